from models.question import QuestionSettings
from prompts.system_prompts import NOT_CONFIGURED_NOTICE
from services.transcript import (
    IN_PROGRESS_PLACEHOLDER,
    SKIPPED_PLACEHOLDER,
    build_transcript,
    is_placeholder,
    parse_transcript,
)

NOT_STARTED = "NOT_STARTED"
AWAITING_OPENING = "AWAITING_OPENING"
ACTIVE = "ACTIVE"
AWAITING_REPLY = "AWAITING_REPLY"
FINISHED = "FINISHED"
SKIPPED = "SKIPPED"
RESTORED = "RESTORED"

AWAITING_STATES = (AWAITING_OPENING, AWAITING_REPLY)
CLOSED_STATES = (FINISHED, SKIPPED, RESTORED)


class WidgetStateError(RuntimeError):
    pass


class InterviewWidget:
    """State of one AI Interview widget for one respondent page view.

    Mirrors what static/ai-interview.js does in the browser: it owns the
    conversation sent to the chat endpoint, the transcript written into the
    answer field and the token counter. At most one request is in flight.
    """

    def __init__(self, settings: QuestionSettings, survey_id: int, sgqa: str,
                 language: str = "en", existing_answer: str = ""):
        self.settings = settings
        self.survey_id = int(survey_id)
        self.sgqa = sgqa
        self.language = language or "en"

        # Conversation
        self.history = []
        self.restored_messages = []

        # Budget
        self.tokens_used = 0
        self.auto_finished = False

        self.state = NOT_STARTED
        self.last_error = None
        self.answer = (existing_answer or "").strip()

        if not is_placeholder(self.answer):
            self._restore(self.answer)
        else:
            # Keeps host validation from blocking navigation before the first exchange
            self.answer = IN_PROGRESS_PLACEHOLDER

    # ------------------------------------------------------------------
    # Transitions
    # ------------------------------------------------------------------

    def begin(self):
        """Start the interview; returns the payload for the opening request."""
        if self.state != NOT_STARTED:
            raise WidgetStateError(f"Cannot begin from {self.state}")
        if not self.settings.prompt:
            self.last_error = NOT_CONFIGURED_NOTICE
            return None
        if not self.history:
            self.history.append({"role": "system", "content": self.settings.prompt})
        self.last_error = None
        self.state = AWAITING_OPENING
        return self.request_payload()

    def retry(self):
        """Re-attempt the opening request after it failed."""
        return self.begin()

    def send(self, text: str):
        """Queue a respondent message; returns the payload, or None for blank text."""
        if self.state in AWAITING_STATES:
            raise WidgetStateError("A request is already in flight")
        if self.state != ACTIVE:
            raise WidgetStateError(f"Cannot send from {self.state}")
        text = (text or "").strip()
        if not text:
            return None
        self.history.append({"role": "user", "content": text})
        self._refresh_answer()
        self.last_error = None
        self.state = AWAITING_REPLY
        return self.request_payload()

    def receive_reply(self, reply: str, tokens_used=0, finish_reason: str = "stop"):
        if self.state not in AWAITING_STATES:
            raise WidgetStateError(f"No request in flight (state {self.state})")
        self.tokens_used += _non_negative_int(tokens_used)
        self.history.append({"role": "assistant", "content": reply})
        self._refresh_answer()
        self.state = ACTIVE
        if self.budget_exhausted:
            self.finish(auto=True)
        return self.state

    def fail(self, message: str):
        """Record a failed request; the respondent may retry or skip."""
        if self.state not in AWAITING_STATES:
            raise WidgetStateError(f"No request in flight (state {self.state})")
        self.last_error = message
        self.state = NOT_STARTED if self.state == AWAITING_OPENING else ACTIVE
        return self.state

    def finish(self, auto: bool = False):
        if self.state in CLOSED_STATES:
            return self.state
        if self.state in AWAITING_STATES:
            raise WidgetStateError("Cannot finish while a request is in flight")
        self.auto_finished = auto
        self.state = FINISHED
        self._refresh_answer()
        return self.state

    def skip(self):
        if self.state in CLOSED_STATES:
            return self.state
        self.answer = SKIPPED_PLACEHOLDER
        self.last_error = None
        self.state = SKIPPED
        return self.state

    # ------------------------------------------------------------------
    # Queries
    # ------------------------------------------------------------------

    @property
    def budget_exhausted(self) -> bool:
        return self.tokens_used >= self.settings.max_tokens

    @property
    def exchanges(self) -> int:
        return sum(1 for m in self.history if m["role"] == "user")

    def can_submit(self) -> bool:
        """Whether the host form may be submitted."""
        if not self.settings.mandatory:
            return True
        if self.state in CLOSED_STATES:
            return True
        return len(self.display_messages()) >= 2

    def request_payload(self) -> dict:
        return {
            "surveyId": self.survey_id,
            "messages": [dict(m) for m in self.history],
            "maxTokens": self.settings.max_tokens,
            "language": self.language,
        }

    def display_messages(self) -> list:
        if self.state == RESTORED:
            return self.restored_messages
        return [m for m in self.history if m["role"] != "system"]

    # ------------------------------------------------------------------

    def _refresh_answer(self):
        self.answer = build_transcript(self.history, concluded=self.state == FINISHED)

    def _restore(self, transcript: str):
        self.restored_messages = parse_transcript(transcript)
        self.state = RESTORED


def _non_negative_int(value) -> int:
    try:
        return max(0, int(value))
    except (TypeError, ValueError):
        return 0
