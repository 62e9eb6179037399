"""Per-question settings of the AI Interview question type."""
from prompts.system_prompts import DEFAULT_INTERVIEW_PROMPT
from config.settings import DEFAULT_MAX_TOKENS

ATTRIBUTE_CATEGORY = "AI Interview Settings"

# Attribute definitions shown in the question editor (Advanced tab)
QUESTION_ATTRIBUTES = {
    "ai_interview_prompt": {
        "types": "T",
        "category": ATTRIBUTE_CATEGORY,
        "sortorder": 1,
        "inputtype": "textarea",
        "default": DEFAULT_INTERVIEW_PROMPT,
        "help": (
            "Instructions for the AI interviewer. "
            "Tip: Specify the topic, the number of questions to ask, the depth of follow-up expected, "
            "and include an explicit instruction such as: "
            "\"When you have finished all questions, thank the respondent and tell them to press the Finish Interview button.\""
        ),
        "caption": "AI Interviewer Prompt / Instructions",
    },
    "ai_interview_max_tokens": {
        "types": "T",
        "category": ATTRIBUTE_CATEGORY,
        "sortorder": 2,
        "inputtype": "integer",
        "default": DEFAULT_MAX_TOKENS,
        "help": (
            "Maximum total tokens (prompt + all messages + AI replies) for this interview. "
            f"When this budget is reached the interview ends automatically. Default: {DEFAULT_MAX_TOKENS}."
        ),
        "caption": "Maximum Token Budget",
    },
    "ai_interview_mandatory": {
        "types": "T",
        "category": ATTRIBUTE_CATEGORY,
        "sortorder": 3,
        "inputtype": "singleselect",
        "options": {
            "0": "No – respondent may skip",
            "1": "Yes – respondent must send at least one message",
        },
        "default": "0",
        "help": "Whether the respondent must interact with the AI before they can proceed to the next page.",
        "caption": "Mandatory Interaction",
    },
}


class QuestionSettings:
    """Static widget configuration, set by the survey author."""

    def __init__(self, prompt: str = DEFAULT_INTERVIEW_PROMPT, max_tokens: int = DEFAULT_MAX_TOKENS,
                 mandatory: bool = False):
        self.prompt = prompt or ""
        self.max_tokens = max_tokens if max_tokens and max_tokens > 0 else DEFAULT_MAX_TOKENS
        self.mandatory = bool(mandatory)

    @classmethod
    def from_attributes(cls, attributes: dict) -> "QuestionSettings":
        attributes = attributes or {}
        prompt = attributes.get("ai_interview_prompt", QUESTION_ATTRIBUTES["ai_interview_prompt"]["default"])
        try:
            max_tokens = int(attributes.get("ai_interview_max_tokens", DEFAULT_MAX_TOKENS))
        except (TypeError, ValueError):
            max_tokens = DEFAULT_MAX_TOKENS
        mandatory = str(attributes.get("ai_interview_mandatory", "0")).strip() == "1"
        return cls(prompt=(prompt or "").strip(), max_tokens=max_tokens, mandatory=mandatory)

    def to_dict(self) -> dict:
        return {"prompt": self.prompt, "max_tokens": self.max_tokens, "mandatory": self.mandatory}
