"""Plain-text transcript used as the stored answer of an AI Interview question."""
from typing import List, Dict

INTERVIEWER_PREFIX = "Interviewer: "
USER_PREFIX = "User: "
CONCLUDED_MARKER = "--- Interview concluded ---"
IN_PROGRESS_PLACEHOLDER = "[AI Interview in progress]"
SKIPPED_PLACEHOLDER = "[Interview skipped — AI service unavailable]"

_PREFIX_BY_ROLE = {"assistant": INTERVIEWER_PREFIX, "user": USER_PREFIX}


def transcript_line(role: str, text: str) -> str:
    """Format one message as a transcript line; system messages have none."""
    prefix = _PREFIX_BY_ROLE.get(role)
    if prefix is None:
        raise ValueError(f"No transcript line for role {role!r}")
    return prefix + text


def build_transcript(messages: List[Dict], concluded: bool = False) -> str:
    lines = [transcript_line(m["role"], m["content"]) for m in messages if m.get("role") in _PREFIX_BY_ROLE]
    if concluded:
        lines += ["", CONCLUDED_MARKER]
    return "\n".join(lines)


def is_placeholder(answer: str) -> bool:
    return (answer or "").strip() in ("", IN_PROGRESS_PLACEHOLDER)


def parse_transcript(transcript: str) -> List[Dict]:
    """Rebuild display messages from a stored transcript.

    Lines that carry no speaker prefix continue the previous message, so
    multi-line replies come back as a single bubble. Anything after the
    concluded marker is ignored. The result is only good enough to redraw the
    widget; it is never sent back to the model.
    """
    bubbles = []
    for line in (transcript or "").split("\n"):
        if line.strip() == CONCLUDED_MARKER:
            break
        if line.startswith(INTERVIEWER_PREFIX):
            bubbles.append({"role": "assistant", "content": line[len(INTERVIEWER_PREFIX):]})
        elif line.startswith(USER_PREFIX):
            bubbles.append({"role": "user", "content": line[len(USER_PREFIX):]})
        elif bubbles:
            bubbles[-1]["content"] += "\n" + line
    for b in bubbles:
        b["content"] = b["content"].rstrip()
    return bubbles
