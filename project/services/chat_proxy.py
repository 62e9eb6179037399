"""Chat proxy: validates a widget request and forwards it upstream once."""
import logging
import re

from flask import current_app

from config.settings import DEFAULT_MAX_TOKENS, MAX_MESSAGE_CHARS, OPENAI_BASE_URL
from prompts.system_prompts import LANGUAGE_INSTRUCTION
from services.ai_service import AIService, ChatResult
from services.errors import BadRequestError, ForbiddenError, ServiceUnavailableError
from services.host_session import has_survey_session, is_admin, survey_language
from services.plugin_settings import get_plugin_settings

logger = logging.getLogger(__name__)

ALLOWED_ROLES = ("system", "user", "assistant")
NOT_CONFIGURED = "The AI service is not configured. Please contact the survey administrator."


class ChatRequest:
    def __init__(self, survey_id: int, messages: list, max_tokens: int, language: str):
        self.survey_id = survey_id
        self.messages = messages
        self.max_tokens = max_tokens
        self.language = language

    @classmethod
    def from_json(cls, body) -> "ChatRequest":
        if not isinstance(body, dict):
            raise BadRequestError("Invalid JSON body")

        survey_id = _as_int(body.get("surveyId", 0), "surveyId")
        messages = body.get("messages") or []
        if not isinstance(messages, list):
            raise BadRequestError("messages must be a list")
        if survey_id <= 0 or not messages:
            raise BadRequestError("Missing required fields: surveyId and messages")

        max_tokens = _as_int(body.get("maxTokens", DEFAULT_MAX_TOKENS), "maxTokens")
        if max_tokens <= 0:
            max_tokens = DEFAULT_MAX_TOKENS
        language = body.get("language")
        return cls(survey_id, messages, max_tokens, str(language) if language is not None else "")


def _as_int(value, field: str) -> int:
    if isinstance(value, bool):
        raise BadRequestError(f"{field} must be an integer")
    try:
        return int(value)
    except (TypeError, ValueError):
        raise BadRequestError(f"{field} must be an integer")


def sanitize_messages(messages: list, max_chars: int = MAX_MESSAGE_CHARS) -> list:
    """Only allow known roles and cap content length."""
    result = []
    for msg in messages:
        if not isinstance(msg, dict):
            continue
        role = msg.get("role")
        content = msg.get("content")
        if role not in ALLOWED_ROLES or content is None:
            continue
        if isinstance(content, (dict, list, bool)):
            continue
        result.append({"role": role, "content": str(content).strip()[:max_chars]})
    return result


def sanitize_language(language: str) -> str:
    lang = re.sub(r"[^a-zA-Z\-]", "", language or "")[:35]
    return lang or "en"


def inject_language_instruction(messages: list, language: str, max_chars: int = MAX_MESSAGE_CHARS) -> list:
    """Prepend the response-language directive to the first system message, or add one.

    The merged message stays within max_chars; the prompt is cut, never the directive.
    """
    instruction = LANGUAGE_INSTRUCTION.format(lang=sanitize_language(language))
    out = [dict(m) for m in messages]
    for msg in out:
        if msg["role"] == "system":
            room = max(0, max_chars - len(instruction) - 2)
            msg["content"] = instruction + "\n\n" + msg["content"][:room]
            return out
    out.insert(0, {"role": "system", "content": instruction})
    return out


def authorize(survey_id: int):
    """A live respondent session for the survey, or an administrator previewing it."""
    if has_survey_session(survey_id) or is_admin():
        return
    raise ForbiddenError("No active survey session. Please start the survey first.")


def handle_chat(body) -> ChatResult:
    """Run the whole proxy flow; raises ChatProxyError subclasses on failure."""
    req = ChatRequest.from_json(body)
    authorize(req.survey_id)

    settings = get_plugin_settings()
    api_key = settings.api_key
    if not api_key:
        logger.error("[CHAT] survey=%s rejected: no upstream credential configured", req.survey_id)
        raise ServiceUnavailableError(NOT_CONFIGURED)

    max_chars = current_app.config.get("MAX_MESSAGE_CHARS", MAX_MESSAGE_CHARS)
    messages = sanitize_messages(req.messages, max_chars)
    if not messages:
        raise BadRequestError("No valid messages provided")

    language = req.language or survey_language(req.survey_id, "en")
    messages = inject_language_instruction(messages, language, max_chars)

    logger.info("[CHAT] survey=%s messages=%d max_tokens=%d lang=%s provider=%s",
                req.survey_id, len(messages), req.max_tokens, sanitize_language(language), settings.provider)
    return AIService.chat_completion(
        api_key,
        settings.model,
        messages,
        req.max_tokens,
        provider=settings.provider,
        base_url=current_app.config.get("OPENAI_BASE_URL") or OPENAI_BASE_URL,
    )
