"""Upstream chat-completion client used by the chat proxy."""
import logging

import requests
from google import genai
from google.genai import types
from google.genai.errors import APIError

from config.settings import (
    OPENAI_BASE_URL,
    UPSTREAM_TIMEOUT_SEC,
    UPSTREAM_CONNECT_TIMEOUT_SEC,
    MIN_COMPLETION_TOKENS,
    USER_AGENT,
)
from services.errors import UpstreamError

logger = logging.getLogger(__name__)

EMPTY_COMPLETION = "The AI returned an empty response. Please try again."

# Gemini finish reasons expressed the way the widget expects them
_GEMINI_FINISH = {"STOP": "stop", "MAX_TOKENS": "length", "SAFETY": "content_filter"}


class ChatResult:
    def __init__(self, content: str, tokens_used: int = 0, finish_reason: str = "stop"):
        self.content = content
        self.tokens_used = tokens_used
        self.finish_reason = finish_reason

    def to_response(self) -> dict:
        return {"reply": self.content, "tokensUsed": self.tokens_used, "finishReason": self.finish_reason}


class AIService:
    """Makes exactly one upstream call per chat request; never retries."""

    @staticmethod
    def completion_cap(max_tokens: int) -> int:
        """Reserve roughly half the interview budget for the reply."""
        return max(MIN_COMPLETION_TOKENS, int(max_tokens) // 2)

    @staticmethod
    def chat_completion(api_key: str, model: str, messages: list, max_tokens: int,
                        provider: str = "openai", base_url: str = OPENAI_BASE_URL) -> ChatResult:
        if provider == "gemini":
            return AIService._gemini_completion(api_key, model, messages, max_tokens)
        return AIService._openai_completion(api_key, model, messages, max_tokens, base_url)

    @staticmethod
    def endpoint_url(provider: str = "openai", base_url: str = OPENAI_BASE_URL) -> str:
        if provider == "gemini":
            return "https://generativelanguage.googleapis.com"
        return base_url.rstrip("/") + "/chat/completions"

    @staticmethod
    def _openai_completion(api_key, model, messages, max_tokens, base_url) -> ChatResult:
        payload = {
            "model": model,
            "messages": messages,
            "max_tokens": AIService.completion_cap(max_tokens),
        }
        url = AIService.endpoint_url("openai", base_url)
        try:
            r = requests.post(
                url,
                json=payload,
                headers={
                    "Authorization": f"Bearer {api_key}",
                    "User-Agent": USER_AGENT,
                },
                timeout=(UPSTREAM_CONNECT_TIMEOUT_SEC, UPSTREAM_TIMEOUT_SEC),
            )
        except requests.RequestException as e:
            logger.warning("[LLM] network error: %s", e)
            raise UpstreamError(f"Network error contacting AI service: {e}") from e

        if not r.content:
            raise UpstreamError("Empty response from AI service")

        try:
            data = r.json()
        except ValueError:
            data = None

        if r.status_code != 200:
            err_msg = f"HTTP {r.status_code}"
            if isinstance(data, dict) and isinstance(data.get("error"), dict) and data["error"].get("message"):
                err_msg = data["error"]["message"]
            logger.warning("[LLM] upstream status=%s", r.status_code)
            raise UpstreamError(f"AI service error: {err_msg}")

        try:
            choice = data["choices"][0]
            content = choice["message"]["content"]
        except (TypeError, KeyError, IndexError):
            content = None
            choice = {}
        if not content:
            raise UpstreamError(EMPTY_COMPLETION)

        usage = data.get("usage") or {}
        result = ChatResult(
            content=content,
            tokens_used=int(usage.get("total_tokens") or 0),
            finish_reason=str(choice.get("finish_reason") or "stop"),
        )
        logger.info("[LLM] reply chars=%d tokens=%d finish=%s", len(content), result.tokens_used, result.finish_reason)
        return result

    @staticmethod
    def _gemini_completion(api_key, model, messages, max_tokens) -> ChatResult:
        system_text = "\n\n".join(m["content"] for m in messages if m["role"] == "system")
        contents = [
            types.Content(role="model" if m["role"] == "assistant" else "user", parts=[types.Part(text=m["content"])])
            for m in messages if m["role"] != "system"
        ]
        if not contents:
            # Opening turn: the interviewer instructions are the whole prompt
            contents = [types.Content(role="user", parts=[types.Part(text=system_text)])]

        client = genai.Client(
            api_key=api_key,
            http_options=types.HttpOptions(timeout=UPSTREAM_TIMEOUT_SEC * 1000),
        )
        try:
            resp = client.models.generate_content(
                model=model,
                contents=contents,
                config=types.GenerateContentConfig(
                    system_instruction=system_text or None,
                    max_output_tokens=AIService.completion_cap(max_tokens),
                ),
            )
        except APIError as e:
            logger.warning("[LLM] gemini status=%s", getattr(e, "code", None))
            raise UpstreamError(f"AI service error: {e.message or f'HTTP {e.code}'}") from e
        except Exception as e:
            logger.warning("[LLM] gemini network error: %s", e)
            raise UpstreamError(f"Network error contacting AI service: {e}") from e

        txt = (getattr(resp, "text", "") or "").strip()
        if not txt:
            raise UpstreamError(EMPTY_COMPLETION)

        usage = getattr(resp, "usage_metadata", None)
        tokens = int(getattr(usage, "total_token_count", 0) or 0)
        finish = "stop"
        candidates = getattr(resp, "candidates", None) or []
        if candidates and candidates[0].finish_reason is not None:
            name = getattr(candidates[0].finish_reason, "name", str(candidates[0].finish_reason))
            finish = _GEMINI_FINISH.get(name, name.lower())
        return ChatResult(content=txt, tokens_used=tokens, finish_reason=finish)
