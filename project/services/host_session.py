"""Host session and administrator gate.

A respondent's survey session lives in the signed Flask session under
``survey_<sid>``, the same key the chat endpoint checks before forwarding a
conversation upstream.
"""
import functools
import hmac
import logging
import uuid

from flask import current_app, jsonify, request, session

logger = logging.getLogger(__name__)

ADMIN_SESSION_KEY = "is_admin"
ADMIN_HEADER = "X-Admin-Token"


def survey_session_key(sid: int) -> str:
    return f"survey_{int(sid)}"


def start_survey_session(sid: int, language: str = "en") -> dict:
    key = survey_session_key(sid)
    data = session.get(key) or {"response_id": uuid.uuid4().hex}
    data["s_lang"] = language or "en"
    session[key] = data
    return data


def has_survey_session(sid: int) -> bool:
    return survey_session_key(sid) in session


def survey_language(sid: int, fallback: str = "en") -> str:
    data = session.get(survey_session_key(sid)) or {}
    return data.get("s_lang") or fallback


def _responses() -> dict:
    # Answers are kept server-side; transcripts are far larger than a cookie allows
    return current_app.extensions.setdefault("survey_responses", {})


def store_answer(sid: int, sgqa: str, answer: str):
    response_id = (session.get(survey_session_key(sid)) or {}).get("response_id")
    if not response_id:
        raise KeyError(f"No response for survey {sid}")
    _responses().setdefault(response_id, {})[sgqa] = answer


def stored_answer(sid: int, sgqa: str) -> str:
    response_id = (session.get(survey_session_key(sid)) or {}).get("response_id")
    return _responses().get(response_id, {}).get(sgqa, "")


def _token_matches(candidate: str) -> bool:
    expected = current_app.config.get("ADMIN_TOKEN") or ""
    if not expected or not candidate:
        return False
    return hmac.compare_digest(candidate.encode("utf-8"), expected.encode("utf-8"))


def admin_login(token: str) -> bool:
    if not _token_matches(token):
        logger.warning("[ADMIN] failed login from %s", request.remote_addr)
        return False
    session[ADMIN_SESSION_KEY] = True
    return True


def admin_logout():
    session.pop(ADMIN_SESSION_KEY, None)


def is_admin() -> bool:
    if session.get(ADMIN_SESSION_KEY):
        return True
    return _token_matches(request.headers.get(ADMIN_HEADER, ""))


def admin_required(view):
    @functools.wraps(view)
    def wrapped(*args, **kwargs):
        if not is_admin():
            return jsonify({"error": "Unauthorized"}), 403
        return view(*args, **kwargs)
    return wrapped
