"""Tests for request parsing, message sanitation and language injection."""

import pytest

from services.chat_proxy import (
    ChatRequest,
    inject_language_instruction,
    sanitize_language,
    sanitize_messages,
)
from services.errors import BadRequestError


class TestSanitizeMessages:
    def test_keeps_known_roles_in_order(self):
        msgs = [
            {"role": "system", "content": "s"},
            {"role": "user", "content": "u"},
            {"role": "assistant", "content": "a"},
        ]
        assert sanitize_messages(msgs) == msgs

    def test_drops_unknown_and_malformed(self):
        msgs = [
            {"role": "function", "content": "f"},
            {"role": "user"},
            {"content": "no role"},
            ["user", "hi"],
            None,
            {"role": "user", "content": {"nested": True}},
            {"role": "user", "content": "ok"},
        ]
        assert sanitize_messages(msgs) == [{"role": "user", "content": "ok"}]

    def test_caps_and_trims_content(self):
        out = sanitize_messages([{"role": "user", "content": "  " + "é" * 9000 + "  "}])
        assert len(out[0]["content"]) == 8000
        assert out[0]["content"] == "é" * 8000

    def test_numbers_become_text(self):
        assert sanitize_messages([{"role": "user", "content": 42}]) == [{"role": "user", "content": "42"}]


class TestLanguage:
    @pytest.mark.parametrize("raw,expected", [
        ("en", "en"),
        ("pt-BR", "pt-BR"),
        ("de'; DROP", "deDROP"),
        ("", "en"),
        ("123", "en"),
        ("a" * 50, "a" * 35),
    ])
    def test_sanitize_language(self, raw, expected):
        assert sanitize_language(raw) == expected

    def test_prepends_to_first_system_message(self):
        msgs = [
            {"role": "user", "content": "hi"},
            {"role": "system", "content": "first"},
            {"role": "system", "content": "second"},
        ]
        out = inject_language_instruction(msgs, "es")
        assert len(out) == 3
        assert out[1]["content"].startswith("IMPORTANT:")
        assert out[1]["content"].endswith("\n\nfirst")
        assert out[2]["content"] == "second"
        assert msgs[1]["content"] == "first"

    def test_inserts_system_message_when_missing(self):
        out = inject_language_instruction([{"role": "user", "content": "hi"}], "it")
        assert [m["role"] for m in out] == ["system", "user"]
        assert "'it'" in out[0]["content"]

    def test_merged_system_message_respects_cap(self):
        out = inject_language_instruction([{"role": "system", "content": "p" * 500}], "en", max_chars=300)
        assert len(out[0]["content"]) == 300
        assert out[0]["content"].startswith("IMPORTANT:")
        assert out[0]["content"].endswith("p")


class TestChatRequest:
    def test_parses_fields(self):
        req = ChatRequest.from_json({"surveyId": "12", "messages": [{}], "maxTokens": 800, "language": "en"})
        assert req.survey_id == 12
        assert req.max_tokens == 800
        assert req.language == "en"

    def test_non_positive_budget_uses_default(self):
        req = ChatRequest.from_json({"surveyId": 1, "messages": [{}], "maxTokens": 0})
        assert req.max_tokens == 6000

    @pytest.mark.parametrize("body", [
        None,
        [],
        "text",
        {"surveyId": 1, "messages": []},
        {"surveyId": -3, "messages": [{}]},
        {"surveyId": 1, "messages": "hello"},
        {"surveyId": True, "messages": [{}]},
        {"surveyId": 1, "messages": [{}], "maxTokens": "lots"},
    ])
    def test_rejects_malformed(self, body):
        with pytest.raises(BadRequestError):
            ChatRequest.from_json(body)
