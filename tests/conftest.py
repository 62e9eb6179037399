"""Shared fixtures: an isolated app per test and a fake upstream model."""

import json

import pytest

from app import create_app
from services.ai_service import AIService, ChatResult

SURVEY_ID = 123456
AI_QID = 10
PLAIN_QID = 11
ADMIN_TOKEN = "admin-secret"

CATALOG = {
    "surveys": [
        {
            "sid": SURVEY_ID,
            "title": "Test survey",
            "language": "de",
            "questions": [
                {
                    "qid": AI_QID,
                    "gid": 1,
                    "title": "Q01",
                    "text": "Talk to our interviewer.",
                    "theme": "AIInterview",
                    "attributes": {
                        "ai_interview_prompt": "Interview the respondent about <b>remote work</b>.",
                        "ai_interview_max_tokens": "1000",
                        "ai_interview_mandatory": "1",
                    },
                },
                {"qid": PLAIN_QID, "gid": 1, "title": "Q02", "text": "Anything else?"},
            ],
        }
    ]
}


@pytest.fixture
def config_overrides(tmp_path):
    surveys_path = tmp_path / "surveys.json"
    surveys_path.write_text(json.dumps(CATALOG), encoding="utf-8")
    return {
        "TESTING": True,
        "SECRET_KEY": "test-secret",
        "OPENAI_API_KEY": "sk-test-key-123456",
        "OPENAI_MODEL": "gpt-4o",
        "LLM_PROVIDER": "openai",
        "ADMIN_TOKEN": ADMIN_TOKEN,
        "PLUGIN_SETTINGS_PATH": str(tmp_path / "plugin_settings.json"),
        "SURVEYS_PATH": str(surveys_path),
        "THEME_REGISTRY_PATH": str(tmp_path / "question_themes.json"),
        "USER_THEME_ROOT": "upload/themes/question",
        "ROOT_DIR": str(tmp_path),
        "THEME_AUTO_INSTALL": False,
    }


@pytest.fixture
def app(config_overrides):
    return create_app(config_overrides)


@pytest.fixture
def client(app):
    return app.test_client()


@pytest.fixture
def survey_client(client):
    """A client with an active respondent session for the test survey."""
    resp = client.post(f"/survey/{SURVEY_ID}/start", json={"language": "fr"})
    assert resp.status_code == 200
    return client


@pytest.fixture
def fake_upstream(monkeypatch):
    """Replaces the upstream call; records every call it receives."""

    class FakeUpstream:
        def __init__(self):
            self.calls = []
            self.result = ChatResult("Hello, I am your interviewer. How are you?", 42, "stop")
            self.error = None

        def __call__(self, api_key, model, messages, max_tokens, provider="openai", base_url=None):
            self.calls.append({
                "api_key": api_key,
                "model": model,
                "messages": messages,
                "max_tokens": max_tokens,
                "provider": provider,
                "base_url": base_url,
            })
            if self.error is not None:
                raise self.error
            return self.result

    fake = FakeUpstream()
    monkeypatch.setattr(AIService, "chat_completion", staticmethod(fake))
    return fake
