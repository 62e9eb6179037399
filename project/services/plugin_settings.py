"""Host-level plugin settings: upstream credential, model and provider.

Values saved by an administrator live in a small JSON file and take precedence
over the environment. The credential never leaves the server.
"""
import json
import logging
import os

from flask import current_app

logger = logging.getLogger(__name__)

SETTING_KEYS = ("openai_api_key", "openai_model", "provider")
PROVIDERS = ("openai", "gemini")
DEFAULT_MODELS = {"openai": "gpt-4o", "gemini": "gemini-2.5-flash-lite"}


class PluginSettings:
    def __init__(self, path: str, defaults: dict = None):
        self.path = path
        self.defaults = defaults or {}

    def _read(self) -> dict:
        if not self.path or not os.path.isfile(self.path):
            return {}
        try:
            with open(self.path, "r", encoding="utf-8") as f:
                data = json.load(f)
        except (OSError, ValueError) as e:
            logger.error("[SETTINGS] unreadable settings file %s: %s", self.path, e)
            return {}
        return data if isinstance(data, dict) else {}

    def get(self, key: str, default=None):
        value = self._read().get(key)
        if isinstance(value, str):
            value = value.strip()
        if value in (None, ""):
            value = self.defaults.get(key, default)
        return value if value is not None else default

    def update(self, values: dict) -> dict:
        unknown = set(values) - set(SETTING_KEYS)
        if unknown:
            raise ValueError(f"Unknown settings: {', '.join(sorted(unknown))}")
        for key, value in values.items():
            if value is not None and not isinstance(value, str):
                raise ValueError(f"{key} must be a string")
        provider = values.get("provider")
        if provider is not None and provider not in PROVIDERS:
            raise ValueError(f"provider must be one of {', '.join(PROVIDERS)}")
        data = self._read()
        if provider and provider != self.provider and "openai_model" not in values:
            # A model saved for the old provider would be sent to the new one
            data.pop("openai_model", None)
        data.update({k: (v.strip() if isinstance(v, str) else v) for k, v in values.items()})
        os.makedirs(os.path.dirname(os.path.abspath(self.path)), exist_ok=True)
        with open(self.path, "w", encoding="utf-8") as f:
            json.dump(data, f, indent=2)
        logger.info("[SETTINGS] updated %s", ", ".join(sorted(values)))
        return self.public()

    @property
    def api_key(self) -> str:
        value = self.get("openai_api_key", "")
        return value if isinstance(value, str) else ""

    @property
    def model(self) -> str:
        """The saved model, else the default for the provider in effect."""
        saved = self._read().get("openai_model")
        if isinstance(saved, str) and saved.strip():
            return saved.strip()
        provider = self.provider
        return self.defaults.get(f"{provider}_model") or DEFAULT_MODELS.get(provider, "gpt-4o")

    @property
    def provider(self) -> str:
        return self.get("provider", "openai")

    def public(self) -> dict:
        """Settings safe to show an administrator; the key is redacted."""
        key = self.api_key
        return {
            "openai_api_key": ("****" + key[-4:]) if len(key) > 8 else ("****" if key else ""),
            "api_key_configured": bool(key),
            "openai_model": self.model,
            "provider": self.provider,
        }


def get_plugin_settings() -> PluginSettings:
    cfg = current_app.config
    return PluginSettings(
        cfg.get("PLUGIN_SETTINGS_PATH"),
        defaults={
            "openai_api_key": cfg.get("OPENAI_API_KEY", ""),
            "openai_model": cfg.get("OPENAI_MODEL"),
            "gemini_model": cfg.get("GEMINI_MODEL"),
            "provider": cfg.get("LLM_PROVIDER", "openai"),
        },
    )
