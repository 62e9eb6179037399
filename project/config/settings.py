import os
import logging
from pathlib import Path
from dotenv import load_dotenv

# Load environment variables
BASE_DIR = Path(__file__).parent.parent
env_path = BASE_DIR / ".env"
if env_path.exists():
    load_dotenv(dotenv_path=env_path)

logger = logging.getLogger(__name__)

# Flask
SECRET_KEY = os.getenv("SECRET_KEY", "dev-change-me")
LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO")
HOST = os.getenv("HOST", "0.0.0.0")
PORT = int(os.getenv("PORT", "8000"))

# Upstream chat-completion configuration
LLM_PROVIDER = os.getenv("LLM_PROVIDER", "openai")
OPENAI_API_KEY = os.getenv("OPENAI_API_KEY", "")
OPENAI_MODEL = os.getenv("OPENAI_MODEL", "gpt-4o")
OPENAI_BASE_URL = os.getenv("OPENAI_BASE_URL", "https://api.openai.com/v1")
GEMINI_MODEL = os.getenv("GEMINI_MODEL", "gemini-2.5-flash-lite")

UPSTREAM_TIMEOUT_SEC = 90
UPSTREAM_CONNECT_TIMEOUT_SEC = 15
USER_AGENT = "AIInterview-Proxy/1.1"

# Conversation limits
MAX_MESSAGE_CHARS = 8000
DEFAULT_MAX_TOKENS = 6000
MIN_COMPLETION_TOKENS = 256

# Administrator access (preview mode and diagnostics)
ADMIN_TOKEN = os.getenv("ADMIN_TOKEN", "")

# Storage locations
PLUGIN_SETTINGS_PATH = os.getenv("PLUGIN_SETTINGS_PATH", str(BASE_DIR / "data" / "plugin_settings.json"))
SURVEYS_PATH = os.getenv("SURVEYS_PATH", str(BASE_DIR / "data" / "surveys.json"))

# Question theme
ROOT_DIR = os.getenv("ROOT_DIR", str(BASE_DIR))
THEME_NAME = "AIInterview"
THEME_SOURCE_DIR = str(BASE_DIR / "question_themes" / THEME_NAME)
USER_THEME_ROOT = os.getenv("USER_THEME_ROOT", "upload/themes/question")
THEME_REGISTRY_PATH = os.getenv("THEME_REGISTRY_PATH", str(BASE_DIR / "data" / "question_themes.json"))
THEME_AUTO_INSTALL = os.getenv("THEME_AUTO_INSTALL", "1") == "1"


def validate_config(config=None) -> list:
    """Check configuration and return a list of warnings.

    A missing credential does not stop startup; the chat endpoint answers 503
    until one is configured through the environment or the plugin settings.
    """
    cfg = config if config is not None else globals()
    warnings = []
    provider = cfg.get("LLM_PROVIDER", "openai")
    if provider not in ("openai", "gemini"):
        warnings.append(f"Unknown LLM_PROVIDER {provider!r}; expected 'openai' or 'gemini'.")
    if not cfg.get("OPENAI_API_KEY"):
        warnings.append("No upstream API key in the environment; set OPENAI_API_KEY or use the admin settings.")
    if not cfg.get("ADMIN_TOKEN"):
        warnings.append("ADMIN_TOKEN is empty; administrator login and preview mode are disabled.")
    if cfg.get("SECRET_KEY") == "dev-change-me":
        warnings.append("SECRET_KEY is the development default.")
    for w in warnings:
        logger.warning("[CONFIG] %s", w)
    return warnings
