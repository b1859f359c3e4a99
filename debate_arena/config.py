"""
config.py

Loads environment variables and defines constants
for model names and global settings.

Credentials are read here but only checked when a backend is built,
so the UI can start without every key present.
"""

import os

from dotenv import load_dotenv

from .errors import ConfigurationError

# Load .env file from project root
load_dotenv()

OPENAI_API_KEY = os.getenv("OPENAI_API_KEY")
GROK_API_KEY = os.getenv("GROK_API_KEY")
OPENROUTER_API_KEY = os.getenv("OPENROUTER_API_KEY")
GEMINI_API_KEY = os.getenv("GEMINI_API_KEY")

OLLAMA_BASE_URL = os.getenv("OLLAMA_BASE_URL", "http://localhost:11434/v1")

# OpenAI-compatible endpoints (Grok and OpenRouter speak the same API)
PROVIDER_BASE_URLS = {
    "openai": None,
    "grok": "https://api.x.ai/v1",
    "openrouter": "https://openrouter.ai/api/v1",
    "ollama": OLLAMA_BASE_URL,
}

# Which env var holds the key for each provider (ollama needs none)
PROVIDER_KEY_NAMES = {
    "openai": "OPENAI_API_KEY",
    "grok": "GROK_API_KEY",
    "openrouter": "OPENROUTER_API_KEY",
    "gemini": "GEMINI_API_KEY",
}

SUPPORTED_PROVIDERS = ("openai", "grok", "openrouter", "ollama", "gemini")

# Debaters and judge (you can tweak these in .env)
DEBATER_PROVIDER = os.getenv("DEBATER_PROVIDER", "openai")
DEBATER_MODEL = os.getenv("DEBATER_MODEL", "gpt-4.1-mini")
JUDGE_PROVIDER = os.getenv("JUDGE_PROVIDER", "gemini")
JUDGE_MODEL = os.getenv("JUDGE_MODEL", "gemini-2.0-flash-lite")

# Default creativity (temperature) range
DEFAULT_TEMPERATURE = 0.6
MIN_TEMPERATURE = 0.0
MAX_TEMPERATURE = 1.0

DEBATER_MAX_TOKENS = 600
JUDGE_TEMPERATURE = 0.3
JUDGE_MAX_TOKENS = 400

TRANSCRIPT_DIR = os.getenv("TRANSCRIPT_DIR", "transcripts")
LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO")


def _int_env(name: str, default: int) -> int:
    raw = os.getenv(name)
    if raw is None or not raw.strip():
        return default
    try:
        return int(raw)
    except ValueError as exc:
        raise ConfigurationError(f"{name} must be an integer, got {raw!r}.") from exc


MAX_ROUNDS = _int_env("MAX_ROUNDS", 3)
MAX_SUB_ROUNDS = _int_env("MAX_SUB_ROUNDS", 3)


def require_api_key(provider: str) -> str:
    """
    Return the API key for a provider, or raise ConfigurationError.

    Looked up at call time so a key exported after import is still seen.
    """
    if provider not in SUPPORTED_PROVIDERS:
        raise ConfigurationError(
            f"Unknown provider {provider!r}. Use one of: {', '.join(SUPPORTED_PROVIDERS)}."
        )

    key_name = PROVIDER_KEY_NAMES.get(provider)
    if key_name is None:
        # Local server, no credential needed
        return "ollama"

    key = os.getenv(key_name)
    if not key:
        raise ConfigurationError(f"{key_name} is missing. Set it in your .env file.")
    return key
