"""chatter_providers.config.defaults
===============================

Small, stable default values used across the package. They can be
overridden through environment variables or the optional config file, but
provide sensible fallbacks for local development and tests.

Only plain constants live here (no I/O, no package imports).
"""

from __future__ import annotations

# ---- Provider endpoints ----
OPENAI_DEFAULT_BASE_URL = "https://api.openai.com/v1"
ANTHROPIC_DEFAULT_BASE_URL = "https://api.anthropic.com/v1"
XAI_DEFAULT_BASE_URL = "https://api.x.ai/v1"
DEEPSEEK_DEFAULT_BASE_URL = "https://api.deepseek.com/v1"
MOONSHOT_DEFAULT_BASE_URL = "https://api.moonshot.ai/v1"
GROQ_DEFAULT_BASE_URL = "https://api.groq.com/openai/v1"
OPENROUTER_DEFAULT_BASE_URL = "https://openrouter.ai/api/v1"

# ---- Streaming orchestration ----
# Attempts made by the streaming loop before an error is surfaced.
STREAM_MAX_ATTEMPTS = 3
# Base of the streaming backoff (seconds); delay for attempt n is base ** n.
STREAM_BACKOFF_BASE_SECONDS = 2.0

# ---- Config file / dotenv ----
CONFIG_FILE_ENV = "CHATTER_CONFIG_FILE"
DOTENV_FILE_ENV = "DOTENV_FILE"
DEFAULT_DOTENV_FILE = ".env"

__all__ = [
    "OPENAI_DEFAULT_BASE_URL",
    "ANTHROPIC_DEFAULT_BASE_URL",
    "XAI_DEFAULT_BASE_URL",
    "DEEPSEEK_DEFAULT_BASE_URL",
    "MOONSHOT_DEFAULT_BASE_URL",
    "GROQ_DEFAULT_BASE_URL",
    "OPENROUTER_DEFAULT_BASE_URL",
    "STREAM_MAX_ATTEMPTS",
    "STREAM_BACKOFF_BASE_SECONDS",
    "CONFIG_FILE_ENV",
    "DOTENV_FILE_ENV",
    "DEFAULT_DOTENV_FILE",
]
