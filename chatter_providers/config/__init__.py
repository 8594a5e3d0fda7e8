"""Unified configuration layer for provider credentials and endpoints.

Goals
-----
* Centralize default base URLs per provider tag.
* Merge sources in a predictable order (later wins):
    1. Built-in defaults
    2. Optional external config file (JSON or YAML) named by CHATTER_CONFIG_FILE
    3. Environment variables (<PROVIDER>_API_KEY, <PROVIDER>_BASE_URL and
       the aliases in ``config.env``)
    4. In-code overrides passed to the helper
* Provide a single call site: ``get_provider_config(provider)``.

The service layer uses this to fill an empty request API key; request values
always take precedence.

External Config File
--------------------
```
openai:
  api_key: sk-...
groq:
  base_url: https://api.groq.com/openai/v1
```
"""
from __future__ import annotations

import json
import os
import threading
from pathlib import Path
from typing import Any, Dict, Optional

import yaml

from .defaults import (
    ANTHROPIC_DEFAULT_BASE_URL,
    CONFIG_FILE_ENV,
    DEEPSEEK_DEFAULT_BASE_URL,
    DEFAULT_DOTENV_FILE,
    DOTENV_FILE_ENV,
    GROQ_DEFAULT_BASE_URL,
    MOONSHOT_DEFAULT_BASE_URL,
    OPENAI_DEFAULT_BASE_URL,
    OPENROUTER_DEFAULT_BASE_URL,
    XAI_DEFAULT_BASE_URL,
)
from .env import find_credential, is_placeholder

DEFAULTS: Dict[str, Dict[str, Any]] = {
    "openai": {"base_url": OPENAI_DEFAULT_BASE_URL},
    "anthropic": {"base_url": ANTHROPIC_DEFAULT_BASE_URL},
    "gemini": {},
    "xai": {"base_url": XAI_DEFAULT_BASE_URL},
    "deepseek": {"base_url": DEEPSEEK_DEFAULT_BASE_URL},
    "moonshot": {"base_url": MOONSHOT_DEFAULT_BASE_URL},
    "groq": {"base_url": GROQ_DEFAULT_BASE_URL},
    "openrouter": {"base_url": OPENROUTER_DEFAULT_BASE_URL},
}

# config field -> environment variable suffix (``<PROVIDER>_<SUFFIX>``)
ENV_SUFFIXES = (
    ("api_key", "API_KEY"),  # pragma: allowlist secret - env suffix name, not a secret
    ("base_url", "BASE_URL"),
)

_LOCK = threading.RLock()
_state: Dict[str, Any] = {"file": None, "dotenv_loaded": False}


def _parse_dotenv(path: Path) -> Dict[str, str]:
    """``KEY=VALUE`` pairs from a dotenv file; comments and junk lines are skipped."""
    pairs: Dict[str, str] = {}
    for raw in path.read_text(encoding="utf-8").splitlines():
        entry = raw.strip()
        if entry.startswith("#") or "=" not in entry:
            continue
        key, _, value = entry.partition("=")
        key = key.strip()
        if key:
            pairs[key] = value.strip().strip("'\"")
    return pairs


def _load_dotenv_once() -> None:
    """Export dotenv values once per process.

    A value already in the environment is kept unless it is a placeholder.
    """
    with _LOCK:
        if _state["dotenv_loaded"]:
            return
        _state["dotenv_loaded"] = True
        path = Path(os.getenv(DOTENV_FILE_ENV, DEFAULT_DOTENV_FILE))
        if not path.is_file():
            return
        for key, value in _parse_dotenv(path).items():
            current = os.environ.get(key)
            if current is None or is_placeholder(current):
                os.environ[key] = value


def _read_config_file(path: Path) -> Dict[str, Any]:
    text = path.read_text(encoding="utf-8")
    try:
        data = json.loads(text)
    except ValueError:
        data = yaml.safe_load(text)
    return data if isinstance(data, dict) else {}


def _external_config() -> Dict[str, Any]:
    """The cached JSON/YAML document named by ``CHATTER_CONFIG_FILE``."""
    with _LOCK:
        if _state["file"] is None:
            path = os.getenv(CONFIG_FILE_ENV)
            _state["file"] = _read_config_file(Path(path)) if path and Path(path).is_file() else {}
        return _state["file"]


def reset_config_cache() -> None:
    """Forget the cached config file and dotenv state (used by tests)."""
    with _LOCK:
        _state["file"] = None
        _state["dotenv_loaded"] = False


def _env_layer(provider: str) -> Dict[str, Any]:
    prefix = provider.upper()
    layer = {
        field: os.environ[f"{prefix}_{suffix}"]
        for field, suffix in ENV_SUFFIXES
        if os.environ.get(f"{prefix}_{suffix}") and not is_placeholder(os.environ[f"{prefix}_{suffix}"])
    }
    if "api_key" not in layer:
        key, _ = find_credential(provider)
        if key:
            layer["api_key"] = key
    return layer


def get_provider_config(provider: str, overrides: Optional[Dict[str, Any]] = None) -> Dict[str, Any]:
    """Return merged configuration for a provider tag.

    Layers, later wins: defaults, config file, environment, ``overrides``
    (``None`` values in ``overrides`` are ignored). Unknown providers still
    consult the config file and environment.
    """
    _load_dotenv_once()
    name = (provider or "").lower().strip()
    from_file = _external_config().get(name)
    layers = (
        DEFAULTS.get(name, {}),
        from_file if isinstance(from_file, dict) else {},
        _env_layer(name),
        {k: v for k, v in (overrides or {}).items() if v is not None},
    )
    merged: Dict[str, Any] = {}
    for layer in layers:
        merged.update(layer)
    return merged


__all__ = [
    "get_provider_config",
    "reset_config_cache",
    "DEFAULTS",
]
