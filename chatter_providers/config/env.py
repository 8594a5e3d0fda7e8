"""Credential environment variables per provider.

Provider tags are the ``ModelConfig.provider`` values of the built-in
catalog. A provider may accept several variable names; they are tried in the
order listed in ``CREDENTIAL_VARS`` and the first usable value wins.

Nothing here raises on unknown providers or unset variables.
"""

from __future__ import annotations

import os
from typing import Dict, Optional, Tuple

CREDENTIAL_VARS: Dict[str, Tuple[str, ...]] = {
    "openai": ("OPENAI_API_KEY",),
    "anthropic": ("ANTHROPIC_API_KEY",),
    "gemini": ("GEMINI_API_KEY", "GOOGLE_API_KEY"),
    "xai": ("XAI_API_KEY",),
    "deepseek": ("DEEPSEEK_API_KEY",),
    "moonshot": ("MOONSHOT_API_KEY",),
    "groq": ("GROQ_API_KEY",),
    "openrouter": ("OPENROUTER_API_KEY",),
}

_PLACEHOLDER_MARKERS = ("placeholder", "changeme", "example")


def is_placeholder(val: Optional[str]) -> bool:
    """True for template values such as ``sk-placeholder`` or ``test_...``."""
    if val is None:
        return False
    lowered = str(val).strip().lower()
    return lowered.startswith("test_") or any(m in lowered for m in _PLACEHOLDER_MARKERS)


def credential_vars(provider: str) -> Tuple[str, ...]:
    """Variable names accepted for ``provider``; empty for unknown tags."""
    return CREDENTIAL_VARS.get((provider or "").lower(), ())


def find_credential(provider: str) -> Tuple[Optional[str], Optional[str]]:
    """Return ``(value, variable)`` for the first set, non-placeholder variable."""
    for name in credential_vars(provider):
        val = os.environ.get(name)
        if val and not is_placeholder(val):
            return val, name
    return None, None


__all__ = [
    "CREDENTIAL_VARS",
    "is_placeholder",
    "credential_vars",
    "find_credential",
]
