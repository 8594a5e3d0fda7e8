"""Dependency wiring entry point."""
from __future__ import annotations

from .container import build_service

__all__ = ["build_service"]
