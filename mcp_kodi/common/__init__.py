"""Shared utilities for the resolver, client and server packages."""

from __future__ import annotations

from .text import normalize_query
from .types import JSONValue
from .validation import require_positive

__all__ = ["JSONValue", "normalize_query", "require_positive"]
