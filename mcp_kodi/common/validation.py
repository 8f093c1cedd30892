"""Validation helpers shared across packages."""

from __future__ import annotations

from typing import Any


def require_positive(value: int, *, name: str) -> int:
    """Return *value* if it is a positive integer, otherwise raise an error."""

    if not isinstance(value, int) or isinstance(value, bool):
        raise TypeError(f"{name} must be an int")
    if value <= 0:
        raise ValueError(f"{name} must be positive")
    return value


def coerce_int(raw: Any, *, name: str) -> int:
    """Convert request parameters such as ``"3"`` or ``3`` into an integer.

    Raises ``ValueError`` for blank, boolean or non-numeric input instead of
    guessing a default.
    """

    if isinstance(raw, bool):
        raise ValueError(f"{name} must be an integer")
    if isinstance(raw, int):
        return raw
    if isinstance(raw, str):
        text = raw.strip()
        if not text:
            raise ValueError(f"{name} is required")
        try:
            return int(text)
        except ValueError as exc:
            raise ValueError(f"{name} must be an integer") from exc
    if raw is None:
        raise ValueError(f"{name} is required")
    raise ValueError(f"{name} must be an integer")


__all__ = ["require_positive", "coerce_int"]
