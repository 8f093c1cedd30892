"""Text normalization helpers shared across resolver and server components."""

from __future__ import annotations

import re

__all__ = ["normalize_query", "split_season_query"]

_WHITESPACE_RE = re.compile(r"\s+")
_SEASON_RE = re.compile(r"^(?P<title>.*?)\s*\bseason\s+(?P<season>\d+)", re.IGNORECASE)


def normalize_query(text: str | None) -> str:
    """Return *text* trimmed, whitespace-collapsed and case-folded."""

    if not text:
        return ""
    return _WHITESPACE_RE.sub(" ", text).strip().casefold()


def split_season_query(text: str | None) -> tuple[str, int | None]:
    """Split ``"<show> season <n> ..."`` into the show title and season number.

    Voice assistants deliver the season inside the free-text query, so
    ``"the office season 2 episode"`` yields ``("the office", 2)``. Text
    without a season marker is returned normalized with ``None``.
    """

    normalized = normalize_query(text)
    match = _SEASON_RE.match(normalized)
    if match is None:
        return normalized, None
    return match.group("title").strip(), int(match.group("season"))
