"""Approximate matching of spoken queries against Kodi library labels."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Sequence, TypeVar

from rapidfuzz import fuzz, utils

logger = logging.getLogger(__name__)

T = TypeVar("T")


@dataclass(frozen=True, slots=True)
class MatcherConfig:
    """Fixed matching options shared by every lookup a matcher performs.

    ``threshold`` follows the 0 (perfect) to 1 (anything) convention: a
    candidate must score at least ``(1 - threshold) * 100`` to be admitted.
    """

    threshold: float = 0.4
    case_sensitive: bool = False

    def __post_init__(self) -> None:
        if not 0.0 <= self.threshold <= 1.0:
            raise ValueError("threshold must be between 0 and 1")

    @property
    def score_cutoff(self) -> float:
        return (1.0 - self.threshold) * 100.0


class FuzzyMatcher:
    """Rank candidates by substring-aware edit distance to a query."""

    def __init__(self, config: MatcherConfig | None = None) -> None:
        self.config = config or MatcherConfig()

    def _process(self, text: str) -> str:
        if self.config.case_sensitive:
            return text.strip()
        return utils.default_process(text)

    @staticmethod
    def _key_text(candidate: object, key: str) -> str | None:
        value = getattr(candidate, key, None)
        if value is None and isinstance(candidate, dict):
            value = candidate.get(key)
        if value is None:
            return None
        text = str(value).strip()
        return text or None

    def rank(self, candidates: Sequence[T], query: str, key: str = "label") -> list[T]:
        """Return candidates clearing the threshold, best first.

        Candidates are ordered by ``partial_ratio`` and then by full
        ``ratio``; equal scores keep their input order.
        """

        if not candidates or not query:
            return []
        pattern = self._process(query)
        if not pattern:
            return []
        cutoff = self.config.score_cutoff
        scored: list[tuple[float, float, int, T]] = []
        for index, candidate in enumerate(candidates):
            raw_text = self._key_text(candidate, key)
            if raw_text is None:
                continue
            text = self._process(raw_text)
            secondary = fuzz.ratio(pattern, text)
            # The query is searched inside the label, never the other way round.
            if len(pattern) <= len(text):
                score = fuzz.partial_ratio(pattern, text)
            else:
                score = secondary
            if score < cutoff:
                continue
            # Equal substring scores go to the label closest to the whole query;
            # input order only breaks exact ties.
            scored.append((score, secondary, index, candidate))
        scored.sort(key=lambda entry: (-entry[0], -entry[1], entry[2]))
        return [entry[3] for entry in scored]

    def match(self, candidates: Sequence[T], query: str, key: str = "label") -> T | None:
        """Return the best candidate for *query* or ``None`` when nothing clears the threshold."""

        ranked = self.rank(candidates, query, key)
        if not ranked:
            logger.debug(
                "No %s among %d candidate(s) matched %r", key, len(candidates), query
            )
            return None
        return ranked[0]


__all__ = ["MatcherConfig", "FuzzyMatcher"]
