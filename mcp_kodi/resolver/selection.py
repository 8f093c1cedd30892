"""Episode and addon selection policies applied to fetched snapshots."""

from __future__ import annotations

import logging
import random
from typing import Sequence

from ..common.text import normalize_query
from ..common.types import Addon, Episode
from ..common.validation import require_positive

logger = logging.getLogger(__name__)

_rng = random.Random()


def episode_weights(episodes: Sequence[Episode]) -> list[int]:
    """Return inverse play-count weights; the most played episode weighs 1."""

    if not episodes:
        return []
    max_played = max(episode.playcount for episode in episodes)
    return [max_played - episode.playcount + 1 for episode in episodes]


def _draw(
    episodes: Sequence[Episode], weights: Sequence[int], rng: random.Random
) -> Episode:
    total = sum(weights)
    picked = rng.randrange(total)
    cumulative = 0
    for episode, weight in zip(episodes, weights):
        cumulative += weight
        if picked < cumulative:
            logger.info(
                "Random selection %d of %d: season %d episode %d (ID: %d), played %d time(s) before",
                picked,
                total,
                episode.season,
                episode.episode,
                episode.episodeid,
                episode.playcount,
            )
            return episode
    # Weights are positive integers summing to total, so the walk always lands.
    raise AssertionError(f"draw {picked} fell outside cumulative weight {total}")


def pick_one(
    episodes: Sequence[Episode], rng: random.Random | None = None
) -> Episode | None:
    """Pick one episode, favouring the ones watched least often."""

    if not episodes:
        return None
    return _draw(episodes, episode_weights(episodes), rng or _rng)


def pick_n(
    episodes: Sequence[Episode], n: int, rng: random.Random | None = None
) -> list[Episode]:
    """Make *n* independent weighted draws; an episode may be picked repeatedly."""

    require_positive(n, name="n")
    if not episodes:
        return []
    weights = episode_weights(episodes)
    source = rng or _rng
    return [_draw(episodes, weights, source) for _ in range(n)]


def next_unwatched(episodes: Sequence[Episode]) -> Episode | None:
    """Return the lowest-numbered episode that has never been played."""

    unwatched = [episode for episode in episodes if episode.playcount == 0]
    if not unwatched:
        return None
    return min(unwatched, key=lambda episode: (episode.season, episode.episode))


def specific_episode(
    episodes: Sequence[Episode], season: int, episode: int
) -> Episode | None:
    """Return the first entry in snapshot order matching *season* and *episode*."""

    for entry in episodes:
        if entry.season == season and entry.episode == episode:
            return entry
    return None


def match_addon(addons: Sequence[Addon], query: str) -> Addon | None:
    """Return the first addon whose identifier contains *query*."""

    needle = normalize_query(query)
    if not needle:
        return None
    for addon in addons:
        if needle in addon.addonid.casefold():
            return addon
    return None


__all__ = [
    "episode_weights",
    "pick_one",
    "pick_n",
    "next_unwatched",
    "specific_episode",
    "match_addon",
]
