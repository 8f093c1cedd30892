"""Resolution and selection engine for fuzzy Kodi playback requests."""

from __future__ import annotations

from .dispatch import BestEffortDispatcher
from .errors import DeviceCallFailed, InvalidInput, KodiRemoteError, NoResults
from .groups import find_in_groups
from .matching import FuzzyMatcher, MatcherConfig
from .policies import MediaDeviceClient, Resolver, ResolverOptions
from .selection import pick_n, pick_one

__all__ = [
    "BestEffortDispatcher",
    "DeviceCallFailed",
    "FuzzyMatcher",
    "InvalidInput",
    "KodiRemoteError",
    "MatcherConfig",
    "MediaDeviceClient",
    "NoResults",
    "Resolver",
    "ResolverOptions",
    "find_in_groups",
    "pick_n",
    "pick_one",
]
