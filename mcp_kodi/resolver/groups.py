"""Cascading channel search across ordered PVR channel groups."""

from __future__ import annotations

import logging
from typing import Awaitable, Callable, Sequence

from ..common.types import Channel, ChannelGroup
from .errors import DeviceCallFailed
from .matching import FuzzyMatcher

logger = logging.getLogger(__name__)

ChannelFetcher = Callable[[int | str], Awaitable[Sequence[Channel]]]


async def find_in_groups(
    groups: Sequence[ChannelGroup],
    fetch_channels: ChannelFetcher,
    query: str,
    matcher: FuzzyMatcher,
    key: str = "label",
) -> tuple[ChannelGroup, Channel] | None:
    """Search *groups* in order and return the first group's best channel match.

    A group whose channel list cannot be fetched, or is empty, is skipped so
    one broken group does not end the search. Groups after the first match
    are never fetched.
    """

    for index, group in enumerate(groups, start=1):
        try:
            channels = await fetch_channels(group.channelgroupid)
        except DeviceCallFailed as exc:
            logger.warning(
                "Skipping channel group %r (%s): %s",
                group.label,
                group.channelgroupid,
                exc,
                exc_info=exc,
            )
            continue
        if not channels:
            logger.info("Channel group %r has no channels", group.label)
            continue
        channel = matcher.match(channels, query, key)
        if channel is not None:
            logger.info(
                "Found PVR channel %r - %s (%d) in group %r after %d group(s)",
                channel.label,
                channel.channelnumber,
                channel.channelid,
                group.label,
                index,
            )
            return group, channel
    return None


__all__ = ["ChannelFetcher", "find_in_groups"]
