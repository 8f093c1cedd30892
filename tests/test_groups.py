import asyncio
import logging

from mcp_kodi.common.types import Channel, ChannelGroup
from mcp_kodi.resolver.errors import DeviceCallFailed
from mcp_kodi.resolver.groups import find_in_groups
from mcp_kodi.resolver.matching import FuzzyMatcher


GROUPS = (
    ChannelGroup(channelgroupid=1, label="A"),
    ChannelGroup(channelgroupid=2, label="B"),
    ChannelGroup(channelgroupid=3, label="C"),
)


class SpyMatcher(FuzzyMatcher):
    def __init__(self):
        super().__init__()
        self.seen: list[tuple[str, ...]] = []

    def match(self, candidates, query, key="label"):
        self.seen.append(tuple(candidate.label for candidate in candidates))
        return super().match(candidates, query, key)


def _fetcher(channels_by_group, fetched):
    async def fetch_channels(group_id):
        fetched.append(group_id)
        value = channels_by_group.get(group_id, ())
        if isinstance(value, Exception):
            raise value
        return tuple(value)

    return fetch_channels


def test_stops_at_first_group_with_a_match():
    channels = {
        1: [Channel(channelid=11, label="News 24")],
        2: [Channel(channelid=21, label="Sports 1")],
        3: [Channel(channelid=31, label="Sports 2")],
    }
    fetched: list[int] = []
    matcher = SpyMatcher()

    result = asyncio.run(
        find_in_groups(GROUPS, _fetcher(channels, fetched), "sport", matcher)
    )

    assert result is not None
    group, channel = result
    assert group.label == "B"
    assert channel.channelid == 21
    assert fetched == [1, 2]
    assert ("Sports 2",) not in matcher.seen


def test_fetch_failure_in_one_group_does_not_abort(caplog):
    channels = {
        1: DeviceCallFailed("PVR.GetChannels failed", method="PVR.GetChannels"),
        2: [],
        3: [Channel(channelid=31, label="Sports 2")],
    }
    fetched: list[int] = []

    with caplog.at_level(logging.WARNING, logger="mcp_kodi.resolver.groups"):
        result = asyncio.run(
            find_in_groups(GROUPS, _fetcher(channels, fetched), "sport", FuzzyMatcher())
        )

    assert result is not None
    assert result[1].channelid == 31
    assert fetched == [1, 2, 3]
    assert "Skipping channel group 'A'" in caplog.text


def test_exhausted_groups_return_none():
    channels = {1: [Channel(channelid=11, label="News 24")]}

    result = asyncio.run(
        find_in_groups(GROUPS, _fetcher(channels, []), "cartoons", FuzzyMatcher())
    )

    assert result is None


def test_search_by_channel_number():
    channels = {
        1: [Channel(channelid=11, label="News", channelnumber=1)],
        2: [Channel(channelid=21, label="Sports", channelnumber=101)],
    }

    result = asyncio.run(
        find_in_groups(
            GROUPS, _fetcher(channels, []), "101", FuzzyMatcher(), key="channelnumber"
        )
    )

    assert result[1].channelid == 21
