import asyncio
import sys
from pathlib import Path

import pytest

# Ensure package root is importable when tests are executed directly
ROOT = Path(__file__).resolve().parents[1]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

from mcp_kodi.common.types import Episode  # noqa: E402


DISPATCH_METHODS = {
    "open_item",
    "enqueue_item",
    "execute_addon",
    "set_volume",
    "toggle_mute",
    "play_pause",
    "stop",
    "activate_display",
}


class RecordingKodiClient:
    """In-memory stand-in for :class:`mcp_kodi.client.KodiClient`."""

    def __init__(
        self,
        *,
        movies=(),
        shows=(),
        episodes=None,
        channel_groups=(),
        channels=None,
        addons=(),
        failures=None,
    ):
        self.movies = tuple(movies)
        self.shows = tuple(shows)
        self.episodes = episodes or {}
        self.channel_groups = tuple(channel_groups)
        self.channels = channels or {}
        self.addons = tuple(addons)
        self.failures = failures or {}
        self.calls: list[tuple[str, tuple]] = []
        self.closed = False

    def _record(self, name, *args):
        self.calls.append((name, args))
        failure = self.failures.get(name)
        if failure is not None:
            raise failure

    @property
    def dispatched(self):
        return [call for call in self.calls if call[0] in DISPATCH_METHODS]

    def fetched(self, name):
        return [args for method, args in self.calls if method == name]

    async def fetch_movies(self):
        self._record("fetch_movies")
        return self.movies

    async def fetch_shows(self):
        self._record("fetch_shows")
        return self.shows

    async def fetch_episodes(self, tvshowid, *, season=None):
        self._record("fetch_episodes", tvshowid, season)
        entries = tuple(self.episodes.get(tvshowid, ()))
        if season is not None:
            entries = tuple(entry for entry in entries if entry.season == season)
        return entries

    async def fetch_channel_groups(self, channel_type="tv"):
        self._record("fetch_channel_groups", channel_type)
        return self.channel_groups

    async def fetch_channels(self, channelgroupid):
        self._record("fetch_channels", channelgroupid)
        value = self.channels.get(channelgroupid, ())
        if isinstance(value, Exception):
            raise value
        return tuple(value)

    async def fetch_addons(self):
        self._record("fetch_addons")
        return self.addons

    async def open_item(self, item):
        self._record("open_item", item)

    async def enqueue_item(self, playlist_id, item):
        self._record("enqueue_item", playlist_id, item)

    async def execute_addon(self, addon_id, params=None):
        self._record("execute_addon", addon_id)

    async def set_volume(self, percent):
        self._record("set_volume", percent)

    async def toggle_mute(self):
        self._record("toggle_mute")

    async def play_pause(self):
        self._record("play_pause")

    async def stop(self):
        self._record("stop")

    async def activate_display(self):
        self._record("activate_display")

    async def close(self):
        self.closed = True


def make_episode(episodeid, *, season=1, episode=None, playcount=0, label=None):
    number = episode if episode is not None else episodeid
    return Episode(
        episodeid=episodeid,
        label=label or f"{season}x{number:02d}",
        season=season,
        episode=number,
        playcount=playcount,
        showtitle="Show",
    )


@pytest.fixture
def kodi_client_factory():
    return RecordingKodiClient


@pytest.fixture
def episode_factory():
    return make_episode


@pytest.fixture
def resolve():
    """Run a resolver operation and wait for its best-effort dispatches."""

    def _resolve(resolver, method, *args):
        async def _run():
            outcome = await getattr(resolver, method)(*args)
            await resolver.dispatcher.drain()
            return outcome

        return asyncio.run(_run())

    return _resolve
