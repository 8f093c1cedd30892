"""Request policies: fetch a snapshot, select from it and dispatch actions."""

from __future__ import annotations

import functools
import logging
import random
from dataclasses import dataclass
from typing import Any, Awaitable, Callable, Coroutine, Protocol, Sequence, TypeVar

from ..common.text import normalize_query
from ..common.types import (
    Addon,
    Channel,
    ChannelGroup,
    Dispatched,
    Enqueue,
    Episode,
    ExecuteAddon,
    Failed,
    MediaItem,
    Movie,
    Open,
    Outcome,
    SelectionPolicy,
    TVShow,
)
from ..common.validation import coerce_int
from .dispatch import BestEffortDispatcher
from .errors import InvalidInput, KodiRemoteError, NoResults
from .groups import find_in_groups
from .matching import FuzzyMatcher
from .selection import match_addon, next_unwatched, pick_n, specific_episode

logger = logging.getLogger(__name__)

_SnapshotT = TypeVar("_SnapshotT")


class MediaDeviceClient(Protocol):
    """Operations the resolver needs from the playback device."""

    async def fetch_movies(self) -> Sequence[Movie]: ...

    async def fetch_shows(self) -> Sequence[TVShow]: ...

    async def fetch_episodes(
        self, tvshowid: int, *, season: int | None = None
    ) -> Sequence[Episode]: ...

    async def fetch_channel_groups(self, channel_type: str = "tv") -> Sequence[ChannelGroup]: ...

    async def fetch_channels(self, channelgroupid: int | str) -> Sequence[Channel]: ...

    async def fetch_addons(self) -> Sequence[Addon]: ...

    async def open_item(self, item: MediaItem) -> None: ...

    async def enqueue_item(self, playlist_id: int, item: MediaItem) -> None: ...

    async def execute_addon(self, addon_id: str, params: Any = None) -> None: ...

    async def set_volume(self, percent: int) -> None: ...

    async def toggle_mute(self) -> None: ...

    async def play_pause(self) -> None: ...

    async def stop(self) -> None: ...

    async def activate_display(self) -> None: ...


@dataclass(frozen=True, slots=True)
class ResolverOptions:
    """Per-deployment knobs for the resolver."""

    playlist_id: int = 1
    channel_type: str = "tv"
    activate_display: bool = False


_Operation = Callable[..., Awaitable[Outcome]]


def _resolution(policy: SelectionPolicy) -> Callable[[_Operation], _Operation]:
    """Turn taxonomy errors raised by an operation into a ``Failed`` outcome."""

    def decorator(fn: _Operation) -> _Operation:
        @functools.wraps(fn)
        async def wrapper(self: "Resolver", *args: Any, **kwargs: Any) -> Outcome:
            try:
                return await fn(self, *args, **kwargs)
            except KodiRemoteError as exc:
                logger.warning("%s request failed (%s): %s", policy.value, exc.kind, exc)
                return Failed(policy=policy, reason=str(exc), error_kind=exc.kind)

        return wrapper

    return decorator


def _require_query(query: str | None, *, name: str = "query") -> str:
    normalized = normalize_query(query)
    if not normalized:
        raise InvalidInput(f"{name} must not be empty")
    return normalized


def _require_int(raw: Any, *, name: str, minimum: int) -> int:
    try:
        value = coerce_int(raw, name=name)
    except ValueError as exc:
        raise InvalidInput(str(exc)) from exc
    if value < minimum:
        raise InvalidInput(f"{name} must be at least {minimum}")
    return value


def _require_results(snapshot: Sequence[_SnapshotT]) -> Sequence[_SnapshotT]:
    if not snapshot:
        raise NoResults("no results")
    return snapshot


class Resolver:
    """Resolve fuzzy playback requests against a Kodi device.

    Every public coroutine validates its input, fetches the snapshot it needs,
    applies one :class:`SelectionPolicy` and hands the resulting commands to
    the best-effort dispatcher. The returned outcome reflects what was
    issued, not what the device later did with it.
    """

    def __init__(
        self,
        client: MediaDeviceClient,
        *,
        matcher: FuzzyMatcher | None = None,
        dispatcher: BestEffortDispatcher | None = None,
        options: ResolverOptions | None = None,
        rng: random.Random | None = None,
    ) -> None:
        self.client = client
        self.matcher = matcher or FuzzyMatcher()
        self.dispatcher = dispatcher or BestEffortDispatcher()
        self.options = options or ResolverOptions()
        self._rng = rng

    # -- dispatch helpers -------------------------------------------------

    def _open(self, item: MediaItem) -> Open:
        self.dispatcher.fire(
            f"Player.Open {item.kind}={item.identifier}", self.client.open_item(item)
        )
        return Open(item=item)

    def _enqueue(self, item: MediaItem) -> Enqueue:
        playlist_id = self.options.playlist_id
        self.dispatcher.fire(
            f"Playlist.Add {item.kind}={item.identifier} (playlist {playlist_id})",
            self.client.enqueue_item(playlist_id, item),
        )
        return Enqueue(item=item, playlist_id=playlist_id)

    def _prepare_display(self) -> None:
        """Wake the TV ahead of playback of an already resolved candidate."""

        if self.options.activate_display:
            logger.info("Activating TV first")
            self.dispatcher.fire("display activation", self.client.activate_display())

    async def _resolve_show(self, title: str) -> TVShow:
        shows = _require_results(await self.client.fetch_shows())
        show = self.matcher.match(shows, title)
        if show is None:
            raise NoResults(f"Couldn't find tv show \"{title}\"")
        logger.info("Found tv show %r (%d)", show.label, show.tvshowid)
        return show

    async def _episodes_of(self, title: str, *, season: int | None = None) -> Sequence[Episode]:
        show = await self._resolve_show(title)
        episodes = _require_results(
            await self.client.fetch_episodes(show.tvshowid, season=season)
        )
        logger.info("Found %d episode(s) of %r", len(episodes), show.label)
        return episodes

    # -- library policies -------------------------------------------------

    @_resolution(SelectionPolicy.BEST_FUZZY_MATCH)
    async def play_movie(self, query: str) -> Outcome:
        title = _require_query(query)
        logger.info("Movie request received to play %r", title)
        movies = _require_results(await self.client.fetch_movies())
        movie = self.matcher.match(movies, title)
        if movie is None:
            raise NoResults(f"Couldn't find movie \"{title}\"")
        logger.info("Found movie %r (%d)", movie.label, movie.movieid)
        self._prepare_display()
        action = self._open(MediaItem(kind="movieid", identifier=movie.movieid))
        return Dispatched(
            policy=SelectionPolicy.BEST_FUZZY_MATCH, actions=(action,), detail=movie.label
        )

    @_resolution(SelectionPolicy.NEXT_UNWATCHED_EPISODE)
    async def play_next_episode(self, query: str) -> Outcome:
        title = _require_query(query)
        logger.info("TV show request received to play %r", title)
        episodes = await self._episodes_of(title)
        episode = next_unwatched(episodes)
        if episode is None:
            logger.info("No unwatched episodes left for %r", title)
            return Dispatched(
                policy=SelectionPolicy.NEXT_UNWATCHED_EPISODE,
                detail="no unwatched episodes",
            )
        logger.info(
            "Playing season %d episode %d (ID: %d)",
            episode.season,
            episode.episode,
            episode.episodeid,
        )
        self._prepare_display()
        action = self._open(MediaItem(kind="episodeid", identifier=episode.episodeid))
        return Dispatched(
            policy=SelectionPolicy.NEXT_UNWATCHED_EPISODE,
            actions=(action,),
            detail=episode.label or None,
        )

    @_resolution(SelectionPolicy.SPECIFIC_SEASON_EPISODE)
    async def play_episode(self, query: str, season: Any, episode: Any) -> Outcome:
        title = _require_query(query)
        season_number = _require_int(season, name="season", minimum=0)
        episode_number = _require_int(episode, name="episode", minimum=0)
        logger.info(
            "Specific episode request received to play %r season %d episode %d",
            title,
            season_number,
            episode_number,
        )
        episodes = await self._episodes_of(title, season=season_number)
        found = specific_episode(episodes, season_number, episode_number)
        if found is None:
            raise NoResults("no results")
        logger.info(
            "Playing season %d episode %d (ID: %d)",
            found.season,
            found.episode,
            found.episodeid,
        )
        self._prepare_display()
        action = self._open(MediaItem(kind="episodeid", identifier=found.episodeid))
        return Dispatched(
            policy=SelectionPolicy.SPECIFIC_SEASON_EPISODE,
            actions=(action,),
            detail=found.label or None,
        )

    async def _random_episodes(
        self, policy: SelectionPolicy, title: str, count: int, *, open_first: bool
    ) -> Outcome:
        episodes = await self._episodes_of(title)
        picks = pick_n(episodes, count, self._rng)
        self._prepare_display()
        actions: list[Open | Enqueue] = []
        for index, picked in enumerate(picks):
            item = MediaItem(kind="episodeid", identifier=picked.episodeid)
            if index == 0 and open_first:
                actions.append(self._open(item))
            else:
                actions.append(self._enqueue(item))
        return Dispatched(policy=policy, actions=tuple(actions))

    @_resolution(SelectionPolicy.ONE_WEIGHTED_RANDOM_EPISODE)
    async def play_random_episode(self, query: str) -> Outcome:
        title = _require_query(query)
        logger.info("Random episode request received to play %r", title)
        return await self._random_episodes(
            SelectionPolicy.ONE_WEIGHTED_RANDOM_EPISODE, title, 1, open_first=True
        )

    @_resolution(SelectionPolicy.ONE_WEIGHTED_RANDOM_EPISODE)
    async def queue_random_episode(self, query: str) -> Outcome:
        title = _require_query(query)
        logger.info("Random episode request received to queue %r", title)
        return await self._random_episodes(
            SelectionPolicy.ONE_WEIGHTED_RANDOM_EPISODE, title, 1, open_first=False
        )

    @_resolution(SelectionPolicy.N_WEIGHTED_RANDOM_EPISODES)
    async def play_random_episodes(self, query: str, count: Any) -> Outcome:
        title = _require_query(query)
        total = _require_int(count, name="count", minimum=1)
        logger.info("Random N=%d episodes request received for %r", total, title)
        return await self._random_episodes(
            SelectionPolicy.N_WEIGHTED_RANDOM_EPISODES, title, total, open_first=True
        )

    # -- PVR and addons ---------------------------------------------------

    async def _play_channel(self, query: str, key: str) -> Outcome:
        wanted = _require_query(query)
        logger.info("PVR channel request received to play %r", wanted)
        groups = await self.client.fetch_channel_groups(self.options.channel_type)
        if not groups:
            raise NoResults("no channel groups were found. Perhaps PVR is not set up?")
        found = await find_in_groups(
            groups, self.client.fetch_channels, wanted, self.matcher, key
        )
        if found is None:
            raise NoResults(
                f"Couldn't find PVR channel \"{wanted}\" in {len(groups)} group(s)"
            )
        _, channel = found
        self._prepare_display()
        action = self._open(MediaItem(kind="channelid", identifier=channel.channelid))
        return Dispatched(
            policy=SelectionPolicy.CASCADING_CHANNEL_MATCH,
            actions=(action,),
            detail=channel.label,
        )

    @_resolution(SelectionPolicy.CASCADING_CHANNEL_MATCH)
    async def play_channel_by_name(self, query: str) -> Outcome:
        return await self._play_channel(query, "label")

    @_resolution(SelectionPolicy.CASCADING_CHANNEL_MATCH)
    async def play_channel_by_number(self, query: str) -> Outcome:
        return await self._play_channel(query, "channelnumber")

    @_resolution(SelectionPolicy.ADDON_ID_SUBSTRING_MATCH)
    async def execute_addon(self, query: str) -> Outcome:
        name = _require_query(query)
        logger.info("Addon request received to execute %r", name)
        addons = _require_results(await self.client.fetch_addons())
        addon = match_addon(addons, name)
        if addon is None:
            raise NoResults(
                f"Couldn't find addon \"{name}\" in the {len(addons)} addons listed"
            )
        logger.info("Found addon %r (type %s)", addon.addonid, addon.type)
        self.dispatcher.fire(
            f"Addons.ExecuteAddon {addon.addonid}", self.client.execute_addon(addon.addonid)
        )
        return Dispatched(
            policy=SelectionPolicy.ADDON_ID_SUBSTRING_MATCH,
            actions=(ExecuteAddon(addon_id=addon.addonid),),
            detail=addon.name or addon.addonid,
        )

    # -- one-shot device commands ----------------------------------------

    def _command(self, description: str, coroutine: Coroutine[Any, Any, None]) -> Outcome:
        logger.info("%s request received", description)
        self.dispatcher.fire(description, coroutine)
        return Dispatched(policy=SelectionPolicy.DEVICE_COMMAND, detail=description)

    @_resolution(SelectionPolicy.DEVICE_COMMAND)
    async def set_volume(self, percent: Any) -> Outcome:
        volume = _require_int(percent, name="volume", minimum=0)
        if volume > 100:
            raise InvalidInput("volume must be at most 100")
        return self._command(f"Set volume to {volume}%", self.client.set_volume(volume))

    @_resolution(SelectionPolicy.DEVICE_COMMAND)
    async def toggle_mute(self) -> Outcome:
        return self._command("Mute toggle", self.client.toggle_mute())

    @_resolution(SelectionPolicy.DEVICE_COMMAND)
    async def play_pause(self) -> Outcome:
        return self._command("Play/Pause", self.client.play_pause())

    @_resolution(SelectionPolicy.DEVICE_COMMAND)
    async def stop(self) -> Outcome:
        return self._command("Stop", self.client.stop())

    @_resolution(SelectionPolicy.DEVICE_COMMAND)
    async def activate_display(self) -> Outcome:
        return self._command("Activate TV", self.client.activate_display())


__all__ = ["MediaDeviceClient", "Resolver", "ResolverOptions"]
