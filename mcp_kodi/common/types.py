"""Type definitions for Kodi library snapshots, dispatch actions and outcomes."""

from __future__ import annotations

from enum import Enum
from typing import Literal, Mapping, Sequence, TypeAlias, TypeVar

from pydantic import BaseModel, ConfigDict, Field


class _Candidate(BaseModel):
    """Base for entities returned by Kodi; frozen once fetched."""

    model_config = ConfigDict(frozen=True, extra="ignore")


class Movie(_Candidate):
    movieid: int
    label: str


class TVShow(_Candidate):
    tvshowid: int
    label: str


class Episode(_Candidate):
    """Episode entry from ``VideoLibrary.GetEpisodes``.

    ``playcount`` has no default: Kodi only reports it when requested, and an
    entry without it cannot take part in watch-count based selection.
    """

    episodeid: int
    label: str = ""
    season: int
    episode: int
    playcount: int = Field(ge=0)
    showtitle: str | None = None


class ChannelGroup(_Candidate):
    channelgroupid: int | str
    label: str


class Channel(_Candidate):
    channelid: int
    label: str
    channelnumber: int | None = None


class Addon(_Candidate):
    addonid: str
    type: str | None = None
    name: str | None = None


Candidate: TypeAlias = Movie | TVShow | Episode | ChannelGroup | Channel | Addon
CandidateT = TypeVar("CandidateT", bound=_Candidate)

# A snapshot is the immutable result of a single fetch.
Snapshot: TypeAlias = tuple[CandidateT, ...]


class SelectionPolicy(str, Enum):
    """Selection strategy applied after a snapshot has been fetched."""

    BEST_FUZZY_MATCH = "best_fuzzy_match"
    NEXT_UNWATCHED_EPISODE = "next_unwatched_episode"
    SPECIFIC_SEASON_EPISODE = "specific_season_episode"
    ONE_WEIGHTED_RANDOM_EPISODE = "one_weighted_random_episode"
    N_WEIGHTED_RANDOM_EPISODES = "n_weighted_random_episodes"
    CASCADING_CHANNEL_MATCH = "cascading_channel_match"
    ADDON_ID_SUBSTRING_MATCH = "addon_id_substring_match"
    DEVICE_COMMAND = "device_command"


MediaKind = Literal["movieid", "episodeid", "channelid"]


class MediaItem(BaseModel):
    """Playable item reference in the shape ``Player.Open`` expects."""

    model_config = ConfigDict(frozen=True)

    kind: MediaKind
    identifier: int

    def as_payload(self) -> dict[str, int]:
        return {self.kind: self.identifier}


class Open(BaseModel):
    """Play *item* immediately, replacing current playback."""

    model_config = ConfigDict(frozen=True)

    action: Literal["open"] = "open"
    item: MediaItem


class Enqueue(BaseModel):
    """Append *item* to a playlist without interrupting playback."""

    model_config = ConfigDict(frozen=True)

    action: Literal["enqueue"] = "enqueue"
    item: MediaItem
    playlist_id: int


class ExecuteAddon(BaseModel):
    """Launch the addon identified by *addon_id*."""

    model_config = ConfigDict(frozen=True)

    action: Literal["execute_addon"] = "execute_addon"
    addon_id: str


Action: TypeAlias = Open | Enqueue | ExecuteAddon


class Dispatched(BaseModel):
    """Resolution finished and zero or more actions were issued."""

    model_config = ConfigDict(frozen=True)

    status: Literal["dispatched"] = "dispatched"
    policy: SelectionPolicy
    actions: tuple[Action, ...] = ()
    detail: str | None = None

    @property
    def ok(self) -> bool:
        return True


class Failed(BaseModel):
    """Resolution stopped before dispatch; *reason* is meant for humans."""

    model_config = ConfigDict(frozen=True)

    status: Literal["failed"] = "failed"
    policy: SelectionPolicy
    reason: str
    error_kind: str

    @property
    def ok(self) -> bool:
        return False


Outcome: TypeAlias = Dispatched | Failed


JSONScalar: TypeAlias = str | int | float | bool | None
JSONValue: TypeAlias = JSONScalar | Sequence["JSONValue"] | Mapping[str, "JSONValue"]
JSONMapping: TypeAlias = Mapping[str, JSONValue]


__all__ = [
    "Movie",
    "TVShow",
    "Episode",
    "ChannelGroup",
    "Channel",
    "Addon",
    "Candidate",
    "Snapshot",
    "SelectionPolicy",
    "MediaItem",
    "Open",
    "Enqueue",
    "ExecuteAddon",
    "Action",
    "Dispatched",
    "Failed",
    "Outcome",
    "JSONValue",
    "JSONMapping",
]
