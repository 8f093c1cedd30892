"""Async Kodi JSON-RPC client used as the media device collaborator."""

from __future__ import annotations

import itertools
import logging
from typing import TYPE_CHECKING, Any, Mapping, Type, TypeVar

import httpx
from pydantic import BaseModel, ValidationError

from .common.types import (
    Addon,
    Channel,
    ChannelGroup,
    Episode,
    JSONValue,
    MediaItem,
    Movie,
    TVShow,
)
from .resolver.errors import DeviceCallFailed

if TYPE_CHECKING:  # pragma: no cover - imported for type checking only
    from .server.config import Settings

logger = logging.getLogger(__name__)

_ModelT = TypeVar("_ModelT", bound=BaseModel)

EPISODE_PROPERTIES = ["playcount", "showtitle", "season", "episode"]
EPISODE_SORT = {"order": "ascending", "method": "episode", "ignorearticle": True}


class KodiClient:
    """Thin wrapper over Kodi's ``/jsonrpc`` endpoint.

    Fetch methods return an empty tuple when Kodi answers without the
    expected result list and raise :class:`DeviceCallFailed` for transport
    errors, JSON-RPC error objects or entries that fail validation.
    """

    def __init__(
        self,
        base_url: str,
        *,
        username: str | None = None,
        password: str | None = None,
        timeout: float = 10.0,
        player_id: int = 1,
        cec_addon_id: str = "script.json-cec",
        http_client: httpx.AsyncClient | None = None,
    ) -> None:
        self.endpoint = f"{base_url.rstrip('/')}/jsonrpc"
        self.player_id = player_id
        self.cec_addon_id = cec_addon_id
        self._auth: httpx.BasicAuth | None = None
        if username:
            self._auth = httpx.BasicAuth(username, password or "")
        self._owns_http_client = http_client is None
        self._http = http_client or httpx.AsyncClient(timeout=timeout)
        self._request_ids = itertools.count(1)

    @classmethod
    def from_settings(
        cls, settings: "Settings", *, http_client: httpx.AsyncClient | None = None
    ) -> "KodiClient":
        return cls(
            settings.kodi_url,
            username=settings.kodi_user,
            password=settings.kodi_password,
            timeout=settings.kodi_timeout,
            player_id=settings.video_player_id,
            cec_addon_id=settings.cec_addon_id,
            http_client=http_client,
        )

    async def close(self) -> None:
        if self._owns_http_client:
            await self._http.aclose()

    async def call(
        self, method: str, params: Mapping[str, Any] | None = None
    ) -> JSONValue:
        """Invoke *method* and return its ``result`` member."""

        payload: dict[str, Any] = {
            "jsonrpc": "2.0",
            "method": method,
            "id": next(self._request_ids),
        }
        if params:
            payload["params"] = dict(params)
        request_kwargs: dict[str, Any] = {"json": payload}
        if self._auth is not None:
            request_kwargs["auth"] = self._auth

        logger.debug("Calling %s with %s", method, payload.get("params"))
        try:
            response = await self._http.post(self.endpoint, **request_kwargs)
        except httpx.HTTPError as exc:
            raise DeviceCallFailed(f"{method} failed: {exc}", method=method) from exc
        if not response.is_success:
            raise DeviceCallFailed(
                f"{method} returned HTTP {response.status_code}", method=method
            )
        try:
            body = response.json()
        except ValueError as exc:
            raise DeviceCallFailed(
                f"{method} returned a non-JSON response", method=method
            ) from exc
        if not isinstance(body, Mapping):
            raise DeviceCallFailed(
                f"{method} returned an unexpected payload", method=method
            )
        error = body.get("error")
        if error:
            if isinstance(error, Mapping):
                message = error.get("message") or "unknown error"
                code = error.get("code")
                raise DeviceCallFailed(
                    f"{method} error {code}: {message}", method=method
                )
            raise DeviceCallFailed(f"{method} error: {error}", method=method)
        return body.get("result")

    async def _fetch(
        self,
        method: str,
        result_key: str,
        model: Type[_ModelT],
        params: Mapping[str, Any] | None = None,
    ) -> tuple[_ModelT, ...]:
        result = await self.call(method, params)
        if not isinstance(result, Mapping):
            return ()
        entries = result.get(result_key)
        if not entries:
            return ()
        try:
            return tuple(model.model_validate(entry) for entry in entries)
        except ValidationError as exc:
            raise DeviceCallFailed(
                f"{method} returned malformed {result_key}: {exc.error_count()} error(s)",
                method=method,
            ) from exc

    async def fetch_movies(self) -> tuple[Movie, ...]:
        return await self._fetch("VideoLibrary.GetMovies", "movies", Movie)

    async def fetch_shows(self) -> tuple[TVShow, ...]:
        return await self._fetch("VideoLibrary.GetTVShows", "tvshows", TVShow)

    async def fetch_episodes(
        self, tvshowid: int, *, season: int | None = None
    ) -> tuple[Episode, ...]:
        """Return episodes of a show sorted ascending by episode number."""

        params: dict[str, Any] = {
            "tvshowid": tvshowid,
            "properties": list(EPISODE_PROPERTIES),
            "sort": dict(EPISODE_SORT),
        }
        if season is not None:
            params["season"] = season
        return await self._fetch("VideoLibrary.GetEpisodes", "episodes", Episode, params)

    async def fetch_channel_groups(
        self, channel_type: str = "tv"
    ) -> tuple[ChannelGroup, ...]:
        return await self._fetch(
            "PVR.GetChannelGroups",
            "channelgroups",
            ChannelGroup,
            {"channeltype": channel_type},
        )

    async def fetch_channels(self, channelgroupid: int | str) -> tuple[Channel, ...]:
        return await self._fetch(
            "PVR.GetChannels",
            "channels",
            Channel,
            {"channelgroupid": channelgroupid, "properties": ["channelnumber"]},
        )

    async def fetch_addons(self) -> tuple[Addon, ...]:
        return await self._fetch(
            "Addons.GetAddons", "addons", Addon, {"properties": ["name"]}
        )

    async def open_item(self, item: MediaItem) -> None:
        await self.call("Player.Open", {"item": item.as_payload()})

    async def enqueue_item(self, playlist_id: int, item: MediaItem) -> None:
        await self.call(
            "Playlist.Add", {"playlistid": playlist_id, "item": item.as_payload()}
        )

    async def execute_addon(
        self, addon_id: str, params: Mapping[str, Any] | None = None
    ) -> None:
        payload: dict[str, Any] = {"addonid": addon_id}
        if params:
            payload["params"] = dict(params)
        await self.call("Addons.ExecuteAddon", payload)

    async def set_volume(self, percent: int) -> None:
        await self.call("Application.SetVolume", {"volume": percent})

    async def toggle_mute(self) -> None:
        await self.call("Application.SetMute", {"mute": "toggle"})

    async def play_pause(self) -> None:
        await self.call("Player.PlayPause", {"playerid": self.player_id})

    async def stop(self) -> None:
        await self.call("Player.Stop", {"playerid": self.player_id})

    async def activate_display(self) -> None:
        """Wake the TV and switch to Kodi's input through the CEC addon."""

        await self.execute_addon(self.cec_addon_id, {"command": "activate"})


__all__ = ["KodiClient", "EPISODE_PROPERTIES", "EPISODE_SORT"]
