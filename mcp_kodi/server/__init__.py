"""FastMCP server exposing Kodi playback tools."""

from __future__ import annotations

import importlib.metadata
import logging
from typing import Any, TYPE_CHECKING

from fastmcp.server import FastMCP

from ..client import KodiClient
from ..resolver import (
    BestEffortDispatcher,
    FuzzyMatcher,
    MatcherConfig,
    Resolver,
    ResolverOptions,
)
from .config import Settings
from .rest import build_rest_routes
from .tools.playback import register_playback_tools


logger = logging.getLogger(__name__)


settings = Settings()
SERVER_NAME = "Kodi Remote"


try:
    __version__ = importlib.metadata.version("mcp-kodi")
except importlib.metadata.PackageNotFoundError:
    __version__ = "0.0.0"


class KodiServer(FastMCP):
    """FastMCP server with an attached Kodi JSON-RPC client."""

    def __init__(
        self,
        *,
        settings: Settings | None = None,
        kodi_client: KodiClient | None = None,
    ) -> None:  # noqa: D401 - short description inherited
        self._kodi_settings = settings or Settings()
        self._kodi_client = kodi_client
        self._owns_kodi_client = False
        self._resolver: Resolver | None = None
        self.dispatcher = BestEffortDispatcher()

        class _ServerLifespan:
            def __init__(self, kodi_server: "KodiServer") -> None:
                self._kodi_server = kodi_server

            async def __aenter__(self) -> None:  # noqa: D401 - matching protocol
                return None

            async def __aexit__(self, exc_type, exc, tb) -> None:  # noqa: ANN001
                await self._kodi_server.close()

        def _lifespan(app: FastMCP) -> _ServerLifespan:  # noqa: ARG001
            return _ServerLifespan(self)

        super().__init__(name=SERVER_NAME, lifespan=_lifespan)

    @property
    def kodi_settings(self) -> Settings:
        return self._kodi_settings

    @property
    def kodi_client(self) -> KodiClient:
        if self._kodi_client is None:
            self._kodi_client = KodiClient.from_settings(self.kodi_settings)
            self._owns_kodi_client = True
        return self._kodi_client

    @kodi_client.setter
    def kodi_client(self, client: KodiClient | None) -> None:
        self._kodi_client = client
        self._owns_kodi_client = False
        self._resolver = None

    @property
    def resolver(self) -> Resolver:
        if self._resolver is None:
            config = self.kodi_settings
            self._resolver = Resolver(
                self.kodi_client,
                matcher=FuzzyMatcher(MatcherConfig(threshold=config.fuzzy_threshold)),
                dispatcher=self.dispatcher,
                options=ResolverOptions(
                    playlist_id=config.video_playlist_id,
                    channel_type=config.pvr_channel_type,
                    activate_display=config.activate_tv,
                ),
            )
        return self._resolver

    async def close(self) -> None:
        """Drain pending dispatches and release the client this server built.

        Injected clients belong to the caller and are left open and attached.
        """

        await self.dispatcher.drain()
        if self._kodi_client is not None and self._owns_kodi_client:
            await self._kodi_client.close()
            self._kodi_client = None
            self._owns_kodi_client = False
            self._resolver = None


server = KodiServer(settings=settings)
register_playback_tools(server)


def _register_rest_endpoints() -> None:
    for route in build_rest_routes(lambda: server.resolver):
        server.custom_route(route.path, methods=["GET"])(route.endpoint)


_register_rest_endpoints()


def main(argv: list[str] | None = None) -> None:
    """Run the command line interface."""

    from .cli import main as cli_main

    cli_main(argv)


if TYPE_CHECKING:
    from .cli import RunConfig as RunConfig


def __getattr__(name: str) -> Any:
    if name == "RunConfig":
        from .cli import RunConfig as _RunConfig

        return _RunConfig
    raise AttributeError(f"module {__name__!r} has no attribute {name!r}")


__all__ = [
    "KodiServer",
    "server",
    "settings",
    "main",
    "RunConfig",
]
