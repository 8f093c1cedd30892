"""Playback tools for the Kodi MCP server."""

from __future__ import annotations

from typing import Annotated, Any, TYPE_CHECKING

from pydantic import Field

from ...common.types import Outcome

if TYPE_CHECKING:  # pragma: no cover - imported for type checking only
    from .. import KodiServer


ShowTitle = Annotated[
    str,
    Field(
        description="Spoken or typed title of the TV show",
        examples=["The Office", "breaking bad"],
    ),
]


def _result(outcome: Outcome) -> dict[str, Any]:
    return outcome.model_dump(mode="json")


def register_playback_tools(server: "KodiServer") -> None:
    """Register playback and remote-control tools on the provided server."""

    def _playback_tool(name: str, *, title: str, operation: str):
        return server.tool(
            name,
            title=title,
            meta={"category": "playback", "operation": operation},
        )

    @_playback_tool("play-movie", title="Play a movie", operation="open")
    async def play_movie(
        title: Annotated[
            str,
            Field(
                description="Spoken or typed movie title",
                examples=["The Gentlemen"],
            ),
        ],
    ) -> dict[str, Any]:
        """Play the library movie whose title best matches the query."""

        return _result(await server.resolver.play_movie(title))

    @_playback_tool("play-tvshow", title="Play next episode", operation="open")
    async def play_tvshow(title: ShowTitle) -> dict[str, Any]:
        """Play the first unwatched episode of the best matching show."""

        return _result(await server.resolver.play_next_episode(title))

    @_playback_tool("play-episode", title="Play a specific episode", operation="open")
    async def play_episode(
        title: ShowTitle,
        season: Annotated[int, Field(description="Season number", ge=0, examples=[2])],
        episode: Annotated[int, Field(description="Episode number", ge=0, examples=[5])],
    ) -> dict[str, Any]:
        """Play an exact season/episode of the best matching show."""

        return _result(await server.resolver.play_episode(title, season, episode))

    @_playback_tool(
        "play-random-episode", title="Play a random episode", operation="open"
    )
    async def play_random_episode(title: ShowTitle) -> dict[str, Any]:
        """Play a random episode, favouring the ones watched least."""

        return _result(await server.resolver.play_random_episode(title))

    @_playback_tool(
        "queue-random-episode", title="Queue a random episode", operation="enqueue"
    )
    async def queue_random_episode(title: ShowTitle) -> dict[str, Any]:
        """Append a random episode to the video playlist."""

        return _result(await server.resolver.queue_random_episode(title))

    @_playback_tool(
        "play-random-episodes", title="Play several random episodes", operation="open"
    )
    async def play_random_episodes(
        title: ShowTitle,
        count: Annotated[
            int,
            Field(description="Number of episodes to play and queue", ge=1, examples=[3]),
        ],
    ) -> dict[str, Any]:
        """Play one random episode and queue ``count - 1`` more."""

        return _result(await server.resolver.play_random_episodes(title, count))

    @_playback_tool(
        "play-channel-by-name", title="Play a PVR channel by name", operation="open"
    )
    async def play_channel_by_name(
        channel: Annotated[
            str, Field(description="Channel name", examples=["BBC One"])
        ],
    ) -> dict[str, Any]:
        """Tune to the best matching PVR channel, searching groups in order."""

        return _result(await server.resolver.play_channel_by_name(channel))

    @_playback_tool(
        "play-channel-by-number", title="Play a PVR channel by number", operation="open"
    )
    async def play_channel_by_number(
        number: Annotated[str, Field(description="Channel number", examples=["101"])],
    ) -> dict[str, Any]:
        """Tune to the PVR channel whose number best matches."""

        return _result(await server.resolver.play_channel_by_number(number))

    @_playback_tool("execute-addon", title="Run an addon", operation="execute")
    async def execute_addon(
        addon: Annotated[
            str,
            Field(
                description="Part of the addon identifier",
                examples=["youtube"],
            ),
        ],
    ) -> dict[str, Any]:
        """Run the first installed addon whose identifier contains the query."""

        return _result(await server.resolver.execute_addon(addon))

    @_playback_tool("set-volume", title="Set volume", operation="command")
    async def set_volume(
        percent: Annotated[int, Field(description="Volume level", ge=0, le=100)],
    ) -> dict[str, Any]:
        """Set the Kodi volume."""

        return _result(await server.resolver.set_volume(percent))

    @_playback_tool("toggle-mute", title="Toggle mute", operation="command")
    async def toggle_mute() -> dict[str, Any]:
        """Mute or unmute Kodi."""

        return _result(await server.resolver.toggle_mute())

    @_playback_tool("play-pause", title="Play or pause", operation="command")
    async def play_pause() -> dict[str, Any]:
        """Pause or resume the video player."""

        return _result(await server.resolver.play_pause())

    @_playback_tool("stop", title="Stop playback", operation="command")
    async def stop() -> dict[str, Any]:
        """Stop the video player."""

        return _result(await server.resolver.stop())

    @_playback_tool("activate-tv", title="Activate TV", operation="command")
    async def activate_tv() -> dict[str, Any]:
        """Turn on the TV and switch to Kodi's HDMI input."""

        return _result(await server.resolver.activate_display())
