"""GET endpoints mirroring the voice-assistant webhook paths."""

from __future__ import annotations

from typing import TYPE_CHECKING, Awaitable, Callable

from starlette.requests import Request
from starlette.responses import JSONResponse, Response
from starlette.routing import Route

from ..common.text import split_season_query
from ..common.types import Outcome

if TYPE_CHECKING:  # pragma: no cover - imported for type checking only
    from ..resolver import Resolver


ResolverProvider = Callable[[], "Resolver"]
RestHandler = Callable[[Request], Awaitable[Response]]

_STATUS_BY_ERROR_KIND = {
    "invalid_input": 400,
    "no_results": 404,
    "device_call_failed": 502,
}


def outcome_response(outcome: Outcome) -> JSONResponse:
    """Render *outcome* as JSON with a status code reflecting its error kind."""

    if outcome.ok:
        status_code = 200
    else:
        status_code = _STATUS_BY_ERROR_KIND.get(outcome.error_kind, 500)
    return JSONResponse(outcome.model_dump(mode="json"), status_code=status_code)


def build_rest_routes(get_resolver: ResolverProvider) -> list[Route]:
    """Return the GET routes, resolving requests with ``get_resolver()``."""

    def _query(request: Request, name: str = "q") -> str:
        return request.query_params.get(name, "")

    async def play_movie(request: Request) -> Response:
        return outcome_response(await get_resolver().play_movie(_query(request)))

    async def play_tvshow(request: Request) -> Response:
        return outcome_response(await get_resolver().play_next_episode(_query(request)))

    async def play_episode(request: Request) -> Response:
        # "q=<show> season <n> episode&e=<n>" or explicit "season=" parameter
        title, season = split_season_query(_query(request))
        explicit_season = request.query_params.get("season")
        if explicit_season is not None:
            season_value: object = explicit_season
        else:
            season_value = season
        episode_value = request.query_params.get("e") or request.query_params.get(
            "episode"
        )
        outcome = await get_resolver().play_episode(title, season_value, episode_value)
        return outcome_response(outcome)

    async def play_random_episode(request: Request) -> Response:
        return outcome_response(await get_resolver().play_random_episode(_query(request)))

    async def queue_random_episode(request: Request) -> Response:
        return outcome_response(await get_resolver().queue_random_episode(_query(request)))

    async def play_n_random_episodes(request: Request) -> Response:
        outcome = await get_resolver().play_random_episodes(
            _query(request), _query(request, "n")
        )
        return outcome_response(outcome)

    async def play_channel_by_name(request: Request) -> Response:
        return outcome_response(await get_resolver().play_channel_by_name(_query(request)))

    async def play_channel_by_number(request: Request) -> Response:
        return outcome_response(
            await get_resolver().play_channel_by_number(_query(request))
        )

    async def execute_addon(request: Request) -> Response:
        return outcome_response(await get_resolver().execute_addon(_query(request)))

    async def set_volume(request: Request) -> Response:
        return outcome_response(await get_resolver().set_volume(_query(request)))

    async def toggle_mute(request: Request) -> Response:  # noqa: ARG001
        return outcome_response(await get_resolver().toggle_mute())

    async def play_pause(request: Request) -> Response:  # noqa: ARG001
        return outcome_response(await get_resolver().play_pause())

    async def stop(request: Request) -> Response:  # noqa: ARG001
        return outcome_response(await get_resolver().stop())

    async def activate_tv(request: Request) -> Response:  # noqa: ARG001
        return outcome_response(await get_resolver().activate_display())

    handlers: dict[str, RestHandler] = {
        "/playmovie": play_movie,
        "/playtvshow": play_tvshow,
        "/playepisode": play_episode,
        "/playrandomepisode": play_random_episode,
        "/queuerandomepisode": queue_random_episode,
        "/playnrandomepisodes": play_n_random_episodes,
        "/playpvrchannelbyname": play_channel_by_name,
        "/playpvrchannelbynumber": play_channel_by_number,
        "/executeaddon": execute_addon,
        "/volume": set_volume,
        "/mute": toggle_mute,
        "/playpause": play_pause,
        "/stop": stop,
        "/activatetv": activate_tv,
    }
    return [Route(path, handler, methods=["GET"]) for path, handler in handlers.items()]


__all__ = ["build_rest_routes", "outcome_response"]
