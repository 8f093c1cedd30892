"""Command line interface for :mod:`mcp_kodi.server`."""

from __future__ import annotations

import argparse
import logging
import os
from dataclasses import dataclass

from . import KodiServer, server, settings


kodi_server: KodiServer = server


@dataclass
class RunConfig:
    """Runtime configuration for FastMCP transport servers."""

    host: str | None = None
    port: int | None = None
    path: str | None = None

    def to_kwargs(self) -> dict[str, object]:
        """Return keyword arguments compatible with ``FastMCP.run``."""

        kwargs: dict[str, object] = {}
        if self.host is not None:
            kwargs["host"] = self.host
        if self.port is not None:
            kwargs["port"] = self.port
        if self.path:
            kwargs["path"] = self.path
        return kwargs


def _resolve_log_level(cli_value: str | None) -> str:
    """Prefer --log-level, then LOG_LEVEL, then ``info``."""

    return cli_value or (os.getenv("LOG_LEVEL") or "info").lower()


_TRANSPORTS = ("stdio", "sse", "streamable-http")


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Run the Kodi MCP server")
    transport = parser.add_argument_group("transport")
    transport.add_argument(
        "--transport",
        choices=_TRANSPORTS,
        default="stdio",
        help="Transport protocol to use (env: MCP_TRANSPORT)",
    )
    transport.add_argument("--bind", help="Host address to bind to (env: MCP_HOST)")
    transport.add_argument("--port", type=int, help="Port to listen on (env: MCP_PORT)")
    transport.add_argument("--mount", help="Mount path for HTTP transports (env: MCP_MOUNT)")

    kodi = parser.add_argument_group("kodi")
    kodi.add_argument(
        "--kodi-host",
        default=settings.kodi_host,
        help="Kodi host name or IP address (env: KODI_HOST)",
    )
    kodi.add_argument(
        "--kodi-port",
        type=int,
        default=settings.kodi_port,
        help="Kodi web server port (env: KODI_PORT)",
    )
    kodi.add_argument(
        "--activate-tv",
        action=argparse.BooleanOptionalAction,
        default=settings.activate_tv,
        help="Wake the TV over CEC before playback (env: ACTIVATE_TV)",
    )
    parser.add_argument(
        "--log-level",
        type=str.lower,
        choices=["critical", "error", "warning", "info", "debug", "notset"],
        help="Logging verbosity (env: LOG_LEVEL)",
    )
    return parser


def _transport_config(
    parser: argparse.ArgumentParser, args: argparse.Namespace
) -> tuple[str, RunConfig]:
    """Merge MCP_* environment variables over the transport flags."""

    transport = os.getenv("MCP_TRANSPORT") or args.transport
    if transport not in _TRANSPORTS:
        parser.error(
            "transport must be one of stdio, sse, or streamable-http (via --transport or MCP_TRANSPORT)"
        )

    host = os.getenv("MCP_HOST") or os.getenv("MCP_BIND") or args.bind
    port = args.port
    env_port = os.getenv("MCP_PORT")
    if env_port is not None:
        try:
            port = int(env_port)
        except ValueError:
            parser.error("MCP_PORT must be an integer")
    mount = os.getenv("MCP_MOUNT") or args.mount

    if transport == "stdio":
        if mount:
            parser.error("--mount or MCP_MOUNT is not allowed when transport is stdio")
        return transport, RunConfig()
    if host is None or port is None:
        parser.error(
            "--bind/--port or MCP_HOST/MCP_PORT are required when transport is not stdio"
        )
    return transport, RunConfig(host=host, port=port, path=mount or None)


def main(argv: list[str] | None = None) -> None:
    """CLI entrypoint for running the MCP server."""

    parser = _build_parser()
    args = parser.parse_args(argv)
    transport, run_config = _transport_config(parser, args)

    settings.kodi_host = args.kodi_host
    settings.kodi_port = args.kodi_port
    settings.activate_tv = args.activate_tv
    # Settings changed after the client was built; rebuild lazily.
    kodi_server.kodi_client = None

    log_level_name = _resolve_log_level(args.log_level)
    logging.basicConfig(level=getattr(logging, log_level_name.upper(), logging.INFO))
    logging.getLogger(__name__).info(
        "Starting %s against %s/jsonrpc (TV activation %s)",
        kodi_server.name,
        settings.kodi_url,
        "on" if settings.activate_tv else "off",
    )

    kodi_server.run(transport=transport, **run_config.to_kwargs())


__all__ = ["RunConfig", "main", "server", "KodiServer", "kodi_server", "settings"]
