"""Command-line entry point: ``python -m password_please``."""
import argparse
import asyncio
import logging
import sys
from typing import Optional, Sequence

import uvicorn

from password_please.config import Settings, settings
from password_please.main import create_app
from password_please.utils.logging import configure_logging, uvicorn_log_config

logger = logging.getLogger(__name__)

# uvicorn.main.STARTUP_FAILURE와 같은 값
STARTUP_FAILURE = 3


def parse_address(address: str, default_host: str = "0.0.0.0") -> tuple[str, int]:
    """Split a ``host:port`` or ``:port`` listen address.

    Raises:
        ValueError: if the port is missing or not a number.
    """
    host, sep, port = address.rpartition(":")
    if not sep or not port.isdigit():
        raise ValueError(f"invalid listen address: {address!r}")
    return host.strip("[]") or default_host, int(port)


def build_settings(argv: Optional[Sequence[str]] = None) -> Settings:
    """Apply command-line flags on top of the environment settings."""
    parser = argparse.ArgumentParser(prog="password_please", description="Random password web service")
    parser.add_argument(
        "--http",
        default=f":{settings.port}",
        help="http listen address (default: :$PORT or :8080)",
    )
    parser.add_argument(
        "--counter",
        default=settings.counter_file,
        help="password counter file (default: no persistence)",
    )
    args = parser.parse_args(argv)

    try:
        host, port = parse_address(args.http, settings.http_host)
    except ValueError as e:
        parser.error(str(e))

    return settings.model_copy(
        update={"http_host": host, "port": port, "counter_file": args.counter or None}
    )


async def serve(cfg: Settings) -> bool:
    """Serve until the shutdown coordinator stops the server.

    The app handles SIGINT/SIGTERM itself: it flushes the counter, then sets
    ``should_exit`` so uvicorn shuts down without re-raising the signal.

    Returns:
        False if the application failed to start.
    """
    server: uvicorn.Server

    def stop_server() -> None:
        server.should_exit = True

    config = uvicorn.Config(
        create_app(cfg, stop_server=stop_server),
        host=cfg.http_host,
        port=cfg.port,
        log_config=uvicorn_log_config(cfg.log_format),
    )
    server = uvicorn.Server(config)
    await server.serve()
    return server.started


def main(argv: Optional[Sequence[str]] = None) -> None:
    cfg = build_settings(argv)
    configure_logging(log_format=cfg.log_format, log_level=cfg.log_level)

    logger.info("Running at address %s", cfg.listen_address)
    if not asyncio.run(serve(cfg)):
        sys.exit(STARTUP_FAILURE)
    sys.exit(0)


if __name__ == "__main__":
    main()
