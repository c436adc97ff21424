"""
Command line entry point.

Usage:
    python -m loom serve [--host HOST] [--port PORT]
    python -m loom mcp
"""

import argparse
import asyncio

from loom.config import get_settings
from loom.logging_config import get_logger, setup_logging

logger = get_logger(__name__)


async def run_stdio() -> None:
    """Serve the tools over stdio; there is no event stream in this mode."""
    from loom.database import close_db, init_db
    from loom.events import EventHub
    from loom.mcp_server import build_mcp_server
    from loom.tools import LoomTools

    await init_db()
    settings = get_settings()
    hub = EventHub(
        queue_size=settings.subscriber_queue_size,
        heartbeat_interval=settings.heartbeat_interval,
    )
    server = build_mcp_server(LoomTools(hub))
    logger.info(f"Serving Loom tools over stdio (db={settings.db_path})")
    try:
        await server.run_stdio_async()
    finally:
        hub.close_all()
        await close_db()


def main(argv: list[str] | None = None) -> None:
    settings = get_settings()

    parser = argparse.ArgumentParser(prog="loom", description="Loom project tracking store")
    subparsers = parser.add_subparsers(dest="command", required=True)

    serve = subparsers.add_parser("serve", help="Run the HTTP API, event stream and MCP endpoint")
    serve.add_argument("--host", default=settings.api_host, help="Bind address")
    serve.add_argument("--port", type=int, default=settings.api_port, help="Bind port")

    subparsers.add_parser("mcp", help="Run the tools server over stdio")

    args = parser.parse_args(argv)
    setup_logging()

    if args.command == "serve":
        import uvicorn

        uvicorn.run("loom.main:app", host=args.host, port=args.port, log_config=None)
    else:
        asyncio.run(run_stdio())


if __name__ == "__main__":
    main()
