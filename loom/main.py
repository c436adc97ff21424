"""
Loom - project tracking store with live change notifications.
"""

from contextlib import asynccontextmanager

from fastapi import FastAPI
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from loom import __version__
from loom.config import get_settings
from loom.database import close_db, init_db
from loom.events import EventHub
from loom.exceptions import register_exception_handlers
from loom.logging_config import get_logger, setup_logging
from loom.mcp_server import build_mcp_server
from loom.routes import events, goals, outcomes, problems, projects, summary, tasks
from loom.tools import LoomTools

logger = get_logger(__name__)


def create_app(session_factory: async_sessionmaker[AsyncSession] | None = None) -> FastAPI:
    """
    Build the HTTP application.

    The app owns one EventHub; the tool layer mounted at /mcp publishes on
    it and /events streams from it.
    """
    settings = get_settings()
    hub = EventHub(
        queue_size=settings.subscriber_queue_size,
        heartbeat_interval=settings.heartbeat_interval,
    )
    tools = LoomTools(hub, session_factory=session_factory)
    mcp = build_mcp_server(tools)
    mcp_app = mcp.streamable_http_app()

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        """Application lifespan handler for startup/shutdown events."""
        logger.info("Starting Loom API...")
        await init_db()
        logger.info(f"Database initialized at {settings.db_path}")
        async with mcp.session_manager.run():
            yield
        logger.info("Shutting down Loom API...")
        hub.close_all()
        await close_db()

    app = FastAPI(
        title="Loom",
        description="Project tracking store with live change notifications",
        version=__version__,
        lifespan=lifespan,
    )
    app.state.hub = hub
    app.state.tools = tools

    # Register custom exception handlers
    register_exception_handlers(app)

    # Include routers
    app.include_router(projects.router, prefix="/api/projects", tags=["Projects"])
    app.include_router(tasks.router, prefix="/api/tasks", tags=["Tasks"])
    app.include_router(problems.router, prefix="/api/problems", tags=["Problems"])
    app.include_router(outcomes.router, prefix="/api/outcomes", tags=["Outcomes"])
    app.include_router(goals.router, prefix="/api/goals", tags=["Goals"])
    app.include_router(summary.router, prefix="/api/summary", tags=["Summary"])
    app.include_router(events.router, tags=["Events"])

    @app.get("/health")
    async def health_check():
        """Health check endpoint."""
        return {"status": "healthy", "subscribers": hub.subscriber_count}

    app.mount("/mcp", mcp_app)
    return app


setup_logging()
app = create_app()
