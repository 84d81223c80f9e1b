"""FastAPI application factory for the Himma dashboard alerting API."""

from __future__ import annotations

import logging
import os
from contextlib import asynccontextmanager

from fastapi import FastAPI

# Configure root logger so all application logs are visible in container output
logging.basicConfig(
    level=os.environ.get("HIMMA_LOG_LEVEL", "INFO"),
    format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
    datefmt="%Y-%m-%d %H:%M:%S",
)
from fastapi.middleware.cors import CORSMiddleware

from himma import __version__
from himma.config import get_config
from himma.engine.alert_emitter import SoundCue
from himma.engine.directory import OrgDirectory
from himma.engine.scheduler import AsyncioScheduler, Scheduler
from himma.engine.session import DashboardSession

logger = logging.getLogger("api")


def create_app(
    directory: OrgDirectory | None = None,
    scheduler: Scheduler | None = None,
    sound: SoundCue | None = None,
) -> FastAPI:
    """Create and configure the FastAPI application.

    All dependencies are injectable for testing. When called with no
    arguments, an empty directory and an asyncio scheduler are used.

    Args:
        directory: Injected project/task collections (empty if None).
        scheduler: Injected scheduler (asyncio event loop if None).
        sound: Injected audible cue (terminal bell if None).

    Returns:
        Configured FastAPI instance.
    """
    cfg = get_config()

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        """Application lifespan -- end any open session on exit."""
        logger.info("Himma API v%s starting", __version__)
        yield
        logger.info("Shutting down Himma API")
        app.state.session.end()

    app = FastAPI(
        title="Himma Alerts API",
        description="Role-scoped notification and alerting backend for the work dashboard.",
        version=__version__,
        lifespan=lifespan,
    )

    # ── Shared state ──────────────────────────────────────────────────
    app.state.session = DashboardSession(
        directory or OrgDirectory(),
        scheduler or AsyncioScheduler(),
        config=cfg.alerts,
        sound=sound,
    )

    # ── CORS ──────────────────────────────────────────────────────────
    app.add_middleware(
        CORSMiddleware,
        allow_origins=cfg.allowed_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    # ── Routers ───────────────────────────────────────────────────────
    from himma.api.routes.health import router as health_router
    from himma.api.routes.session import router as session_router
    from himma.api.routes.projects import router as projects_router
    from himma.api.routes.tasks import router as tasks_router
    from himma.api.routes.notifications import router as notifications_router
    from himma.api.routes.toasts import router as toasts_router

    app.include_router(health_router)
    app.include_router(session_router)
    app.include_router(projects_router)
    app.include_router(tasks_router)
    app.include_router(notifications_router)
    app.include_router(toasts_router)

    return app
