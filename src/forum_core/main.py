# src/forum_core/main.py
"""Main entry point for the forum core application."""

from __future__ import annotations

import logging

from fastapi import FastAPI
from sqlalchemy.exc import SQLAlchemyError

from forum_core.api.v1 import auth_router, reactions_router
from forum_core.core.exception_handlers import setup_exception_handlers
from forum_core.core.logging import configure_logging
from forum_core.core.middleware import setup_middleware
from forum_core.core.settings import settings
from forum_core.db.session import create_tables
from forum_core.services import PeriodicTask, build_services

logger = logging.getLogger(__name__)

app = FastAPI(
    title=settings.app_name,
    description="Sessions, rate limiting and reactions for a discussion forum",
    version=settings.app_version,
)

setup_middleware(app)
setup_exception_handlers(app)

app.include_router(auth_router, prefix="/api/v1")
app.include_router(reactions_router, prefix="/api/v1")


@app.on_event("startup")
async def on_startup() -> None:
    configure_logging(settings.log_level)
    try:
        create_tables()
    except SQLAlchemyError:
        logger.critical("Failed to initialize database schema", exc_info=True)
        raise

    services = build_services()
    app.state.services = services
    app.state.background_tasks = []
    if settings.background_sweeps:
        for task in services.background_tasks():
            await task.start()
            app.state.background_tasks.append(task)
            logger.info("Started %s every %.0f seconds", task.name, task.interval_seconds)
    logger.info("%s %s ready", settings.app_name, settings.app_version)


@app.on_event("shutdown")
async def on_shutdown() -> None:
    tasks: list[PeriodicTask] = getattr(app.state, "background_tasks", [])
    for task in tasks:
        await task.stop()
    app.state.background_tasks = []
    logger.info("Shutting down")


@app.get("/health")
async def health_check() -> dict[str, str]:
    """Health check endpoint to verify the service is running."""
    return {"status": "ok"}


@app.get("/")
async def root() -> dict[str, str]:
    """Root endpoint with basic information about the API."""
    return {
        "name": settings.app_name,
        "version": settings.app_version,
        "docs": "/docs",
        "redoc": "/redoc",
    }


if __name__ == "__main__":
    import uvicorn
    uvicorn.run("forum_core.main:app", host="0.0.0.0", port=8000, reload=settings.debug)
