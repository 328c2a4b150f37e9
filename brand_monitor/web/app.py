"""FastAPI application factory."""

from contextlib import asynccontextmanager

from fastapi import FastAPI
from sqlalchemy.orm import sessionmaker

from brand_monitor.config import AppConfig
from brand_monitor.models import SessionLocal

from .dashboard import router as dashboard_router
from .monitor import router as monitor_router


def create_app(
    config: AppConfig,
    session_factory: sessionmaker = SessionLocal,
    start_scheduler: bool | None = None,
) -> FastAPI:
    """Build the app. The periodic trigger runs in-process when enabled."""
    if start_scheduler is None:
        start_scheduler = config.scheduler.enabled

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        if start_scheduler:
            from brand_monitor.scheduler import init_scheduler
            init_scheduler(config)

        yield

        if start_scheduler:
            from brand_monitor.scheduler import shutdown_scheduler
            shutdown_scheduler()

    app = FastAPI(title="Brand Monitor", lifespan=lifespan)
    app.state.config = config
    app.state.session_factory = session_factory

    app.include_router(monitor_router)
    app.include_router(dashboard_router)

    @app.get("/health")
    def health():
        return {"status": "ok"}

    return app
