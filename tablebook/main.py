"""
FastAPI app entrypoint.

Thin HTTP adapter over the reservation core. The cache coordinator and notification dispatcher are
built once per process and shared by every request through app.state.
"""
import logging
import os
from contextlib import asynccontextmanager

from apscheduler.schedulers.background import BackgroundScheduler
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from tablebook.api.routes import reservations, restaurants, waitlist
from tablebook.config import settings
from tablebook.core.constants import CACHE_HEALTH_JOB_ID
from tablebook.scheduler.cache_health_job import run_cache_health_check
from tablebook.services.cache import build_cache_coordinator
from tablebook.services.notifications import NotificationDispatcher, build_notification_sink

logging.basicConfig(
    level=getattr(logging, settings.log_level.upper(), logging.INFO),
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
)
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    # Tests may pre-seed app.state with their own cache/notifier
    if getattr(app.state, "cache", None) is None:
        app.state.cache = build_cache_coordinator(settings)
    if getattr(app.state, "notifier", None) is None:
        app.state.notifier = NotificationDispatcher(build_notification_sink(settings))

    scheduler = BackgroundScheduler()
    scheduler.add_job(
        run_cache_health_check,
        "interval",
        seconds=settings.cache_health_interval_seconds,
        id=CACHE_HEALTH_JOB_ID,
        args=[app.state.cache],
    )
    scheduler.start()
    app.state.scheduler = scheduler
    logger.info(
        "Reservations API ready (cache %s, notifications via %s)",
        "degraded/in-process" if app.state.cache.degraded else "redis",
        settings.notify_channel or "log",
    )
    yield
    scheduler.shutdown(wait=False)


def create_app() -> FastAPI:
    app = FastAPI(title="Table Reservations", version="0.1.0", lifespan=lifespan)

    # CORS: dev origins + optional CORS_ORIGINS env (comma-separated) for a hosted frontend
    cors_origins = [
        "http://localhost:5173",
        "http://127.0.0.1:5173",
        "http://localhost:3000",
        "http://127.0.0.1:3000",
    ]
    cors_extra = os.getenv("CORS_ORIGINS", "")
    if cors_extra:
        cors_origins.extend(o.strip() for o in cors_extra.split(",") if o.strip())
    app.add_middleware(
        CORSMiddleware,
        allow_origins=cors_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    app.include_router(restaurants.router, prefix="/restaurants", tags=["restaurants"])
    app.include_router(reservations.router, prefix="/restaurants", tags=["reservations"])
    app.include_router(waitlist.router, prefix="/restaurants", tags=["waitlist"])

    @app.get("/", include_in_schema=False)
    def root():
        """Root: point to API docs and health."""
        return {"message": "Table Reservations API", "docs": "/docs", "health": "/health"}

    @app.get("/health")
    def health() -> dict[str, str]:
        cache = getattr(app.state, "cache", None)
        return {"status": "ok", "cache": "degraded" if cache is None or cache.degraded else "ok"}

    return app


app = create_app()
