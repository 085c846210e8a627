"""FastAPI application factory."""

from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager

from fastapi import FastAPI

from campus.activity.router import router as activity_router
from campus.admirers.router import router as admirers_router
from campus.bookmarks.router import router as bookmarks_router
from campus.config import get_settings
from campus.database import close_db, init_db
from campus.health.router import router as health_router
from campus.leaderboard.router import router as leaderboard_router
from campus.middleware import setup_middleware
from campus.personas.router import router as personas_router
from campus.redis_client import close_redis, init_redis
from campus.streaks.router import router as streaks_router


@asynccontextmanager
async def lifespan(_app: FastAPI) -> AsyncGenerator[None, None]:
    """Startup and shutdown lifecycle."""
    settings = get_settings()
    await init_db(settings.database_url)
    await init_redis(settings.redis_url)

    yield

    await close_db()
    await close_redis()


def create_app() -> FastAPI:
    """Create and configure the FastAPI application."""
    settings = get_settings()

    app = FastAPI(
        title="Campus Anonymous Engagement API",
        description="Personas, streaks, leaderboards, bookmarks and secret admirers for anonymous visitors",
        version=settings.app_version,
        docs_url="/docs" if settings.debug else None,
        redoc_url="/redoc" if settings.debug else None,
        lifespan=lifespan,
    )

    setup_middleware(app, settings)
    app.include_router(health_router, tags=["Health"])
    app.include_router(personas_router)
    app.include_router(streaks_router)
    app.include_router(leaderboard_router)
    app.include_router(bookmarks_router)
    app.include_router(admirers_router)
    app.include_router(activity_router)

    return app


app = create_app()
