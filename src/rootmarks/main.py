"""FastAPI application factory."""

import logging
from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager

from fastapi import FastAPI

from rootmarks.books.router import router as books_router
from rootmarks.config import get_settings
from rootmarks.database import close_db, get_session, init_db
from rootmarks.events.router import router as events_router
from rootmarks.gamification.router import router as gamification_router
from rootmarks.gamification.seed import seed_badges
from rootmarks.health.router import router as health_router
from rootmarks.middleware import setup_middleware
from rootmarks.plants.router import router as plants_router
from rootmarks.profiles.router import router as profiles_router
from rootmarks.redis_client import close_redis, init_redis
from rootmarks.season.router import router as season_router

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(_app: FastAPI) -> AsyncGenerator[None, None]:
    """Startup and shutdown lifecycle."""
    settings = get_settings()
    await init_db(settings.database_url)
    if settings.redis_url:
        await init_redis(settings.redis_url)

    # Seed badge definitions (idempotent)
    try:
        async for db in get_session():
            await seed_badges(db)
            break
    except Exception:
        logger.warning("Badge seeding failed (tables may not exist yet)", exc_info=True)

    yield

    await close_db()
    await close_redis()


def create_app() -> FastAPI:
    """Create and configure the FastAPI application."""
    settings = get_settings()

    app = FastAPI(
        title="Rootmarks API",
        description="Backend API for Rootmarks, a reading tracker that grows a garden from finished books",
        version=settings.app_version,
        docs_url="/docs" if settings.debug else None,
        redoc_url="/redoc" if settings.debug else None,
        lifespan=lifespan,
    )

    setup_middleware(app, settings)
    app.include_router(health_router, tags=["Health"])
    app.include_router(profiles_router)
    app.include_router(books_router)
    app.include_router(gamification_router)
    app.include_router(plants_router)
    app.include_router(season_router)
    app.include_router(events_router)

    return app


app = create_app()
