import logging
from contextlib import asynccontextmanager
from typing import AsyncIterator, Optional

import uvicorn
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from app.api.errors import register_exception_handlers
from app.api.v1.entries import router as entries_router
from app.api.v1.food_history import router as food_history_router
from app.api.v1.health import router as health_router
from app.api.v1.hydration import router as hydration_router
from app.api.v1.oura import router as oura_router
from app.api.v1.weight import router as weight_router
from app.core.config import Settings, settings as default_settings
from app.core.db import Database
from app.core.logging_config import configure_logging
from app.core.scheduler import SyncScheduler

logger = logging.getLogger(__name__)


def create_app(
    settings: Optional[Settings] = None,
    database: Optional[Database] = None,
) -> FastAPI:
    settings = settings or default_settings
    database = database or Database(settings.DATABASE_URL)
    scheduler = SyncScheduler(database, settings)

    @asynccontextmanager
    async def lifespan(app: FastAPI) -> AsyncIterator[None]:
        configure_logging(settings)
        logger.info("Starting nutrition tracker [%s]", settings.ENVIRONMENT)
        database.create_all()
        scheduler.start()
        yield
        scheduler.stop()
        database.dispose()
        logger.info("Nutrition tracker shut down")

    app = FastAPI(title="Nutrition Tracker", version="1.0.0", lifespan=lifespan)
    app.state.db = database
    app.state.settings = settings
    app.state.scheduler = scheduler

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.CORS_ORIGINS,
        allow_methods=["*"],
        allow_headers=["*"],
    )
    register_exception_handlers(app)

    app.include_router(health_router, prefix="/api")
    app.include_router(entries_router, prefix="/api/v1")
    app.include_router(food_history_router, prefix="/api/v1")
    app.include_router(oura_router, prefix="/api/v1")
    app.include_router(hydration_router, prefix="/api/v1")
    app.include_router(weight_router, prefix="/api/v1")

    return app


def run() -> None:
    settings = default_settings
    uvicorn.run(
        "app.main:create_app",
        factory=True,
        host=settings.HOST,
        port=settings.PORT,
        timeout_graceful_shutdown=settings.SHUTDOWN_GRACE_SECONDS,
        log_level=settings.LOG_LEVEL.lower(),
    )


if __name__ == "__main__":
    run()
