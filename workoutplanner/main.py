"""Main FastAPI application."""
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from workoutplanner import __version__
from workoutplanner.config.settings import get_settings
from workoutplanner.core.error_handlers import domain_error_handler
from workoutplanner.core.exceptions import DomainError
from workoutplanner.core.logging import configure_logging, get_logger
from workoutplanner.db.database import close_all_engines, init_db
from workoutplanner.middleware import RequestIDMiddleware

logger = get_logger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan handler."""
    await init_db()
    logger.info("application_started", app=app.title, version=__version__)

    yield

    await close_all_engines()
    logger.info("application_stopped", app=app.title)


def create_app(use_lifespan: bool = True) -> FastAPI:
    """Create and configure the FastAPI application."""
    settings = get_settings()
    configure_logging()

    app = FastAPI(
        title=settings.app_name,
        description="Workout sessions with typed sets, lifecycle actions and optimistic locking",
        version=__version__,
        lifespan=lifespan if use_lifespan else None,
    )

    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )
    app.add_middleware(RequestIDMiddleware)

    app.add_exception_handler(DomainError, domain_error_handler)

    from workoutplanner.api.routes import (
        exercises_router,
        health_router,
        sets_router,
        workouts_router,
    )

    app.include_router(health_router)
    app.include_router(workouts_router)
    app.include_router(sets_router)
    app.include_router(exercises_router)

    return app


# Create app instance
app = create_app()


if __name__ == "__main__":
    import uvicorn
    uvicorn.run("workoutplanner.main:app", host="0.0.0.0", port=8000, reload=True)
