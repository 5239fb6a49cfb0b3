"""FastAPI application entry point with lifespan, logging, middleware and guard wiring."""

import logging
import time
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from movie_catalog.config import Settings, settings as default_settings
from movie_catalog.models import HealthResponse
from movie_catalog.pipeline import RoutePipeline, attach_pipeline
from movie_catalog.routers import directors, movies
from movie_catalog.services.database import DatabaseService
from movie_catalog.services.guards import (
    DependencyUnavailableError,
    LockPredicate,
    MutationGuard,
    NotFoundLogger,
)
from movie_catalog.services.seed import seed_catalog

logging.basicConfig(
    level=getattr(logging, default_settings.log_level.upper(), logging.INFO),
    format="%(asctime)s  %(levelname)-8s  %(name)s  %(message)s",
    datefmt="%Y-%m-%d %H:%M:%S",
)
logger = logging.getLogger(__name__)


def install_guards(app: FastAPI, db: DatabaseService, settings: Settings) -> None:
    """Attach the lock guard to PUT/DELETE and the 404 logger to DELETE."""
    lock = MutationGuard(
        reader=db,
        predicate=LockPredicate(settings.lock_thresholds, attribute=settings.lock_attribute),
    )
    status_code = settings.lock_status_code

    attach_pipeline(
        app, movies.update_movie,
        RoutePipeline(guards=[lock], rejection_status=status_code),
    )
    attach_pipeline(
        app, movies.delete_movie,
        RoutePipeline(guards=[lock], observers=[NotFoundLogger()], rejection_status=status_code),
    )


def create_app(settings: Settings = default_settings) -> FastAPI:
    @asynccontextmanager
    async def lifespan(app: FastAPI):
        db = DatabaseService(settings.database_url)
        db.create_schema()
        if settings.seed_demo_data:
            seed_catalog(db)

        movies.init_router(db)
        directors.init_router(db)
        install_guards(app, db, settings)
        app.state.db = db

        logger.info(
            "Application started: db=%s  lock %s in %s",
            settings.database_url, settings.lock_attribute, settings.lock_thresholds,
        )
        yield
        db.dispose()
        logger.info("Application shutting down")

    app = FastAPI(
        title="Movie Catalog",
        description=(
            "CRUD API for a movie catalog. Updates and deletes of movies whose "
            "rating matches a configured lock value are refused with 423 Locked."
        ),
        version="1.0.0",
        lifespan=lifespan,
    )

    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_methods=["*"],
        allow_headers=["*"],
    )

    @app.middleware("http")
    async def log_requests(request: Request, call_next):
        start = time.perf_counter()
        response = await call_next(request)
        elapsed = (time.perf_counter() - start) * 1000
        logger.info(
            "%s %s → %d  (%.0f ms)",
            request.method, request.url.path, response.status_code, elapsed,
        )
        return response

    @app.exception_handler(DependencyUnavailableError)
    async def dependency_unavailable_handler(request: Request, exc: DependencyUnavailableError):
        return JSONResponse(
            status_code=503,
            content={"detail": "The catalog database is unavailable.", "code": "dependency_unavailable"},
        )

    @app.exception_handler(Exception)
    async def global_exception_handler(request: Request, exc: Exception):
        logger.exception("Unhandled error on %s %s", request.method, request.url.path)
        return JSONResponse(
            status_code=500,
            content={"detail": "An internal error occurred. Please try again."},
        )

    @app.get("/health", response_model=HealthResponse, tags=["system"])
    def health():
        """Check database connectivity."""
        db: DatabaseService = app.state.db
        db_ok = db.health_check()
        return HealthResponse(status="healthy" if db_ok else "degraded", database=db_ok)

    app.include_router(movies.router)
    app.include_router(directors.router)
    return app


app = create_app()
