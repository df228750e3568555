"""FastAPI application factory."""

import logging
from contextlib import asynccontextmanager
from collections.abc import AsyncIterator

from fastapi import FastAPI, Request, status
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from sqlalchemy.engine import make_url

from orgforms.config import get_settings
from orgforms.domain.exceptions import StorageError
from orgforms.infrastructure.database import Base, engine
from orgforms.infrastructure.logging.log_config import setup_logging
from orgforms.presentation.api.router import router as api_router

logger = logging.getLogger(__name__)


async def _ensure_database_exists() -> None:
    """Issue ``CREATE DATABASE`` for a PostgreSQL target that is missing.

    Only PostgreSQL URLs are handled; SQLite creates its file on first connect.
    Failure is logged and startup continues, so ``create_all`` reports the
    real connection error.
    """
    import asyncpg

    url = make_url(get_settings().database_url)
    if url.get_backend_name() != "postgresql" or not url.database:
        return

    maintenance = url.set(drivername="postgresql", database="postgres")
    try:
        conn = await asyncpg.connect(maintenance.render_as_string(hide_password=False))
    except Exception as exc:
        logger.warning("Cannot reach PostgreSQL to check database '%s': %s", url.database, exc)
        return
    try:
        if await conn.fetchval("SELECT 1 FROM pg_database WHERE datname = $1", url.database):
            logger.debug("Database '%s' exists", url.database)
            return
        await conn.execute(f'CREATE DATABASE "{url.database}"')
        logger.info("Created database '%s'", url.database)
    except asyncpg.PostgresError as exc:
        logger.warning("Could not create database '%s': %s", url.database, exc)
    finally:
        await conn.close()


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncIterator[None]:
    setup_logging()
    await _ensure_database_exists()

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    logger.info("Document and audit tables ready")

    yield

    await engine.dispose()


async def _storage_error_handler(request: Request, exc: StorageError) -> JSONResponse:
    logger.error("Storage failure on %s %s: %s", request.method, request.url.path, exc.cause or exc)
    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content={"detail": "Internal server error"},
    )


def create_app() -> FastAPI:
    """Build the API app: CORS, the storage error handler and the /api router."""
    settings = get_settings()

    app = FastAPI(
        title=settings.app_title,
        version=settings.app_version,
        lifespan=lifespan,
    )

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    app.add_exception_handler(StorageError, _storage_error_handler)

    app.include_router(api_router)

    return app


app = create_app()


if __name__ == "__main__":
    import uvicorn

    uvicorn.run(
        "orgforms.main:app",
        host="0.0.0.0",
        port=8020,
        reload=True,
    )
