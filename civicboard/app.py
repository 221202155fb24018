"""Litestar application for the Civicboard issue board."""

import logging
from contextlib import asynccontextmanager
from typing import AsyncIterator

import aiosqlite
from litestar import Litestar, Response, get
from litestar.config.cors import CORSConfig
from litestar.di import Provide
from litestar.logging import LoggingConfig
from litestar.openapi import OpenAPIConfig
from litestar.status_codes import HTTP_200_OK, HTTP_503_SERVICE_UNAVAILABLE

from .config import Settings, get_settings
from .db import Database, close_database, db_dependency, get_database
from .models import HealthResponse
from .routes import IssueController

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: Litestar) -> AsyncIterator[None]:
    """Open the issue database on startup and close it on shutdown."""
    db = await get_database()
    logger.info(f"Civicboard ready, issues stored in {db.db_path}")
    try:
        yield
    finally:
        await close_database()


async def check_database(db: Database) -> HealthResponse:
    """Query the issues table to prove the database answers."""
    try:
        row = await db.fetchone("SELECT COUNT(*) FROM issues")
    except (aiosqlite.Error, RuntimeError) as exc:
        logger.warning(f"Health check failed: {exc}")
        return HealthResponse(status="unavailable", database="unavailable")
    return HealthResponse(status="ok", database="connected", issues=row[0])


@get("/api/health", dependencies={"db": Provide(db_dependency)})
async def health_check(db: Database) -> Response[HealthResponse]:
    """Report whether the API can reach its database; 503 when it cannot."""
    health = await check_database(db)
    status_code = HTTP_200_OK if health.status == "ok" else HTTP_503_SERVICE_UNAVAILABLE
    return Response(health, status_code=status_code)


def create_app(settings: Settings | None = None) -> Litestar:
    """Build the application from settings."""
    settings = settings or get_settings()

    return Litestar(
        route_handlers=[health_check, IssueController],
        lifespan=[lifespan],
        cors_config=CORSConfig(
            allow_origins=settings.cors_origins,
            allow_methods=["GET", "POST", "DELETE", "OPTIONS"],
            allow_headers=["*"],
        ),
        openapi_config=OpenAPIConfig(
            title="Civicboard API",
            version="0.1.0",
            description="Post city issues and find similar ones before posting",
        ),
        logging_config=LoggingConfig(
            root={"level": settings.log_level, "handlers": ["console"]},
            formatters={
                "standard": {"format": "%(asctime)s - %(name)s - %(levelname)s - %(message)s"}
            },
            log_exceptions="always",
        ),
    )


app = create_app()


if __name__ == "__main__":
    import uvicorn

    uvicorn.run("civicboard.app:app", host="0.0.0.0", port=8000, reload=True)
