"""Health check endpoint."""

from datetime import UTC, datetime
from typing import Annotated, Literal

import structlog
from fastapi import APIRouter, Depends, HTTPException, Request
from pydantic import BaseModel

from src.config import Settings
from src.infrastructure.database import Database

logger = structlog.get_logger()
router = APIRouter()


class HealthResponse(BaseModel):
    """Health check response schema."""

    status: Literal["OK"]
    message: str
    version: str
    timestamp: datetime


def get_app_settings(request: Request) -> Settings:
    """Return the settings the application was built with."""
    settings: Settings = request.app.state.settings
    return settings


def get_database(request: Request) -> Database:
    """Return the database opened during application startup."""
    database: Database = request.app.state.database
    return database


@router.get("", response_model=HealthResponse)
async def health_check(
    settings: Annotated[Settings, Depends(get_app_settings)],
    database: Annotated[Database, Depends(get_database)],
) -> HealthResponse:
    """Health check endpoint with database verification.

    Raises:
        HTTPException: 503 if the database is unavailable.
    """
    try:
        await database.execute("SELECT 1")
    except Exception as e:
        logger.error("health_check_failed", error=str(e), error_type=type(e).__name__)
        raise HTTPException(
            status_code=503,
            detail=f"Service unhealthy: {type(e).__name__}",
        ) from e

    return HealthResponse(
        status="OK",
        message=f"{settings.app_name} is running",
        version=settings.app_version,
        timestamp=datetime.now(UTC),
    )
