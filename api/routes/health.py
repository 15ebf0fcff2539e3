"""
Health check endpoints.

Provides endpoints for monitoring application health and readiness.
"""

import logging

from fastapi import APIRouter, Depends
from fastapi.responses import JSONResponse
from pydantic import BaseModel

from shared.config import get_settings
from shared.documents import IDocumentStore
from shared.exceptions import ExternalServiceError

from ..dependencies import get_document_store

logger = logging.getLogger(__name__)

router = APIRouter()


class HealthResponse(BaseModel):
    """Health check response model."""

    status: str
    version: str


class ReadinessResponse(BaseModel):
    """Readiness check response model."""

    status: str
    database: str


@router.get("/health", response_model=HealthResponse)
async def health_check() -> HealthResponse:
    """
    Basic health check endpoint.

    Returns 200 if the API is running.
    """
    return HealthResponse(status="healthy", version=get_settings().app_version)


@router.get("/ready", response_model=ReadinessResponse)
async def readiness_check(
    store: IDocumentStore = Depends(get_document_store),
):
    """
    Readiness check endpoint.

    Returns 503 when the document store cannot be queried.
    """
    try:
        await store.query("profiles", limit=1)
    except ExternalServiceError as e:
        logger.warning(f"Readiness check failed: {e.message}")
        return JSONResponse(
            status_code=503,
            content=ReadinessResponse(status="not_ready", database="unavailable").model_dump(),
        )
    return ReadinessResponse(status="ready", database="connected")
