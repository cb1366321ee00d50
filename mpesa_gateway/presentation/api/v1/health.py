"""Health check endpoint for service monitoring."""

from typing import Annotated

from fastapi import APIRouter, Depends
from pydantic import BaseModel

from mpesa_gateway import __version__
from mpesa_gateway.core.config import MpesaSettings, get_settings

health_router = APIRouter()


class HealthResponse(BaseModel):
    status: str = "healthy"
    version: str
    environment: str


@health_router.get(
    "/health",
    response_model=HealthResponse,
    summary="Health Check",
    description="Returns the health status of the service and the gateway environment it targets.",
)
async def health_check(
    settings: Annotated[MpesaSettings, Depends(get_settings)],
) -> HealthResponse:
    return HealthResponse(
        status="healthy",
        version=__version__,
        environment=settings.environment.value,
    )
