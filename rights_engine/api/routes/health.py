"""Liveness endpoint."""

from fastapi import APIRouter

from rights_engine.config import settings
from rights_engine.models.response.response import HealthCheckResponse

router = APIRouter()


@router.get(
    "/health",
    response_model=HealthCheckResponse,
    summary="Liveness probe",
    operation_id="get_engine_health",
)
async def health_check() -> HealthCheckResponse:
    """Report that the engine is up, with its version and coverage policy."""
    return HealthCheckResponse(
        version=settings.app_version,
        service=settings.app_name,
        coverage_policy=settings.coverage_policy,
    )
