"""ASGI entry point for the rights engine service."""

from contextlib import asynccontextmanager
from typing import AsyncGenerator, Dict

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from pydantic import BaseModel, Field

from rights_engine.api.main import api_router
from rights_engine.config import CoveragePolicy, settings
from rights_engine.utils.logging import get_logger

LOGGER = get_logger(__name__, level=settings.log_level)


class ServiceInfoResponse(BaseModel):
    """Service metadata returned at the root path."""

    service: str = Field(..., description="Service name")
    version: str = Field(..., description="Running engine version")
    coverage_policy: CoveragePolicy = Field(..., description="Active evidence coverage policy")
    merge_service_enabled: bool = Field(..., description="Whether an external merge service is configured")
    endpoints: Dict[str, str] = Field(default_factory=dict, description="Paths of the public endpoints")


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """Log the effective engine configuration on startup and shutdown."""
    LOGGER.info(
        f"Starting {settings.app_name} {settings.app_version}",
        extra={
            "environment": settings.environment,
            "coverage_policy": settings.coverage_policy.value,
            "merge_service": bool(settings.merge_service_url),
            "max_benefits": settings.max_benefits,
        },
    )
    if not settings.merge_service_url:
        LOGGER.info("No merge service configured, oversized runs use the local fallback merge")

    yield

    LOGGER.info(f"Stopping {settings.app_name}")


app = FastAPI(
    title=settings.app_name,
    version=settings.app_version,
    description="Evidence-grounded extraction of insurance benefits from bilingual policy text",
    lifespan=lifespan,
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_credentials=True,
    allow_methods=["GET", "POST"],
    allow_headers=["*"],
)


@app.get(
    "/",
    response_model=ServiceInfoResponse,
    tags=["Root"],
    summary="Service information",
    operation_id="get_service_info",
)
async def service_info() -> ServiceInfoResponse:
    return ServiceInfoResponse(
        service=settings.app_name,
        version=settings.app_version,
        coverage_policy=settings.coverage_policy,
        merge_service_enabled=bool(settings.merge_service_url),
        endpoints={
            "docs": "/docs",
            "health": f"{settings.api_v1_prefix}/health",
            "extractions": f"{settings.api_v1_prefix}/extractions",
        },
    )


app.include_router(api_router, prefix=settings.api_v1_prefix)

if __name__ == "__main__":
    import uvicorn

    uvicorn.run(
        "rights_engine.main:app",
        host=settings.host,
        port=settings.port,
        reload=settings.debug,
        log_level=settings.log_level.lower(),
    )
