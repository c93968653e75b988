from typing import List

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

from rights_engine.config import CoveragePolicy
from rights_engine.models.benefits import Benefit, RunQualityMetrics


class HealthCheckResponse(BaseModel):
    """Liveness probe payload.

    Attributes:
        status: Always "healthy" while the process serves requests
        version: Engine version
        service: Service name
        coverage_policy: Evidence coverage policy the engine runs with
    """

    status: str = Field(default="healthy", description="Liveness status")
    version: str = Field(..., description="Engine version", examples=["0.1.0"])
    service: str = Field(..., description="Service name")
    coverage_policy: CoveragePolicy = Field(
        default=CoveragePolicy.WARN,
        description="Evidence coverage policy applied to runs",
    )


class ExtractionResponse(BaseModel):
    """Result of an extraction run.

    Attributes:
        run_id: Run identifier
        benefits: Accepted benefits, each with complete evidence
        invalid_count: Benefits rejected by the evidence gate
        metrics: Run quality metrics
        missing_requirements: Structural gaps in the submitted document set
    """

    run_id: str = Field(..., description="Run identifier")
    benefits: List[Benefit] = Field(default_factory=list, description="Accepted benefits")
    invalid_count: int = Field(default=0, description="Benefits rejected for incomplete evidence")
    metrics: RunQualityMetrics = Field(..., description="Run quality metrics")
    missing_requirements: List[str] = Field(
        default_factory=list,
        description="Missing schedule/policy documents and unreadable documents",
        examples=[["schedule_document_missing"]],
    )

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)
