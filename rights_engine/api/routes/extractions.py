"""Benefit extraction API endpoints."""

from typing import Annotated

from fastapi import APIRouter, Depends, HTTPException, status

from rights_engine.core.exceptions import (
    EvidenceCoverageError,
    MissingRequirementError,
    NoDocumentsError,
)
from rights_engine.dependencies import get_extraction_pipeline
from rights_engine.models.request.extraction import ExtractionRequest
from rights_engine.models.response.response import ExtractionResponse
from rights_engine.pipeline.extraction_pipeline import BenefitExtractionPipeline
from rights_engine.utils.logging import get_logger

LOGGER = get_logger(__name__)

router = APIRouter()


@router.post(
    "",
    response_model=ExtractionResponse,
    response_model_by_alias=True,
    summary="Extract evidence-backed benefits",
    description="Run harvesting, deduplication and evidence validation over a policy document set",
    operation_id="create_benefit_extraction",
)
async def create_extraction(
    request: ExtractionRequest,
    pipeline: Annotated[BenefitExtractionPipeline, Depends(get_extraction_pipeline)],
) -> ExtractionResponse:
    """Extract benefits from the submitted documents."""
    try:
        result = await pipeline.run(request.documents, run_id=request.run_id or None)
    except NoDocumentsError as e:
        raise HTTPException(status_code=status.HTTP_422_UNPROCESSABLE_ENTITY, detail=str(e)) from e
    except MissingRequirementError as e:
        raise HTTPException(
            status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
            detail={"message": str(e), "requirement": e.requirement},
        ) from e
    except EvidenceCoverageError as e:
        LOGGER.warning(f"Extraction aborted by coverage policy: {e}")
        raise HTTPException(status_code=status.HTTP_409_CONFLICT, detail=str(e)) from e

    return ExtractionResponse(
        run_id=result.run_id,
        benefits=result.benefits,
        invalid_count=len(result.invalid_benefits),
        metrics=result.metrics,
        missing_requirements=result.missing_requirements,
    )
