"""Dependency factories for the FastAPI application."""

from rights_engine.config import settings
from rights_engine.pipeline.extraction_pipeline import BenefitExtractionPipeline


def get_extraction_pipeline() -> BenefitExtractionPipeline:
    """Get an extraction pipeline wired from the current settings.

    Returns:
        BenefitExtractionPipeline: Pipeline for a single run
    """
    return BenefitExtractionPipeline.from_settings(settings)
