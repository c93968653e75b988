from rights_engine.pipeline.extraction_pipeline import (
    BenefitExtractionPipeline,
    ExtractionRunResult,
)

__all__ = ["BenefitExtractionPipeline", "ExtractionRunResult"]
