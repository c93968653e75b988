"""Run pipeline: harvest → normalize → validate over a policy document set.

The pipeline sequences the extraction stages for one run. Everything except
the optional merge-service call is synchronous and pure; the coroutine
boundary exists only so that call can be awaited.
"""

from dataclasses import dataclass, field
from typing import Dict, Iterator, List, Optional, Sequence
from uuid import uuid4

from rights_engine.config import EngineSettings, settings as default_settings
from rights_engine.core.base_stage import StageResult, StageStatus
from rights_engine.core.exceptions import (
    ConfigurationError,
    MissingRequirementError,
    NoDocumentsError,
)
from rights_engine.models.benefits import Benefit, DedupState, RunQualityMetrics
from rights_engine.models.documents import Document, DocumentType
from rights_engine.services.evidence.evidence_enricher import EvidenceEnricher
from rights_engine.services.extraction.benefit_harvester import BenefitHarvester
from rights_engine.services.normalization.deduplicator import BenefitDeduplicator
from rights_engine.services.normalization.merge_client import MergeServiceClient
from rights_engine.services.validation.evidence_validator import EvidenceValidator
from rights_engine.utils.logging import get_logger

LOGGER = get_logger(__name__)

SCHEDULE_MISSING = "schedule_document_missing"
POLICY_MISSING = "policy_document_missing"
UNREADABLE_DOCUMENT = "unreadable_document"

STAGE_HARVEST = "harvest"
STAGE_NORMALIZE = "normalize"
STAGE_VALIDATE = "validate"

DEFAULT_EXPORT_BATCH_SIZE = 100


@dataclass
class ExtractionRunResult:
    """Everything a run hands back to the orchestrator for persistence."""

    run_id: str
    benefits: List[Benefit]
    invalid_benefits: List[Benefit]
    metrics: RunQualityMetrics
    missing_requirements: List[str] = field(default_factory=list)
    stages: Dict[str, StageResult] = field(default_factory=dict)
    batch_size: int = DEFAULT_EXPORT_BATCH_SIZE

    def export_batches(self, batch_size: Optional[int] = None) -> Iterator[List[Benefit]]:
        """Yield accepted benefits in persistence-sized batches."""
        batch_size = self.batch_size if batch_size is None else batch_size
        if batch_size <= 0:
            raise ValueError("batch_size must be positive")
        for start in range(0, len(self.benefits), batch_size):
            yield self.benefits[start:start + batch_size]


def find_missing_requirements(documents: Sequence[Document]) -> List[str]:
    """Structural gaps in a document set that limit what can be reported."""
    doc_types = {document.doc_type for document in documents}
    missing = []
    if DocumentType.SCHEDULE not in doc_types:
        missing.append(SCHEDULE_MISSING)
    if DocumentType.POLICY not in doc_types:
        missing.append(POLICY_MISSING)
    for document in documents:
        if not document.is_readable:
            missing.append(f"{UNREADABLE_DOCUMENT}:{document.document_id}")
    return missing


class BenefitExtractionPipeline:
    """Sequences harvesting, normalization and validation for a run.

    Attributes:
        harvester: Per-document benefit harvester
        deduplicator: Cross-document deduplicator
        validator: Evidence gate
        require_policy_document: Fail the run when no policy document is present
        export_batch_size: Batch size of the returned result's export
    """

    def __init__(
        self,
        harvester: Optional[BenefitHarvester] = None,
        deduplicator: Optional[BenefitDeduplicator] = None,
        validator: Optional[EvidenceValidator] = None,
        require_policy_document: bool = False,
        export_batch_size: int = DEFAULT_EXPORT_BATCH_SIZE,
    ):
        self.harvester = harvester or BenefitHarvester()
        self.deduplicator = deduplicator or BenefitDeduplicator()
        self.validator = validator or EvidenceValidator()
        self.require_policy_document = require_policy_document
        self.export_batch_size = export_batch_size

    @classmethod
    def from_settings(cls, engine_settings: Optional[EngineSettings] = None) -> "BenefitExtractionPipeline":
        """Build a pipeline wired from engine settings.

        Raises:
            ConfigurationError: When a size limit is not positive
        """
        engine_settings = engine_settings or default_settings

        limits = {
            "max_benefits": engine_settings.max_benefits,
            "max_evidence_spans": engine_settings.max_evidence_spans,
            "export_batch_size": engine_settings.export_batch_size,
        }
        invalid = [name for name, value in limits.items() if value <= 0]
        if invalid:
            raise ConfigurationError(f"Settings must be positive: {', '.join(invalid)}")

        merge_client = None
        if engine_settings.merge_service_url:
            merge_client = MergeServiceClient(
                base_url=engine_settings.merge_service_url,
                api_key=engine_settings.merge_service_api_key,
                timeout=engine_settings.merge_service_timeout,
                max_retries=engine_settings.max_retries,
                retry_delay=engine_settings.retry_delay,
            )

        return cls(
            harvester=BenefitHarvester(
                enricher=EvidenceEnricher(context_window=engine_settings.context_window),
                min_chunk_length=engine_settings.min_chunk_length,
                max_chunk_length=engine_settings.max_chunk_length,
                base_confidence=engine_settings.base_confidence,
            ),
            deduplicator=BenefitDeduplicator(
                merge_client=merge_client,
                max_benefits=engine_settings.max_benefits,
                max_evidence_spans=engine_settings.max_evidence_spans,
            ),
            validator=EvidenceValidator(coverage_policy=engine_settings.coverage_policy),
            require_policy_document=engine_settings.require_policy_document,
            export_batch_size=engine_settings.export_batch_size,
        )

    async def run(self, documents: Sequence[Document], run_id: Optional[str] = None) -> ExtractionRunResult:
        """Extract the validated benefit set of a run.

        Args:
            documents: All documents of the policy set
            run_id: Identifier of the run, generated when omitted

        Returns:
            ExtractionRunResult

        Raises:
            NoDocumentsError: When the run has no documents
            MissingRequirementError: When no policy document is present and
                the policy document is configured as required
            EvidenceCoverageError: Under the abort coverage policy
        """
        run_id = run_id or str(uuid4())

        if not documents:
            raise NoDocumentsError(f"Run {run_id} has no documents to process")

        missing = find_missing_requirements(documents)
        has_schedule = SCHEDULE_MISSING not in missing

        if POLICY_MISSING in missing and self.require_policy_document:
            raise MissingRequirementError(
                f"Run {run_id} has no policy document", requirement=POLICY_MISSING
            )

        LOGGER.info(
            f"Starting extraction run {run_id} over {len(documents)} documents",
            extra={
                "run_id": run_id,
                "documents": len(documents),
                "has_schedule": has_schedule,
                "missing_requirements": missing,
            },
        )

        stages: Dict[str, StageResult] = {}

        harvested: List[Benefit] = []
        per_document: Dict[str, int] = {}
        for document in documents:
            result = self.harvester.harvest(document, has_schedule, DedupState())
            per_document[document.document_id] = len(result.benefits)
            harvested.extend(result.benefits)
        stages[STAGE_HARVEST] = StageResult(
            status=StageStatus.COMPLETED,
            data={"benefits": len(harvested), "per_document": per_document},
        )

        normalization = await self.deduplicator.normalize(harvested)
        stages[STAGE_NORMALIZE] = StageResult(
            status=StageStatus.COMPLETED,
            data={"benefits": len(normalization.benefits), "method": normalization.method},
        )

        upstream_warnings = [
            warning for warning in missing if warning != SCHEDULE_MISSING
        ] + normalization.warnings

        try:
            validation = self.validator.validate(
                normalization.benefits,
                schedule_required=not has_schedule,
                upstream_warnings=upstream_warnings,
            )
        except Exception as e:
            stages[STAGE_VALIDATE] = StageResult(status=StageStatus.FAILED, error=str(e))
            LOGGER.error(
                f"Validation failed for run {run_id}: {e}",
                extra={"run_id": run_id},
            )
            raise

        stages[STAGE_VALIDATE] = StageResult(
            status=StageStatus.COMPLETED,
            data={"valid": len(validation.valid), "invalid": len(validation.invalid)},
        )

        LOGGER.info(
            f"Run {run_id} completed with {len(validation.valid)} benefits",
            extra={
                "run_id": run_id,
                "coverage_ratio": validation.metrics.evidence_coverage_ratio,
                "layer_distribution": validation.metrics.layer_distribution,
            },
        )

        return ExtractionRunResult(
            run_id=run_id,
            benefits=validation.valid,
            invalid_benefits=validation.invalid,
            metrics=validation.metrics,
            missing_requirements=missing,
            stages=stages,
            batch_size=self.export_batch_size,
        )
