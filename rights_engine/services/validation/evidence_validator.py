"""Evidence-coverage validation gate.

No benefit leaves the engine unless every one of its evidence spans cites a
document, a page and a non-empty quote.
"""

from collections import Counter
from typing import List, Optional, Sequence

from rights_engine.config import CoveragePolicy
from rights_engine.core.exceptions import EvidenceCoverageError
from rights_engine.models.benefits import (
    Benefit,
    BenefitLayer,
    RunQualityMetrics,
    ValidationResult,
)
from rights_engine.utils.logging import get_logger

LOGGER = get_logger(__name__)

SCHEDULE_REQUIRED_WARNING = (
    "No schedule document in the run: monetary amounts were withheld (unknown_schedule_required)"
)


def has_complete_evidence(benefit: Benefit) -> bool:
    spans = benefit.spans
    return bool(spans) and all(span.is_complete() for span in spans)


def coverage_ratio(valid_count: int, invalid_count: int) -> float:
    total = valid_count + invalid_count
    return valid_count / total if total else 0.0


class EvidenceValidator:
    """Partitions benefits by evidence completeness and computes run metrics.

    Attributes:
        coverage_policy: WARN exports the valid subset; ABORT raises when any
            benefit is rejected
    """

    def __init__(self, coverage_policy: CoveragePolicy = CoveragePolicy.WARN):
        self.coverage_policy = coverage_policy

    def validate(
        self,
        benefits: Sequence[Benefit],
        schedule_required: bool = False,
        upstream_warnings: Optional[Sequence[str]] = None,
    ) -> ValidationResult:
        """Validate normalized benefits.

        Args:
            benefits: Normalized benefit list
            schedule_required: Whether amounts were withheld for lack of a schedule
            upstream_warnings: Warnings raised by earlier stages, carried into metrics

        Returns:
            ValidationResult with valid and invalid buckets and RunQualityMetrics

        Raises:
            EvidenceCoverageError: Under the ABORT policy when any benefit is rejected
        """
        valid: List[Benefit] = []
        invalid: List[Benefit] = []
        for benefit in benefits:
            if has_complete_evidence(benefit):
                valid.append(benefit)
            else:
                invalid.append(benefit)

        warnings = list(upstream_warnings or [])
        if schedule_required:
            warnings.append(SCHEDULE_REQUIRED_WARNING)
        if invalid:
            warnings.append(f"{len(invalid)} benefits rejected for incomplete evidence")

        distribution = Counter(benefit.layer.value for benefit in valid)
        metrics = RunQualityMetrics(
            evidence_coverage_ratio=coverage_ratio(len(valid), len(invalid)),
            benefits_count=len(valid),
            layer_distribution={layer.value: distribution.get(layer.value, 0) for layer in BenefitLayer},
            warnings=warnings,
        )

        result = ValidationResult(valid=valid, invalid=invalid, metrics=metrics)

        LOGGER.info(
            f"Validated {len(benefits)} benefits: {len(valid)} valid, {len(invalid)} rejected",
            extra={
                "valid": len(valid),
                "invalid": len(invalid),
                "coverage_ratio": metrics.evidence_coverage_ratio,
            },
        )

        if invalid and self.coverage_policy == CoveragePolicy.ABORT:
            raise EvidenceCoverageError(
                f"Evidence coverage {metrics.evidence_coverage_ratio:.2f} below 1.0: "
                f"{len(invalid)} benefits lack complete evidence",
                result=result,
            )

        return result
