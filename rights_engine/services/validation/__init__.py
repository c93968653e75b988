"""Evidence validation gate."""

from rights_engine.services.validation.evidence_validator import (
    EvidenceValidator,
    coverage_ratio,
    has_complete_evidence,
)

__all__ = ["EvidenceValidator", "coverage_ratio", "has_complete_evidence"]
