"""Domain models for the extraction engine."""

from rights_engine.models.benefits import (
    AmountValue,
    Amounts,
    Benefit,
    BenefitLayer,
    BenefitStatus,
    DedupState,
    EvidenceSet,
    RunQualityMetrics,
    ValidationResult,
    ValueState,
)
from rights_engine.models.documents import Document, DocumentType
from rights_engine.models.evidence import (
    ClauseReference,
    ClauseType,
    EvidenceSpan,
    Heading,
    HeadingKind,
    Language,
    StructuralIndex,
)

__all__ = [
    "AmountValue",
    "Amounts",
    "Benefit",
    "BenefitLayer",
    "BenefitStatus",
    "ClauseReference",
    "ClauseType",
    "DedupState",
    "Document",
    "DocumentType",
    "EvidenceSet",
    "EvidenceSpan",
    "Heading",
    "HeadingKind",
    "Language",
    "RunQualityMetrics",
    "StructuralIndex",
    "ValidationResult",
    "ValueState",
]
