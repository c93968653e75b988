"""Benefit normalization: fuzzy dedup, evidence capping and external merge."""

from rights_engine.services.normalization.deduplicator import (
    BenefitDeduplicator,
    NormalizationResult,
    cap_evidence_spans,
    dedup_key,
)
from rights_engine.services.normalization.merge_client import MergeResponse, MergeServiceClient

__all__ = [
    "BenefitDeduplicator",
    "MergeResponse",
    "MergeServiceClient",
    "NormalizationResult",
    "cap_evidence_spans",
    "dedup_key",
]
