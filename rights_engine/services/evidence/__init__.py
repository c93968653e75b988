"""Evidence span construction."""

from rights_engine.services.evidence.evidence_enricher import EvidenceEnricher

__all__ = ["EvidenceEnricher"]
