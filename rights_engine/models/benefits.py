"""Benefit records, run metrics and the dedup state threaded through harvesting."""

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, FrozenSet, List, Optional
from uuid import uuid4

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

from rights_engine.models.evidence import EvidenceSpan


class BenefitLayer(str, Enum):
    """How certain a right is."""

    CERTAIN = "certain"
    CONDITIONAL = "conditional"
    SERVICE = "service"


class BenefitStatus(str, Enum):
    INCLUDED = "included"
    EXCLUDED = "excluded"


class ValueState(str, Enum):
    KNOWN = "known"
    UNKNOWN_SCHEDULE_REQUIRED = "unknown_schedule_required"


class _CamelModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class AmountValue(_CamelModel):
    """A monetary figure parsed from benefit text."""

    raw: str = Field(..., description="Matched text, e.g. 'up to 5,000 ILS'")
    numeric: float = Field(..., description="Parsed numeric value")
    position: int = Field(..., description="Offset of the match within the quote")
    currency: Optional[str] = Field(default=None, description="ISO 4217 code when identifiable")


class Amounts(_CamelModel):
    value_state: ValueState = ValueState.UNKNOWN_SCHEDULE_REQUIRED
    values: List[AmountValue] = Field(default_factory=list)


class EvidenceSet(_CamelModel):
    spans: List[EvidenceSpan] = Field(default_factory=list)


class Benefit(_CamelModel):
    """A single insurance right extracted from policy text."""

    benefit_id: str = Field(default_factory=lambda: str(uuid4()))
    layer: BenefitLayer = BenefitLayer.CONDITIONAL
    title: str = ""
    summary: str = ""
    status: BenefitStatus = BenefitStatus.INCLUDED
    evidence_set: EvidenceSet = Field(default_factory=EvidenceSet)
    tags: List[str] = Field(default_factory=list)
    eligibility: Dict[str, Any] = Field(default_factory=dict)
    amounts: Amounts = Field(default_factory=Amounts)
    actionable_steps: List[str] = Field(default_factory=list)

    @property
    def spans(self) -> List[EvidenceSpan]:
        return self.evidence_set.spans


class RunQualityMetrics(_CamelModel):
    """Quality snapshot recomputed on every run."""

    evidence_coverage_ratio: float = 0.0
    benefits_count: int = 0
    layer_distribution: Dict[str, int] = Field(default_factory=dict)
    warnings: List[str] = Field(default_factory=list)


@dataclass(frozen=True)
class DedupState:
    """Keys of chunks already harvested from the current document."""

    seen_keys: FrozenSet[str] = field(default_factory=frozenset)

    def __contains__(self, key: str) -> bool:
        return key in self.seen_keys

    def with_key(self, key: str) -> "DedupState":
        return DedupState(seen_keys=self.seen_keys | {key})


@dataclass
class ValidationResult:
    """Outcome of the evidence gate."""

    valid: List[Benefit]
    invalid: List[Benefit]
    metrics: RunQualityMetrics
