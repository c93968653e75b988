"""Benefit deduplication and evidence capping.

Normalization is always local-first: a fuzzy title pass merges near-duplicates,
evidence is capped per benefit with cross-document round-robin, and only when
the result is still larger than the configured ceiling is the external merge
service consulted, with a simpler local merge as fallback.
"""

import re
from dataclasses import dataclass, field
from typing import Any, Callable, Dict, List, Optional, Sequence

from rights_engine.core.exceptions import APIClientError
from rights_engine.models.benefits import Amounts, Benefit, EvidenceSet, ValueState
from rights_engine.models.evidence import EvidenceSpan
from rights_engine.services.normalization.merge_client import MergeServiceClient
from rights_engine.utils.logging import get_logger

LOGGER = get_logger(__name__)

BIDI_MARKS_PATTERN = re.compile("[\u200e\u200f\u202a-\u202e\u2066-\u2069]")
PUNCTUATION_PATTERN = re.compile(r"[^\w\s]|_")
DIGITS_PATTERN = re.compile(r"\d")
WHITESPACE_PATTERN = re.compile(r"\s+")

GENERIC_TITLE_PREFIXES = frozenset({
    "coverage", "coverages", "right", "rights", "service", "services",
    "benefit", "benefits", "insurance",
    "כיסוי", "כיסויים", "זכות", "זכויות", "זכאות", "שירות", "שירותי", "שירותים",
    "הטבה", "הטבות", "ביטוח",
})

DEDUP_KEY_LENGTH = 40
FALLBACK_KEY_LENGTH = 50
DEFAULT_MAX_EVIDENCE_SPANS = 5
DEFAULT_MAX_BENEFITS = 500

METHOD_LOCAL = "local_fuzzy"
METHOD_FALLBACK = "local_fallback"


def dedup_key(title: str, length: int = DEDUP_KEY_LENGTH) -> str:
    """Order-independent merge key derived from a benefit title.

    Bidi marks, punctuation and digits are removed, leading generic words
    ("coverage", "שירות", ...) are dropped and whitespace is squeezed out.
    A title made only of generic words keeps them rather than collapsing to
    an empty key.
    """
    text = BIDI_MARKS_PATTERN.sub("", title or "").lower()
    text = DIGITS_PATTERN.sub("", PUNCTUATION_PATTERN.sub(" ", text))
    tokens = text.split()
    specific = list(tokens)
    while specific and specific[0] in GENERIC_TITLE_PREFIXES:
        specific.pop(0)
    return "".join(specific or tokens)[:length]


def fallback_key(title: str, length: int = FALLBACK_KEY_LENGTH) -> str:
    text = BIDI_MARKS_PATTERN.sub("", title or "").lower()
    return WHITESPACE_PATTERN.sub(" ", text).strip()[:length]


def _union(first: Sequence[Any], second: Sequence[Any]) -> List[Any]:
    merged = list(first)
    for item in second:
        if item not in merged:
            merged.append(item)
    return merged


def union_spans(first: Sequence[EvidenceSpan], second: Sequence[EvidenceSpan]) -> List[EvidenceSpan]:
    """Union of two span lists, deduplicated by exact quote."""
    seen = set()
    spans = []
    for span in list(first) + list(second):
        if span.quote in seen:
            continue
        seen.add(span.quote)
        spans.append(span)
    return spans


def _merge_amounts(first: Amounts, second: Amounts) -> Amounts:
    if ValueState.UNKNOWN_SCHEDULE_REQUIRED in (first.value_state, second.value_state):
        return Amounts(value_state=ValueState.UNKNOWN_SCHEDULE_REQUIRED, values=[])
    values = list(first.values)
    known = {(value.raw, value.numeric) for value in values}
    for value in second.values:
        if (value.raw, value.numeric) not in known:
            values.append(value)
            known.add((value.raw, value.numeric))
    return Amounts(value_state=ValueState.KNOWN, values=values)


def _merge_eligibility(first: Dict[str, Any], second: Dict[str, Any]) -> Dict[str, Any]:
    merged = dict(second)
    for key, value in first.items():
        other = second.get(key)
        if isinstance(value, bool) and isinstance(other, bool):
            merged[key] = value or other
        elif isinstance(value, list) and isinstance(other, list):
            merged[key] = _union(value, other)
        else:
            merged[key] = value
    return merged


def merge_benefits(primary: Benefit, other: Benefit) -> Benefit:
    """Fold ``other`` into ``primary``.

    The primary keeps its identity, title, layer and status; the longer
    summary wins and evidence, tags and steps are unioned.
    """
    summary = other.summary if len(other.summary) > len(primary.summary) else primary.summary
    return primary.model_copy(update={
        "summary": summary,
        "evidence_set": EvidenceSet(spans=union_spans(primary.spans, other.spans)),
        "tags": _union(primary.tags, other.tags),
        "eligibility": _merge_eligibility(primary.eligibility, other.eligibility),
        "amounts": _merge_amounts(primary.amounts, other.amounts),
        "actionable_steps": _union(primary.actionable_steps, other.actionable_steps),
    })


def merge_by_key(benefits: Sequence[Benefit], key_fn: Callable[[str], str]) -> List[Benefit]:
    """Left fold of benefits sharing a title key, preserving first-seen order."""
    merged: Dict[str, Benefit] = {}
    for benefit in benefits:
        key = key_fn(benefit.title) or f"id:{benefit.benefit_id}"
        if key in merged:
            merged[key] = merge_benefits(merged[key], benefit)
        else:
            merged[key] = benefit
    return list(merged.values())


def cap_evidence_spans(spans: Sequence[EvidenceSpan], limit: int = DEFAULT_MAX_EVIDENCE_SPANS) -> List[EvidenceSpan]:
    """Keep at most ``limit`` spans, balanced across source documents.

    Spans are deduplicated by quote, grouped by document in order of first
    appearance, each group ordered by page, then picked round-robin.
    """
    groups: Dict[str, List[EvidenceSpan]] = {}
    for span in union_spans(spans, []):
        groups.setdefault(span.document_id, []).append(span)
    for group in groups.values():
        group.sort(key=lambda span: span.page)

    selected: List[EvidenceSpan] = []
    turn = 0
    while len(selected) < limit:
        picked = False
        for group in groups.values():
            if turn < len(group):
                selected.append(group[turn])
                picked = True
                if len(selected) == limit:
                    break
        if not picked:
            break
        turn += 1
    return selected


@dataclass
class NormalizationResult:
    benefits: List[Benefit]
    method: str
    warnings: List[str] = field(default_factory=list)


class BenefitDeduplicator:
    """Merges near-duplicate benefits and caps their evidence.

    Attributes:
        merge_client: Optional external similarity-merge client
        max_benefits: Ceiling above which the external merge is attempted
        max_evidence_spans: Evidence spans kept per benefit
    """

    def __init__(
        self,
        merge_client: Optional[MergeServiceClient] = None,
        max_benefits: int = DEFAULT_MAX_BENEFITS,
        max_evidence_spans: int = DEFAULT_MAX_EVIDENCE_SPANS,
    ):
        self.merge_client = merge_client
        self.max_benefits = max_benefits
        self.max_evidence_spans = max_evidence_spans

    def fuzzy_pass(self, benefits: Sequence[Benefit]) -> List[Benefit]:
        return merge_by_key(benefits, dedup_key)

    def cap_pass(self, benefits: Sequence[Benefit]) -> List[Benefit]:
        capped = []
        for benefit in benefits:
            spans = cap_evidence_spans(benefit.spans, self.max_evidence_spans)
            if len(spans) == len(benefit.spans):
                capped.append(benefit)
            else:
                capped.append(benefit.model_copy(update={"evidence_set": EvidenceSet(spans=spans)}))
        return capped

    def fallback_merge(self, benefits: Sequence[Benefit]) -> List[Benefit]:
        merged = merge_by_key(benefits, fallback_key)
        return self.cap_pass(merged[:self.max_benefits])

    async def normalize(self, benefits: Sequence[Benefit]) -> NormalizationResult:
        """Run the fuzzy pass, cap evidence, and merge externally above the ceiling.

        Args:
            benefits: Harvested benefits from all documents of a run

        Returns:
            NormalizationResult with the merged benefits and the method used
        """
        merged = self.cap_pass(self.fuzzy_pass(benefits))

        LOGGER.info(
            f"Fuzzy pass merged {len(benefits)} benefits into {len(merged)}",
            extra={"input": len(benefits), "output": len(merged)},
        )

        if len(merged) <= self.max_benefits:
            return NormalizationResult(benefits=merged, method=METHOD_LOCAL)

        warnings = []
        if self.merge_client is not None and self.merge_client.is_configured:
            try:
                response = await self.merge_client.merge(merged, self.max_benefits)
                result = self.cap_pass(response.benefits[:self.max_benefits])
                LOGGER.info(
                    f"External merge returned {len(result)} benefits",
                    extra={"method": response.method, "output": len(result)},
                )
                return NormalizationResult(benefits=result, method=f"external:{response.method}")
            except APIClientError as e:
                LOGGER.warning(
                    f"External merge failed, using local fallback: {e}",
                    extra={"benefits": len(merged)},
                )
                warnings.append(f"External merge service failed: {e}")
        else:
            LOGGER.warning(
                "Benefit count exceeds ceiling and no merge service is configured, using local fallback",
                extra={"benefits": len(merged), "max_benefits": self.max_benefits},
            )

        result = self.fallback_merge(merged)
        if len(merged) > len(result):
            warnings.append(
                f"Benefit list reduced from {len(merged)} to {len(result)} by local fallback merge"
            )
        return NormalizationResult(benefits=result, method=METHOD_FALLBACK, warnings=warnings)
