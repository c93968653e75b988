"""Keyword-driven classification of benefit chunks."""

from typing import Any, Dict, List

from rights_engine.models.benefits import Amounts, BenefitLayer, BenefitStatus, ValueState
from rights_engine.models.evidence import EvidenceSpan
from rights_engine.services.rules.keyword_rules import (
    KeywordCategory,
    find_terms,
    has_keyword,
    match_topics,
)

STEP_PREAPPROVAL = "Obtain the insurer's prior approval before receiving the treatment or service."
STEP_WAITING_PERIOD = "Confirm that the waiting period has ended before submitting a claim."
STEP_REIMBURSEMENT = "Keep original invoices and receipts and submit a reimbursement claim."
STEP_SERVICE = "Contact the insurer's service center to use this benefit."
STEP_SCHEDULE = "Request the policy schedule to confirm the insured amounts."


def classify_status(text: str) -> BenefitStatus:
    if has_keyword(text, KeywordCategory.EXCLUSION):
        return BenefitStatus.EXCLUDED
    return BenefitStatus.INCLUDED


def classify_layer(text: str) -> BenefitLayer:
    """Classify a chunk into a layer.

    Service cues win over conditional cues, which win over certain cues.
    Without any cue the benefit is conditional.
    """
    if has_keyword(text, KeywordCategory.SERVICE):
        return BenefitLayer.SERVICE
    if has_keyword(text, KeywordCategory.CONDITIONAL):
        return BenefitLayer.CONDITIONAL
    if has_keyword(text, KeywordCategory.CERTAIN) or has_keyword(text, KeywordCategory.RIGHT):
        return BenefitLayer.CERTAIN
    return BenefitLayer.CONDITIONAL


def build_tags(text: str, span: EvidenceSpan, status: BenefitStatus) -> List[str]:
    tags = match_topics(text)
    if span.is_annex:
        tags.append("annex")
    if status == BenefitStatus.EXCLUDED:
        tags.append("exclusion")
    return tags


def build_eligibility(text: str) -> Dict[str, Any]:
    return {
        "requiresPreapproval": has_keyword(text, KeywordCategory.PREAPPROVAL),
        "waitingPeriod": has_keyword(text, KeywordCategory.WAITING_PERIOD),
        "conditions": find_terms(text, KeywordCategory.CONDITIONAL),
    }


def build_actionable_steps(
    text: str,
    layer: BenefitLayer,
    status: BenefitStatus,
    amounts: Amounts,
    amount_mentioned: bool,
) -> List[str]:
    """Derive practical next steps for the insured from the chunk's cues."""
    if status == BenefitStatus.EXCLUDED:
        return []

    steps = []
    if has_keyword(text, KeywordCategory.PREAPPROVAL):
        steps.append(STEP_PREAPPROVAL)
    if has_keyword(text, KeywordCategory.WAITING_PERIOD):
        steps.append(STEP_WAITING_PERIOD)
    if has_keyword(text, KeywordCategory.REIMBURSEMENT):
        steps.append(STEP_REIMBURSEMENT)
    if layer == BenefitLayer.SERVICE:
        steps.append(STEP_SERVICE)
    if amount_mentioned and amounts.value_state == ValueState.UNKNOWN_SCHEDULE_REQUIRED:
        steps.append(STEP_SCHEDULE)
    return steps
