"""Unit tests for keyword-driven benefit classification."""

from rights_engine.models.benefits import Amounts, BenefitLayer, BenefitStatus, ValueState
from rights_engine.models.evidence import EvidenceSpan
from rights_engine.services.extraction.benefit_classifier import (
    STEP_PREAPPROVAL,
    STEP_REIMBURSEMENT,
    STEP_SCHEDULE,
    STEP_SERVICE,
    build_actionable_steps,
    build_eligibility,
    build_tags,
    classify_layer,
    classify_status,
)


class TestLayerAndStatus:

    def test_service_wins_over_conditional(self):
        """Test that service cues take precedence over conditional cues."""
        text = "Subject to approval, the assistance hotline is available to the insured."

        assert classify_layer(text) == BenefitLayer.SERVICE

    def test_conditional(self):
        """Test that conditional cues yield the conditional layer."""
        assert classify_layer("Subject to pre-authorization, surgery costs are covered.") == BenefitLayer.CONDITIONAL

    def test_certain(self):
        """Test that entitlement cues yield the certain layer."""
        assert classify_layer("The insured is entitled to a private room.") == BenefitLayer.CERTAIN

    def test_no_cue_defaults_to_conditional(self):
        """Test that text without cues defaults to conditional."""
        assert classify_layer("General wording without cues.") == BenefitLayer.CONDITIONAL

    def test_exclusion_status(self):
        """Test that exclusion wording marks the benefit excluded."""
        assert classify_status("Cosmetic surgery is not covered.") == BenefitStatus.EXCLUDED
        assert classify_status("ניתוחים קוסמטיים אינם מכוסים.") == BenefitStatus.EXCLUDED
        assert classify_status("The insured is entitled to surgery.") == BenefitStatus.INCLUDED


class TestEnrichmentFields:

    def test_eligibility(self):
        """Test that eligibility flags are derived from the chunk."""
        eligibility = build_eligibility(
            "Subject to pre-authorization and a waiting period of 90 days, the insured is covered."
        )

        assert eligibility["requiresPreapproval"] is True
        assert eligibility["waitingPeriod"] is True
        assert "Subject to" in eligibility["conditions"]

    def test_tags(self):
        """Test that tags combine topics, status and document type."""
        span = EvidenceSpan(document_id="doc-1", page=1, quote="q", is_annex=True)

        tags = build_tags("Dental treatment abroad is not covered.", span, BenefitStatus.EXCLUDED)

        assert tags == ["dental", "abroad", "annex", "exclusion"]

    def test_steps_for_preapproval_reimbursement(self):
        """Test the actionable steps for a pre-approved reimbursement."""
        steps = build_actionable_steps(
            "Reimbursement of surgery costs requires prior approval.",
            BenefitLayer.CONDITIONAL,
            BenefitStatus.INCLUDED,
            Amounts(value_state=ValueState.KNOWN),
            amount_mentioned=False,
        )

        assert steps == [STEP_PREAPPROVAL, STEP_REIMBURSEMENT]

    def test_service_and_schedule_steps(self):
        """Test the steps for a service benefit and a missing schedule."""
        steps = build_actionable_steps(
            "Helpline consultations up to 500 ILS.",
            BenefitLayer.SERVICE,
            BenefitStatus.INCLUDED,
            Amounts(value_state=ValueState.UNKNOWN_SCHEDULE_REQUIRED),
            amount_mentioned=True,
        )

        assert steps == [STEP_SERVICE, STEP_SCHEDULE]

    def test_excluded_benefit_has_no_steps(self):
        """Test that excluded benefits carry no actionable steps."""
        steps = build_actionable_steps(
            "Reimbursement is not covered without prior approval.",
            BenefitLayer.CONDITIONAL,
            BenefitStatus.EXCLUDED,
            Amounts(),
            amount_mentioned=False,
        )

        assert steps == []
