"""Unit tests for BenefitDeduplicator.

Tests the fuzzy title pass, evidence capping and the external merge with its
local fallback.
"""

from unittest.mock import AsyncMock, MagicMock

import pytest

from rights_engine.core.exceptions import APIClientError
from rights_engine.models.benefits import AmountValue, Amounts, ValueState
from rights_engine.services.normalization import (
    BenefitDeduplicator,
    MergeResponse,
    MergeServiceClient,
    cap_evidence_spans,
    dedup_key,
)
from rights_engine.services.normalization.deduplicator import merge_benefits


class TestDedupKey:

    def test_generic_prefix_punctuation_and_digits_removed(self):
        """Test that generic prefixes, punctuation and digits are dropped from keys."""
        assert dedup_key("Coverage: Hospitalization 2024") == dedup_key("hospitalization")
        assert dedup_key("hospitalization") == "hospitalization"

    def test_hebrew_generic_prefix(self):
        """Test that a Hebrew generic prefix is dropped from keys."""
        assert dedup_key("כיסוי: אשפוז") == "אשפוז"

    def test_bidi_marks_ignored(self):
        """Test that bidi marks do not change the key."""
        assert dedup_key("\u200fאשפוז") == "אשפוז"

    def test_key_length_is_bounded(self):
        """Test that keys are truncated to a bounded length."""
        assert len(dedup_key("x" * 100)) == 40

    def test_generic_only_title_is_kept(self):
        """Test that a title made only of a generic word keeps that word."""
        assert dedup_key("Benefit") == "benefit"

    def test_punctuation_only_title_has_empty_key(self):
        """Test that a punctuation-only title has an empty key."""
        assert dedup_key("!!!") == ""


class TestFuzzyPass:
    """Title-keyed merging."""

    @pytest.fixture
    def deduplicator(self):
        return BenefitDeduplicator()

    def test_near_duplicate_titles_merge(self, deduplicator, benefit_factory, span_factory):
        """Test that benefits with near-duplicate titles are merged."""
        first_span = span_factory(quote="Hospital costs are covered.")
        second_span = span_factory(quote="Inpatient stays are reimbursed.", document_id="doc-2")
        first = benefit_factory(
            title="Hospitalization",
            summary="Short.",
            spans=[first_span],
            tags=["hospitalization"],
        )
        second = benefit_factory(
            title="Coverage - Hospitalization",
            summary="A longer summary of the same right.",
            spans=[second_span, span_factory(quote="Hospital costs are covered.")],
            tags=["annex"],
        )

        merged = deduplicator.fuzzy_pass([first, second])

        assert len(merged) == 1
        benefit = merged[0]
        assert benefit.benefit_id == first.benefit_id
        assert benefit.title == "Hospitalization"
        assert benefit.summary == "A longer summary of the same right."
        assert [span.quote for span in benefit.spans] == [
            "Hospital costs are covered.",
            "Inpatient stays are reimbursed.",
        ]
        assert benefit.tags == ["hospitalization", "annex"]

    def test_fuzzy_pass_is_idempotent(self, deduplicator, benefit_factory, span_factory):
        """Test that running the fuzzy pass twice changes nothing."""
        benefits = [
            benefit_factory(title="Hospitalization", spans=[span_factory(quote="a")]),
            benefit_factory(title="coverage hospitalization", spans=[span_factory(quote="b")]),
            benefit_factory(title="Dental care", spans=[span_factory(quote="c")]),
        ]

        once = deduplicator.fuzzy_pass(benefits)
        twice = deduplicator.fuzzy_pass(once)

        assert [b.benefit_id for b in twice] == [b.benefit_id for b in once]
        assert len(once) == 2

    def test_empty_keys_never_merge(self, deduplicator, benefit_factory):
        """Test that benefits with empty keys are never merged."""
        merged = deduplicator.fuzzy_pass([benefit_factory(title="!!!"), benefit_factory(title="???")])

        assert len(merged) == 2

    def test_unknown_amounts_win_on_merge(self, benefit_factory):
        """Test that an unknown amount state wins when merging."""
        known = benefit_factory(title="Surgery").model_copy(update={
            "amounts": Amounts(
                value_state=ValueState.KNOWN,
                values=[AmountValue(raw="5,000 ILS", numeric=5000.0, position=0, currency="ILS")],
            )
        })
        unknown = benefit_factory(title="Surgery")

        merged = merge_benefits(known, unknown)

        assert merged.amounts.value_state == ValueState.UNKNOWN_SCHEDULE_REQUIRED
        assert merged.amounts.values == []


class TestEvidenceCap:
    """Round-robin evidence capping."""

    def test_cap_balances_across_documents(self, span_factory):
        """Test that the evidence cap takes spans round-robin across documents."""
        layout = [("A", 3), ("B", 2), ("A", 1), ("C", 5), ("A", 2), ("B", 1), ("A", 4), ("C", 1)]
        spans = [
            span_factory(quote=f"quote {doc}{page}", document_id=doc, page=page)
            for doc, page in layout
        ]

        capped = cap_evidence_spans(spans, limit=5)

        assert len(capped) == 5
        assert len({span.quote for span in capped}) == 5
        assert [(span.document_id, span.page) for span in capped] == [
            ("A", 1), ("B", 1), ("C", 1), ("A", 2), ("B", 2),
        ]

    def test_duplicate_quotes_collapse_before_cap(self, span_factory):
        """Test that duplicate quotes collapse before the cap is applied."""
        spans = [span_factory(quote="same"), span_factory(quote="same", page=2)]

        assert len(cap_evidence_spans(spans, limit=5)) == 1

    def test_cap_pass_limits_every_benefit(self, benefit_factory, span_factory):
        """Test that the cap pass limits spans on every benefit."""
        spans = [span_factory(quote=f"q{i}", page=i + 1) for i in range(8)]
        deduplicator = BenefitDeduplicator(max_evidence_spans=5)

        capped = deduplicator.cap_pass([benefit_factory(spans=spans)])

        assert len(capped[0].spans) == 5


class TestNormalize:
    """Local-first normalization with external merge above the ceiling."""

    def _distinct(self, benefit_factory, span_factory, count):
        titles = ["Hospitalization", "Dental care", "Ambulance", "Physiotherapy"]
        return [
            benefit_factory(title=titles[i], spans=[span_factory(quote=f"quote {i}")])
            for i in range(count)
        ]

    def _client(self, **merge_kwargs):
        client = MagicMock()
        client.is_configured = True
        client.merge = AsyncMock(**merge_kwargs)
        return client

    @pytest.mark.asyncio
    async def test_under_ceiling_stays_local(self, benefit_factory, span_factory):
        """Test that a list under the ceiling never calls the merge service."""
        client = self._client()
        deduplicator = BenefitDeduplicator(merge_client=client, max_benefits=10)

        result = await deduplicator.normalize(self._distinct(benefit_factory, span_factory, 3))

        assert result.method == "local_fuzzy"
        assert len(result.benefits) == 3
        assert result.warnings == []
        client.merge.assert_not_called()

    @pytest.mark.asyncio
    async def test_external_merge_above_ceiling(self, benefit_factory, span_factory):
        """Test that a list above the ceiling uses the merge service."""
        benefits = self._distinct(benefit_factory, span_factory, 3)
        client = self._client(return_value=MergeResponse(benefits=[benefits[0]], method="embedding"))
        deduplicator = BenefitDeduplicator(merge_client=client, max_benefits=2)

        result = await deduplicator.normalize(benefits)

        assert result.method == "external:embedding"
        assert [b.benefit_id for b in result.benefits] == [benefits[0].benefit_id]
        client.merge.assert_awaited_once()
        assert client.merge.call_args.args[1] == 2

    @pytest.mark.asyncio
    async def test_external_failure_falls_back_locally(self, benefit_factory, span_factory):
        """Test that a merge service failure falls back to the local merge."""
        client = self._client(side_effect=APIClientError("service unavailable"))
        deduplicator = BenefitDeduplicator(merge_client=client, max_benefits=2)

        result = await deduplicator.normalize(self._distinct(benefit_factory, span_factory, 3))

        assert result.method == "local_fallback"
        assert len(result.benefits) == 2
        assert any("service unavailable" in warning for warning in result.warnings)

    @pytest.mark.asyncio
    async def test_malformed_service_url_falls_back_locally(self, benefit_factory, span_factory):
        """Test that a merge service URL httpx cannot parse degrades to the local fallback."""
        client = MergeServiceClient(base_url="http://[::1/merge", retry_delay=0)
        deduplicator = BenefitDeduplicator(merge_client=client, max_benefits=2)

        result = await deduplicator.normalize(self._distinct(benefit_factory, span_factory, 3))

        assert result.method == "local_fallback"
        assert len(result.benefits) == 2
        assert result.warnings

    @pytest.mark.asyncio
    async def test_no_client_falls_back_locally(self, benefit_factory, span_factory):
        """Test that a missing merge client falls back to the local merge."""
        deduplicator = BenefitDeduplicator(max_benefits=2)

        result = await deduplicator.normalize(self._distinct(benefit_factory, span_factory, 4))

        assert result.method == "local_fallback"
        assert len(result.benefits) == 2
        assert result.warnings
