"""Benefit harvester.

Segments a document into paragraph-like chunks, keeps those that confer a
right, and turns each into a Benefit backed by exactly one evidence span.
"""

from dataclasses import dataclass
from typing import List, Optional, Sequence

from rights_engine.models.benefits import Benefit, DedupState, EvidenceSet
from rights_engine.models.documents import Document
from rights_engine.models.evidence import StructuralIndex
from rights_engine.services.evidence.evidence_enricher import EvidenceEnricher
from rights_engine.services.extraction.amount_extractor import extract_amounts, mentions_amount
from rights_engine.services.extraction.benefit_classifier import (
    build_actionable_steps,
    build_eligibility,
    build_tags,
    classify_layer,
    classify_status,
)
from rights_engine.services.extraction.text_utils import (
    build_summary,
    build_title,
    chunk_key,
    segment_paragraphs,
)
from rights_engine.services.rules.keyword_rules import KeywordCategory, has_keyword
from rights_engine.utils.logging import get_logger

LOGGER = get_logger(__name__)

PAGE_PROBE_LENGTH = 50


@dataclass
class HarvestResult:
    """Benefits harvested from one document and the updated dedup state."""

    benefits: List[Benefit]
    state: DedupState


class BenefitHarvester:
    """Harvests rights-conferring paragraphs as Benefit records.

    Attributes:
        enricher: Evidence enricher used to cite each chunk
        min_chunk_length: Shortest chunk considered
        max_chunk_length: Longest chunk considered
        base_confidence: Confidence assigned to each evidence span
    """

    def __init__(
        self,
        enricher: Optional[EvidenceEnricher] = None,
        min_chunk_length: int = 30,
        max_chunk_length: int = 2000,
        base_confidence: float = 0.8,
    ):
        self.enricher = enricher or EvidenceEnricher()
        self.min_chunk_length = min_chunk_length
        self.max_chunk_length = max_chunk_length
        self.base_confidence = base_confidence

    def harvest(
        self,
        document: Document,
        has_schedule: bool,
        state: Optional[DedupState] = None,
    ) -> HarvestResult:
        """Harvest benefits from a document.

        Args:
            document: Source document
            has_schedule: Whether the run contains a schedule document
            state: Chunk keys already seen for this document

        Returns:
            HarvestResult with the benefits and the new dedup state
        """
        state = state or DedupState()
        text = document.full_text

        if not text.strip():
            LOGGER.info(
                "Document has no extractable text, skipping",
                extra={"document_id": document.document_id},
            )
            return HarvestResult(benefits=[], state=state)

        index = self.enricher.indexer.index(text)
        chunks = segment_paragraphs(text, self.min_chunk_length, self.max_chunk_length)

        benefits = []
        skipped_duplicates = 0
        for chunk in chunks:
            if not has_keyword(chunk, KeywordCategory.RIGHT):
                continue

            key = chunk_key(chunk)
            if key in state:
                skipped_duplicates += 1
                continue
            state = state.with_key(key)

            benefits.append(self.build_benefit(chunk, document, text, index, has_schedule))

        LOGGER.info(
            f"Harvested {len(benefits)} benefits from {document.display_name or document.document_id}",
            extra={
                "document_id": document.document_id,
                "pages": document.page_count,
                "chunks": len(chunks),
                "benefits": len(benefits),
                "skipped_duplicates": skipped_duplicates,
            },
        )

        return HarvestResult(benefits=benefits, state=state)

    def build_benefit(
        self,
        chunk: str,
        document: Document,
        text: str,
        index: StructuralIndex,
        has_schedule: bool,
    ) -> Benefit:
        """Build a single benefit from a rights-conferring chunk."""
        page = resolve_page(chunk, document.page_texts)
        span = self.enricher.enrich(
            text=text,
            page_texts=document.page_texts,
            quote=chunk,
            document_id=document.document_id,
            document_name=document.display_name,
            document_type=document.doc_type,
            page=page,
            confidence=self.base_confidence,
            index=index,
        )

        status = classify_status(chunk)
        layer = classify_layer(chunk)
        amounts = extract_amounts(chunk, has_schedule)

        return Benefit(
            layer=layer,
            title=build_title(chunk, self.leading_heading(chunk) or span.heading_title),
            summary=build_summary(chunk),
            status=status,
            evidence_set=EvidenceSet(spans=[span]),
            tags=build_tags(chunk, span, status),
            eligibility=build_eligibility(chunk),
            amounts=amounts,
            actionable_steps=build_actionable_steps(
                chunk, layer, status, amounts, mentions_amount(chunk)
            ),
        )

    def leading_heading(self, chunk: str) -> Optional[str]:
        """The chunk's own first line when it reads as a heading over a body.

        A heading that opens the chunk sits at the quote offset itself, so the
        enricher's nearest-preceding lookup would name the previous section.
        """
        first, _, body = chunk.partition("\n")
        if not body.strip():
            return None
        first = first.strip()
        return first if self.enricher.indexer.classify_heading(first) else None


def resolve_page(chunk: str, page_texts: Sequence[str]) -> int:
    """First page whose text contains the chunk's opening characters, else page 1."""
    probe = chunk[:PAGE_PROBE_LENGTH]
    for page_number, page_text in enumerate(page_texts, start=1):
        if probe and probe in page_text:
            return page_number
    return 1
