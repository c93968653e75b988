"""Evidence enrichment: turns a quoted excerpt into a citation-bearing span.

Given a document's text and a quote, the enricher resolves where the quote sits
structurally (nearest clause reference, nearest heading, paragraph anchor),
captures readable surrounding context, picks the sentence worth highlighting
and flags annex/endorsement material.
"""

import re
from typing import Optional, Sequence, Tuple

from rights_engine.models.documents import DocumentType
from rights_engine.models.evidence import ClauseReference, EvidenceSpan, StructuralIndex
from rights_engine.services.indexing.structural_indexer import (
    StructuralIndexer,
    nearest_clause,
    nearest_heading,
)
from rights_engine.services.rules.clause_rules import (
    ANNEX_LABEL_PATTERN,
    ANNEX_NAME_PATTERN,
    SECTION_LABELS,
)
from rights_engine.services.rules.keyword_rules import KeywordCategory, has_keyword
from rights_engine.utils.logging import get_logger

LOGGER = get_logger(__name__)

BLANK_LINE_PATTERN = re.compile(r"\n[ \t]*\n")
SENTENCE_SPLIT_PATTERN = re.compile(r"(?<=[.!?;])\s+|\n+")
WHITESPACE_PATTERN = re.compile(r"\s+")

DEFAULT_CONTEXT_WINDOW = 150
DEFAULT_ANCHOR_WORDS = 8
MIN_HIGHLIGHT_LENGTH = 20


class EvidenceEnricher:
    """Builds EvidenceSpan records with structural citation metadata.

    Attributes:
        indexer: Structural indexer used when no precomputed index is supplied
        context_window: Characters of context captured on each side of a quote
        anchor_words: Number of words used for a paragraph anchor
    """

    def __init__(
        self,
        indexer: Optional[StructuralIndexer] = None,
        context_window: int = DEFAULT_CONTEXT_WINDOW,
        anchor_words: int = DEFAULT_ANCHOR_WORDS,
    ):
        self.indexer = indexer or StructuralIndexer()
        self.context_window = context_window
        self.anchor_words = anchor_words

    def enrich(
        self,
        *,
        text: str,
        page_texts: Sequence[str],
        quote: str,
        document_id: str,
        document_name: str,
        document_type: DocumentType,
        page: int,
        confidence: float,
        index: Optional[StructuralIndex] = None,
    ) -> EvidenceSpan:
        """Build an evidence span for a quote.

        Args:
            text: Full document text
            page_texts: Per-page text, 1-indexed by position
            quote: Verbatim excerpt to cite
            document_id: Source document identifier
            document_name: Source document display name
            document_type: Source document type
            page: 1-indexed page the quote was resolved to
            confidence: Base confidence for the span
            index: Precomputed structural index of ``text``

        Returns:
            EvidenceSpan; positional enrichment is omitted when the quote
            cannot be located
        """
        is_annex = self.is_annex_document(document_type, document_name)
        span = EvidenceSpan(
            document_id=document_id,
            page=page,
            quote=quote,
            confidence=confidence,
            document_name=document_name,
            highlighted_text=highlight_sentence(quote),
            is_annex=is_annex,
            verbatim=True,
        )

        located = self._locate(text, page_texts, page, quote, index)
        if located is None:
            LOGGER.debug(
                "Quote not located, emitting span without structural enrichment",
                extra={"document_id": document_id, "page": page},
            )
            if is_annex:
                span.annex_name = document_name or None
            return span

        coordinate_text, offset, coordinate_index = located

        clause = nearest_clause(coordinate_index.clause_references, offset)
        heading = nearest_heading(coordinate_index.headings, offset)

        if clause is not None:
            span.clause_number = clause.number
            span.section_path = render_section_path(clause)
        else:
            span.paragraph_anchor = paragraph_anchor(coordinate_text, offset, self.anchor_words)

        if heading is not None:
            span.heading_title = heading.text

        span.excerpt_context = build_context(
            coordinate_text, offset, offset + len(quote), self.context_window
        )

        if is_annex:
            span.annex_name = find_annex_name(coordinate_text, offset) or document_name or None

        return span

    @staticmethod
    def is_annex_document(document_type: DocumentType, document_name: str) -> bool:
        if document_type == DocumentType.ENDORSEMENT:
            return True
        return bool(ANNEX_NAME_PATTERN.search(document_name or ""))

    def _locate(
        self,
        text: str,
        page_texts: Sequence[str],
        page: int,
        quote: str,
        index: Optional[StructuralIndex],
    ) -> Optional[Tuple[str, int, StructuralIndex]]:
        """Find the quote and the text/index whose coordinates its offset uses."""
        if not quote or not quote.strip():
            return None

        page_text = page_texts[page - 1] if 1 <= page <= len(page_texts) else ""
        if page_text:
            local_offset = page_text.find(quote)
            if local_offset >= 0:
                page_start = text.find(page_text) if text else -1
                if page_start >= 0:
                    return text, page_start + local_offset, index or self.indexer.index(text)
                return page_text, local_offset, self.indexer.index(page_text)

        if text:
            offset = text.find(quote)
            if offset >= 0:
                return text, offset, index or self.indexer.index(text)

        return None


def render_section_path(reference: ClauseReference) -> str:
    template = SECTION_LABELS.get((reference.type, reference.language), "{number}")
    return template.format(number=reference.number)


def paragraph_anchor(text: str, offset: int, words: int = DEFAULT_ANCHOR_WORDS) -> Optional[str]:
    """First words of the paragraph containing offset."""
    start = 0
    for match in BLANK_LINE_PATTERN.finditer(text, 0, offset):
        start = match.end()
    end_match = BLANK_LINE_PATTERN.search(text, start)
    paragraph = text[start:end_match.start()] if end_match else text[start:]
    tokens = paragraph.split()[:words]
    return " ".join(tokens) if tokens else None


def build_context(text: str, start: int, end: int, window: int = DEFAULT_CONTEXT_WINDOW) -> str:
    """Surrounding context of text[start:end], trimmed to sentence boundaries.

    The leading window is cut after its first period and the trailing window
    after its last period, when the window does not already reach the text edge.
    """
    window_start = max(0, start - window)
    window_end = min(len(text), end + window)

    if window_start > 0:
        period = text.find(".", window_start, start)
        if period >= 0:
            window_start = period + 1

    if window_end < len(text):
        period = text.rfind(".", end, window_end)
        if period >= 0:
            window_end = period + 1

    return WHITESPACE_PATTERN.sub(" ", text[window_start:window_end]).strip()


def highlight_sentence(quote: str) -> Optional[str]:
    """Pick the sentence of a quote that best expresses the right."""
    sentences = [s.strip() for s in SENTENCE_SPLIT_PATTERN.split(quote or "") if s and s.strip()]
    for sentence in sentences:
        if has_keyword(sentence, KeywordCategory.RIGHT):
            return sentence
    for sentence in sentences:
        if len(sentence) > MIN_HIGHLIGHT_LENGTH:
            return sentence
    return None


def find_annex_name(text: str, offset: Optional[int] = None) -> Optional[str]:
    """Nearest annex label at or before offset, else the first label in the text."""
    matches = list(ANNEX_LABEL_PATTERN.finditer(text or ""))
    if not matches:
        return None
    if offset is not None:
        before = [match for match in matches if match.start() <= offset]
        if before:
            return before[-1].group(0).strip()
    return matches[0].group(0).strip()
