"""Structural indexer for policy wording.

Scans raw document text for clause markers ("סעיף 4.2", "Section 12",
"Exclusion 3", ...) and heading lines, producing position-ordered sequences the
evidence enricher uses to cite where a quote sits in the document.
"""

from typing import Iterator, List, Optional, Sequence, Tuple

from rights_engine.models.evidence import (
    ClauseReference,
    Heading,
    HeadingKind,
    StructuralIndex,
)
from rights_engine.services.rules.clause_rules import (
    CLAUSE_RULES,
    HEADING_PATTERNS,
    HEBREW_TOPIC_WORDS,
    ClauseRule,
)
from rights_engine.utils.logging import get_logger

LOGGER = get_logger(__name__)

MAX_CAPS_HEADING_LENGTH = 60
MAX_TOPIC_HEADING_LENGTH = 80
MIN_COLON_HEADING_LENGTH = 3
MAX_COLON_HEADING_LENGTH = 60
MAX_NUMBERED_HEADING_LENGTH = 50


class StructuralIndexer:
    """Rule-driven indexer for clause references and headings.

    All clause rules are evaluated against the text and every match is kept,
    even when several rules hit the same location; disambiguation happens at
    lookup time through nearest-before search.

    Attributes:
        clause_rules: Clause rule table evaluated in order
        topic_words: Hebrew words that open a section title
    """

    def __init__(
        self,
        clause_rules: Sequence[ClauseRule] = CLAUSE_RULES,
        topic_words: Sequence[str] = HEBREW_TOPIC_WORDS,
    ):
        self.clause_rules = tuple(clause_rules)
        self.topic_words = tuple(topic_words)

    def index(self, text: str) -> StructuralIndex:
        """Index clause references and headings of a text.

        Args:
            text: Full document (or page) text

        Returns:
            StructuralIndex with both sequences sorted by position
        """
        index = StructuralIndex(
            clause_references=self.find_clause_references(text),
            headings=self.find_headings(text),
        )

        LOGGER.debug(
            f"Indexed {len(index.clause_references)} clause references "
            f"and {len(index.headings)} headings",
            extra={
                "clause_references": len(index.clause_references),
                "headings": len(index.headings),
                "text_length": len(text or ""),
            },
        )

        return index

    def find_clause_references(self, text: str) -> List[ClauseReference]:
        """Find all clause markers in text.

        Sorting is stable, so references found at the same position keep the
        rule-table order they were discovered in.
        """
        if not text:
            return []

        references = []
        for rule in self.clause_rules:
            for match in rule.pattern.finditer(text):
                references.append(
                    ClauseReference(
                        type=rule.clause_type,
                        number=match.group(1).strip(),
                        language=rule.language,
                        original_text=match.group(0).strip(),
                        position=match.start(),
                    )
                )

        references.sort(key=lambda ref: ref.position)
        return references

    def find_headings(self, text: str) -> List[Heading]:
        """Find heading lines in text."""
        headings = []
        for position, line in _iter_lines(text or ""):
            stripped = line.strip()
            if not stripped:
                continue
            classified = self.classify_heading(stripped)
            if classified is None:
                continue
            kind, level = classified
            headings.append(Heading(text=stripped, level=level, position=position, kind=kind))
        return headings

    def classify_heading(self, line: str) -> Optional[Tuple[HeadingKind, int]]:
        """Decide whether a stripped line is a heading.

        Returns:
            (kind, level) or None when the line is body text
        """
        if self._is_caps_heading(line):
            return HeadingKind.CAPS, 1
        if self._is_topic_heading(line):
            return HeadingKind.TOPIC, 1
        if line.endswith(":") and MIN_COLON_HEADING_LENGTH <= len(line) <= MAX_COLON_HEADING_LENGTH:
            return HeadingKind.COLON, 2
        if len(line) < MAX_NUMBERED_HEADING_LENGTH and HEADING_PATTERNS["numbered"].match(line):
            return HeadingKind.NUMBERED, 2
        return None

    def _is_caps_heading(self, line: str) -> bool:
        if not 3 <= len(line) <= MAX_CAPS_HEADING_LENGTH:
            return False
        if sum(1 for char in line if char.isalpha()) < 2:
            return False
        return bool(HEADING_PATTERNS["caps"].match(line))

    def _is_topic_heading(self, line: str) -> bool:
        if len(line) > MAX_TOPIC_HEADING_LENGTH:
            return False
        return any(line.startswith(word) for word in self.topic_words)


def _iter_lines(text: str) -> Iterator[Tuple[int, str]]:
    """Yield (line start offset, line) pairs."""
    position = 0
    for line in text.split("\n"):
        yield position, line
        position += len(line) + 1


def nearest_clause(
    references: Sequence[ClauseReference], offset: int
) -> Optional[ClauseReference]:
    """Return the clause reference closest at or before offset.

    Ties on distance resolve to the reference found first.
    """
    best = None
    best_distance = None
    for reference in references:
        if reference.position > offset:
            continue
        distance = offset - reference.position
        if best_distance is None or distance < best_distance:
            best = reference
            best_distance = distance
    return best


def nearest_heading(headings: Sequence[Heading], offset: int) -> Optional[Heading]:
    """Return the last heading strictly before offset."""
    best = None
    for heading in headings:
        if heading.position < offset and (best is None or heading.position >= best.position):
            best = heading
    return best
