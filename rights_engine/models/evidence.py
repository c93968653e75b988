"""Structural markers and evidence span models.

ClauseReference and Heading are transient values produced by the structural
indexer and consumed by the evidence enricher. EvidenceSpan is the persisted
citation attached to every benefit.
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import List, Optional
from uuid import uuid4

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel


class Language(str, Enum):
    HEBREW = "hebrew"
    ENGLISH = "english"


class ClauseType(str, Enum):
    """Typed structural markers found in policy wording."""

    SECTION = "section"
    CHAPTER = "chapter"
    CLAUSE = "clause"
    ARTICLE = "article"
    PARAGRAPH = "paragraph"
    APPENDIX = "appendix"
    ANNEX = "annex"
    EXCLUSION = "exclusion"
    DEFINITION = "definition"
    CONDITION = "condition"


class HeadingKind(str, Enum):
    COLON = "colon"
    NUMBERED = "numbered"
    TOPIC = "topic"
    CAPS = "caps"


@dataclass(frozen=True)
class ClauseReference:
    """A located clause marker such as "סעיף 4.2" or "Section 12"."""

    type: ClauseType
    number: str
    language: Language
    original_text: str
    position: int


@dataclass(frozen=True)
class Heading:
    """A line detected as a section title."""

    text: str
    level: int
    position: int
    kind: HeadingKind


@dataclass(frozen=True)
class StructuralIndex:
    """Clause references and headings of one text, each sorted by position."""

    clause_references: List[ClauseReference] = field(default_factory=list)
    headings: List[Heading] = field(default_factory=list)


class EvidenceSpan(BaseModel):
    """Verbatim citation backing a benefit.

    A span counts as evidence only when quote, document_id and page are all
    present (see ``is_complete``). Incomplete spans are still representable so
    that validation can reject them explicitly.
    """

    evidence_id: str = Field(default_factory=lambda: str(uuid4()))
    document_id: str = Field(default="", description="Source document identifier")
    page: int = Field(default=0, description="1-indexed page number, 0 when unknown")
    quote: str = Field(default="", description="Verbatim quoted text")
    confidence: float = Field(default=0.0, ge=0.0, le=1.0)
    section_path: Optional[str] = None
    document_name: str = ""
    clause_number: Optional[str] = None
    heading_title: Optional[str] = None
    paragraph_anchor: Optional[str] = None
    excerpt_context: Optional[str] = None
    highlighted_text: Optional[str] = None
    is_annex: bool = False
    annex_name: Optional[str] = None
    verbatim: bool = True

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    def is_complete(self) -> bool:
        return bool(self.quote and self.quote.strip()) and bool(self.document_id) and self.page > 0
