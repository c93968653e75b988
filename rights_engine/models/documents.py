"""Source document models.

Documents arrive from the intake step (storage + PDF-to-text conversion) and are
treated as immutable for the whole run.
"""

from enum import Enum
from typing import List

from pydantic import BaseModel, ConfigDict, Field, computed_field
from pydantic.alias_generators import to_camel


class DocumentType(str, Enum):
    """Kinds of documents that make up a policy set."""

    POLICY = "policy"
    SCHEDULE = "schedule"
    ENDORSEMENT = "endorsement"
    CLAIM_FORM = "claim_form"
    CORRESPONDENCE = "correspondence"
    UNKNOWN = "unknown"


class Document(BaseModel):
    """Extracted text of a single source document."""

    document_id: str = Field(..., min_length=1, description="Identifier of the stored document")
    display_name: str = Field(default="", description="Human readable document name")
    doc_type: DocumentType = Field(default=DocumentType.UNKNOWN, description="Document classification")
    text: str = Field(default="", description="Full extracted text")
    page_texts: List[str] = Field(
        default_factory=list,
        description="Extracted text per page, 1-indexed by position"
    )

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        frozen=True,
        json_schema_extra={
            "example": {
                "documentId": "doc-001",
                "displayName": "Health Policy 2024.pdf",
                "docType": "policy",
                "text": "סעיף 4 - אשפוז\nהמבוטח זכאי להחזר הוצאות אשפוז.",
                "pageTexts": ["סעיף 4 - אשפוז\nהמבוטח זכאי להחזר הוצאות אשפוז."],
            }
        },
    )

    @computed_field(alias="pageCount", description="Number of pages, 1 when only full text was supplied")
    @property
    def page_count(self) -> int:
        if self.page_texts:
            return len(self.page_texts)
        return 1 if self.text else 0

    @property
    def is_readable(self) -> bool:
        """Whether any extractable text is present."""
        if self.text.strip():
            return True
        return any(page.strip() for page in self.page_texts)

    @property
    def full_text(self) -> str:
        """Full text, rebuilt from the pages when only pages were supplied."""
        if self.text:
            return self.text
        return "\n\n".join(self.page_texts)
