"""Pytest configuration and shared fixtures."""

from typing import Callable, List, Optional

import pytest
from fastapi.testclient import TestClient

from rights_engine.main import app
from rights_engine.models.benefits import (
    Amounts,
    Benefit,
    BenefitLayer,
    EvidenceSet,
    ValueState,
)
from rights_engine.models.documents import Document, DocumentType
from rights_engine.models.evidence import EvidenceSpan

HEBREW_POLICY_TEXT = (
    "פרק ב - כיסויים\n"
    "\n"
    "סעיף 4 - אשפוז:\n"
    "המבוטח זכאי להחזר הוצאות אשפוז בבית חולים בישראל, עד 2,000 ₪ ליום.\n"
    "\n"
    "סעיף 5 - ניתוחים:\n"
    "בכפוף לאישור מראש של המבטח, המבוטח זכאי לכיסוי הוצאות ניתוח בבית חולים פרטי.\n"
    "\n"
    "סעיף 6 - מוקד שירות:\n"
    "המבוטח זכאי לשירות ייעוץ רפואי טלפוני באמצעות מוקד השירות של המבטח.\n"
    "\n"
    "סעיף 7 - חריגים:\n"
    "ניתוחים קוסמטיים אינם מכוסים ולא ישולם בגינם כל תגמול.\n"
)

SCHEDULE_TEXT = (
    "POLICY SCHEDULE\n"
    "\n"
    "Insured: Dana Levi\n"
    "Policy period: 01/01/2024 - 31/12/2024\n"
)


@pytest.fixture
def test_client() -> TestClient:
    """Create FastAPI test client.

    Returns:
        TestClient: FastAPI test client instance
    """
    return TestClient(app)


@pytest.fixture(autouse=True)
def clear_dependency_overrides():
    """Ensure FastAPI dependency overrides are reset between tests."""
    app.dependency_overrides = {}
    yield
    app.dependency_overrides = {}


@pytest.fixture
def policy_document() -> Document:
    """Hebrew health policy with four numbered sections on a single page."""
    return Document(
        document_id="policy-1",
        display_name="פוליסת בריאות.pdf",
        doc_type=DocumentType.POLICY,
        text=HEBREW_POLICY_TEXT,
        page_texts=[HEBREW_POLICY_TEXT],
    )


@pytest.fixture
def schedule_document() -> Document:
    return Document(
        document_id="schedule-1",
        display_name="Policy Schedule.pdf",
        doc_type=DocumentType.SCHEDULE,
        text=SCHEDULE_TEXT,
        page_texts=[SCHEDULE_TEXT],
    )


@pytest.fixture
def span_factory() -> Callable[..., EvidenceSpan]:
    """Factory for complete evidence spans."""

    def _create(
        quote: str = "The insured is entitled to reimbursement of hospital costs.",
        document_id: str = "doc-1",
        page: int = 1,
    ) -> EvidenceSpan:
        return EvidenceSpan(
            document_id=document_id,
            page=page,
            quote=quote,
            confidence=0.8,
        )

    return _create


@pytest.fixture
def benefit_factory(span_factory) -> Callable[..., Benefit]:
    """Factory for benefits backed by the given spans."""

    def _create(
        title: str = "Hospitalization",
        summary: str = "Reimbursement of hospital costs.",
        spans: Optional[List[EvidenceSpan]] = None,
        layer: BenefitLayer = BenefitLayer.CERTAIN,
        tags: Optional[List[str]] = None,
    ) -> Benefit:
        return Benefit(
            layer=layer,
            title=title,
            summary=summary,
            evidence_set=EvidenceSet(spans=[span_factory()] if spans is None else spans),
            tags=tags or [],
            amounts=Amounts(value_state=ValueState.UNKNOWN_SCHEDULE_REQUIRED),
        )

    return _create
