"""Unit tests for the Document model."""

from rights_engine.models.documents import Document, DocumentType


class TestDocument:

    def test_page_count_is_serialized(self):
        """Test that the derived page count appears in the camelCase wire shape."""
        document = Document(document_id="policy-1", doc_type=DocumentType.POLICY, page_texts=["one", "two"])

        data = document.model_dump(by_alias=True)

        assert data["pageCount"] == 2
        assert data["documentId"] == "policy-1"

    def test_page_count_without_pages(self):
        """Test that full text alone counts as one page and no text as zero."""
        assert Document(document_id="d-1", text="body").page_count == 1
        assert Document(document_id="d-2").page_count == 0

    def test_serialized_document_validates_back(self):
        """Test that a dumped document, page count included, is accepted as input."""
        document = Document(document_id="policy-1", text="body", page_texts=["body"])

        restored = Document.model_validate(document.model_dump(mode="json", by_alias=True))

        assert restored == document
