"""Tests for the HTTP API endpoints."""

from unittest.mock import AsyncMock

from fastapi.testclient import TestClient

from rights_engine.config import settings
from rights_engine.core.exceptions import EvidenceCoverageError
from rights_engine.dependencies import get_extraction_pipeline
from rights_engine.main import app
from rights_engine.pipeline import BenefitExtractionPipeline


def _payload(*documents) -> dict:
    return {
        "runId": "run-api",
        "documents": [document.model_dump(mode="json", by_alias=True) for document in documents],
    }


class TestServiceEndpoints:

    def test_root(self, test_client: TestClient) -> None:
        """Test that the root endpoint reports service info and endpoint paths."""
        response = test_client.get("/")

        assert response.status_code == 200
        data = response.json()
        assert data["endpoints"]["health"] == f"{settings.api_v1_prefix}/health"
        assert data["coverage_policy"] == settings.coverage_policy.value
        assert data["merge_service_enabled"] is bool(settings.merge_service_url)

    def test_health(self, test_client: TestClient) -> None:
        """Test that the health endpoint reports status, version and coverage policy."""
        response = test_client.get("/api/v1/health")

        assert response.status_code == 200
        data = response.json()
        assert data["status"] == "healthy"
        assert data["version"] == settings.app_version
        assert data["coverage_policy"] == settings.coverage_policy.value


class TestExtractionEndpoint:
    """Request/response behavior and error mapping of POST /extractions."""

    def test_extraction_success(self, test_client: TestClient, policy_document) -> None:
        """Test that a policy document yields cited benefits over HTTP."""
        app.dependency_overrides[get_extraction_pipeline] = lambda: BenefitExtractionPipeline()

        response = test_client.post("/api/v1/extractions", json=_payload(policy_document))

        assert response.status_code == 200
        data = response.json()
        assert data["runId"] == "run-api"
        assert len(data["benefits"]) == 4
        assert data["invalidCount"] == 0
        assert data["metrics"]["evidenceCoverageRatio"] == 1.0
        assert data["missingRequirements"] == ["schedule_document_missing"]

        span = data["benefits"][0]["evidenceSet"]["spans"][0]
        assert span["documentId"] == "policy-1"
        assert span["page"] == 1
        assert span["sectionPath"] == "סעיף 4"
        assert data["benefits"][0]["amounts"]["valueState"] == "unknown_schedule_required"

    def test_empty_document_set(self, test_client: TestClient) -> None:
        """Test that an empty document list is rejected with 422."""
        response = test_client.post("/api/v1/extractions", json={"documents": []})

        assert response.status_code == 422

    def test_document_without_id_is_rejected(self, test_client: TestClient) -> None:
        """Test that a document without an id fails request validation."""
        response = test_client.post(
            "/api/v1/extractions",
            json={"documents": [{"displayName": "policy.pdf", "text": "text"}]},
        )

        assert response.status_code == 422

    def test_required_policy_missing(self, test_client: TestClient, schedule_document) -> None:
        """Test that a missing required policy document maps to 422."""
        app.dependency_overrides[get_extraction_pipeline] = lambda: BenefitExtractionPipeline(
            require_policy_document=True
        )

        response = test_client.post("/api/v1/extractions", json=_payload(schedule_document))

        assert response.status_code == 422
        assert response.json()["detail"]["requirement"] == "policy_document_missing"

    def test_coverage_abort_maps_to_conflict(self, test_client: TestClient, policy_document) -> None:
        """Test that an aborted coverage check maps to 409."""
        pipeline = AsyncMock()
        pipeline.run.side_effect = EvidenceCoverageError("coverage below 1.0")
        app.dependency_overrides[get_extraction_pipeline] = lambda: pipeline

        response = test_client.post("/api/v1/extractions", json=_payload(policy_document))

        assert response.status_code == 409
        assert "coverage below 1.0" in response.json()["detail"]
