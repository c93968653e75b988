"""Unit tests for MergeServiceClient."""

from unittest.mock import AsyncMock, MagicMock

import pytest

from rights_engine.core.exceptions import APIClientError
from rights_engine.services.normalization import MergeServiceClient


class TestMergeServiceClient:
    """Request payload and response validation."""

    def _client(self, response):
        http_client = MagicMock()
        http_client.call_api = AsyncMock(return_value=response)
        return MergeServiceClient(base_url="http://merge.local/merge", http_client=http_client), http_client

    @pytest.mark.asyncio
    async def test_merge_success(self, benefit_factory):
        """Test that a merge response is validated into benefits."""
        benefit = benefit_factory()
        client, http_client = self._client({
            "benefits": [benefit.model_dump(mode="json", by_alias=True)],
            "method": "embedding",
        })

        response = await client.merge([benefit], max_benefits=10)

        assert response.method == "embedding"
        assert [b.benefit_id for b in response.benefits] == [benefit.benefit_id]

        payload = http_client.call_api.call_args.kwargs["payload"]
        assert payload["maxBenefits"] == 10
        assert payload["benefits"][0]["benefitId"] == benefit.benefit_id
        assert "evidenceSet" in payload["benefits"][0]

    @pytest.mark.asyncio
    async def test_method_defaults_to_external(self, benefit_factory):
        """Test that a missing method defaults to external."""
        benefit = benefit_factory()
        client, _ = self._client({"benefits": [benefit.model_dump(mode="json", by_alias=True)]})

        response = await client.merge([benefit], max_benefits=10)

        assert response.method == "external"

    @pytest.mark.asyncio
    async def test_missing_benefits_list_is_rejected(self, benefit_factory):
        """Test that a response without a benefits list is rejected."""
        client, _ = self._client({"result": []})

        with pytest.raises(APIClientError):
            await client.merge([benefit_factory()], max_benefits=10)

    @pytest.mark.asyncio
    async def test_malformed_benefit_is_rejected(self, benefit_factory):
        """Test that a malformed benefit in the response is rejected."""
        client, _ = self._client({"benefits": [{"layer": "not-a-layer"}]})

        with pytest.raises(APIClientError):
            await client.merge([benefit_factory()], max_benefits=10)

    @pytest.mark.asyncio
    async def test_unconfigured_client_raises(self, benefit_factory):
        """Test that merging without a URL raises APIClientError."""
        client = MergeServiceClient(base_url="")

        assert client.is_configured is False
        with pytest.raises(APIClientError):
            await client.merge([benefit_factory()], max_benefits=10)
