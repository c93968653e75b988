"""Client for the external similarity-merge service.

The service receives the full benefit list and a ceiling and returns a merged
list. It is optional: callers must fall back to a local merge on any failure.
"""

from dataclasses import dataclass
from typing import List, Optional

from pydantic import ValidationError as PydanticValidationError

from rights_engine.core.base_client import BaseHTTPClient
from rights_engine.core.exceptions import APIClientError
from rights_engine.models.benefits import Benefit
from rights_engine.utils.logging import get_logger

LOGGER = get_logger(__name__)


@dataclass
class MergeResponse:
    benefits: List[Benefit]
    method: str


class MergeServiceClient:
    """Wrapper around the similarity-merge HTTP endpoint."""

    def __init__(
        self,
        base_url: str,
        api_key: str = "",
        timeout: int = 60,
        max_retries: int = 3,
        retry_delay: int = 2,
        http_client: Optional[BaseHTTPClient] = None,
    ):
        """Initialize merge service client.

        Args:
            base_url: Merge endpoint URL; empty means the service is not deployed
            api_key: Optional bearer token
            timeout: Request timeout in seconds
            max_retries: Maximum retry attempts
            retry_delay: Base delay for exponential backoff
            http_client: Preconfigured HTTP client (mainly for tests)
        """
        self.base_url = base_url
        self.client = http_client or BaseHTTPClient(
            base_url=base_url,
            api_key=api_key,
            timeout=timeout,
            max_retries=max_retries,
            retry_delay=retry_delay,
        )

    @property
    def is_configured(self) -> bool:
        return bool(self.base_url)

    async def merge(self, benefits: List[Benefit], max_benefits: int) -> MergeResponse:
        """Ask the service to merge similar benefits.

        Args:
            benefits: Full benefit list
            max_benefits: Ceiling on the returned benefit count

        Returns:
            MergeResponse with merged benefits and the method the service used

        Raises:
            APIClientError: On unavailability, non-success status, transport
                error or a malformed response
        """
        if not self.is_configured:
            raise APIClientError("Merge service URL is not configured")

        payload = {
            "benefits": [benefit.model_dump(mode="json", by_alias=True) for benefit in benefits],
            "maxBenefits": max_benefits,
        }

        LOGGER.info(
            f"Requesting external merge of {len(benefits)} benefits",
            extra={"benefits": len(benefits), "max_benefits": max_benefits},
        )

        response = await self.client.call_api(method="POST", payload=payload)

        raw_benefits = response.get("benefits") if isinstance(response, dict) else None
        if not isinstance(raw_benefits, list):
            raise APIClientError("Invalid response format from merge service")

        try:
            merged = [Benefit.model_validate(item) for item in raw_benefits]
        except PydanticValidationError as e:
            raise APIClientError(f"Merge service returned malformed benefits: {e}", original_error=e) from e

        return MergeResponse(benefits=merged, method=str(response.get("method") or "external"))
