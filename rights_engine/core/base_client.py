import asyncio
from typing import Any, Dict, Optional

import httpx
from httpx import HTTPStatusError, TimeoutException

from rights_engine.core.exceptions import APIClientError, APITimeoutError, AppError
from rights_engine.utils.logging import get_logger

LOGGER = get_logger(__name__)

# Responses with these statuses are retried; other 4xx fail immediately.
RETRYABLE_CLIENT_STATUSES = frozenset({408, 429})
ERROR_BODY_PREVIEW = 500


class BaseHTTPClient:
    """JSON-over-HTTP client with bounded retries and exponential backoff.

    Used for calls to external collaborators such as the similarity-merge
    service. Failures surface as APIClientError or APITimeoutError.
    """

    def __init__(
        self,
        base_url: str,
        api_key: str = "",
        timeout: int = 60,
        max_retries: int = 3,
        retry_delay: int = 2
    ):
        """Initialize the client.

        Args:
            base_url: Endpoint that requests are sent to
            api_key: Bearer token, omitted from headers when empty
            timeout: Per-request timeout in seconds
            max_retries: Total number of attempts per call
            retry_delay: Backoff base in seconds, doubled after each attempt
        """
        self.base_url = base_url
        self.api_key = api_key
        self.timeout = timeout
        self.max_retries = max(1, max_retries)
        self.retry_delay = retry_delay

    def build_headers(self, extra: Optional[Dict[str, str]] = None) -> Dict[str, str]:
        headers = {"Content-Type": "application/json"}
        if self.api_key:
            headers["Authorization"] = f"Bearer {self.api_key}"
        headers.update(extra or {})
        return headers

    async def call_api(
        self,
        endpoint: str = "",
        method: str = "POST",
        payload: Optional[Dict[str, Any]] = None,
        headers: Optional[Dict[str, str]] = None
    ) -> Dict[str, Any]:
        """Send a request and return the decoded JSON body.

        GET requests carry the payload as query parameters, every other
        method sends it as a JSON body.

        Raises:
            APIClientError: On a non-retryable response or once attempts run out
            APITimeoutError: When the final attempt times out
        """
        url = f"{self.base_url}{endpoint}" if endpoint else self.base_url
        request_headers = self.build_headers(headers)
        is_get = method.upper() == "GET"

        LOGGER.debug(
            f"{method.upper()} {url}",
            extra={"timeout": self.timeout, "max_retries": self.max_retries}
        )

        async with httpx.AsyncClient(timeout=self.timeout) as client:
            for attempt in range(1, self.max_retries + 1):
                try:
                    if is_get:
                        response = await client.get(url, headers=request_headers, params=payload)
                    else:
                        response = await client.post(url, headers=request_headers, json=payload)
                    response.raise_for_status()
                    return response.json()
                except (httpx.HTTPError, httpx.InvalidURL, ValueError) as e:
                    failure = self._to_app_error(e, url)
                    if not self._should_retry(e, attempt):
                        raise failure from e
                    LOGGER.warning(
                        f"Request to {url} failed, retrying ({attempt}/{self.max_retries})",
                        extra={"error": str(failure)}
                    )
                    await asyncio.sleep(self.retry_delay * (2 ** (attempt - 1)))

        raise APIClientError(f"No response from {url} after {self.max_retries} attempts")

    def _should_retry(self, error: Exception, attempt: int) -> bool:
        if attempt >= self.max_retries or isinstance(error, httpx.InvalidURL):
            return False
        if isinstance(error, HTTPStatusError):
            status_code = error.response.status_code
            return status_code >= 500 or status_code in RETRYABLE_CLIENT_STATUSES
        return True

    def _to_app_error(self, error: Exception, url: str) -> AppError:
        if isinstance(error, TimeoutException):
            return APITimeoutError(f"Timed out calling {url}", original_error=error)
        if isinstance(error, HTTPStatusError):
            status_code = error.response.status_code
            body = error.response.text[:ERROR_BODY_PREVIEW]
            LOGGER.warning(
                f"{url} answered {status_code}",
                extra={"status_code": status_code, "error_body": body}
            )
            return APIClientError(f"HTTP {status_code} from {url}: {body}", original_error=error)
        return APIClientError(f"Error calling {url}: {error}", original_error=error)
