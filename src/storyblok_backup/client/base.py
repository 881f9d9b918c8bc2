"""Base HTTP client for the Storyblok Management API.

This module provides URL building, authentication headers, error mapping
and the retry policy shared by the concrete client.
"""

import logging
from typing import Any

import httpx
from tenacity import (
    retry,
    retry_if_exception_type,
    stop_after_attempt,
    wait_exponential,
)

from ..exceptions import (
    ApiConnectionError,
    ApiError,
    AuthenticationError,
    AuthorizationError,
    NotFoundError,
    RateLimitError,
    ServerError,
    ValidationError,
)
from ..models.config import StoryblokConfig

logger = logging.getLogger(__name__)


class BaseClient:
    """Base HTTP client for Management API operations.

    Provides:
    - OAuth token authentication
    - Region-aware base URL
    - Error handling and exception mapping
    - Transport-level retry on rate limits, server and connection errors

    Not intended to be used directly - use ManagementClient instead.
    """

    def __init__(self, config: StoryblokConfig) -> None:
        """Initialize the base client.

        Args:
            config: Storyblok configuration with token, space and region
        """
        self.config = config
        self.base_url = config.get_base_url()
        self._token = config.get_oauth_token()

        logger.info(
            f"Initialized Storyblok client for {self.base_url} (region: {config.region.value})"
        )

    def _get_headers(self, extra_headers: dict[str, str] | None = None) -> dict[str, str]:
        """Build request headers with authentication."""
        headers = {
            "Content-Type": "application/json",
            "Accept": "application/json",
            "Authorization": self._token,
        }

        if extra_headers:
            headers.update(extra_headers)

        return headers

    def _build_url(self, path: str) -> str:
        """Build the full URL for an API path (e.g. ``spaces/123/stories``)."""
        return f"{self.base_url}/{path.strip('/')}"

    @staticmethod
    def _extract_error_message(response: httpx.Response) -> tuple[str, dict[str, Any]]:
        """Pull a readable message out of a Storyblok error body.

        The API answers with ``{"error": "..."}``, a plain list of messages,
        or a field -> messages mapping for validation failures.
        """
        try:
            body = response.json()
        except Exception:
            return response.text or f"HTTP {response.status_code}", {}

        if isinstance(body, dict):
            if "error" in body:
                return str(body["error"]), body
            if body:
                messages = []
                for field, errors in body.items():
                    if isinstance(errors, list):
                        errors = ", ".join(str(e) for e in errors)
                    messages.append(f"{field} {errors}")
                return "; ".join(messages), body
        if isinstance(body, list) and body:
            return "; ".join(str(item) for item in body), {"errors": body}
        return response.text or f"HTTP {response.status_code}", {}

    def _handle_error_response(self, response: httpx.Response) -> None:
        """Raise the ApiError subclass matching an error response.

        Raises:
            Appropriate ApiError subclass based on status code
        """
        status_code = response.status_code
        error_message, error_details = self._extract_error_message(response)

        if status_code == 401:
            raise AuthenticationError(
                f"Authentication failed: {error_message}",
                status_code=status_code,
                details=error_details,
            )
        elif status_code == 403:
            raise AuthorizationError(
                f"Authorization failed: {error_message}",
                status_code=status_code,
                details=error_details,
            )
        elif status_code == 404:
            raise NotFoundError(
                f"Resource not found: {error_message}",
                status_code=status_code,
                details=error_details,
            )
        elif status_code in (400, 422):
            raise ValidationError(
                f"Validation error: {error_message}",
                status_code=status_code,
                details=error_details,
            )
        elif status_code == 429:
            retry_after = response.headers.get("Retry-After")
            retry_seconds = int(retry_after) if retry_after and retry_after.isdigit() else None
            raise RateLimitError(
                f"Rate limit exceeded: {error_message}",
                retry_after=retry_seconds,
                details=error_details,
            )
        elif 500 <= status_code < 600:
            raise ServerError(
                f"Server error: {error_message}",
                status_code=status_code,
                details=error_details,
            )
        else:
            raise ApiError(
                f"Unexpected error (HTTP {status_code}): {error_message}",
                status_code=status_code,
                details=error_details,
            )

    def _create_retry_decorator(self) -> Any:
        """Create a retry decorator based on configuration.

        Returns:
            Configured tenacity retry decorator
        """
        retry_config = self.config.retry

        return retry(
            stop=stop_after_attempt(retry_config.max_attempts),
            wait=wait_exponential(
                multiplier=retry_config.exponential_base,
                min=retry_config.initial_wait,
                max=retry_config.max_wait,
            ),
            retry=retry_if_exception_type((RateLimitError, ServerError, ApiConnectionError)),
            reraise=True,
        )
