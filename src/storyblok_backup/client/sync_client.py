"""Synchronous HTTP client for the Storyblok Management API.

Backup and restore process one request at a time, so blocking I/O is all
they need.
"""

import logging
from pathlib import Path
from typing import Any

import httpx

from ..exceptions import (
    ApiConnectionError,
    ApiError,
    ApiTimeoutError,
    FormatError,
    OutputConflictError,
)
from ..models.config import StoryblokConfig
from .base import BaseClient

logger = logging.getLogger(__name__)

DEFAULT_PAGE_SIZE = 100


class ManagementClient(BaseClient):
    """Synchronous client for the Storyblok Management API.

    Example:
        ```python
        from storyblok_backup import ManagementClient, StoryblokConfig

        config = StoryblokConfig(oauth_token="your-token", space_id="12345")

        with ManagementClient(config) as client:
            stories = client.get_all("spaces/12345/stories")
            print(len(stories))
        ```
    """

    def __init__(
        self,
        config: StoryblokConfig,
        http_client: httpx.Client | None = None,
    ) -> None:
        """Initialize the client.

        Args:
            config: Storyblok configuration
            http_client: HTTP client to use (defaults to a pooled httpx.Client)
        """
        super().__init__(config)

        self._client = http_client or httpx.Client(
            timeout=self.config.timeout,
            verify=self.config.verify_ssl,
            follow_redirects=True,
        )
        self._owns_client = http_client is None

    def __enter__(self) -> "ManagementClient":
        """Context manager entry."""
        return self

    def __exit__(self, exc_type: Any, exc_val: Any, exc_tb: Any) -> None:
        """Context manager exit - closes the client."""
        self.close()

    def close(self) -> None:
        """Close the HTTP client if this instance created it."""
        if self._owns_client:
            self._client.close()
        logger.debug("Closed Storyblok management client")

    def _send(
        self,
        method: str,
        path: str,
        params: dict[str, Any] | None = None,
        json: dict[str, Any] | None = None,
    ) -> httpx.Response:
        """Send a request with automatic retry and return the raw response.

        Raises:
            ApiError: On API errors (after retries are exhausted)
        """
        retry_decorator = self._create_retry_decorator()

        @retry_decorator  # type: ignore[untyped-decorator]
        def _do_request() -> httpx.Response:
            url = self._build_url(path)
            logger.debug(f"{method} {url} params={params}")

            try:
                response = self._client.request(
                    method=method,
                    url=url,
                    params=params,
                    json=json,
                    headers=self._get_headers(),
                )
            except httpx.ConnectError as e:
                raise ApiConnectionError(f"Failed to connect to {self.base_url}: {e}") from e
            except httpx.TimeoutException as e:
                raise ApiTimeoutError(
                    f"Request timed out after {self.config.timeout}s: {e}"
                ) from e

            if not response.is_success:
                self._handle_error_response(response)

            logger.debug(f"Response: {response.status_code}")
            return response

        return _do_request()  # type: ignore[no-any-return]

    @staticmethod
    def _decode(response: httpx.Response) -> dict[str, Any]:
        if response.status_code == 204 or not response.content:
            return {}
        try:
            data: dict[str, Any] = response.json()
        except ValueError as e:
            content_type = response.headers.get("content-type", "unknown")
            raise FormatError(
                f"Received non-JSON response (content-type: {content_type})",
                status_code=response.status_code,
                details={"body_preview": response.text[:500]},
            ) from e
        return data

    def request(
        self,
        method: str,
        path: str,
        params: dict[str, Any] | None = None,
        json: dict[str, Any] | None = None,
    ) -> dict[str, Any]:
        """Make a request and return the decoded JSON body."""
        return self._decode(self._send(method, path, params=params, json=json))

    def get(self, path: str, params: dict[str, Any] | None = None) -> dict[str, Any]:
        """Make a GET request."""
        return self.request("GET", path, params=params)

    def post(self, path: str, json: dict[str, Any]) -> dict[str, Any]:
        """Make a POST request."""
        return self.request("POST", path, json=json)

    def put(self, path: str, json: dict[str, Any]) -> dict[str, Any]:
        """Make a PUT request."""
        return self.request("PUT", path, json=json)

    def get_all(
        self,
        path: str,
        params: dict[str, Any] | None = None,
        response_key: str | None = None,
        page_size: int = DEFAULT_PAGE_SIZE,
    ) -> list[dict[str, Any]]:
        """Fetch every page of a collection and return the items as one list.

        The Management API reports the collection size in the ``total``
        response header and wraps the items under a key named after the
        resource (``spaces/1/stories`` -> ``stories``).

        Args:
            path: Collection path
            params: Extra query parameters (e.g. ``datasource_id``)
            response_key: Key holding the items (defaults to the last path segment)
            page_size: Items per page

        Returns:
            All items of the collection, in API order
        """
        key = response_key or path.rstrip("/").split("/")[-1]
        items: list[dict[str, Any]] = []
        page = 1

        while True:
            page_params = {**(params or {}), "page": page, "per_page": page_size}
            response = self._send("GET", path, params=page_params)
            chunk = self._decode(response).get(key) or []
            items.extend(chunk)

            total_header = response.headers.get("total")
            if not chunk or total_header is None or not total_header.isdigit():
                break
            if len(items) >= int(total_header):
                break
            page += 1

        logger.debug(f"Fetched {len(items)} items from {path} in {page} page(s)")
        return items

    def download_file(self, url: str, save_path: str | Path, *, exclusive: bool = True) -> int:
        """Stream a file (e.g. an asset binary) to disk.

        The asset CDN is public, so no authentication header is sent.

        Args:
            url: Absolute file URL
            save_path: Target path
            exclusive: Refuse to write if the target already exists

        Returns:
            Number of bytes written

        Raises:
            OutputConflictError: If exclusive and the target exists
            ApiError: On download failure
        """
        path = Path(save_path)
        mode = "xb" if exclusive else "wb"

        try:
            with self._client.stream("GET", url) as response:
                if not response.is_success:
                    response.read()
                    self._handle_error_response(response)

                total_bytes = 0
                with open(path, mode) as f:
                    for chunk in response.iter_bytes():
                        f.write(chunk)
                        total_bytes += len(chunk)
        except FileExistsError as e:
            raise OutputConflictError(
                f"File {path} already exists, refusing to overwrite it",
                details={"path": str(path)},
            ) from e
        except httpx.TimeoutException as e:
            raise ApiTimeoutError(f"Download of {url} timed out: {e}") from e
        except httpx.HTTPError as e:
            raise ApiError(f"Download of {url} failed: {e}") from e

        logger.debug(f"Downloaded {total_bytes} bytes to {path}")
        return total_bytes
