"""Protocol definitions for dependency injection.

The backup orchestrator and the restore dispatcher only depend on the
ManagementAPI protocol, so tests (or alternative transports) can pass any
object with the same methods instead of the real HTTP client.
"""

from pathlib import Path
from typing import Any, Protocol, runtime_checkable


@runtime_checkable
class ManagementAPI(Protocol):
    """Operations the pipelines need from the Storyblok Management API."""

    def get_all(
        self,
        path: str,
        params: dict[str, Any] | None = None,
        response_key: str | None = None,
    ) -> list[dict[str, Any]]:
        """Fetch every item of a paginated collection."""
        ...

    def get(self, path: str, params: dict[str, Any] | None = None) -> dict[str, Any]:
        """GET a single resource and return the decoded body."""
        ...

    def post(self, path: str, json: dict[str, Any]) -> dict[str, Any]:
        """POST a body and return the decoded response."""
        ...

    def put(self, path: str, json: dict[str, Any]) -> dict[str, Any]:
        """PUT a body and return the decoded response."""
        ...

    def download_file(self, url: str, save_path: str | Path, *, exclusive: bool = True) -> int:
        """Stream a binary to disk and return the number of bytes written."""
        ...
