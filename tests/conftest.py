"""Pytest configuration and shared fixtures."""

import copy
from pathlib import Path
from typing import Any
from urllib.parse import urlencode

import pytest
import respx

from storyblok_backup import RetryConfig, StoryblokConfig
from storyblok_backup.exceptions import NotFoundError, OutputConflictError

SPACE_ID = "12345"
BASE_URL = "https://mapi.storyblok.com/v1"


@pytest.fixture(autouse=True)
def _reset_global_respx_router():
    """Drop routes registered on respx's global router outside its own context."""
    yield
    respx.mock.clear()
    respx.mock.reset()


def _key(path: str, params: dict[str, Any] | None = None) -> str:
    if not params:
        return path
    return f"{path}?{urlencode(sorted(params.items()))}"


class FakeManagementAPI:
    """In-memory stand-in for the Management API client.

    Collections are keyed by path (plus sorted query string), single
    resources by path. Every call is recorded in ``calls``.
    """

    def __init__(
        self,
        collections: dict[str, list[dict[str, Any]]] | None = None,
        resources: dict[str, dict[str, Any]] | None = None,
        files: dict[str, bytes] | None = None,
        errors: dict[str, Exception] | None = None,
    ) -> None:
        self.collections = collections or {}
        self.resources = resources or {}
        self.files = files or {}
        self.errors = errors or {}
        self.calls: list[tuple[str, str, Any]] = []

    def _maybe_fail(self, method: str, path: str) -> None:
        error = self.errors.get(f"{method} {path}")
        if error is not None:
            raise error

    def get_all(
        self,
        path: str,
        params: dict[str, Any] | None = None,
        response_key: str | None = None,
    ) -> list[dict[str, Any]]:
        self.calls.append(("get_all", path, params))
        self._maybe_fail("GET", path)
        return copy.deepcopy(self.collections.get(_key(path, params), []))

    def get(self, path: str, params: dict[str, Any] | None = None) -> dict[str, Any]:
        self.calls.append(("get", path, params))
        self._maybe_fail("GET", path)
        if path not in self.resources:
            raise NotFoundError(f"Resource not found: {path}", status_code=404)
        return copy.deepcopy(self.resources[path])

    def post(self, path: str, json: dict[str, Any]) -> dict[str, Any]:
        self.calls.append(("post", path, copy.deepcopy(json)))
        self._maybe_fail("POST", path)
        return {"created": True}

    def put(self, path: str, json: dict[str, Any]) -> dict[str, Any]:
        self.calls.append(("put", path, copy.deepcopy(json)))
        self._maybe_fail("PUT", path)
        return {"updated": True}

    def download_file(self, url: str, save_path: str | Path, *, exclusive: bool = True) -> int:
        self.calls.append(("download_file", url, str(save_path)))
        content = self.files.get(url, b"binary-content")
        try:
            with open(save_path, "xb" if exclusive else "wb") as f:
                f.write(content)
        except FileExistsError as e:
            raise OutputConflictError(f"File {save_path} already exists") from e
        return len(content)

    def paths(self, method: str) -> list[str]:
        return [path for name, path, _ in self.calls if name == method]


@pytest.fixture
def storyblok_config() -> StoryblokConfig:
    """Create a test configuration without retries.

    Returns:
        Test configuration with mock values
    """
    return StoryblokConfig(
        _env_file=None,  # type: ignore[call-arg]
        oauth_token="test-oauth-token",
        space_id=SPACE_ID,
        retry=RetryConfig(max_attempts=1),
    )


@pytest.fixture
def fake_api() -> FakeManagementAPI:
    """Create an empty fake Management API."""
    return FakeManagementAPI()


@pytest.fixture
def space_response() -> dict[str, Any]:
    """Mock response of ``GET spaces/<id>``."""
    return {"space": {"id": int(SPACE_ID), "name": "Test Space", "plan": "starter"}}


@pytest.fixture
def clean_env(monkeypatch: pytest.MonkeyPatch, tmp_path: Path) -> Path:
    """Remove STORYBLOK_* variables and run inside an empty directory."""
    import os

    for key in list(os.environ):
        if key.startswith("STORYBLOK_"):
            monkeypatch.delenv(key, raising=False)
    monkeypatch.chdir(tmp_path)
    return tmp_path


@pytest.fixture
def make_api() -> type[FakeManagementAPI]:
    """Factory for fake Management APIs preloaded with data."""
    return FakeManagementAPI
