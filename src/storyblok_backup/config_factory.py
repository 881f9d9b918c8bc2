"""Configuration factory for building StoryblokConfig instances.

Configuration is layered: defaults, then a ``.env`` file, then environment
variables, then explicit keyword arguments (usually CLI flags).
"""

import logging
from pathlib import Path
from typing import Any

from pydantic import ValidationError as PydanticValidationError

from .exceptions import ConfigurationError
from .models.config import StoryblokConfig

logger = logging.getLogger(__name__)

DEFAULT_ENV_SEARCH_PATHS = (".env", "~/.config/storyblok-backup/.env")


def _drop_unset(values: dict[str, Any]) -> dict[str, Any]:
    return {key: value for key, value in values.items() if value is not None}


def _describe(error: PydanticValidationError) -> str:
    parts = []
    for item in error.errors():
        location = ".".join(str(loc) for loc in item["loc"]) or "config"
        parts.append(f"{location}: {item['msg']}")
    return "; ".join(parts)


class ConfigFactory:
    """Factory methods for StoryblokConfig.

    Example:
        >>> config = ConfigFactory.from_env(overrides={"region": "us"})
        >>> config.get_base_url()
        'https://api-us.storyblok.com/v1'
    """

    @staticmethod
    def create(**kwargs: Any) -> StoryblokConfig:
        """Create a config from explicit values, ignoring any ``.env`` file.

        Environment variables still fill in values that are not given.

        Raises:
            ConfigurationError: If the resulting configuration is invalid
        """
        try:
            return StoryblokConfig(_env_file=None, **_drop_unset(kwargs))  # type: ignore[call-arg]
        except PydanticValidationError as e:
            raise ConfigurationError(f"Invalid configuration: {_describe(e)}") from e

    @staticmethod
    def from_env_file(
        env_file: str | Path,
        *,
        required: bool = False,
        overrides: dict[str, Any] | None = None,
    ) -> StoryblokConfig:
        """Load configuration from a specific ``.env`` file.

        Args:
            env_file: Path to the file
            required: Fail if the file does not exist
            overrides: Explicit values that win over file and environment

        Raises:
            ConfigurationError: If the file is required but missing, or the
                configuration is invalid
        """
        path = Path(env_file).expanduser()
        if not path.is_file():
            if required:
                raise ConfigurationError(f".env file not found: {path}")
            logger.debug(f"No .env file at {path}, using environment only")
            return ConfigFactory.from_environment_only(overrides=overrides)

        try:
            return StoryblokConfig(  # type: ignore[call-arg]
                _env_file=str(path), **_drop_unset(overrides or {})
            )
        except PydanticValidationError as e:
            raise ConfigurationError(f"Invalid configuration: {_describe(e)}") from e

    @staticmethod
    def from_env(
        search_paths: list[str] | None = None,
        *,
        required: bool = False,
        overrides: dict[str, Any] | None = None,
    ) -> StoryblokConfig:
        """Load configuration from the first ``.env`` file found.

        Args:
            search_paths: Candidate files, first match wins
            required: Fail if none of the files exists
            overrides: Explicit values that win over file and environment
        """
        candidates = search_paths or list(DEFAULT_ENV_SEARCH_PATHS)
        for candidate in candidates:
            path = Path(candidate).expanduser()
            if path.is_file():
                logger.debug(f"Loading configuration from {path}")
                return ConfigFactory.from_env_file(path, required=True, overrides=overrides)

        if required:
            raise ConfigurationError(f"No .env file found in: {', '.join(candidates)}")
        return ConfigFactory.from_environment_only(overrides=overrides)

    @staticmethod
    def from_environment_only(overrides: dict[str, Any] | None = None) -> StoryblokConfig:
        """Load configuration from ``STORYBLOK_*`` environment variables only."""
        return ConfigFactory.create(**(overrides or {}))


def load_config(
    env_file: str | Path | None = None,
    *,
    required: bool = False,
    **overrides: Any,
) -> StoryblokConfig:
    """Load configuration the way the command line tools do.

    Args:
        env_file: Specific ``.env`` file, or None to search the default paths
        required: Fail if no ``.env`` file is found
        **overrides: Explicit values (None values are ignored)

    Example:
        >>> config = load_config(oauth_token="abc", space_id="123", region=None)
    """
    if env_file is not None:
        return ConfigFactory.from_env_file(env_file, required=required, overrides=overrides)
    return ConfigFactory.from_env(required=required, overrides=overrides)
