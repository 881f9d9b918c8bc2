"""storyblok-backup: back up and restore Storyblok spaces.

This package provides:
- A synchronous client for the Storyblok Management API
- A catalog of every resource type of a space
- Backup of a whole space to one JSON file per resource
- Restore of single backup files (create or update)
- Configuration via arguments, environment variables and .env files
"""

from .__version__ import __version__
from .backup import SpaceExporter, SpaceRestorer
from .catalog import (
    BACKUP_CATALOG,
    RESTORE_CATALOG,
    ResourceTypeDescriptor,
    RestoreTypeDescriptor,
    get_descriptor,
    get_restore_descriptor,
    resolve_selection,
)
from .client import ManagementClient
from .config_factory import ConfigFactory, load_config
from .exceptions import (
    ApiConnectionError,
    ApiError,
    ApiTimeoutError,
    AuthenticationError,
    AuthorizationError,
    ConfigurationError,
    FormatError,
    InvalidInputFileError,
    MissingDatasourceIdError,
    NotFoundError,
    OutputConflictError,
    RateLimitError,
    ServerError,
    StoryblokBackupError,
    UnknownResourceTypeError,
    UnsupportedOperationError,
    ValidationError,
)
from .models import (
    BackupOptions,
    BackupReport,
    Region,
    RestoreMode,
    RestoreOptions,
    RestoreRequest,
    RestoreResult,
    RetryConfig,
    StoryblokConfig,
)
from .protocols import ManagementAPI

__all__ = [
    "__version__",
    # Client
    "ManagementClient",
    "ManagementAPI",
    # Configuration
    "StoryblokConfig",
    "RetryConfig",
    "Region",
    "ConfigFactory",
    "load_config",
    # Catalog
    "BACKUP_CATALOG",
    "RESTORE_CATALOG",
    "ResourceTypeDescriptor",
    "RestoreTypeDescriptor",
    "get_descriptor",
    "get_restore_descriptor",
    "resolve_selection",
    # Backup/Restore
    "SpaceExporter",
    "SpaceRestorer",
    "BackupOptions",
    "BackupReport",
    "RestoreMode",
    "RestoreOptions",
    "RestoreRequest",
    "RestoreResult",
    # Exceptions
    "StoryblokBackupError",
    "ConfigurationError",
    "UnknownResourceTypeError",
    "OutputConflictError",
    "InvalidInputFileError",
    "UnsupportedOperationError",
    "MissingDatasourceIdError",
    "ApiError",
    "AuthenticationError",
    "AuthorizationError",
    "NotFoundError",
    "ValidationError",
    "RateLimitError",
    "ServerError",
    "ApiConnectionError",
    "ApiTimeoutError",
    "FormatError",
]
