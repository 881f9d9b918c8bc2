"""Data models for storyblok-backup."""

from .config import Region, RetryConfig, StoryblokConfig
from .results import (
    BackupOptions,
    BackupReport,
    RestoredItem,
    RestoreMode,
    RestoreOptions,
    RestoreRequest,
    RestoreResult,
)

__all__ = [
    "StoryblokConfig",
    "RetryConfig",
    "Region",
    "BackupOptions",
    "BackupReport",
    "RestoreMode",
    "RestoreOptions",
    "RestoreRequest",
    "RestoredItem",
    "RestoreResult",
]
