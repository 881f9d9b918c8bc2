"""HTTP client for the Storyblok Management API."""

from .base import BaseClient
from .sync_client import ManagementClient

__all__ = ["BaseClient", "ManagementClient"]
