"""Backup and restore of Storyblok spaces.

This package walks the resource catalog to write a space to JSON files,
and sends single backup files back to the Management API.
"""

from .exporter import SpaceExporter
from .restorer import SpaceRestorer

__all__ = ["SpaceExporter", "SpaceRestorer"]
