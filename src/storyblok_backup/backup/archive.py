"""Zip archiving of a finished backup."""

import logging
import os
import zipfile
from datetime import datetime
from pathlib import Path

from storyblok_backup.exceptions import OutputConflictError

logger = logging.getLogger(__name__)


def archive_name(prefix: str, now: datetime | None = None) -> str:
    """Build the archive file name, e.g. ``backup-2024-05-01-13-45-00.zip``."""
    timestamp = (now or datetime.now()).strftime("%Y-%m-%d-%H-%M-%S")
    return f"{prefix}-{timestamp}.zip"


def create_zip(source_dir: Path, target_dir: Path, prefix: str = "backup") -> Path:
    """Archive ``source_dir`` into a timestamped zip file inside ``target_dir``.

    Paths inside the archive are relative to the parent of ``source_dir``,
    so the archive unpacks to a ``backup/`` folder.

    Raises:
        OutputConflictError: If an archive with the same name already exists
    """
    zip_path = target_dir / archive_name(prefix)
    if zip_path.exists():
        raise OutputConflictError(
            f"Zip file {zip_path} already exists", details={"path": str(zip_path)}
        )

    file_count = 0
    with zipfile.ZipFile(zip_path, "w", compression=zipfile.ZIP_DEFLATED) as zf:
        for root, _, filenames in os.walk(source_dir):
            for filename in sorted(filenames):
                file_path = Path(root) / filename
                zf.write(file_path, file_path.relative_to(source_dir.parent))
                file_count += 1

    logger.info(f"Archived {file_count} files into {zip_path}")
    return zip_path
