"""On-disk layout of a backup.

Everything is written below ``<output_dir>/backup``: one folder per resource
type, one pretty-printed JSON file per item, and the space itself as
``space-<spaceId>.json`` at the root.
"""

import json
import logging
import shutil
from pathlib import Path
from typing import Any

from storyblok_backup.exceptions import OutputConflictError

logger = logging.getLogger(__name__)

BACKUP_FOLDER = "backup"


class BackupStorage:
    """Owns the output directory of one backup run.

    Example:
        >>> storage = BackupStorage(".output")
        >>> storage.prepare(force=True)
        >>> storage.write_json("stories", "123", {"id": 123})
        PosixPath('.output/backup/stories/123.json')
    """

    def __init__(self, output_dir: str | Path) -> None:
        self.output_dir = Path(output_dir)
        self.backup_dir = self.output_dir / BACKUP_FOLDER
        self.files_written = 0

    def check_available(self, force: bool = False) -> None:
        """Fail if the output directory exists and may not be replaced.

        Raises:
            OutputConflictError: If the directory exists and force is not set
        """
        if self.output_dir.exists() and not force:
            raise OutputConflictError(
                f'Output directory "{self.output_dir}" already exists. '
                "Use --force to delete and recreate it (POSSIBLY DANGEROUS!).",
                details={"path": str(self.output_dir)},
            )

    def prepare(self, force: bool = False) -> None:
        """Create a fresh, empty backup directory.

        Raises:
            OutputConflictError: If the directory exists and force is not set
        """
        self.check_available(force)
        if self.output_dir.exists():
            logger.info(f"Removing existing output directory {self.output_dir}")
            shutil.rmtree(self.output_dir)
        self.backup_dir.mkdir(parents=True)

    def folder(self, name: str | None) -> Path:
        """Return (and create) the folder for a resource type.

        ``None`` is the backup root itself.
        """
        if name is None:
            return self.backup_dir
        path = self.backup_dir / name
        path.mkdir(parents=True, exist_ok=True)
        return path

    def write_json(self, folder: str | None, file_stem: str, content: Any) -> Path:
        """Write one JSON file (2-space indent) and return its path."""
        path = self.folder(folder) / f"{file_stem}.json"
        with open(path, "w", encoding="utf-8") as f:
            json.dump(content, f, indent=2, ensure_ascii=False)

        self.files_written += 1
        logger.debug(f"Written file {path}")
        return path
