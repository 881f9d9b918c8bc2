#!/usr/bin/env python3
"""Copy Components Between Spaces

Backs up the components of a source space and creates them in a target
space. Both spaces must live in the same region and be reachable with the
same personal OAuth token.

Usage:
    1. Set STORYBLOK_OAUTH_TOKEN (or put it in a .env file)
    2. Update SOURCE_SPACE and TARGET_SPACE below
    3. Run: python copy_components.py

Environment Variables (optional):
    SOURCE_SPACE_ID: Override SOURCE_SPACE
    TARGET_SPACE_ID: Override TARGET_SPACE
"""

import os
import tempfile
from pathlib import Path

from storyblok_backup import (
    BackupOptions,
    ManagementClient,
    RestoreOptions,
    SpaceExporter,
    SpaceRestorer,
    load_config,
)
from storyblok_backup.exceptions import StoryblokBackupError

SOURCE_SPACE = os.getenv("SOURCE_SPACE_ID", "111111")
TARGET_SPACE = os.getenv("TARGET_SPACE_ID", "222222")


def copy_components(work_dir: Path) -> int:
    """Back up source components and create each one in the target space.

    Returns:
        Number of components created
    """
    source_config = load_config(space_id=SOURCE_SPACE)
    target_config = load_config(space_id=TARGET_SPACE)

    with ManagementClient(source_config) as client:
        report = SpaceExporter(client, SOURCE_SPACE).run_backup(
            BackupOptions(output_dir=work_dir, types=["components"])
        )
    print(f"Backed up {report.item_counts.get('components', 0)} components")

    created = 0
    with ManagementClient(target_config) as client:
        restorer = SpaceRestorer(client, TARGET_SPACE)
        for path in sorted((report.backup_dir / "components").glob("*.json")):
            restorer.run_restore("component", path, RestoreOptions(create=True))
            print(f"  Created {path.stem}")
            created += 1
    return created


def main() -> None:
    with tempfile.TemporaryDirectory() as tmp:
        try:
            # run_backup refuses existing directories, so use a fresh subfolder
            created = copy_components(Path(tmp) / "components-copy")
        except StoryblokBackupError as e:
            print(f"Copy failed: {e}")
            raise SystemExit(1) from e

    print(f"Done: {created} components created in space {TARGET_SPACE}")


if __name__ == "__main__":
    main()
