"""Asset binary handling during backup.

Asset metadata is written like any other resource; the binaries are
downloaded next to it as ``<assetId>.<extension>``.
"""

import logging
from pathlib import Path
from typing import Any

from storyblok_backup.exceptions import FormatError
from storyblok_backup.protocols import ManagementAPI

logger = logging.getLogger(__name__)


class AssetHandler:
    """Utilities for naming and downloading asset binaries."""

    @staticmethod
    def local_file_name(asset: dict[str, Any]) -> str | None:
        """Build the local file name of an asset binary.

        The extension is everything after the last ``.`` of the source file
        name. Source files without an extension are stored under the bare id.

        Returns:
            File name, or None if the asset has no source file

        Example:
            >>> AssetHandler.local_file_name(
            ...     {"id": 42, "filename": "https://a.storyblok.com/f/1/hero.image.png"}
            ... )
            '42.png'
        """
        source = asset.get("filename")
        if not source:
            return None

        base_name = source.rstrip("/").rsplit("/", 1)[-1]
        if "." not in base_name:
            return str(asset["id"])
        extension = base_name.rsplit(".", 1)[-1]
        return f"{asset['id']}.{extension}"

    @staticmethod
    def download_asset_file(
        client: ManagementAPI,
        asset: dict[str, Any],
        output_dir: Path,
    ) -> Path:
        """Download the binary of an asset into ``output_dir``.

        Existing files are never overwritten: a file already present at the
        target path aborts the run.

        Returns:
            Path of the downloaded file

        Raises:
            FormatError: If the asset has no source file
            OutputConflictError: If the target file already exists
            ApiError: If the download fails
        """
        file_name = AssetHandler.local_file_name(asset)
        if file_name is None:
            raise FormatError(
                f"Asset {asset.get('id')} has no file to download",
                details={"asset": asset},
            )

        output_path = output_dir / file_name
        size = client.download_file(asset["filename"], output_path, exclusive=True)

        logger.debug(f"Downloaded asset file {output_path} ({size} bytes)")
        return output_path
