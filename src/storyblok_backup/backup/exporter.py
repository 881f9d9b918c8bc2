"""Main backup orchestration for a Storyblok space.

This module walks the backup catalog in order, fetches every selected
resource type from the Management API and writes each item to its own JSON
file.
"""

import logging
import time
from collections.abc import Callable
from typing import Any

from storyblok_backup.backup.archive import create_zip
from storyblok_backup.backup.asset_handler import AssetHandler
from storyblok_backup.backup.storage import BackupStorage
from storyblok_backup.catalog import ResourceTypeDescriptor, resolve_selection
from storyblok_backup.exceptions import FormatError
from storyblok_backup.models.results import BackupOptions, BackupReport
from storyblok_backup.protocols import ManagementAPI

logger = logging.getLogger(__name__)

ProgressCallback = Callable[[int, int, str], None]
TypeHandler = Callable[[ResourceTypeDescriptor, BackupStorage, BackupOptions, BackupReport], int]

VOLATILE_STORY_FIELDS = ("preview_token",)


class SpaceExporter:
    """Back up a Storyblok space to a directory of JSON files.

    Resource types are processed one at a time in catalog order and items
    strictly one after another. Any API failure aborts the whole run; there
    is no partial-success bookkeeping.

    Example:
        >>> from storyblok_backup import ManagementClient, load_config
        >>> from storyblok_backup.backup import SpaceExporter
        >>>
        >>> config = load_config()
        >>> with ManagementClient(config) as client:
        ...     exporter = SpaceExporter(client, config.space_id)
        ...     report = exporter.run_backup(BackupOptions(types=["stories"]))
        ...     print(f"Backed up {report.total_items} items")
    """

    def __init__(self, client: ManagementAPI, space_id: str | int):
        """Initialize exporter.

        Args:
            client: Management API client
            space_id: ID of the space to back up
        """
        self.client = client
        self.space_id = str(space_id)
        self._handlers: dict[str, TypeHandler] = {
            "space": self._backup_space,
            "stories": self._backup_stories,
            "assets": self._backup_assets,
            "datasources": self._backup_datasources,
        }

    def run_backup(
        self,
        options: BackupOptions | None = None,
        progress_callback: ProgressCallback | None = None,
    ) -> BackupReport:
        """Back up the selected resource types.

        Args:
            options: Backup options (uses defaults if None)
            progress_callback: Optional callback(current, total, message)

        Returns:
            BackupReport with per-type counts

        Raises:
            UnknownResourceTypeError: If the type filter names an unknown type
            OutputConflictError: If the output directory or an asset file exists
            ApiError: If any API call fails
        """
        if options is None:
            options = BackupOptions()

        start = time.perf_counter()

        # Validate everything local before the first request
        selection = resolve_selection(options.types)
        storage = BackupStorage(options.output_dir)
        storage.prepare(force=options.force)

        report = BackupReport(space_id=self.space_id, backup_dir=storage.backup_dir)
        total = len(selection)

        for idx, descriptor in enumerate(selection):
            if progress_callback:
                progress_callback(idx, total, f"Fetching {descriptor.name}")
            logger.info(f"Fetching {descriptor.name}")

            handler = self._handlers.get(descriptor.name, self._backup_collection)
            count = handler(descriptor, storage, options, report)
            report.record(descriptor.name, count)

            logger.debug(f"Backed up {count} {descriptor.name}")

        report.files_written = storage.files_written

        if options.create_zip:
            if progress_callback:
                progress_callback(total, total + 1, "Creating zip file")
            report.zip_path = create_zip(
                storage.backup_dir, storage.output_dir, prefix=options.zip_prefix
            )

        if progress_callback:
            progress_callback(total, total, "Backup complete")

        report.duration_seconds = time.perf_counter() - start
        logger.info(
            f"Backed up {report.total_items} items of {len(report.processed_types)} "
            f"resource types in {report.duration_seconds:.1f}s"
        )
        return report

    @staticmethod
    def _unwrap(response: dict[str, Any], key: str) -> dict[str, Any]:
        """Return the object the API wraps under ``key``.

        Raises:
            FormatError: If the response has no such object
        """
        value = response.get(key)
        if not isinstance(value, dict):
            raise FormatError(
                f'Unexpected API response: missing "{key}" object',
                details={"response": response},
            )
        return value

    def _collection_path(self, descriptor: ResourceTypeDescriptor) -> str:
        return f"spaces/{self.space_id}/{descriptor.api_segment}"

    def _fetch_collection(self, descriptor: ResourceTypeDescriptor) -> list[dict[str, Any]]:
        return self.client.get_all(self._collection_path(descriptor))

    def _backup_collection(
        self,
        descriptor: ResourceTypeDescriptor,
        storage: BackupStorage,
        options: BackupOptions,
        report: BackupReport,
    ) -> int:
        """Write every item of a collection as returned by the API."""
        items = self._fetch_collection(descriptor)
        for item in items:
            storage.write_json(descriptor.folder, descriptor.file_name_for(item), item)
        return len(items)

    def _backup_space(
        self,
        descriptor: ResourceTypeDescriptor,
        storage: BackupStorage,
        options: BackupOptions,
        report: BackupReport,
    ) -> int:
        """Write the space itself as ``space-<spaceId>.json`` at the backup root."""
        response = self.client.get(f"spaces/{self.space_id}")
        space = self._unwrap(response, "space")
        storage.write_json(descriptor.folder, f"space-{self.space_id}", space)
        return 1

    def _backup_stories(
        self,
        descriptor: ResourceTypeDescriptor,
        storage: BackupStorage,
        options: BackupOptions,
        report: BackupReport,
    ) -> int:
        """Fetch the full body of every story; the collection only has summaries."""
        summaries = self._fetch_collection(descriptor)
        for summary in summaries:
            story_id = descriptor.file_name_for(summary)
            response = self.client.get(f"{self._collection_path(descriptor)}/{story_id}")
            story = self._unwrap(response, "story")
            for field in VOLATILE_STORY_FIELDS:
                story.pop(field, None)
            storage.write_json(descriptor.folder, story_id, story)
        return len(summaries)

    def _backup_assets(
        self,
        descriptor: ResourceTypeDescriptor,
        storage: BackupStorage,
        options: BackupOptions,
        report: BackupReport,
    ) -> int:
        """Write asset metadata and, if requested, download each binary."""
        assets = self._fetch_collection(descriptor)
        for asset in assets:
            storage.write_json(descriptor.folder, descriptor.file_name_for(asset), asset)
            if options.with_asset_files:
                AssetHandler.download_asset_file(
                    self.client, asset, storage.folder(descriptor.folder)
                )
                report.assets_downloaded += 1
        return len(assets)

    def _backup_datasources(
        self,
        descriptor: ResourceTypeDescriptor,
        storage: BackupStorage,
        options: BackupOptions,
        report: BackupReport,
    ) -> int:
        """Write each datasource followed by its entries as ``<id>_entries.json``."""
        datasources = self._fetch_collection(descriptor)
        for datasource in datasources:
            datasource_id = descriptor.file_name_for(datasource)
            storage.write_json(descriptor.folder, datasource_id, datasource)

            entries = self.client.get_all(
                f"spaces/{self.space_id}/datasource_entries",
                {"datasource_id": datasource["id"]},
            )
            storage.write_json(descriptor.folder, f"{datasource_id}_entries", entries)
        return len(datasources)
