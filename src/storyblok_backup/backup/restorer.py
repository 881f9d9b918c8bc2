"""Restore of single backup files into a Storyblok space.

This module maps a resource type to the API verb, request envelope and
identifier strategy needed to send a backup file back to the Management API.
"""

import json
import logging
import time
from collections.abc import Callable
from pathlib import Path
from typing import Any

from storyblok_backup.catalog import RestoreTypeDescriptor, get_restore_descriptor
from storyblok_backup.exceptions import (
    InvalidInputFileError,
    MissingDatasourceIdError,
    UnsupportedOperationError,
)
from storyblok_backup.models.results import (
    RestoredItem,
    RestoreMode,
    RestoreOptions,
    RestoreRequest,
    RestoreResult,
)
from storyblok_backup.protocols import ManagementAPI

logger = logging.getLogger(__name__)

Shaped = tuple[str | None, dict[str, Any]]
Shaper = Callable[[RestoreTypeDescriptor, dict[str, Any], RestoreOptions], Shaped]


def _shape_default(
    descriptor: RestoreTypeDescriptor, item: dict[str, Any], options: RestoreOptions
) -> Shaped:
    return descriptor.envelope, item


def _shape_story(
    descriptor: RestoreTypeDescriptor, item: dict[str, Any], options: RestoreOptions
) -> Shaped:
    story = {key: value for key, value in item.items() if key != "updated_at"}
    return descriptor.envelope, story


def _shape_collaborator(
    descriptor: RestoreTypeDescriptor, item: dict[str, Any], options: RestoreOptions
) -> Shaped:
    if not options.create:
        return descriptor.envelope, item

    # New collaborators are invited, which takes a flat payload
    try:
        invitation = {
            "email": item["user"]["userid"],
            "role": item.get("role"),
            "space_id": item.get("space_id"),
            "permissions": item.get("permissions"),
            "space_role_ids": item.get("space_role_ids"),
            "allow_multiple_roles_creation": item.get("role") == "multi",
        }
    except (KeyError, TypeError) as e:
        raise InvalidInputFileError(
            f"Collaborator has no user id to invite: missing field {e}"
        ) from e
    return None, invitation


def _shape_datasource_entry(
    descriptor: RestoreTypeDescriptor, item: dict[str, Any], options: RestoreOptions
) -> Shaped:
    if not options.create:
        return descriptor.envelope, item
    return descriptor.envelope, {**item, "datasource_id": options.datasource_id}


SHAPERS: dict[str, Shaper] = {
    "story": _shape_story,
    "collaborator": _shape_collaborator,
    "datasource-entries": _shape_datasource_entry,
}


class SpaceRestorer:
    """Restore one backup file into a Storyblok space.

    Create or update is chosen by the caller, never inferred from the file.
    Multi-item files (datasource entries) are restored item by item and the
    first failing item aborts the rest.

    Example:
        >>> with ManagementClient(config) as client:
        ...     restorer = SpaceRestorer(client, config.space_id)
        ...     result = restorer.run_restore(
        ...         "story",
        ...         ".output/backup/stories/123.json",
        ...         RestoreOptions(publish=True),
        ...     )
        ...     print(f"Restored {result.count} item(s)")
    """

    def __init__(self, client: ManagementAPI, space_id: str | int):
        """Initialize restorer.

        Args:
            client: Management API client
            space_id: ID of the target space
        """
        self.client = client
        self.space_id = str(space_id)

    def run_restore(
        self,
        resource_type: str,
        file_path: str | Path,
        options: RestoreOptions | None = None,
    ) -> RestoreResult:
        """Restore a backup file.

        Args:
            resource_type: Restore type name (e.g. ``story``, ``datasource-entries``)
            file_path: Backup file to read
            options: Restore flags (uses update mode if None)

        Returns:
            RestoreResult with one acknowledgement per restored item

        Raises:
            UnknownResourceTypeError: If the type cannot be restored
            InvalidInputFileError: If the file is missing, malformed or lacks an id
            UnsupportedOperationError: If creating this type is not possible
            MissingDatasourceIdError: If creating entries without a datasource id
            ApiError: If an API call fails
        """
        if options is None:
            options = RestoreOptions()

        start = time.perf_counter()
        descriptor = get_restore_descriptor(resource_type)
        items = self._load_items(descriptor, Path(file_path))

        if options.create and descriptor.create_unsupported:
            raise UnsupportedOperationError(descriptor.create_unsupported)
        if descriptor.many and options.create and not options.datasource_id:
            raise MissingDatasourceIdError(
                "State the datasource ID via the --id argument when creating datasource entries."
            )

        # Build every request first so a bad item fails before the first call
        requests = [self.build_request(descriptor, item, options) for item in items]

        result = RestoreResult(resource_type=resource_type, mode=options.mode)
        for request in requests:
            result.items.append(self._send(descriptor, request))

        result.duration_seconds = time.perf_counter() - start
        return result

    def build_request(
        self,
        descriptor: RestoreTypeDescriptor,
        item: dict[str, Any],
        options: RestoreOptions,
    ) -> RestoreRequest:
        """Shape one item into the request the API expects.

        Raises:
            InvalidInputFileError: If an update lacks the id it targets
        """
        shaper = SHAPERS.get(descriptor.name, _shape_default)
        envelope_key, payload = shaper(descriptor, item, options)

        target_id = item.get("id") if not options.create else None
        if not options.create and descriptor.api_segment and target_id is None:
            raise InvalidInputFileError(
                f'Cannot update "{descriptor.name}": the file has no "id" field'
            )

        return RestoreRequest(
            resource_type=descriptor.name,
            target_id=target_id,
            envelope_key=envelope_key,
            payload=payload,
            mode=options.mode,
            publish=options.publish,
        )

    def request_path(self, descriptor: RestoreTypeDescriptor, request: RestoreRequest) -> str:
        """Build the API path a request is sent to."""
        if descriptor.api_segment is None:
            # Spaces are created on the account, updated on themselves
            if request.mode is RestoreMode.CREATE:
                return "spaces"
            return f"spaces/{self.space_id}"

        path = f"spaces/{self.space_id}/{descriptor.api_segment}"
        if request.mode is RestoreMode.UPDATE:
            path = f"{path}/{request.target_id}"
        return path

    def _send(self, descriptor: RestoreTypeDescriptor, request: RestoreRequest) -> RestoredItem:
        path = self.request_path(descriptor, request)
        label = descriptor.api_segment or "spaces"

        if request.mode is RestoreMode.CREATE:
            response = self.client.post(path, request.body)
            logger.info(f'Created "{label}" resource.')
            method = "POST"
        else:
            response = self.client.put(path, request.body)
            logger.info(f'Updated "{label}" resource with id "{request.target_id}".')
            method = "PUT"

        logger.debug(f"Result: {json.dumps(response, ensure_ascii=False)}")
        return RestoredItem(
            target_id=request.target_id, method=method, path=path, response=response
        )

    @staticmethod
    def _load_items(descriptor: RestoreTypeDescriptor, path: Path) -> list[dict[str, Any]]:
        """Decode a backup file into the list of items to restore.

        Raises:
            InvalidInputFileError: If the file is missing, not JSON or has the wrong shape
        """
        if not path.is_file():
            raise InvalidInputFileError(f'Stated file "{path}" does not exist.')

        try:
            with open(path, encoding="utf-8") as f:
                document = json.load(f)
        except (OSError, ValueError) as e:
            raise InvalidInputFileError(f'Stated file "{path}" is not valid JSON: {e}') from e

        if descriptor.many:
            if not isinstance(document, list) or not all(isinstance(i, dict) for i in document):
                raise InvalidInputFileError(
                    f'File "{path}" must contain a list of {descriptor.name} objects'
                )
            return document

        if not isinstance(document, dict):
            raise InvalidInputFileError(f'File "{path}" must contain a single JSON object')
        return [document]
