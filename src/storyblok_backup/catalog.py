"""Static catalogs of the resource types that can be backed up and restored.

The backup catalog is ordered: the exporter walks it front to back, so the
order of BACKUP_CATALOG is the order in which a space is written to disk.
The restore catalog is a separate, overlapping table keyed by the singular
type names the restore command accepts.
"""

from collections.abc import Callable, Iterable
from dataclasses import dataclass
from typing import Any

from .exceptions import FormatError, UnknownResourceTypeError

FileNameAccessor = Callable[[dict[str, Any]], Any]


def _field(name: str) -> FileNameAccessor:
    def accessor(item: dict[str, Any]) -> Any:
        return item[name]

    return accessor


def _nested(outer: str, inner: str) -> FileNameAccessor:
    def accessor(item: dict[str, Any]) -> Any:
        return item[outer][inner]

    return accessor


@dataclass(frozen=True)
class ResourceTypeDescriptor:
    """How one resource type is fetched and written during backup.

    Attributes:
        name: Logical name used in type filters (e.g. ``component-groups``)
        api_segment: Path segment below ``spaces/<id>/`` (e.g. ``component_groups``)
        folder: Output folder below the backup root, None for the space singleton
        file_name: Accessor returning the value an item's file is named after
        has_sub_fetch: Items need a second request (story body, entries, binary)
        selectable: Can be named in a type filter
    """

    name: str
    api_segment: str
    folder: str | None
    file_name: FileNameAccessor = _field("id")
    has_sub_fetch: bool = False
    selectable: bool = True

    def file_name_for(self, item: dict[str, Any]) -> str:
        """Evaluate the file-name accessor against an item.

        Raises:
            FormatError: If the item lacks the field its file is named after
        """
        try:
            return str(self.file_name(item))
        except (KeyError, TypeError) as e:
            raise FormatError(
                f"Cannot name {self.name} item: missing field {e}",
                details={"item": item},
            ) from e


SPACE = ResourceTypeDescriptor(name="space", api_segment="", folder=None, selectable=False)

BACKUP_CATALOG: tuple[ResourceTypeDescriptor, ...] = (
    SPACE,
    ResourceTypeDescriptor("stories", "stories", "stories", has_sub_fetch=True),
    ResourceTypeDescriptor("collaborators", "collaborators", "collaborators"),
    ResourceTypeDescriptor("components", "components", "components", file_name=_field("name")),
    ResourceTypeDescriptor("component-groups", "component_groups", "component-groups"),
    ResourceTypeDescriptor("assets", "assets", "assets", has_sub_fetch=True),
    ResourceTypeDescriptor("asset-folders", "asset_folders", "asset-folders"),
    ResourceTypeDescriptor("internal-tags", "internal_tags", "internal-tags"),
    # Entries are written right after their datasource, within this step
    ResourceTypeDescriptor("datasources", "datasources", "datasources", has_sub_fetch=True),
    ResourceTypeDescriptor("space-roles", "space_roles", "space-roles"),
    ResourceTypeDescriptor("tasks", "tasks", "tasks"),
    ResourceTypeDescriptor(
        "activities", "activities", "activities", file_name=_nested("activity", "id")
    ),
    ResourceTypeDescriptor("presets", "presets", "presets"),
    ResourceTypeDescriptor("field-types", "field_types", "field-types", file_name=_field("name")),
    ResourceTypeDescriptor("webhooks", "webhook_endpoints", "webhooks"),
    ResourceTypeDescriptor("workflow-stages", "workflow_stages", "workflow-stages"),
    ResourceTypeDescriptor(
        "workflow-stage-changes", "workflow_stage_changes", "workflow-stage-changes"
    ),
    ResourceTypeDescriptor("workflows", "workflows", "workflows"),
    ResourceTypeDescriptor("releases", "releases", "releases"),
    ResourceTypeDescriptor("pipeline-branches", "branches", "pipeline-branches"),
    ResourceTypeDescriptor("access-tokens", "api_keys", "access-tokens"),
)

_BACKUP_BY_NAME = {descriptor.name: descriptor for descriptor in BACKUP_CATALOG}


def get_descriptor(name: str) -> ResourceTypeDescriptor:
    """Return the backup descriptor for a logical name.

    Raises:
        UnknownResourceTypeError: If the name is not in the catalog
    """
    try:
        return _BACKUP_BY_NAME[name]
    except KeyError:
        raise UnknownResourceTypeError(
            f'Invalid resource type "{name}"',
            details={"available": selectable_types()},
        ) from None


def selectable_types() -> list[str]:
    """Names that may appear in a type filter, in catalog order."""
    return [descriptor.name for descriptor in BACKUP_CATALOG if descriptor.selectable]


def resolve_selection(names: Iterable[str] | None) -> list[ResourceTypeDescriptor]:
    """Validate a type filter and return the selected descriptors in catalog order.

    ``None`` selects the whole catalog, including the space singleton. An
    explicit filter may only name selectable types; every name is checked
    before anything is returned so a run fails before its first request.

    Raises:
        UnknownResourceTypeError: If the filter is empty, or a name is
            unknown or not selectable
    """
    if names is None:
        return list(BACKUP_CATALOG)

    wanted = {name.strip() for name in names}
    if not wanted or "" in wanted:
        raise UnknownResourceTypeError(
            "Empty resource type in type filter",
            details={"available": selectable_types()},
        )
    for name in sorted(wanted):
        descriptor = get_descriptor(name)
        if not descriptor.selectable:
            raise UnknownResourceTypeError(
                f'Resource type "{name}" cannot be selected with a type filter',
                details={"available": selectable_types()},
            )

    return [descriptor for descriptor in BACKUP_CATALOG if descriptor.name in wanted]


@dataclass(frozen=True)
class RestoreTypeDescriptor:
    """How a backup file of one resource type is sent back to the API.

    Attributes:
        name: Type name accepted by the restore command (e.g. ``story``)
        api_segment: Path segment below ``spaces/<id>/``, None for the space itself
        envelope: Key the API expects around the payload
        many: The file holds a list of items restored one by one
        create_unsupported: Reason creating is impossible, None if it is supported
    """

    name: str
    api_segment: str | None
    envelope: str
    many: bool = False
    create_unsupported: str | None = None


RESTORE_CATALOG: dict[str, RestoreTypeDescriptor] = {
    descriptor.name: descriptor
    for descriptor in (
        RestoreTypeDescriptor("story", "stories", "story"),
        RestoreTypeDescriptor("collaborator", "collaborators", "collaborator"),
        RestoreTypeDescriptor("component", "components", "component"),
        RestoreTypeDescriptor("component-group", "component_groups", "component_group"),
        RestoreTypeDescriptor(
            "asset",
            "assets",
            "asset",
            create_unsupported="Creating assets is not supported.",
        ),
        RestoreTypeDescriptor("asset-folder", "asset_folders", "asset_folder"),
        RestoreTypeDescriptor("internal-tag", "internal_tags", "internal_tag"),
        RestoreTypeDescriptor("datasource", "datasources", "datasource"),
        RestoreTypeDescriptor(
            "datasource-entries", "datasource_entries", "datasource_entry", many=True
        ),
        RestoreTypeDescriptor("space", None, "space"),
        RestoreTypeDescriptor("space-role", "space_roles", "space_role"),
        RestoreTypeDescriptor("task", "tasks", "task"),
        RestoreTypeDescriptor("preset", "presets", "preset"),
        # Field types are backup-only
        RestoreTypeDescriptor("webhook", "webhook_endpoints", "webhook_endpoint"),
        RestoreTypeDescriptor("workflow", "workflows", "workflow"),
        RestoreTypeDescriptor("workflow-stage", "workflow_stages", "workflow_stage"),
        RestoreTypeDescriptor("release", "releases", "release"),
        RestoreTypeDescriptor("pipeline-branch", "branches", "branch"),
        RestoreTypeDescriptor(
            "access-token",
            "api_keys",
            "api_key",
            create_unsupported=(
                "Creating access-tokens from backup is not possible, "
                "since it will result in a new token."
            ),
        ),
    )
}


def get_restore_descriptor(name: str) -> RestoreTypeDescriptor:
    """Return the restore descriptor for a type name.

    Raises:
        UnknownResourceTypeError: If the type cannot be restored
    """
    try:
        return RESTORE_CATALOG[name]
    except KeyError:
        raise UnknownResourceTypeError(
            f'Invalid resource type "{name}"',
            details={"available": list(RESTORE_CATALOG)},
        ) from None
