"""Run options, requests and reports of the backup and restore pipelines."""

from datetime import datetime
from enum import Enum
from pathlib import Path
from typing import Any

from pydantic import BaseModel, Field, field_validator


class RestoreMode(str, Enum):
    """Whether a restore creates a new resource or updates an existing one."""

    CREATE = "create"
    UPDATE = "update"


class BackupOptions(BaseModel):
    """Options of a single backup run.

    Attributes:
        output_dir: Directory the ``backup`` folder (and zip) is written to
        types: Allow-list of resource type names (None means everything)
        with_asset_files: Also download the binary of every asset
        force: Delete and recreate an existing output directory
        create_zip: Archive the backup folder after a successful run
        zip_prefix: File name prefix of the archive
    """

    output_dir: Path = Path("./.output")
    types: list[str] | None = None
    with_asset_files: bool = False
    force: bool = False
    create_zip: bool = False
    zip_prefix: str = "backup"


class BackupReport(BaseModel):
    """Summary of a finished backup run."""

    space_id: str
    backup_dir: Path
    processed_types: list[str] = Field(default_factory=list)
    item_counts: dict[str, int] = Field(default_factory=dict)
    files_written: int = 0
    assets_downloaded: int = 0
    zip_path: Path | None = None
    started_at: datetime = Field(default_factory=datetime.now)
    duration_seconds: float = 0.0

    def record(self, resource_type: str, count: int) -> None:
        """Register the number of items fetched for a resource type."""
        self.processed_types.append(resource_type)
        self.item_counts[resource_type] = count

    @property
    def total_items(self) -> int:
        """Total number of items fetched across all resource types."""
        return sum(self.item_counts.values())


class RestoreOptions(BaseModel):
    """Flags of a single restore invocation."""

    create: bool = False
    publish: bool = False
    datasource_id: int | str | None = None

    @field_validator("datasource_id", mode="before")
    @classmethod
    def _numeric_datasource_id(cls, value: Any) -> Any:
        # The API expects numeric ids as JSON numbers
        if isinstance(value, str) and value.strip().isdigit():
            return int(value)
        return value

    @property
    def mode(self) -> RestoreMode:
        return RestoreMode.CREATE if self.create else RestoreMode.UPDATE


class RestoreRequest(BaseModel):
    """One API call the restore dispatcher is about to issue.

    ``envelope_key`` is None when the payload is sent as-is (collaborator
    invitations). ``target_id`` is only meaningful in update mode.
    """

    resource_type: str
    target_id: str | int | None = None
    envelope_key: str | None
    payload: dict[str, Any]
    mode: RestoreMode
    publish: bool = False

    @property
    def body(self) -> dict[str, Any]:
        """JSON body to send, wrapped in the envelope."""
        body: dict[str, Any] = (
            {self.envelope_key: self.payload} if self.envelope_key else dict(self.payload)
        )
        if self.publish:
            body["publish"] = 1
        return body


class RestoredItem(BaseModel):
    """Acknowledgement of one successfully restored resource."""

    target_id: str | int | None = None
    method: str
    path: str
    response: dict[str, Any] = Field(default_factory=dict)


class RestoreResult(BaseModel):
    """Summary of a finished restore invocation."""

    resource_type: str
    mode: RestoreMode
    items: list[RestoredItem] = Field(default_factory=list)
    duration_seconds: float = 0.0

    @property
    def count(self) -> int:
        return len(self.items)
