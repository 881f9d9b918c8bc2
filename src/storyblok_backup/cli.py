"""Command line entry points: ``storyblok-backup`` and ``storyblok-restore``."""

import logging
from pathlib import Path
from typing import Annotated, Optional

import typer
from rich.console import Console
from rich.logging import RichHandler
from rich.markup import escape

from .backup import SpaceExporter, SpaceRestorer
from .catalog import RESTORE_CATALOG, selectable_types
from .client import ManagementClient
from .config_factory import load_config
from .exceptions import StoryblokBackupError
from .models import BackupOptions, RestoreOptions

backup_app = typer.Typer(
    add_completion=False,
    help="Back up all resources of a Storyblok space to JSON files.",
)
restore_app = typer.Typer(
    add_completion=False,
    help="Restore a single Storyblok resource from a backup file.",
)

TokenOption = Annotated[
    Optional[str],
    typer.Option(
        "--token",
        help="Personal OAuth access token (NOT the access token of a space). "
        "Defaults to STORYBLOK_OAUTH_TOKEN.",
    ),
]
SpaceOption = Annotated[
    Optional[str],
    typer.Option("--space", help="ID of the space. Defaults to STORYBLOK_SPACE_ID."),
]
RegionOption = Annotated[
    Optional[str],
    typer.Option(
        "--region",
        help="Region of the space: eu (default), us, ap, ca, cn. Defaults to STORYBLOK_REGION.",
    ),
]
EnvFileOption = Annotated[
    Optional[Path],
    typer.Option("--env-file", help="Read settings from this .env file."),
]
VerboseOption = Annotated[
    bool,
    typer.Option("--verbose", help="Show every written file and raw API results."),
]


def _configure_logging(verbose: bool) -> None:
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.INFO,
        format="%(message)s",
        datefmt="[%X]",
        handlers=[RichHandler(console=Console(stderr=True), show_path=False)],
        force=True,
    )
    # Request lines from httpx only matter when debugging
    logging.getLogger("httpx").setLevel(logging.INFO if verbose else logging.WARNING)
    logging.getLogger("httpcore").setLevel(logging.WARNING)


def _fail(console: Console, error: StoryblokBackupError) -> typer.Exit:
    console.print(f"[bold red]Error:[/bold red] {escape(error.message)}")
    return typer.Exit(code=1)


@backup_app.command()
def backup(
    token: TokenOption = None,
    space: SpaceOption = None,
    region: RegionOption = None,
    types: Annotated[
        Optional[str],
        typer.Option(
            "--types",
            help="Comma separated resource types to back up (default: all). "
            f"Possible values: {', '.join(selectable_types())}.",
        ),
    ] = None,
    with_asset_files: Annotated[
        bool, typer.Option("--with-asset-files", help="Download all asset files of the space.")
    ] = False,
    output_dir: Annotated[
        Path,
        typer.Option(
            "--output-dir",
            help="Directory to write the backup to (fails if it already exists).",
        ),
    ] = Path("./.output"),
    force: Annotated[
        bool,
        typer.Option("--force", help="Delete and recreate an existing output directory."),
    ] = False,
    create_zip: Annotated[
        bool, typer.Option("--create-zip", help="Create a zip file of the backup.")
    ] = False,
    zip_prefix: Annotated[
        str,
        typer.Option("--zip-prefix", help="Prefix of the zip file, the suffix is the date."),
    ] = "backup",
    env_file: EnvFileOption = None,
    verbose: VerboseOption = False,
) -> None:
    """Back up a Storyblok space."""
    console = Console()
    _configure_logging(verbose)

    try:
        config = load_config(env_file, oauth_token=token, space_id=space, region=region)
        options = BackupOptions(
            output_dir=output_dir,
            types=types.split(",") if types is not None else None,
            with_asset_files=with_asset_files,
            force=force,
            create_zip=create_zip,
            zip_prefix=zip_prefix,
        )

        console.print(f"Creating backup for space {config.space_id}:")
        console.print(f"Output dir: {options.output_dir}")

        with ManagementClient(config) as client:
            report = SpaceExporter(client, config.space_id).run_backup(options)

    except StoryblokBackupError as e:
        raise _fail(console, e) from e

    if report.zip_path:
        console.print(f"Backup file '{report.zip_path}' successfully created.")
    console.print(
        f"[green]Backup successfully created in {round(report.duration_seconds)} seconds.[/green]"
    )


@restore_app.command()
def restore(
    resource_type: Annotated[
        str,
        typer.Option(
            "--type",
            help=f"Type of resource to restore: {', '.join(RESTORE_CATALOG)}.",
        ),
    ],
    file: Annotated[Path, typer.Option("--file", help="File of the resource to restore.")],
    token: TokenOption = None,
    space: SpaceOption = None,
    region: RegionOption = None,
    publish: Annotated[
        bool, typer.Option("--publish", help="Publish a story after restoring it.")
    ] = False,
    create: Annotated[
        bool,
        typer.Option("--create", help="Create a new resource instead of updating."),
    ] = False,
    datasource_id: Annotated[
        Optional[str],
        typer.Option(
            "--id",
            help="ID of the datasource the entries belong to "
            "(required for datasource-entries with --create).",
        ),
    ] = None,
    env_file: EnvFileOption = None,
    verbose: VerboseOption = False,
) -> None:
    """Restore a resource of a Storyblok space."""
    console = Console()
    _configure_logging(verbose)

    try:
        config = load_config(env_file, oauth_token=token, space_id=space, region=region)
        options = RestoreOptions(create=create, publish=publish, datasource_id=datasource_id)

        with ManagementClient(config) as client:
            result = SpaceRestorer(client, config.space_id).run_restore(
                resource_type, file, options
            )

    except StoryblokBackupError as e:
        raise _fail(console, e) from e

    console.print(
        f"[green]Restore successful in {round(result.duration_seconds)} seconds.[/green]"
    )
