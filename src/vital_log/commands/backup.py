"""Backup commands."""

from datetime import datetime
from pathlib import Path

import click

from ..config import get_config
from ..errors import BackupFormatError
from ..services.backup import DataBackup
from ..store import LocalStore
from .base import async_command, echo_error, echo_success, ensure_initialized


@click.group()
def backup():
    """Export and inspect backup bundles."""


@backup.command()
@click.option(
    "--output",
    "-o",
    type=click.Path(dir_okay=False, path_type=Path),
    default=None,
    help="Output file (default: vital-log-backup-<timestamp>.json)",
)
@click.pass_context
@async_command
async def export(ctx, output: Path | None):
    """Write the complete history and profile to a JSON file."""
    ensure_initialized(ctx)
    bundle = await DataBackup.create(LocalStore(get_config().storage.db_path))

    if output is None:
        output = Path(f"vital-log-backup-{datetime.now().strftime('%Y%m%d-%H%M%S')}.json")
    bundle.write(output)

    echo_success(f"Backup written to {output}")
    click.echo(bundle.get_summary())


@backup.command()
@click.argument("path", type=click.Path(exists=True, dir_okay=False, path_type=Path))
@click.pass_context
def inspect(ctx, path: Path):
    """Check a backup file and summarize its contents."""
    try:
        bundle = DataBackup.read(path)
    except BackupFormatError as e:
        echo_error(str(e))
        ctx.exit(1)
    click.echo(bundle.get_summary())
