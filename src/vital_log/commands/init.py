"""Initialize command."""

import click

from ..config import get_config
from ..store import init_db
from .base import async_command, echo_info, echo_success


@click.command()
@async_command
async def init():
    """Initialize the vital-log data directory and database.

    Safe to run again; existing data is kept.
    """
    storage = get_config().storage

    echo_info(f"Initializing vital-log in {storage.data_dir}")
    storage.data_dir.mkdir(parents=True, exist_ok=True)

    await init_db(storage.db_path)
    echo_success("Database initialized")

    click.echo()
    click.echo("vital-log is ready to use!")
    click.echo()
    click.echo("Next steps:")
    click.echo("  1. Record a blood pressure reading:")
    click.echo("     vital-log session add 120 80 --hr 72")
    click.echo("     vital-log session complete")
    click.echo()
    click.echo("  2. Log a workout:")
    click.echo('     vital-log workout load "Push Day"')
    click.echo("     vital-log workout start")
    click.echo("     vital-log workout log")
    click.echo()
    click.echo("  3. See your averages:")
    click.echo("     vital-log stats averages")
