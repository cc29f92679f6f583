"""CLI entry point for vital-log."""

import click

from . import __version__
from .commands import (
    backup,
    history,
    init,
    plans,
    profile,
    records,
    serve,
    session,
    stats,
    sync,
    workout,
)
from .config import get_config
from .log import configure_logging


@click.group()
@click.version_option(version=__version__, prog_name="vital-log")
def main():
    """vital-log: blood pressure, health metric and workout tracking.

    Record readings into sessions, log workouts, and see rolling averages
    and trends. History can be synced to a self-hosted server.

    Example usage:

        # Initialize the data directory
        vital-log init

        # Record readings and save the session
        vital-log session add 120 80 --hr 72
        vital-log session add 118 79
        vital-log session complete

        # See averages
        vital-log stats averages

        # Sync
        vital-log sync push
    """
    configure_logging(get_config().logging)


main.add_command(init)
main.add_command(session)
main.add_command(workout)
main.add_command(plans)
main.add_command(records)
main.add_command(history)
main.add_command(stats)
main.add_command(profile)
main.add_command(sync)
main.add_command(backup)
main.add_command(serve)


def run():
    """Run the CLI."""
    main()


if __name__ == "__main__":
    run()
