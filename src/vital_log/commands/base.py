"""Shared CLI utilities."""

import asyncio
from functools import wraps

import click

from ..config import get_config
from ..services.events import EventBus
from ..services.tracker import HealthTracker
from ..store import LocalStore


def async_command(f):
    """Decorator to run async Click commands."""

    @wraps(f)
    def wrapper(*args, **kwargs):
        return asyncio.run(f(*args, **kwargs))

    return wrapper


def ensure_initialized(ctx: click.Context) -> None:
    """Ensure the database is initialized."""
    db_path = get_config().storage.db_path
    if not db_path.exists():
        click.echo(
            click.style("Error: ", fg="red")
            + "vital-log is not initialized. Run 'vital-log init' first."
        )
        ctx.exit(1)


async def load_tracker(events: EventBus | None = None) -> HealthTracker:
    """Create a tracker over the configured local store and load its state."""
    config = get_config()
    tracker = HealthTracker(
        LocalStore(config.storage.db_path),
        config=config.session,
        events=events,
    )
    await tracker.load()
    return tracker


def echo_success(message: str) -> None:
    """Print a success message."""
    click.echo(click.style("[OK] ", fg="green") + message)


def echo_error(message: str) -> None:
    """Print an error message."""
    click.echo(click.style("[ERROR] ", fg="red") + message)


def echo_info(message: str) -> None:
    """Print an info message."""
    click.echo(click.style("[INFO] ", fg="blue") + message)


def echo_warning(message: str) -> None:
    """Print a warning message."""
    click.echo(click.style("[WARN] ", fg="yellow") + message)


def format_table(headers: list[str], rows: list[list[str]], padding: int = 2) -> str:
    """Format data as a simple aligned table."""
    if not rows:
        return ""

    widths = [len(h) for h in headers]
    for row in rows:
        for i, cell in enumerate(row):
            widths[i] = max(widths[i], len(str(cell)))

    def line(cells: list[str]) -> str:
        return "".join(str(c).ljust(widths[i] + padding) for i, c in enumerate(cells)).rstrip()

    lines = [line(headers), line(["-" * w for w in widths])]
    lines.extend(line(row) for row in rows)
    return "\n".join(lines)


def format_duration(seconds: float) -> str:
    minutes, secs = divmod(int(seconds), 60)
    hours, minutes = divmod(minutes, 60)
    if hours:
        return f"{hours}:{minutes:02d}:{secs:02d}"
    return f"{minutes}:{secs:02d}"
