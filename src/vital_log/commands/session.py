"""Measurement session commands."""

import click

from ..models.readings import METRIC_TYPES, MetricType
from .base import (
    async_command,
    echo_error,
    echo_info,
    echo_success,
    echo_warning,
    ensure_initialized,
    format_duration,
    format_table,
    load_tracker,
)

METRIC_CHOICES = [t.value for t in MetricType]


@click.group()
@click.pass_context
def session(ctx):
    """Record blood pressure readings and health metrics.

    Readings go into the current session. Completing the session moves it
    into history.
    """
    ensure_initialized(ctx)


@session.command()
@async_command
async def start():
    """Start (or restart) the current session."""
    tracker = await load_tracker()
    if await tracker.start_session():
        echo_success("Session started")
    else:
        echo_error("Session could not be started")


@session.command()
@async_command
async def stop():
    """Stop the current session without saving it."""
    tracker = await load_tracker()
    await tracker.stop_session()
    echo_success("Session stopped")


@session.command()
@click.argument("systolic", type=int)
@click.argument("diastolic", type=int)
@click.option("--hr", "heart_rate", type=int, default=None, help="Heart rate (bpm)")
@click.pass_context
@async_command
async def add(ctx, systolic: int, diastolic: int, heart_rate: int | None):
    """Add a blood pressure reading, e.g. 'add 120 80 --hr 72'."""
    tracker = await load_tracker()

    if not await tracker.add_reading(systolic, diastolic, heart_rate):
        echo_error(
            f"Reading {systolic}/{diastolic} was rejected. Check the values are in range, "
            "the session is not full, and the session is started if auto-start is off."
        )
        ctx.exit(1)

    count = len(tracker.current_session.readings)
    echo_success(f"Reading added ({count} in session, average {tracker.current_session.get_display()})")


@session.command()
@click.argument("metric_type", type=click.Choice(METRIC_CHOICES))
@click.argument("value", type=float)
@click.pass_context
@async_command
async def metric(ctx, metric_type: str, value: float):
    """Add a health metric such as weight or blood sugar."""
    tracker = await load_tracker()
    kind = MetricType(metric_type)
    info = METRIC_TYPES[kind]

    if not await tracker.add_metric(kind, value):
        echo_error(
            f"{info.label} {value:g} was rejected "
            f"(expected {info.min_value:g}-{info.max_value:g} {info.unit})"
        )
        ctx.exit(1)

    echo_success(f"{info.label} {value:g} {info.unit} added")


@session.command()
@click.argument("index", type=int)
@click.option("--metric", "is_metric", is_flag=True, help="Remove a metric instead of a reading")
@click.pass_context
@async_command
async def remove(ctx, index: int, is_metric: bool):
    """Remove a reading (or metric) by its 1-based position."""
    tracker = await load_tracker()
    removed = (
        await tracker.remove_metric(index - 1)
        if is_metric
        else await tracker.remove_reading(index - 1)
    )
    if not removed:
        echo_error(f"No {'metric' if is_metric else 'reading'} at position {index}")
        ctx.exit(1)
    echo_success("Removed")


@session.command()
@async_command
async def show():
    """Show the current session."""
    tracker = await load_tracker()
    current = tracker.current_session

    click.echo()
    click.echo(f"Session {current.id[:8]} ({current.state.value})")
    click.echo(f"Started: {current.start_time.strftime('%Y-%m-%d %H:%M')}")
    click.echo(f"Duration: {format_duration(current.duration.total_seconds())}")

    if current.readings:
        rows = [
            [str(i), r.get_display(), r.timestamp.strftime("%H:%M")]
            for i, r in enumerate(current.readings, start=1)
        ]
        click.echo()
        click.echo(format_table(["#", "Reading", "Time"], rows))
        click.echo()
        click.echo(f"Average: {current.get_display()}")

    if current.metrics:
        rows = [
            [str(i), METRIC_TYPES[m.type].label, m.get_display(), m.timestamp.strftime("%H:%M")]
            for i, m in enumerate(current.metrics, start=1)
        ]
        click.echo()
        click.echo(format_table(["#", "Metric", "Value", "Time"], rows))

    if not current.readings and not current.metrics:
        click.echo()
        echo_info("No readings yet. Add one with 'vital-log session add 120 80'")

    if not tracker.can_add_reading() and current.is_active:
        echo_warning("Session is full")


@session.command()
@async_command
async def complete():
    """Complete the current session and save it to history."""
    tracker = await load_tracker()
    saved = await tracker.complete_session()
    if saved is None:
        echo_info("Nothing to save; the session is empty")
        return
    echo_success(f"Session saved: {saved.get_display()} ({len(saved.readings)} readings)")


@session.command()
@click.confirmation_option(prompt="Discard the current session?")
@async_command
async def discard():
    """Discard the current session."""
    tracker = await load_tracker()
    await tracker.discard_session()
    echo_success("Session discarded")
