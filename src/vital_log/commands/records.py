"""One-rep-max record commands."""

from datetime import datetime

import click

from ..models.records import (
    MAJOR_LIFTS,
    OneRepMax,
    brzycki_one_rep_max,
    epley_one_rep_max,
    weight_for_reps,
)
from .base import (
    async_command,
    echo_error,
    echo_info,
    echo_success,
    ensure_initialized,
    format_table,
    load_tracker,
)


@click.group()
@click.pass_context
def records(ctx):
    """Track one-rep-max personal records."""
    ensure_initialized(ctx)


@records.command()
@click.argument("lift")
@click.argument("weight", type=float)
@click.option("--date", "on", default=None, help="Date of the lift (YYYY-MM-DD)")
@click.option("--notes", default=None)
@click.pass_context
@async_command
async def add(ctx, lift: str, weight: float, on: str | None, notes: str | None):
    """Record a one-rep max for LIFT in lbs."""
    try:
        when = datetime.strptime(on, "%Y-%m-%d") if on else datetime.now()
    except ValueError:
        raise click.BadParameter(f"'{on}' is not a date in YYYY-MM-DD format") from None

    record = OneRepMax(
        lift_name=lift,
        weight=weight,
        date=when,
        notes=notes,
        is_custom=lift not in MAJOR_LIFTS,
    )
    tracker = await load_tracker()
    previous = tracker.one_rep_max_for(lift)
    if not await tracker.add_one_rep_max(record):
        echo_error("Weight must be positive and the lift needs a name")
        ctx.exit(1)

    message = f"Recorded {record.get_display()}"
    if previous is not None and weight > previous.weight:
        message += f" (+{weight - previous.weight:g} lbs)"
    echo_success(message)


@records.command(name="list")
@click.option("--lift", default=None, help="Only show one lift")
@async_command
async def list_records(lift: str | None):
    """List records, newest first."""
    tracker = await load_tracker()
    shown = tracker.one_rep_max_history(lift) if lift else tracker.one_rep_maxes
    if not shown:
        echo_info("No one-rep max records")
        return

    rows = [
        [r.id[:8], r.lift_name, f"{r.weight:.1f}", r.date.strftime("%Y-%m-%d"), r.notes or ""]
        for r in shown
    ]
    click.echo()
    click.echo(format_table(["ID", "Lift", "Weight", "Date", "Notes"], rows))

    heaviest = tracker.heaviest_one_rep_max()
    if heaviest is not None and not lift:
        click.echo()
        click.echo(f"Heaviest: {heaviest.get_display()}")


@records.command()
@click.argument("record_id")
@click.pass_context
@async_command
async def delete(ctx, record_id: str):
    """Delete a record by ID (a prefix is enough)."""
    tracker = await load_tracker()
    matches = [r for r in tracker.one_rep_maxes if r.id.startswith(record_id)]
    if len(matches) != 1:
        echo_error(f"{'No' if not matches else 'More than one'} record matches '{record_id}'")
        ctx.exit(1)
    await tracker.delete_one_rep_max(matches[0].id)
    echo_success("Record deleted")


@records.command()
@click.argument("weight", type=float)
@click.argument("reps", type=int)
def estimate(weight: float, reps: int):
    """Estimate a one-rep max from WEIGHT lifted for REPS."""
    epley = epley_one_rep_max(weight, reps)
    if not epley:
        echo_error("Reps must be positive")
        return

    click.echo(f"Epley:   {epley:.1f} lbs")
    click.echo(f"Brzycki: {brzycki_one_rep_max(weight, reps):.1f} lbs")
    click.echo()
    rows = [[str(n), f"{weight_for_reps(epley, n):.1f}"] for n in (1, 3, 5, 8, 10, 12)]
    click.echo(format_table(["Reps", "Weight"], rows))
