"""History commands."""

from datetime import datetime

import click

from .base import (
    async_command,
    echo_error,
    echo_info,
    echo_success,
    ensure_initialized,
    format_duration,
    format_table,
    load_tracker,
)


def _parse_day(value: str):
    try:
        return datetime.strptime(value, "%Y-%m-%d").date()
    except ValueError:
        raise click.BadParameter(f"'{value}' is not a date in YYYY-MM-DD format") from None


@click.group()
@click.pass_context
def history(ctx):
    """Browse and delete saved sessions and workouts."""
    ensure_initialized(ctx)


@history.command(name="list")
@click.option("--date", "day", default=None, help="Only sessions from this day (YYYY-MM-DD)")
@click.option("--limit", "-n", type=int, default=20, help="Maximum rows to show")
@async_command
async def list_sessions(day: str | None, limit: int):
    """List saved measurement sessions, newest first."""
    tracker = await load_tracker()
    sessions = tracker.sessions_on(_parse_day(day)) if day else tracker.sessions

    if not sessions:
        echo_info("No sessions found")
        return

    rows = []
    for i, s in enumerate(sessions[:limit], start=1):
        rows.append([
            str(i),
            s.id[:8],
            s.start_time.strftime("%Y-%m-%d %H:%M"),
            s.get_display() if s.readings else "-",
            str(len(s.readings)),
            str(len(s.metrics)),
        ])

    click.echo()
    click.echo(format_table(["#", "ID", "Started", "Average", "Readings", "Metrics"], rows))
    click.echo()
    click.echo(f"Total: {len(sessions)} session(s)")


@history.command()
@click.argument("session_id")
@click.pass_context
@async_command
async def show(ctx, session_id: str):
    """Show a saved session by ID (a prefix is enough)."""
    tracker = await load_tracker()
    matches = [s for s in tracker.sessions if s.id.startswith(session_id)]
    if len(matches) != 1:
        echo_error(f"{'No' if not matches else 'More than one'} session matches '{session_id}'")
        ctx.exit(1)

    s = matches[0]
    click.echo()
    click.echo(f"Session {s.id}")
    click.echo(f"Started: {s.start_time.strftime('%Y-%m-%d %H:%M')}")
    click.echo(f"Duration: {format_duration(s.duration.total_seconds())}")
    for r in s.readings:
        click.echo(f"  {r.timestamp.strftime('%H:%M')}  {r.get_display()}")
    for m in s.metrics:
        click.echo(f"  {m.timestamp.strftime('%H:%M')}  {m.get_display()}")
    if s.readings:
        click.echo(f"Average: {s.get_display()}")


@history.command()
@click.argument("session_id")
@click.pass_context
@async_command
async def delete(ctx, session_id: str):
    """Delete a saved session by ID."""
    tracker = await load_tracker()
    matches = [s for s in tracker.sessions if s.id.startswith(session_id)]
    if len(matches) != 1:
        echo_error(f"{'No' if not matches else 'More than one'} session matches '{session_id}'")
        ctx.exit(1)
    await tracker.delete_session(matches[0].id)
    echo_success("Session deleted")


@history.command(name="delete-date")
@click.argument("day")
@async_command
async def delete_date(day: str):
    """Delete every session started on a day (YYYY-MM-DD)."""
    tracker = await load_tracker()
    removed = await tracker.delete_sessions_on(_parse_day(day))
    echo_success(f"Deleted {removed} session(s)")


@history.command()
@click.confirmation_option(prompt="Delete all saved measurement sessions?")
@async_command
async def clear():
    """Delete all saved measurement sessions."""
    tracker = await load_tracker()
    removed = await tracker.delete_all_sessions()
    echo_success(f"Deleted {removed} session(s)")


@history.command()
@click.option("--limit", "-n", type=int, default=20, help="Maximum rows to show")
@click.option("--favorites", is_flag=True, help="Only show favorite workouts")
@async_command
async def workouts(limit: int, favorites: bool):
    """List saved workouts, newest first. Favorites are marked with *."""
    tracker = await load_tracker()
    listed = [w for w in tracker.workouts if w.is_favorite or not favorites]
    if not listed:
        echo_info("No workouts found")
        return

    rows = [
        [
            w.id[:8] + (" *" if w.is_favorite else ""),
            w.start_time.strftime("%Y-%m-%d %H:%M"),
            ", ".join(e.exercise_type.display_name for e in w.exercise_sessions[:3])
            + (" ..." if w.total_exercises > 3 else ""),
            str(w.total_sets),
            format_duration(w.duration.total_seconds()),
        ]
        for w in listed[:limit]
    ]
    click.echo()
    click.echo(format_table(["ID", "Started", "Exercises", "Sets", "Duration"], rows))
    click.echo()
    click.echo(f"Total: {len(listed)} workout(s)")


@history.command(name="delete-workout")
@click.argument("workout_id")
@click.pass_context
@async_command
async def delete_workout(ctx, workout_id: str):
    """Delete a saved workout by ID (a prefix is enough)."""
    tracker = await load_tracker()
    matches = [w for w in tracker.workouts if w.id.startswith(workout_id)]
    if len(matches) != 1:
        echo_error(f"{'No' if not matches else 'More than one'} workout matches '{workout_id}'")
        ctx.exit(1)
    await tracker.delete_workout(matches[0].id)
    echo_success("Workout deleted")


@history.command()
@click.argument("workout_id")
@click.pass_context
@async_command
async def favorite(ctx, workout_id: str):
    """Toggle the favorite mark on a saved workout (a prefix is enough)."""
    tracker = await load_tracker()
    matches = [w for w in tracker.workouts if w.id.startswith(workout_id)]
    if len(matches) != 1:
        echo_error(f"{'No' if not matches else 'More than one'} workout matches '{workout_id}'")
        ctx.exit(1)
    await tracker.toggle_workout_favorite(matches[0].id)
    echo_success("Marked as favorite" if matches[0].is_favorite else "Favorite removed")
