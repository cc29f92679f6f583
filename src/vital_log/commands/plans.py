"""Custom workout commands."""

import click

from ..models.exercises import ExerciseType
from ..models.templates import CustomWorkout, TemplateExercise
from .base import (
    async_command,
    echo_error,
    echo_info,
    echo_success,
    ensure_initialized,
    format_table,
    load_tracker,
)


def _parse_exercise(value: str) -> TemplateExercise:
    """Parse ``TYPE:SETS``, ``TYPE:SETSxREPS`` or ``TYPE:SETSxSECONDSs``."""
    kind, _, plan = value.partition(":")
    try:
        exercise_type = ExerciseType(kind.strip())
    except ValueError:
        raise click.BadParameter(f"'{kind}' is not a known exercise type") from None

    sets_text, _, amount = (plan or "3").lower().partition("x")
    try:
        sets = int(sets_text)
        if amount.endswith("s"):
            return TemplateExercise(exercise_type, sets=sets, time=int(amount[:-1]))
        return TemplateExercise(exercise_type, sets=sets, reps=int(amount) if amount else None)
    except ValueError:
        raise click.BadParameter(f"'{value}' should look like bench_press:4x8 or weighted_plank:3x45s") from None


@click.group()
@click.pass_context
def plans(ctx):
    """Save, favorite and load custom workouts."""
    ensure_initialized(ctx)


@plans.command(name="list")
@async_command
async def list_plans():
    """List saved custom workouts, favorites first."""
    tracker = await load_tracker()
    if not tracker.custom_workouts:
        echo_info("No custom workouts. Create one with 'vital-log plans create'")
        return

    ordered = sorted(tracker.custom_workouts, key=lambda w: not w.is_favorite)
    rows = [
        [
            w.id[:8],
            w.display_name,
            str(w.total_exercises),
            str(w.total_sets),
            f"{w.estimated_duration} min",
            str(w.use_count),
        ]
        for w in ordered
    ]
    click.echo()
    click.echo(format_table(["ID", "Name", "Exercises", "Sets", "Duration", "Used"], rows))


@plans.command()
@click.argument("name")
@click.option(
    "--exercise",
    "-e",
    "exercises",
    multiple=True,
    required=True,
    help="TYPE:SETSxREPS, e.g. bench_press:4x8 (repeatable)",
)
@click.option("--description", "-d", default=None)
@click.pass_context
@async_command
async def create(ctx, name: str, exercises: tuple[str, ...], description: str | None):
    """Save a new custom workout."""
    workout = CustomWorkout(
        name=name,
        description=description,
        exercises=[_parse_exercise(e) for e in exercises],
    )
    tracker = await load_tracker()
    if tracker.get_custom_workout(name) is not None:
        echo_error(f"A custom workout named '{name}' already exists")
        ctx.exit(1)
    await tracker.save_custom_workout(workout)
    echo_success(f"Saved {name} ({workout.total_exercises} exercises, ~{workout.estimated_duration} min)")


@plans.command()
@click.argument("name")
@click.pass_context
@async_command
async def show(ctx, name: str):
    """Show the exercises of a custom workout."""
    tracker = await load_tracker()
    workout = tracker.get_custom_workout(name)
    if workout is None:
        echo_error(f"No custom workout named '{name}'")
        ctx.exit(1)

    click.echo()
    click.echo(click.style(workout.display_name, bold=True))
    if workout.description:
        click.echo(workout.description)
    for i, planned in enumerate(workout.exercises, start=1):
        click.echo(f"  {i}. {planned.exercise_type.display_name}: {planned.get_display()}")
    if workout.last_used:
        click.echo()
        click.echo(f"Last used {workout.last_used.strftime('%Y-%m-%d')} ({workout.use_count} times)")


@plans.command()
@click.argument("name")
@click.pass_context
@async_command
async def favorite(ctx, name: str):
    """Toggle the favorite mark on a custom workout."""
    tracker = await load_tracker()
    workout = tracker.get_custom_workout(name)
    if workout is None:
        echo_error(f"No custom workout named '{name}'")
        ctx.exit(1)
    await tracker.toggle_custom_workout_favorite(workout.id)
    echo_success("Marked as favorite" if workout.is_favorite else "Favorite removed")


@plans.command()
@click.argument("name")
@click.pass_context
@async_command
async def load(ctx, name: str):
    """Load a custom workout into the current workout."""
    tracker = await load_tracker()
    workout = tracker.get_custom_workout(name)
    if workout is None:
        echo_error(f"No custom workout named '{name}'")
        ctx.exit(1)
    if not await tracker.load_custom_workout(workout.id):
        echo_error("The current workout already has sets logged. Finish or discard it first")
        ctx.exit(1)
    echo_success(f"Loaded {workout.name} ({workout.total_exercises} exercises)")


@plans.command()
@click.argument("name")
@click.confirmation_option(prompt="Delete this custom workout?")
@click.pass_context
@async_command
async def delete(ctx, name: str):
    """Delete a custom workout."""
    tracker = await load_tracker()
    workout = tracker.get_custom_workout(name)
    if workout is None:
        echo_error(f"No custom workout named '{name}'")
        ctx.exit(1)
    await tracker.delete_custom_workout(workout.id)
    echo_success(f"Deleted {workout.name}")
