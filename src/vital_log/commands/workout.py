"""Workout session commands."""

import click
import questionary
from questionary import Style

from ..models.exercises import ExerciseCategory, ExerciseType, exercises_in_category
from ..models.sessions import WorkoutState
from ..models.templates import PRE_BUILT_WORKOUTS, get_template
from ..services.tracker import HealthTracker
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

EXERCISE_CHOICES = [t.value for t in ExerciseType]

custom_style = Style(
    [
        ("qmark", "fg:#00897b bold"),
        ("question", "bold"),
        ("answer", "fg:#f44336 bold"),
        ("pointer", "fg:#00897b bold"),
        ("highlighted", "fg:#00897b bold"),
        ("selected", "fg:#cc5454"),
        ("instruction", ""),
        ("text", ""),
    ]
)


@click.group()
@click.pass_context
def workout(ctx):
    """Plan and log strength workouts."""
    ensure_initialized(ctx)


@workout.command()
@click.option("--category", type=click.Choice([c.value for c in ExerciseCategory]), default=None)
def exercises(category: str | None):
    """List available exercise types."""
    categories = [ExerciseCategory(category)] if category else list(ExerciseCategory)
    for cat in categories:
        click.echo()
        click.echo(click.style(cat.value.replace("_", " ").title(), bold=True))
        for exercise in exercises_in_category(cat):
            click.echo(f"  {exercise.value:<28} {exercise.display_name}")


@workout.command()
def templates():
    """List pre-built workout templates."""
    rows = [
        [t.slug, t.name, str(len(t.exercises)), f"{t.estimated_duration} min", t.difficulty.value]
        for t in PRE_BUILT_WORKOUTS
    ]
    click.echo()
    click.echo(format_table(["Slug", "Name", "Exercises", "Duration", "Level"], rows))


@workout.command()
@click.argument("name")
@click.pass_context
@async_command
async def load(ctx, name: str):
    """Load a template into the current workout."""
    template = get_template(name)
    if template is None:
        echo_error(f"No template named '{name}'. See 'vital-log workout templates'")
        ctx.exit(1)

    tracker = await load_tracker()
    if not await tracker.load_template(template):
        echo_error("The current workout already has sets logged. Finish or discard it first")
        ctx.exit(1)
    echo_success(f"Loaded {template.name} ({len(template.exercises)} exercises)")


@workout.command(name="add")
@click.argument("exercise_type", type=click.Choice(EXERCISE_CHOICES))
@click.pass_context
@async_command
async def add_exercise(ctx, exercise_type: str):
    """Add an exercise to the current workout."""
    tracker = await load_tracker()
    kind = ExerciseType(exercise_type)
    if not await tracker.add_exercise(kind):
        echo_error("Cannot add exercises to a completed workout")
        ctx.exit(1)
    echo_success(f"{kind.display_name} added as exercise {tracker.current_workout.total_exercises}")


async def _transition(ctx, action: str) -> None:
    tracker = await load_tracker()
    handlers = {
        "start": tracker.start_workout,
        "pause": tracker.pause_workout,
        "resume": tracker.resume_workout,
    }
    state = tracker.current_workout.state
    if not await handlers[action]():
        echo_error(f"Cannot {action} a workout that is {state.value.replace('_', ' ')}")
        ctx.exit(1)
    echo_success(f"Workout {tracker.current_workout.state.value}")


@workout.command()
@click.pass_context
@async_command
async def start(ctx):
    """Start or continue the current workout."""
    await _transition(ctx, "start")


@workout.command()
@click.pass_context
@async_command
async def pause(ctx):
    """Pause the current workout."""
    await _transition(ctx, "pause")


@workout.command()
@click.pass_context
@async_command
async def resume(ctx):
    """Resume a paused workout."""
    await _transition(ctx, "resume")


@workout.command(name="set")
@click.argument("exercise", type=int)
@click.option("--reps", "-r", type=int, default=None)
@click.option("--weight", "-w", type=float, default=None, help="Weight in lbs")
@click.option("--time", "-t", "seconds", type=float, default=None, help="Duration in seconds")
@click.pass_context
@async_command
async def log_set(ctx, exercise: int, reps: int | None, weight: float | None, seconds: float | None):
    """Log a set for an exercise (1-based position) of the active workout."""
    tracker = await load_tracker()
    if not await tracker.add_set(exercise - 1, reps=reps, weight=weight, time=seconds):
        echo_error(
            "Set rejected. The workout must be active, the exercise must exist, "
            "and at least one of reps, weight or time must be positive"
        )
        ctx.exit(1)
    session = tracker.current_workout.exercise_sessions[exercise - 1]
    echo_success(f"{session.exercise_type.display_name}: set {len(session.sets)} logged")


@workout.command(name="remove-set")
@click.argument("exercise", type=int)
@click.argument("set_number", type=int)
@click.pass_context
@async_command
async def remove_set(ctx, exercise: int, set_number: int):
    """Remove a set from an exercise (both 1-based)."""
    tracker = await load_tracker()
    if not await tracker.remove_set(exercise - 1, set_number - 1):
        echo_error(f"No set {set_number} on exercise {exercise}")
        ctx.exit(1)
    echo_success("Set removed")


@workout.command(name="remove")
@click.argument("exercise", type=int)
@click.pass_context
@async_command
async def remove_exercise(ctx, exercise: int):
    """Remove an exercise (1-based) from the current workout."""
    tracker = await load_tracker()
    if not await tracker.remove_exercise(exercise - 1):
        echo_error(f"No exercise at position {exercise}")
        ctx.exit(1)
    echo_success("Exercise removed")


@workout.command(name="done")
@click.argument("exercise", type=int)
@click.pass_context
@async_command
async def complete_exercise(ctx, exercise: int):
    """Mark an exercise (1-based) as finished."""
    tracker = await load_tracker()
    if not await tracker.complete_exercise(exercise - 1):
        echo_error(f"No exercise at position {exercise}")
        ctx.exit(1)
    echo_success("Exercise completed")


def _print_workout(tracker: HealthTracker) -> None:
    current = tracker.current_workout
    click.echo()
    click.echo(f"Workout {current.id[:8]} ({current.state.value.replace('_', ' ')})")
    if current.state != WorkoutState.NOT_STARTED:
        click.echo(f"Duration: {format_duration(current.duration.total_seconds())}")

    if not current.exercise_sessions:
        click.echo()
        echo_info("No exercises. Load a template or use 'vital-log workout add'")
        return

    for i, exercise in enumerate(current.exercise_sessions, start=1):
        marker = " (done)" if exercise.is_completed else ""
        click.echo()
        click.echo(f"{i}. {exercise.exercise_type.display_name}{marker}")
        for n, s in enumerate(exercise.sets, start=1):
            click.echo(f"   Set {n}: {s.get_display()}")

    click.echo()
    click.echo(current.get_display())


@workout.command()
@async_command
async def show():
    """Show the current workout."""
    tracker = await load_tracker()
    _print_workout(tracker)


@workout.command()
@async_command
async def log():
    """Log sets interactively for the active workout."""
    tracker = await load_tracker()
    current = tracker.current_workout

    if current.state == WorkoutState.NOT_STARTED:
        if await questionary.confirm("Start the workout now?", default=True, style=custom_style).ask_async():
            await tracker.start_workout()
    if tracker.current_workout.state != WorkoutState.ACTIVE:
        echo_error("The workout is not active")
        return

    while True:
        choices = [
            questionary.Choice(f"{e.exercise_type.display_name} ({len(e.sets)} sets)", i)
            for i, e in enumerate(tracker.current_workout.exercise_sessions)
        ]
        choices.append(questionary.Choice("Add another exercise", "add"))
        choices.append(questionary.Choice("Done", "done"))

        selection = await questionary.select(
            "Which exercise?", choices=choices, style=custom_style
        ).ask_async()

        if selection in (None, "done"):
            break
        if selection == "add":
            category = await questionary.select(
                "Category?",
                choices=[questionary.Choice(c.value.replace("_", " ").title(), c) for c in ExerciseCategory],
                style=custom_style,
            ).ask_async()
            if category is None:
                break
            kind = await questionary.select(
                "Exercise?",
                choices=[questionary.Choice(t.display_name, t) for t in exercises_in_category(category)],
                style=custom_style,
            ).ask_async()
            if kind is None:
                break
            await tracker.add_exercise(kind)
            continue

        exercise = tracker.current_workout.exercise_sessions[selection]
        info = exercise.exercise_type.info
        reps = weight = seconds = None
        if info.supports_reps:
            reps = _to_number(await questionary.text("Reps:", style=custom_style).ask_async(), int)
        if info.supports_weight:
            weight = _to_number(await questionary.text(f"Weight ({info.unit}):", style=custom_style).ask_async(), float)
        if info.supports_time:
            seconds = _to_number(await questionary.text("Time (seconds):", style=custom_style).ask_async(), float)

        if await tracker.add_set(selection, reps=reps, weight=weight, time=seconds):
            echo_success(f"Set {len(exercise.sets)} logged")
        else:
            echo_error("Set rejected; enter at least one positive value")

    _print_workout(tracker)


def _to_number(text: str | None, kind):
    if text is None or not text.strip():
        return None
    try:
        return kind(text.strip())
    except ValueError:
        return None


@workout.command()
@async_command
async def finish():
    """Complete the current workout and save it to history."""
    tracker = await load_tracker()
    saved = await tracker.finish_workout()
    if saved is None:
        echo_info("Nothing to save; the workout has no exercises")
        return
    echo_success(f"Workout saved: {saved.get_display()}")


@workout.command()
@click.confirmation_option(prompt="Discard the current workout?")
@async_command
async def discard():
    """Discard the current workout."""
    tracker = await load_tracker()
    await tracker.discard_workout()
    echo_success("Workout discarded")
