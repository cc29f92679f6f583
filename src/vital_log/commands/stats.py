"""Statistics commands."""

import click

from ..models.analytics import TimeRange
from ..models.exercises import ExerciseType
from ..models.readings import METRIC_TYPES, MetricType
from ..services.aggregation import round_half_up
from .base import async_command, echo_info, ensure_initialized, format_table, load_tracker


@click.group()
@click.pass_context
def stats(ctx):
    """Rolling averages, trends and lifetime totals."""
    ensure_initialized(ctx)


@stats.command()
@async_command
async def averages():
    """Show 3/7/14/21/30-day blood pressure averages."""
    tracker = await load_tracker()
    results = tracker.rolling_averages()
    if not results:
        echo_info("No readings in the last 30 days")
        return

    rows = []
    for avg in results:
        hr = str(round_half_up(avg.avg_heart_rate)) if avg.avg_heart_rate is not None else "-"
        rows.append([
            avg.period_label,
            f"{round_half_up(avg.avg_systolic)}/{round_half_up(avg.avg_diastolic)}",
            hr,
            str(avg.reading_count),
            avg.category.label,
        ])
    click.echo()
    click.echo(format_table(["Period", "Average", "HR", "Readings", "Category"], rows))


@stats.command()
@click.argument("exercise_type", type=click.Choice([t.value for t in ExerciseType]))
@click.option(
    "--range",
    "time_range",
    type=click.Choice([r.value for r in TimeRange]),
    default=TimeRange.MONTH.value,
    show_default=True,
)
@async_command
async def trend(exercise_type: str, time_range: str):
    """Show weight progression for an exercise."""
    tracker = await load_tracker()
    kind = ExerciseType(exercise_type)
    points = tracker.fitness_trends(kind, TimeRange(time_range))
    analysis = tracker.trend_analysis(kind, TimeRange(time_range))

    if not points:
        echo_info(f"No {kind.display_name} sessions in this range")
        return

    rows = [
        [p.date.strftime("%Y-%m-%d"), str(p.sets), str(p.total_reps), f"{p.average_weight:g}", f"{p.max_weight:g}"]
        for p in points
    ]
    click.echo()
    click.echo(format_table(["Date", "Sets", "Reps", "Avg lbs", "Max lbs"], rows))
    click.echo()
    click.echo(f"Trend: {analysis.direction.value}")
    click.echo(f"Change: {analysis.get_delta_display()} ({analysis.get_improvement_display()})")
    click.echo(f"Average weight: {analysis.avg_weight:.1f} lbs, best: {analysis.max_weight:g} lbs")


@stats.command()
@click.argument("exercise_type", type=click.Choice([t.value for t in ExerciseType]))
@async_command
async def exercise(exercise_type: str):
    """Show lifetime totals for an exercise."""
    tracker = await load_tracker()
    result = tracker.exercise_stats(ExerciseType(exercise_type))
    if not result.total_sessions:
        echo_info("No sessions recorded for this exercise")
        return

    click.echo()
    click.echo(result.exercise_type.display_name)
    click.echo(f"  Sessions: {result.total_sessions}")
    click.echo(f"  Sets: {result.total_sets}")
    click.echo(f"  Reps: {result.total_reps}")
    if result.total_time:
        click.echo(f"  Time: {result.total_time:g}s")
    click.echo(f"  Best weight: {result.max_weight:g} lbs")
    click.echo(f"  Average best weight: {result.average_weight:.1f} lbs")


@stats.command()
@click.argument("metric_type", type=click.Choice([t.value for t in MetricType]))
@click.option("--days", type=int, default=30, show_default=True, help="Averaging window")
@click.option("--trend-days", type=int, default=7, show_default=True, help="Trend window")
@async_command
async def metric(metric_type: str, days: int, trend_days: int):
    """Show the average and trend of a health metric."""
    tracker = await load_tracker()
    kind = MetricType(metric_type)
    info = METRIC_TYPES[kind]

    average = tracker.metric_average(kind, days)
    if average is None:
        echo_info(f"No {info.label.lower()} recorded in the last {days} days")
        return

    click.echo()
    click.echo(f"{info.label}: {average:.1f} {info.unit} ({days}-day average)")
    click.echo(f"Trend ({trend_days} days): {tracker.metric_trend(kind, trend_days).value}")
