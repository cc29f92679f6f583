"""Tests for the HealthTracker service."""

from datetime import timedelta

import pytest

from vital_log.config import SessionConfig
from vital_log.models.analytics import TimeRange
from vital_log.models.exercises import ExerciseType
from vital_log.models.readings import MetricType
from vital_log.models.sessions import MeasurementState, WorkoutState
from vital_log.models.records import OneRepMax
from vital_log.models.templates import CustomWorkout, TemplateExercise, get_template
from vital_log.services.tracker import HealthTracker

from conftest import NOW, make_session, make_workout


async def reload(tracker):
    """Build a second tracker over the same store and load it."""
    fresh = HealthTracker(tracker.store, tracker.config)
    await fresh.load()
    return fresh


class TestMeasurementSession:
    """Tests for the current measurement session."""

    @pytest.mark.asyncio
    async def test_add_reading_persists(self, tracker):
        """Test an accepted reading is saved as the in-progress session."""
        assert await tracker.add_reading(120, 80, 72)

        fresh = await reload(tracker)
        assert fresh.current_session.readings[0].systolic == 120
        assert fresh.current_session.is_active

    @pytest.mark.asyncio
    async def test_invalid_reading_not_saved(self, tracker):
        """Test a rejected reading leaves the store alone."""
        assert not await tracker.add_reading(80, 120)

        assert await tracker.store.load_current_session() is None

    @pytest.mark.asyncio
    async def test_reading_cap(self, store, events):
        """Test the per-session reading cap."""
        tracker = HealthTracker(store, SessionConfig(max_readings_per_session=2), events)

        assert await tracker.add_reading(120, 80)
        assert tracker.can_add_reading()
        assert await tracker.add_reading(122, 81)
        assert not tracker.can_add_reading()
        assert not await tracker.add_reading(124, 82)
        assert len(tracker.current_session.readings) == 2

    @pytest.mark.asyncio
    async def test_auto_start_disabled(self, store, events):
        """Test readings are rejected until an explicit start."""
        tracker = HealthTracker(store, SessionConfig(auto_start_on_add=False), events)

        assert not await tracker.add_reading(120, 80)
        assert not await tracker.add_metric(MetricType.WEIGHT, 180)

        assert await tracker.start_session()
        assert await tracker.add_reading(120, 80)

    @pytest.mark.asyncio
    async def test_restart_keeps_clock(self, store, events):
        """Test restart leaves start_time alone when configured to."""
        tracker = HealthTracker(store, SessionConfig(restart_resets_clock=False), events)
        earlier = NOW - timedelta(hours=2)
        tracker.current_session.start_time = earlier

        await tracker.start_session()

        assert tracker.current_session.start_time == earlier

    @pytest.mark.asyncio
    async def test_stop_session(self, tracker):
        """Test stop keeps the readings but deactivates."""
        await tracker.add_reading(120, 80)
        await tracker.stop_session()

        assert tracker.current_session.state == MeasurementState.STOPPED
        fresh = await reload(tracker)
        assert not fresh.current_session.is_active

    @pytest.mark.asyncio
    async def test_add_and_remove_metric(self, tracker):
        """Test metrics are added and removed by index."""
        assert await tracker.add_metric(MetricType.WEIGHT, 180.5)
        assert not await tracker.add_metric(MetricType.BODY_FAT, 80)

        assert not await tracker.remove_metric(1)
        assert await tracker.remove_metric(0)
        assert tracker.current_session.metrics == []

    @pytest.mark.asyncio
    async def test_remove_reading(self, tracker):
        """Test readings are removed by index."""
        await tracker.add_reading(120, 80)
        await tracker.add_reading(130, 85)

        assert await tracker.remove_reading(0)
        assert tracker.current_session.readings[0].systolic == 130
        assert not await tracker.remove_reading(5)

    @pytest.mark.asyncio
    async def test_complete_session(self, tracker):
        """Test completing moves the session to the front of history."""
        await tracker.add_reading(120, 80, 72)

        completed = await tracker.complete_session()

        assert completed.is_completed
        assert tracker.sessions[0] is completed
        assert tracker.current_session.state == MeasurementState.EMPTY
        assert await tracker.store.load_current_session() is None

        fresh = await reload(tracker)
        assert [s.id for s in fresh.sessions] == [completed.id]

    @pytest.mark.asyncio
    async def test_complete_empty_session(self, tracker):
        """Test an empty session is not saved."""
        await tracker.start_session()

        assert await tracker.complete_session() is None
        assert tracker.sessions == []

    @pytest.mark.asyncio
    async def test_history_newest_first(self, tracker):
        """Test later sessions are inserted before earlier ones."""
        await tracker.add_reading(120, 80)
        first = await tracker.complete_session()
        await tracker.add_reading(130, 85)
        second = await tracker.complete_session()

        assert [s.id for s in tracker.sessions] == [second.id, first.id]

    @pytest.mark.asyncio
    async def test_discard_session(self, tracker):
        """Test discard clears the in-progress session."""
        await tracker.add_reading(120, 80)

        await tracker.discard_session()

        assert tracker.current_session.readings == []
        assert await tracker.store.load_current_session() is None


class TestHistory:
    """Tests for measurement history deletion."""

    @pytest.fixture
    def history(self):
        return [
            make_session(NOW, [(120, 80, 72)]),
            make_session(NOW - timedelta(hours=3), [(125, 82, 70)]),
            make_session(NOW - timedelta(days=1), [(130, 85, 75)]),
        ]

    @pytest.mark.asyncio
    async def test_get_and_delete_by_id(self, tracker, history):
        """Test lookup and deletion by id."""
        tracker.sessions = list(history)

        assert tracker.get_session(history[1].id) is history[1]
        assert await tracker.delete_session(history[1].id)
        assert not await tracker.delete_session(history[1].id)
        assert tracker.get_session(history[1].id) is None

        fresh = await reload(tracker)
        assert [s.id for s in fresh.sessions] == [history[0].id, history[2].id]

    @pytest.mark.asyncio
    async def test_delete_by_index(self, tracker, history):
        """Test deletion by position."""
        tracker.sessions = list(history)

        assert await tracker.delete_session_at(0)
        assert not await tracker.delete_session_at(2)
        assert not await tracker.delete_session_at(-1)
        assert len(tracker.sessions) == 2

    @pytest.mark.asyncio
    async def test_delete_by_date(self, tracker, history):
        """Test deleting every session on a calendar day."""
        tracker.sessions = list(history)

        assert len(tracker.sessions_on(NOW.date())) == 2
        assert await tracker.delete_sessions_on(NOW.date()) == 2
        assert await tracker.delete_sessions_on(NOW.date()) == 0
        assert [s.id for s in tracker.sessions] == [history[2].id]

    @pytest.mark.asyncio
    async def test_delete_all(self, tracker, history, events):
        """Test clearing the history."""
        tracker.sessions = list(history)

        assert await tracker.delete_all_sessions() == 3
        assert tracker.sessions == []
        assert events.history[-1].event_type == "history.deleted"
        assert events.history[-1].data["count"] == 3


class TestWorkout:
    """Tests for the current workout."""

    @pytest.mark.asyncio
    async def test_log_and_finish(self, tracker):
        """Test a full workout is saved into history."""
        assert await tracker.add_exercise(ExerciseType.BENCH_PRESS)
        assert await tracker.start_workout()
        assert await tracker.add_set(0, reps=10, weight=135)
        assert await tracker.add_set(0, reps=6, weight=145)

        workout = await tracker.finish_workout()

        assert workout.state == WorkoutState.COMPLETED
        assert tracker.workouts[0] is workout
        assert tracker.current_workout.state == WorkoutState.NOT_STARTED

        fresh = await reload(tracker)
        assert fresh.workouts[0].exercise_sessions[0].total_reps == 16
        assert fresh.current_workout.exercise_sessions == []

    @pytest.mark.asyncio
    async def test_finish_without_exercises(self, tracker):
        """Test an empty workout is not saved."""
        await tracker.start_workout()

        assert await tracker.finish_workout() is None
        assert tracker.workouts == []

    @pytest.mark.asyncio
    async def test_in_progress_workout_persists(self, tracker):
        """Test a paused workout survives a reload."""
        await tracker.add_exercise(ExerciseType.SQUAT)
        await tracker.start_workout()
        await tracker.add_set(0, reps=5, weight=225)
        await tracker.pause_workout()

        fresh = await reload(tracker)

        assert fresh.current_workout.state == WorkoutState.PAUSED
        assert fresh.current_workout.total_sets == 1
        assert await fresh.resume_workout()

    @pytest.mark.asyncio
    async def test_rejected_changes(self, tracker):
        """Test invalid workout changes return False."""
        await tracker.add_exercise(ExerciseType.SQUAT)

        assert not await tracker.add_set(0, reps=5)
        assert not await tracker.pause_workout()
        await tracker.start_workout()
        assert not await tracker.add_set(3, reps=5)
        assert not await tracker.remove_set(0, 0)
        assert not await tracker.remove_exercise(2)

    @pytest.mark.asyncio
    async def test_exercise_mutations(self, tracker):
        """Test removing sets and exercises and completing an exercise."""
        await tracker.add_exercise(ExerciseType.SQUAT)
        await tracker.add_exercise(ExerciseType.LUNGES)
        await tracker.start_workout()
        await tracker.add_set(0, reps=5, weight=225)

        assert await tracker.remove_set(0, 0)
        assert await tracker.complete_exercise(0)
        assert not await tracker.add_set(0, reps=5, weight=225)
        assert await tracker.remove_exercise(1)
        assert tracker.current_workout.total_exercises == 1

    @pytest.mark.asyncio
    async def test_load_template(self, tracker):
        """Test a template seeds the current workout."""
        template = get_template("Leg Day")

        assert await tracker.load_template(template)

        exercises = [e.exercise_type for e in tracker.current_workout.exercise_sessions]
        assert exercises == [t.exercise_type for t in template.exercises]
        assert tracker.current_workout.state == WorkoutState.NOT_STARTED

    @pytest.mark.asyncio
    async def test_load_template_rejected_with_sets(self, tracker):
        """Test a template cannot replace a workout with logged sets."""
        await tracker.add_exercise(ExerciseType.BENCH_PRESS)
        await tracker.start_workout()
        await tracker.add_set(0, reps=10, weight=135)

        assert not await tracker.load_template(get_template("push-day"))
        assert tracker.current_workout.total_sets == 1

    @pytest.mark.asyncio
    async def test_discard_and_delete(self, tracker):
        """Test discarding the current workout and deleting history."""
        old = make_workout(NOW, ExerciseType.DEADLIFTS, [(5, 315)])
        tracker.workouts = [old]
        await tracker.add_exercise(ExerciseType.SQUAT)

        await tracker.discard_workout()
        assert tracker.current_workout.exercise_sessions == []

        assert await tracker.delete_workout(old.id)
        assert not await tracker.delete_workout(old.id)
        assert tracker.workouts == []


class TestFavoritesAndPlans:
    """Tests for workout favorites and custom workouts."""

    def make_plan(self, name="Upper A"):
        return CustomWorkout(
            name=name,
            exercises=[
                TemplateExercise(ExerciseType.BENCH_PRESS, sets=4, reps=8),
                TemplateExercise(ExerciseType.PULL_UPS, sets=3, reps=8),
            ],
        )

    @pytest.mark.asyncio
    async def test_toggle_workout_favorite(self, tracker):
        """Test the favorite flag flips and is saved."""
        saved = make_workout(NOW, ExerciseType.SQUAT, [(5, 225)])
        tracker.workouts = [saved]

        assert await tracker.toggle_workout_favorite(saved.id)
        assert (await reload(tracker)).workouts[0].is_favorite

        assert await tracker.toggle_workout_favorite(saved.id)
        assert not (await reload(tracker)).workouts[0].is_favorite
        assert not await tracker.toggle_workout_favorite("missing")

    @pytest.mark.asyncio
    async def test_save_and_find_plan(self, tracker):
        """Test saving a custom workout and finding it by name or id."""
        plan = self.make_plan()

        assert await tracker.save_custom_workout(plan)
        assert not await tracker.save_custom_workout(plan)
        assert not await tracker.save_custom_workout(CustomWorkout(name="Empty"))

        fresh = await reload(tracker)
        assert fresh.get_custom_workout("upper a").id == plan.id
        assert fresh.get_custom_workout(plan.id).name == "Upper A"
        assert fresh.get_custom_workout("nope") is None

    @pytest.mark.asyncio
    async def test_update_favorite_delete_plan(self, tracker, events):
        """Test plan edits are persisted and announced."""
        plan = self.make_plan()
        await tracker.save_custom_workout(plan)

        plan.description = "Edited"
        assert await tracker.update_custom_workout(plan)
        assert await tracker.toggle_custom_workout_favorite(plan.id)
        fresh = await reload(tracker)
        assert fresh.custom_workouts[0].description == "Edited"
        assert fresh.custom_workouts[0].is_favorite

        assert await tracker.delete_custom_workout(plan.id)
        assert not await tracker.delete_custom_workout(plan.id)
        assert (await reload(tracker)).custom_workouts == []
        assert events.history[-1].event_type == "custom_workout.deleted"

    @pytest.mark.asyncio
    async def test_load_plan(self, tracker):
        """Test loading a plan seeds the workout and counts the use."""
        plan = self.make_plan()
        await tracker.save_custom_workout(plan)

        assert await tracker.load_custom_workout(plan.id)

        exercises = [e.exercise_type for e in tracker.current_workout.exercise_sessions]
        assert exercises == [ExerciseType.BENCH_PRESS, ExerciseType.PULL_UPS]
        fresh = await reload(tracker)
        assert fresh.custom_workouts[0].use_count == 1
        assert fresh.custom_workouts[0].last_used is not None

    @pytest.mark.asyncio
    async def test_load_plan_rejected_with_sets(self, tracker):
        """Test a plan is not loaded over logged sets and its use is not counted."""
        plan = self.make_plan()
        await tracker.save_custom_workout(plan)
        await tracker.add_exercise(ExerciseType.SQUAT)
        await tracker.start_workout()
        await tracker.add_set(0, reps=5, weight=225)

        assert not await tracker.load_custom_workout(plan.id)
        assert not await tracker.load_custom_workout("missing")
        assert plan.use_count == 0


class TestOneRepMax:
    """Tests for one-rep-max records."""

    @pytest.mark.asyncio
    async def test_heavier_record_replaces_lighter(self, tracker):
        """Test a heavier lift drops lighter records of the same lift."""
        light = OneRepMax("Bench Press", 200, NOW - timedelta(days=30))
        squat = OneRepMax("Back Squat", 300, NOW - timedelta(days=20))
        heavy = OneRepMax("Bench Press", 225, NOW)

        for record in (light, squat, heavy):
            assert await tracker.add_one_rep_max(record)

        fresh = await reload(tracker)
        assert [r.id for r in fresh.one_rep_maxes] == [heavy.id, squat.id]
        assert fresh.one_rep_max_for("Bench Press").weight == 225
        assert fresh.heaviest_one_rep_max().id == squat.id

    @pytest.mark.asyncio
    async def test_lighter_record_kept_alongside(self, tracker):
        """Test a lighter lift does not remove the heavier record."""
        heavy = OneRepMax("Deadlift", 405, NOW - timedelta(days=10))
        light = OneRepMax("Deadlift", 385, NOW)
        await tracker.add_one_rep_max(heavy)
        await tracker.add_one_rep_max(light)

        assert [r.weight for r in tracker.one_rep_max_history("Deadlift")] == [385, 405]

    @pytest.mark.asyncio
    async def test_rejected_and_deleted(self, tracker):
        """Test invalid records are rejected and deletion by id."""
        assert not await tracker.add_one_rep_max(OneRepMax("Bench Press", 0))
        assert not await tracker.add_one_rep_max(OneRepMax(" ", 100))

        record = OneRepMax("Overhead Press", 135, NOW)
        await tracker.add_one_rep_max(record)
        updated = OneRepMax("Overhead Press", 140, NOW, id=record.id)
        assert await tracker.update_one_rep_max(updated)
        assert tracker.one_rep_max_for("Overhead Press").weight == 140

        assert await tracker.delete_one_rep_max(record.id)
        assert not await tracker.delete_one_rep_max(record.id)
        assert (await reload(tracker)).one_rep_maxes == []


class TestProfileAndStats:
    """Tests for the profile and statistics passthroughs."""

    @pytest.mark.asyncio
    async def test_set_profile(self, tracker, sample_profile):
        """Test the profile is touched and saved."""
        await tracker.set_profile(sample_profile)

        assert sample_profile.last_updated > NOW
        fresh = await reload(tracker)
        assert fresh.profile.display_name == "Test User"

    def test_statistics(self, tracker):
        """Test statistics are computed from the loaded history."""
        tracker.sessions = [make_session(NOW - timedelta(days=1), [(120, 78, 70)])]
        tracker.workouts = [
            make_workout(NOW - timedelta(days=10), ExerciseType.BENCH_PRESS, [(10, 100)]),
            make_workout(NOW - timedelta(days=2), ExerciseType.BENCH_PRESS, [(10, 110)]),
        ]

        assert [a.window_days for a in tracker.rolling_averages(NOW)] == [3, 7, 14, 21, 30]
        assert len(tracker.fitness_trends(ExerciseType.BENCH_PRESS, TimeRange.MONTH, NOW)) == 2
        assert tracker.trend_analysis(ExerciseType.BENCH_PRESS, TimeRange.MONTH, NOW).weight_delta == 10
        assert tracker.exercise_stats(ExerciseType.BENCH_PRESS).total_sessions == 2
        assert tracker.metric_average(MetricType.WEIGHT, now=NOW) is None


class TestEvents:
    """Tests for tracker event publication."""

    @pytest.mark.asyncio
    async def test_session_events(self, tracker, events):
        """Test session changes are announced in order."""
        received = []
        events.subscribe(received.append, "session.*")

        await tracker.add_reading(120, 80, 72)
        await tracker.add_metric(MetricType.WEIGHT, 180)
        await tracker.complete_session()

        assert [e.event_type for e in received] == [
            "session.reading_added",
            "session.metric_added",
            "session.completed",
        ]
        assert received[0].data["reading"]["systolic"] == 120

    @pytest.mark.asyncio
    async def test_rejected_changes_publish_nothing(self, tracker, events):
        """Test rejected changes are silent."""
        await tracker.add_reading(80, 120)
        await tracker.pause_workout()
        await tracker.remove_reading(0)

        assert events.history == []

    @pytest.mark.asyncio
    async def test_workout_events(self, tracker, events):
        """Test workout changes are announced."""
        received = []
        events.subscribe(received.append, "workout.*")

        await tracker.load_template(get_template("core strength"))
        await tracker.start_workout()
        await tracker.add_set(0, time=45)

        assert [e.event_type for e in received] == [
            "workout.template_loaded",
            "workout.started",
            "workout.set_added",
        ]
        assert received[0].data["template"] == "Core Strength"
