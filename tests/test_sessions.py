"""Tests for measurement and workout session state machines."""

from datetime import datetime, timedelta

import pytest

from vital_log.models.exercises import ExerciseSet, ExerciseType
from vital_log.models.readings import BloodPressureReading, HealthMetric, MetricType
from vital_log.models.sessions import (
    ExerciseSession,
    MeasurementSession,
    MeasurementState,
    WorkoutSession,
    WorkoutState,
    auto_start,
)


class TestMeasurementSession:
    """Tests for MeasurementSession lifecycle."""

    def test_new_session_is_empty(self):
        """Test a new session is inactive with no data."""
        session = MeasurementSession()

        assert session.state == MeasurementState.EMPTY
        assert not session.is_active
        assert session.end_time is None

    def test_averages(self):
        """Test averages, with heart rate only over readings that carry one."""
        session = MeasurementSession()
        session.add_reading(BloodPressureReading(120, 80, 72))
        session.add_reading(BloodPressureReading(130, 85, 75))
        session.add_reading(BloodPressureReading(110, 70))

        assert session.average_systolic == 120
        assert session.average_diastolic == pytest.approx(78.333, abs=0.001)
        assert session.average_heart_rate == 73.5
        assert session.get_display() == "120/78 HR 74"

    def test_empty_averages(self):
        """Test averages of an empty session."""
        session = MeasurementSession()

        assert session.average_systolic == 0
        assert session.average_diastolic == 0
        assert session.average_heart_rate is None

    def test_auto_start_on_add(self):
        """Test adding to an inactive session starts it."""
        session = MeasurementSession()

        assert session.add_reading(BloodPressureReading(120, 80))
        assert session.is_active
        assert session.state == MeasurementState.ACTIVE

    def test_no_auto_start_rejects(self):
        """Test an inactive session rejects readings when auto-start is off."""
        session = MeasurementSession()

        assert not session.add_reading(BloodPressureReading(120, 80), auto_start=False)
        assert session.readings == []
        assert not session.is_active

    def test_auto_start_policy(self):
        """Test the auto-start policy function."""
        session = MeasurementSession()
        assert auto_start(session)
        assert session.is_active

        session.complete()
        assert not auto_start(session)

    def test_invalid_reading_rejected(self):
        """Test invalid readings leave the session unchanged."""
        session = MeasurementSession()

        assert not session.add_reading(BloodPressureReading(80, 90))
        assert session.readings == []
        assert not session.is_active

    def test_completed_rejects_mutations(self):
        """Test a completed session rejects every mutator."""
        session = MeasurementSession()
        session.add_reading(BloodPressureReading(120, 80))
        session.complete()

        assert not session.add_reading(BloodPressureReading(125, 82))
        assert not session.add_metric(HealthMetric(MetricType.WEIGHT, 180))
        assert not session.remove_reading(0)
        assert not session.start()
        assert len(session.readings) == 1

    def test_complete_twice_keeps_end_time(self):
        """Test a second complete keeps the first end time."""
        session = MeasurementSession()
        session.add_reading(BloodPressureReading(120, 80))
        session.complete()
        first_end = session.end_time

        session.complete()

        assert session.end_time == first_end
        assert session.state == MeasurementState.COMPLETED
        assert not session.is_active

    def test_stop_does_not_complete(self):
        """Test stop deactivates without stamping an end time."""
        session = MeasurementSession()
        session.add_reading(BloodPressureReading(120, 80))
        session.stop()

        assert session.state == MeasurementState.STOPPED
        assert session.end_time is None

    def test_restart_clock_policy(self):
        """Test start resets the clock only when asked to."""
        original = datetime.now() - timedelta(hours=1)
        session = MeasurementSession(start_time=original)

        session.start(reset_clock=False)
        assert session.start_time == original

        session.start(reset_clock=True)
        assert session.start_time > original

    def test_remove_out_of_range(self):
        """Test out-of-range and negative indexes return False."""
        session = MeasurementSession()
        session.add_reading(BloodPressureReading(120, 80))

        assert not session.remove_reading(1)
        assert not session.remove_reading(-1)
        assert not session.remove_metric(0)
        assert len(session.readings) == 1

        assert session.remove_reading(0)
        assert session.readings == []

    def test_can_add_reading(self):
        """Test the reading cap."""
        session = MeasurementSession()
        assert not session.can_add_reading()

        session.add_reading(BloodPressureReading(120, 80))
        assert session.can_add_reading()
        assert session.can_add_reading(max_readings=2)

        session.add_reading(BloodPressureReading(122, 81))
        assert not session.can_add_reading(max_readings=2)

    def test_metrics_by_type(self):
        """Test metric filtering and averaging."""
        session = MeasurementSession()
        session.add_metric(HealthMetric(MetricType.WEIGHT, 180))
        session.add_metric(HealthMetric(MetricType.WEIGHT, 182))
        session.add_metric(HealthMetric(MetricType.BLOOD_SUGAR, 95))

        assert len(session.metrics_for_type(MetricType.WEIGHT)) == 2
        assert session.average_for_type(MetricType.WEIGHT) == 181
        assert session.average_for_type(MetricType.BODY_FAT) is None

    def test_round_trip(self):
        """Test session serialization."""
        session = MeasurementSession()
        session.add_reading(BloodPressureReading(120, 80, 72))
        session.add_metric(HealthMetric(MetricType.WEIGHT, 180))
        session.complete()

        restored = MeasurementSession.from_dict(session.to_dict())

        assert restored.id == session.id
        assert restored.readings == session.readings
        assert restored.metrics == session.metrics
        assert restored.end_time == session.end_time
        assert restored.is_completed


class TestExerciseSession:
    """Tests for ExerciseSession derived values."""

    def test_bench_press_totals(self):
        """Test totals across sets."""
        session = ExerciseSession(ExerciseType.BENCH_PRESS)
        session.add_set(ExerciseSet(reps=10, weight=135))
        session.add_set(ExerciseSet(reps=6, weight=145))

        assert session.total_reps == 16
        assert session.average_weight == 140
        assert session.max_weight == 145
        assert session.total_weight == 280

    def test_no_weights(self):
        """Test weight statistics with no weighted sets."""
        session = ExerciseSession(ExerciseType.WEIGHTED_PLANK)
        session.add_set(ExerciseSet(time=60))

        assert session.average_weight is None
        assert session.max_weight is None
        assert session.total_time == 60

    def test_invalid_set_rejected(self):
        """Test an empty set is not added."""
        session = ExerciseSession(ExerciseType.SQUAT)
        assert not session.add_set(ExerciseSet())
        assert session.sets == []

    def test_complete_keeps_first_end_time(self):
        """Test completing twice does not move the end time."""
        session = ExerciseSession(ExerciseType.SQUAT)
        session.complete()
        first = session.end_time

        session.complete()

        assert session.is_completed
        assert session.end_time == first

    def test_completed_rejects_set_changes(self):
        """Test a completed exercise keeps its sets."""
        session = ExerciseSession(ExerciseType.SQUAT)
        session.add_set(ExerciseSet(reps=5, weight=225))
        session.complete()

        assert not session.add_set(ExerciseSet(reps=5, weight=235))
        assert not session.remove_set(0)
        assert len(session.sets) == 1


class TestWorkoutSession:
    """Tests for WorkoutSession lifecycle."""

    def test_state_transitions(self):
        """Test not_started -> active <-> paused -> completed."""
        workout = WorkoutSession()
        assert workout.state == WorkoutState.NOT_STARTED

        assert workout.start()
        assert workout.state == WorkoutState.ACTIVE
        assert workout.pause()
        assert workout.state == WorkoutState.PAUSED
        assert workout.resume()
        assert workout.state == WorkoutState.ACTIVE
        assert workout.complete()
        assert workout.state == WorkoutState.COMPLETED
        assert workout.end_time is not None

    def test_invalid_transitions(self):
        """Test transitions from the wrong state return False."""
        workout = WorkoutSession()

        assert not workout.pause()
        assert not workout.resume()

        workout.start()
        assert not workout.start()
        assert not workout.resume()

    def test_start_resumes_paused(self):
        """Test start continues a paused workout without resetting its clock."""
        workout = WorkoutSession()
        workout.start()
        started = workout.start_time
        workout.pause()

        assert workout.start()
        assert workout.state == WorkoutState.ACTIVE
        assert workout.start_time == started

    def test_completed_is_terminal(self):
        """Test every mutator returns False once completed."""
        workout = WorkoutSession()
        workout.add_exercise_session(ExerciseType.SQUAT)
        workout.start()
        workout.add_set(0, ExerciseSet(reps=5, weight=225))
        workout.complete()

        assert not workout.complete()
        assert not workout.start()
        assert not workout.pause()
        assert not workout.resume()
        assert not workout.add_exercise_session(ExerciseType.LUNGES)
        assert not workout.add_set(0, ExerciseSet(reps=5, weight=225))
        assert not workout.remove_set(0, 0)
        assert not workout.remove_exercise_session(0)
        assert not workout.complete_exercise(0)
        assert workout.total_sets == 1

    def test_completed_workout_locks_exercises(self):
        """Test exercises of a completed workout cannot be edited directly."""
        workout = WorkoutSession()
        workout.add_exercise_session(ExerciseType.BENCH_PRESS)
        workout.start()
        workout.add_set(0, ExerciseSet(reps=5, weight=185))
        workout.complete()

        exercise = workout.exercise_sessions[0]
        assert exercise.is_completed
        assert exercise.end_time == workout.end_time
        assert not exercise.add_set(ExerciseSet(reps=5, weight=100))
        assert not exercise.remove_set(0)
        assert workout.total_sets == 1

    def test_loaded_completed_workout_locks_exercises(self):
        """Test a stored completed workout with open exercises comes back closed."""
        workout = WorkoutSession()
        workout.add_exercise_session(ExerciseType.SQUAT)
        workout.start()
        workout.add_set(0, ExerciseSet(reps=5, weight=225))
        workout.complete()
        data = workout.to_dict()
        data["exercise_sessions"][0]["is_completed"] = False
        data["exercise_sessions"][0]["end_time"] = None

        restored = WorkoutSession.from_dict(data)

        exercise = restored.exercise_sessions[0]
        assert exercise.is_completed
        assert exercise.end_time == restored.end_time
        assert not exercise.add_set(ExerciseSet(reps=5, weight=100))
        assert restored.total_sets == 1

    def test_exercises_added_before_start(self):
        """Test templates can be loaded before the workout starts."""
        workout = WorkoutSession()

        assert workout.add_exercise_session(ExerciseType.BENCH_PRESS)
        assert workout.total_exercises == 1

    def test_add_set_requires_active(self):
        """Test sets are only logged while active."""
        workout = WorkoutSession()
        workout.add_exercise_session(ExerciseType.BENCH_PRESS)

        assert not workout.add_set(0, ExerciseSet(reps=10, weight=135))

        workout.start()
        assert workout.add_set(0, ExerciseSet(reps=10, weight=135))

        workout.pause()
        assert not workout.add_set(0, ExerciseSet(reps=10, weight=135))
        assert workout.total_sets == 1

    def test_add_set_bad_index_or_invalid(self):
        """Test index and validity checks on add_set."""
        workout = WorkoutSession()
        workout.add_exercise_session(ExerciseType.BENCH_PRESS)
        workout.start()

        assert not workout.add_set(1, ExerciseSet(reps=10))
        assert not workout.add_set(-1, ExerciseSet(reps=10))
        assert not workout.add_set(0, ExerciseSet())
        assert workout.total_sets == 0

    def test_totals(self):
        """Test workout totals across exercises."""
        workout = WorkoutSession()
        workout.add_exercise_session(ExerciseType.BENCH_PRESS)
        workout.add_exercise_session(ExerciseType.SQUAT)
        workout.start()
        workout.add_set(0, ExerciseSet(reps=10, weight=135))
        workout.add_set(0, ExerciseSet(reps=6, weight=145))
        workout.add_set(1, ExerciseSet(reps=5, weight=225))

        assert workout.total_exercises == 2
        assert workout.total_sets == 3
        assert workout.total_reps == 21

    def test_remove_and_complete_exercise(self):
        """Test exercise-level mutators."""
        workout = WorkoutSession()
        workout.add_exercise_session(ExerciseType.BENCH_PRESS)
        workout.add_exercise_session(ExerciseType.SQUAT)
        workout.start()
        workout.add_set(0, ExerciseSet(reps=10, weight=135))

        assert workout.remove_set(0, 0)
        assert not workout.remove_set(0, 0)
        assert workout.complete_exercise(0)
        assert workout.exercise_sessions[0].is_completed
        assert not workout.add_set(0, ExerciseSet(reps=8, weight=135))
        assert workout.remove_exercise_session(1)
        assert workout.total_exercises == 1

    def test_round_trip(self):
        """Test workout serialization."""
        workout = WorkoutSession()
        workout.add_exercise_session(ExerciseType.DEADLIFTS)
        workout.start()
        workout.add_set(0, ExerciseSet(reps=5, weight=315))
        workout.pause()

        restored = WorkoutSession.from_dict(workout.to_dict())

        assert restored.state == WorkoutState.PAUSED
        assert restored.exercise_sessions[0].exercise_type == ExerciseType.DEADLIFTS
        assert restored.exercise_sessions[0].sets[0].weight == 315
