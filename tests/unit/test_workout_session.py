"""
Unit tests for the WorkoutSession aggregate.

Tests for:
- Creation and the status state machine
- Duration and calorie calculation on completion
- Exercise and set management through the aggregate root
- Performance score and summary
- Invariants enforced when rehydrating stored sessions
"""

from datetime import date, datetime, timedelta, timezone

import pytest
from pydantic import ValidationError

from domain.exceptions import TrackingDomainError
from domain.models import (
    ExerciseMetricType,
    PerceivedDifficulty,
    SessionExercise,
    WorkoutSession,
    WorkoutSessionStatus,
)
from domain.models.workout_session import describe_performance, estimate_session_calories

pytestmark = pytest.mark.unit

T0 = datetime(2024, 3, 4, 10, 0, tzinfo=timezone.utc)


# =============================================================================
# Fixtures
# =============================================================================


@pytest.fixture
def session() -> WorkoutSession:
    """An in-progress session started at T0."""
    return WorkoutSession.create(user_id="user-1", workout_id="workout-1", now=T0)


@pytest.fixture
def planned_session() -> WorkoutSession:
    return WorkoutSession.create(
        user_id="user-1",
        workout_id="workout-1",
        planned_date=datetime(2024, 3, 6, 7, 0, tzinfo=timezone.utc),
        now=T0,
    )


def with_exercises(session: WorkoutSession, *names: str) -> WorkoutSession:
    for name in names:
        session = session.add_exercise(
            name.lower(), name, ExerciseMetricType.WEIGHT, repetitions=10, weight=50, now=T0
        )
    return session


# =============================================================================
# Creation
# =============================================================================


class TestCreate:
    """Tests for WorkoutSession.create()."""

    def test_unplanned_session_starts_immediately(self, session):
        assert session.status == WorkoutSessionStatus.IN_PROGRESS
        assert session.start_time == T0
        assert session.end_time is None
        assert session.is_active

    def test_planned_session_waits(self, planned_session):
        assert planned_session.status == WorkoutSessionStatus.PLANNED
        assert planned_session.start_time is None

    def test_empty_user_rejected(self):
        with pytest.raises(TrackingDomainError, match="User ID cannot be empty"):
            WorkoutSession.create(user_id=" ", workout_id="workout-1")

    def test_empty_workout_rejected(self):
        with pytest.raises(TrackingDomainError, match="Workout ID cannot be empty"):
            WorkoutSession.create(user_id="user-1", workout_id="")


# =============================================================================
# State Machine
# =============================================================================


class TestTransitions:
    """Tests for start, complete, abandon and cancel."""

    def test_start_planned(self, planned_session):
        started = planned_session.start(now=T0)
        assert started.status == WorkoutSessionStatus.IN_PROGRESS
        assert started.start_time == T0

    def test_complete_empty_session_after_thirty_minutes(self, session):
        completed = session.complete(PerceivedDifficulty.MODERATE, now=T0 + timedelta(minutes=30))

        assert completed.status == WorkoutSessionStatus.COMPLETED
        assert completed.end_time > completed.start_time
        assert completed.total_duration_seconds == 1800
        assert completed.calories_estimated == 175
        assert completed.perceived_difficulty == PerceivedDifficulty.MODERATE
        assert completed.calculate_performance_score() == 0

    def test_complete_rounds_duration(self, session):
        completed = session.complete(
            PerceivedDifficulty.EASY, now=T0 + timedelta(seconds=90, milliseconds=600)
        )
        assert completed.total_duration_seconds == 91

    def test_complete_uses_supplied_body_weight(self, session):
        completed = session.complete(
            PerceivedDifficulty.HARD, now=T0 + timedelta(hours=1), body_weight_kg=90
        )
        assert completed.calories_estimated == 450

    def test_complete_trims_notes(self, session):
        completed = session.complete(PerceivedDifficulty.HARD, "  felt strong ", now=T0 + timedelta(minutes=5))
        assert completed.notes == "felt strong"

    def test_abandon_records_end_time(self, session):
        abandoned = session.abandon("tweaked my back", now=T0 + timedelta(minutes=10))

        assert abandoned.status == WorkoutSessionStatus.ABANDONED
        assert abandoned.end_time == T0 + timedelta(minutes=10)
        assert abandoned.total_duration_seconds == 600
        assert abandoned.notes == "tweaked my back"

    def test_cancel_planned(self, planned_session):
        cancelled = planned_session.cancel("travelling")
        assert cancelled.status == WorkoutSessionStatus.CANCELLED
        assert cancelled.end_time is None
        assert cancelled.status.is_terminal

    @pytest.mark.parametrize(
        "action",
        [
            lambda s: s.start(),
            lambda s: s.cancel(),
        ],
    )
    def test_in_progress_cannot_start_or_cancel(self, session, action):
        with pytest.raises(TrackingDomainError, match="with status in_progress"):
            action(session)
        assert session.status == WorkoutSessionStatus.IN_PROGRESS

    @pytest.mark.parametrize(
        "action",
        [
            lambda s: s.complete(PerceivedDifficulty.MODERATE),
            lambda s: s.abandon(),
        ],
    )
    def test_planned_cannot_complete_or_abandon(self, planned_session, action):
        with pytest.raises(TrackingDomainError, match="with status planned"):
            action(planned_session)
        assert planned_session.status == WorkoutSessionStatus.PLANNED
        assert planned_session.end_time is None

    def test_terminal_states_reject_everything(self, session):
        completed = session.complete(PerceivedDifficulty.MODERATE, now=T0 + timedelta(minutes=30))

        for action in (
            lambda s: s.start(),
            lambda s: s.complete(PerceivedDifficulty.MODERATE),
            lambda s: s.abandon(),
            lambda s: s.cancel(),
        ):
            with pytest.raises(TrackingDomainError, match="Cannot .* session with status completed"):
                action(completed)
        assert completed.status == WorkoutSessionStatus.COMPLETED

    def test_update_planned_date_only_when_planned(self, session, planned_session):
        new_date = datetime(2024, 3, 8, tzinfo=timezone.utc)
        assert planned_session.update_planned_date(new_date).planned_date == new_date
        with pytest.raises(TrackingDomainError, match="planned sessions"):
            session.update_planned_date(new_date)

    def test_set_estimated_calories_rejects_negative(self, session):
        assert session.set_estimated_calories(300).calories_estimated == 300
        with pytest.raises(TrackingDomainError, match="Calories cannot be negative"):
            session.set_estimated_calories(-1)


# =============================================================================
# Exercises and Sets
# =============================================================================


class TestExerciseManagement:
    """Tests for exercise and set edits through the aggregate."""

    def test_add_exercise_with_initial_set(self, session):
        updated = session.add_exercise(
            "bench-press", "Bench Press", ExerciseMetricType.WEIGHT, repetitions=10, weight=50
        )
        exercise = updated.last_exercise

        assert updated.exercise_count == 1
        assert exercise.order == 1
        assert exercise.workout_session_id == session.id
        assert exercise.set_count == 1
        assert session.exercise_count == 0

    def test_add_exercise_without_measurements_has_no_sets(self, session):
        updated = session.add_exercise("plank", "Plank", ExerciseMetricType.TIME)
        assert updated.last_exercise.sets == []

    def test_add_exercise_requires_in_progress(self, planned_session):
        with pytest.raises(TrackingDomainError, match="Can only add exercises to sessions in progress"):
            planned_session.add_exercise("squat", "Squat", ExerciseMetricType.WEIGHT)
        assert planned_session.exercises == []

    def test_remove_exercise_keeps_orders_contiguous(self, session):
        session = with_exercises(session, "Squat", "Bench", "Row", "Press")
        second = session.exercises[1]

        updated = session.remove_exercise(second.id)

        assert [e.order for e in updated.exercises] == [1, 2, 3]
        assert [e.exercise_name for e in updated.exercises] == ["Squat", "Row", "Press"]

    def test_remove_unknown_exercise(self, session):
        with pytest.raises(TrackingDomainError, match="Exercise missing not found in session"):
            session.remove_exercise("missing")

    def test_set_lifecycle(self, session):
        session = with_exercises(session, "Squat")
        exercise_id = session.last_exercise.id

        session = session.add_set(exercise_id, repetitions=8, weight=60, rest_time_seconds=90)
        session = session.update_set(exercise_id, 2, weight=62.5)
        session = session.remove_set(exercise_id, 1)

        sets = session.get_exercise(exercise_id).sets
        assert len(sets) == 1
        assert sets[0].set_number == 1
        assert sets[0].weight == 62.5

    def test_set_edits_require_in_progress(self, session):
        session = with_exercises(session, "Squat")
        exercise_id = session.last_exercise.id
        completed = session.complete(PerceivedDifficulty.MODERATE, now=T0 + timedelta(minutes=30))

        with pytest.raises(TrackingDomainError, match="sessions in progress"):
            completed.add_set(exercise_id, repetitions=5)

    def test_set_edit_on_unknown_exercise(self, session):
        with pytest.raises(TrackingDomainError, match="not found in session"):
            session.add_set("missing", repetitions=5)

    def test_failed_set_edit_leaves_session_unchanged(self, session):
        session = with_exercises(session, "Squat")
        exercise_id = session.last_exercise.id

        with pytest.raises(TrackingDomainError):
            session.update_set(exercise_id, 9, repetitions=5)
        assert session.get_exercise(exercise_id).set_count == 1

    def test_set_exercise_performance_score(self, session):
        session = with_exercises(session, "Squat")
        exercise_id = session.last_exercise.id

        scored = session.set_exercise_performance_score(exercise_id, 72)
        assert scored.get_exercise(exercise_id).performance_score == 72

    def test_queries(self, session):
        session = with_exercises(session, "Squat")
        session = session.add_exercise("running", "Running", ExerciseMetricType.DISTANCE, distance=5000)

        assert session.has_exercise("squat")
        assert not session.has_exercise("deadlift")
        assert [e.exercise_id for e in session.get_exercises_by_type(ExerciseMetricType.DISTANCE)] == [
            "running"
        ]


# =============================================================================
# Performance
# =============================================================================


class TestPerformance:
    """Tests for calculate_performance_score() and the summary."""

    def test_score_with_bonuses(self, session, monkeypatch):
        session = session.add_exercise("squat", "Squat", ExerciseMetricType.WEIGHT)
        session = session.add_exercise("bench-press", "Bench Press", ExerciseMetricType.WEIGHT)
        completed = session.complete(PerceivedDifficulty.MODERATE, now=T0 + timedelta(minutes=45))

        scores = {"squat": 80.0, "bench-press": 82.0}
        monkeypatch.setattr(
            SessionExercise,
            "get_overall_performance_score",
            lambda self: scores[self.exercise_id],
        )

        # 81 average + 2 consistency + 3 duration
        assert completed.calculate_performance_score() == pytest.approx(86.0)

    def test_score_with_completion_bonus(self, session):
        session = with_exercises(session, "Squat")
        completed = session.complete(PerceivedDifficulty.MODERATE, now=T0 + timedelta(minutes=45))

        # One 10x50 set scores 80, +5 consistency within the exercise,
        # then +5 every exercise has sets, +3 duration
        assert completed.calculate_performance_score() == pytest.approx(93.0)

    def test_score_capped_at_100(self, session, monkeypatch):
        session = with_exercises(session, "Squat", "Bench")
        completed = session.complete(PerceivedDifficulty.MODERATE, now=T0 + timedelta(minutes=45))
        monkeypatch.setattr(SessionExercise, "get_overall_performance_score", lambda self: 99.0)

        assert completed.calculate_performance_score() == 100.0

    def test_score_zero_unless_completed(self, session):
        assert with_exercises(session, "Squat").calculate_performance_score() == 0.0

    def test_summary(self, session):
        session = with_exercises(session, "Squat")
        completed = session.complete(PerceivedDifficulty.MODERATE, now=T0 + timedelta(minutes=45))

        assert completed.get_performance_summary() == "Excellent - 93% (45min)"

    def test_summary_not_completed(self, session):
        assert session.get_performance_summary() == "Workout not completed"

    @pytest.mark.parametrize(
        "score,label",
        [(100, "Personal Record"), (85, "Excellent"), (70, "Good"), (40, "On Track"), (10, "Keep Going")],
    )
    def test_describe_performance(self, score, label):
        assert describe_performance(score) == label

    def test_estimate_session_calories(self):
        assert estimate_session_calories(1800) == 175
        assert estimate_session_calories(None) == 0
        assert estimate_session_calories(3600, body_weight_kg=80, met=6) == 480


# =============================================================================
# Planned Date Queries
# =============================================================================


class TestPlannedDateQueries:
    """Tests for is_overdue and is_upcoming."""

    def test_overdue_and_upcoming(self, planned_session):
        assert planned_session.is_overdue(today=date(2024, 3, 7))
        assert not planned_session.is_upcoming(today=date(2024, 3, 7))
        assert planned_session.is_upcoming(today=date(2024, 3, 6))

    def test_in_progress_is_never_overdue(self, session):
        assert not session.is_overdue(today=date(2030, 1, 1))

    def test_falls_within_uses_planned_date_before_start(self, planned_session):
        day_start = datetime(2024, 3, 6, tzinfo=timezone.utc)

        assert planned_session.falls_within(day_start, day_start + timedelta(days=1))
        assert planned_session.anchor_time == planned_session.planned_date

    def test_falls_within_uses_start_time(self, session):
        assert session.falls_within(T0 - timedelta(hours=1), T0 + timedelta(hours=1))
        assert not session.falls_within(T0 + timedelta(hours=1), T0 + timedelta(hours=2))
        assert session.anchor_time == T0


# =============================================================================
# Immutability
# =============================================================================


class TestImmutability:
    """Sessions and their exercises are frozen snapshots."""

    def test_fields_cannot_be_reassigned(self, session):
        with pytest.raises(ValidationError):
            session.status = WorkoutSessionStatus.COMPLETED
        assert session.status == WorkoutSessionStatus.IN_PROGRESS

    def test_exercises_cannot_be_modified_in_place(self, session):
        session = with_exercises(session, "Squat")

        with pytest.raises(ValidationError):
            session.exercises[0].order = 0
        assert session.exercises[0].order == 1

    def test_new_version_does_not_share_exercise_list(self, session):
        session = with_exercises(session, "Squat", "Bench")
        done = session.complete(PerceivedDifficulty.MODERATE, now=T0 + timedelta(minutes=30))

        assert done.exercises is not session.exercises
        session.exercises.pop()
        assert done.exercise_count == 2

    def test_new_exercise_version_does_not_share_set_list(self, session):
        session = session.add_exercise(
            "squat", "Squat", ExerciseMetricType.WEIGHT, repetitions=5, weight=100
        )
        exercise = session.exercises[0]

        scored = exercise.set_performance_score(80)

        assert scored.sets is not exercise.sets
        assert scored.sets == exercise.sets


# =============================================================================
# Rehydration
# =============================================================================


class TestRehydration:
    """Stored sessions are validated when loaded."""

    def test_json_round_trip(self, session):
        session = with_exercises(session, "Squat", "Bench")
        completed = session.complete(PerceivedDifficulty.HARD, now=T0 + timedelta(minutes=40))

        restored = WorkoutSession.model_validate_json(completed.model_dump_json())

        assert restored.model_dump() == completed.model_dump()
        assert restored.exercises[1].order == 2

    def test_completed_without_end_time_rejected(self):
        with pytest.raises(ValidationError, match="requires an end time"):
            WorkoutSession(
                user_id="user-1",
                workout_id="workout-1",
                status=WorkoutSessionStatus.COMPLETED,
                start_time=T0,
            )

    def test_planned_with_end_time_rejected(self):
        with pytest.raises(ValidationError, match="cannot have an end time"):
            WorkoutSession(
                user_id="user-1",
                workout_id="workout-1",
                status=WorkoutSessionStatus.PLANNED,
                end_time=T0,
            )

    def test_in_progress_without_start_rejected(self):
        with pytest.raises(ValidationError, match="requires a start time"):
            WorkoutSession(
                user_id="user-1",
                workout_id="workout-1",
                status=WorkoutSessionStatus.IN_PROGRESS,
            )

    def test_gap_in_exercise_order_rejected(self, session):
        session = with_exercises(session, "Squat", "Bench")
        data = session.model_dump()
        data["exercises"][1]["order"] = 3

        with pytest.raises(ValidationError, match="contiguous"):
            WorkoutSession.model_validate(data)

    def test_foreign_exercise_rejected(self, session):
        session = with_exercises(session, "Squat")
        data = session.model_dump()
        data["id"] = "another-session"

        with pytest.raises(ValidationError, match="does not belong"):
            WorkoutSession.model_validate(data)
