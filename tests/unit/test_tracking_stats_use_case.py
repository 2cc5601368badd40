"""
Unit tests for TrackingStatsUseCase and its helpers.

Tests for:
- Totals, weekly/monthly counts and average difficulty
- Current and longest streaks over distinct workout days
- Weekly and daily frequency grouping
- Metric trends
- Per-exercise performance history
- Scoring a session against earlier sessions
"""

from datetime import date, datetime, timedelta, timezone

import pytest

from application.use_cases import TrackingStatsUseCase
from application.use_cases.tracking_stats import (
    current_streak,
    longest_streak,
    trend_direction,
    week_start,
)
from domain.exceptions import NotFoundError
from domain.models import (
    ExerciseMetricType,
    PerceivedDifficulty,
    UserMetric,
    UserMetricType,
    WorkoutSession,
)
from tests.fakes import (
    FakeUserMetricRepository,
    FakeWorkoutSessionRepository,
    create_completed_session,
)

pytestmark = pytest.mark.unit

NOW = datetime(2024, 3, 10, 12, 0, tzinfo=timezone.utc)

WORKOUT_DAYS = [
    date(2024, 3, 10),
    date(2024, 3, 9),
    date(2024, 3, 9),
    date(2024, 3, 8),
    date(2024, 3, 5),
    date(2024, 3, 4),
    date(2024, 2, 28),
    date(2024, 2, 1),
]


def at_eight(day: date) -> datetime:
    return datetime(day.year, day.month, day.day, 8, 0, tzinfo=timezone.utc)


def completed_with_exercise(
    started_at: datetime, sets, exercise_id: str = "bench-press"
) -> WorkoutSession:
    """A completed session with one weight exercise and the given (reps, weight) sets."""
    session = WorkoutSession.create("user-1", "workout-1", now=started_at)
    session = session.add_exercise(exercise_id, "Bench Press", ExerciseMetricType.WEIGHT, now=started_at)
    exercise_id_in_session = session.last_exercise.id
    for reps, weight in sets:
        session = session.add_set(exercise_id_in_session, repetitions=reps, weight=weight, now=started_at)
    return session.complete(PerceivedDifficulty.MODERATE, now=started_at + timedelta(minutes=40))


# =============================================================================
# Fixtures
# =============================================================================


@pytest.fixture
def session_repo() -> FakeWorkoutSessionRepository:
    repo = FakeWorkoutSessionRepository()
    repo.seed([create_completed_session("user-1", at_eight(day), minutes=30) for day in WORKOUT_DAYS])
    # Still running; never counted
    repo.seed([WorkoutSession.create("user-1", "workout-1", now=NOW)])
    return repo


@pytest.fixture
def metric_repo() -> FakeUserMetricRepository:
    repo = FakeUserMetricRepository()
    repo.seed(
        [
            UserMetric.create("user-1", UserMetricType.WEIGHT, 80, recorded_at=NOW - timedelta(days=14)),
            UserMetric.create("user-1", UserMetricType.WEIGHT, 78, recorded_at=NOW - timedelta(days=1)),
            UserMetric.create("user-1", UserMetricType.PERSONAL_RECORD, 140, recorded_at=NOW),
        ]
    )
    return repo


@pytest.fixture
def use_case(session_repo, metric_repo) -> TrackingStatsUseCase:
    return TrackingStatsUseCase(session_repo=session_repo, metric_repo=metric_repo)


# =============================================================================
# Helpers
# =============================================================================


class TestHelpers:

    def test_week_start_is_monday(self):
        assert week_start(date(2024, 3, 10)) == date(2024, 3, 4)
        assert week_start(date(2024, 3, 4)) == date(2024, 3, 4)

    def test_trend_direction(self):
        assert trend_direction(None) == "stable"
        assert trend_direction(2.0) == "stable"
        assert trend_direction(2.5) == "up"
        assert trend_direction(-2.5) == "down"

    def test_streak_counts_distinct_days(self, session_repo):
        sessions = [s for s in session_repo.get_all() if s.end_time is not None]

        assert current_streak(sessions, date(2024, 3, 10)) == 3
        assert longest_streak(sessions) == 3

    def test_streak_alive_until_yesterday(self, session_repo):
        sessions = [s for s in session_repo.get_all() if s.end_time is not None]

        assert current_streak(sessions, date(2024, 3, 11)) == 3
        assert current_streak(sessions, date(2024, 3, 12)) == 0

    def test_streaks_without_sessions(self):
        assert current_streak([], date(2024, 3, 10)) == 0
        assert longest_streak([]) == 0


# =============================================================================
# User Stats
# =============================================================================


class TestGetUserStats:

    def test_totals(self, use_case):
        stats = use_case.get_user_stats("user-1", now=NOW)

        assert stats.total_workouts == 8
        assert stats.total_workout_seconds == 8 * 1800
        assert stats.average_workout_seconds == 1800
        assert stats.total_calories == 8 * 175
        assert stats.workouts_this_week == 6
        assert stats.workouts_this_month == 7
        assert stats.average_perceived_difficulty == 3.0
        assert stats.last_workout_at == at_eight(date(2024, 3, 10)) + timedelta(minutes=30)

    def test_streaks(self, use_case):
        stats = use_case.get_user_stats("user-1", now=NOW)

        assert stats.current_streak == 3
        assert stats.longest_streak == 3

    def test_weekly_frequency(self, use_case):
        stats = use_case.get_user_stats("user-1", now=NOW)

        assert [(f.date, f.workout_count) for f in stats.weekly_frequency] == [
            (date(2024, 1, 29), 1),
            (date(2024, 2, 26), 1),
            (date(2024, 3, 4), 6),
        ]
        assert stats.weekly_frequency[-1].total_duration_seconds == 6 * 1800

    def test_metric_trends(self, use_case):
        trends = {t.metric_type: t for t in use_case.get_user_stats("user-1", now=NOW).metric_trends}

        weight = trends[UserMetricType.WEIGHT]
        assert weight.current_value == 78
        assert weight.previous_value == 80
        assert weight.percentage_change == pytest.approx(-2.5)
        assert weight.trend == "down"

        record = trends[UserMetricType.PERSONAL_RECORD]
        assert record.previous_value is None
        assert record.trend == "stable"

    def test_new_user(self):
        use_case = TrackingStatsUseCase(FakeWorkoutSessionRepository(), FakeUserMetricRepository())
        stats = use_case.get_user_stats("nobody", now=NOW)

        assert stats.total_workouts == 0
        assert stats.current_streak == 0
        assert stats.last_workout_at is None
        assert stats.weekly_frequency == []
        assert stats.metric_trends == []


class TestWorkoutFrequency:

    def test_daily_counts(self, use_case):
        frequency = use_case.get_workout_frequency("user-1", date(2024, 3, 8), date(2024, 3, 9))

        assert [(f.date, f.workout_count) for f in frequency] == [
            (date(2024, 3, 8), 1),
            (date(2024, 3, 9), 2),
        ]

    def test_planned_session_created_before_window_counted(self, metric_repo):
        session_repo = FakeWorkoutSessionRepository()
        planned = WorkoutSession.create(
            "user-1",
            "workout-1",
            planned_date=at_eight(date(2024, 3, 5)),
            now=at_eight(date(2024, 3, 1)),
        )
        done = planned.start(now=at_eight(date(2024, 3, 5))).complete(
            PerceivedDifficulty.MODERATE, now=at_eight(date(2024, 3, 5)) + timedelta(minutes=45)
        )
        session_repo.seed([done])
        use_case = TrackingStatsUseCase(session_repo=session_repo, metric_repo=metric_repo)

        frequency = use_case.get_workout_frequency("user-1", date(2024, 3, 4), date(2024, 3, 6))

        assert [(f.date, f.workout_count) for f in frequency] == [(date(2024, 3, 5), 1)]
        assert frequency[0].total_duration_seconds == 45 * 60

    def test_sessions_outside_window_or_not_completed_ignored(self, use_case):
        frequency = use_case.get_workout_frequency("user-1", date(2024, 3, 10), date(2024, 3, 10))

        # The in-progress session started on the same day is not counted
        assert [(f.date, f.workout_count) for f in frequency] == [(date(2024, 3, 10), 1)]


# =============================================================================
# Exercise Performance
# =============================================================================


class TestExercisePerformance:

    def test_history(self):
        repo = FakeWorkoutSessionRepository()
        older = completed_with_exercise(at_eight(date(2024, 3, 1)), [(10, 50), (8, 60)])
        newer = completed_with_exercise(at_eight(date(2024, 3, 5)), [(10, 55)])
        repo.seed([older, newer])
        use_case = TrackingStatsUseCase(repo, FakeUserMetricRepository())

        performance = use_case.get_exercise_performance("user-1", "bench-press")

        assert performance.exercise_name == "Bench Press"
        assert performance.best_value == 60.0
        assert performance.average_value == pytest.approx(55.0)
        assert performance.total_sessions == 2
        assert performance.last_performed_at == at_eight(date(2024, 3, 5))
        assert [h.value for h in performance.history] == [55.0, 60.0]

    def test_never_performed(self, use_case):
        assert use_case.get_exercise_performance("user-1", "bench-press") is None


# =============================================================================
# History Scoring
# =============================================================================


class TestScoreAgainstHistory:

    def test_session_excluded_from_its_own_history(self):
        repo = FakeWorkoutSessionRepository()
        earlier = completed_with_exercise(at_eight(date(2024, 3, 1)), [(10, 50)])
        current = completed_with_exercise(at_eight(date(2024, 3, 5)), [(10, 60)])
        repo.seed([earlier, current])
        use_case = TrackingStatsUseCase(repo, FakeUserMetricRepository())

        result = use_case.score_against_history(current.id)

        assert result.session_id == current.id
        assert result.score == 100.0
        assert result.description == "Personal Record"
        assert result.exercise_scores == {current.last_exercise.id: 100.0}

    def test_first_session_scores_as_first_attempt(self):
        repo = FakeWorkoutSessionRepository()
        current = completed_with_exercise(at_eight(date(2024, 3, 5)), [(10, 60)])
        repo.seed([current])
        use_case = TrackingStatsUseCase(repo, FakeUserMetricRepository())

        result = use_case.score_against_history(current.id)

        assert result.score == 80.0
        assert result.description == "Great"

    def test_unknown_session(self, use_case):
        with pytest.raises(NotFoundError):
            use_case.score_against_history("nope")
