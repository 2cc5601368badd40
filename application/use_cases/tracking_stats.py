"""
TrackingStats Use Case.

Derives statistics from a user's completed sessions and metrics:
totals, streaks, weekly frequency, metric trends, per-exercise history and
history-based session scoring.
"""

import logging
from collections import defaultdict
from dataclasses import dataclass, field
from datetime import date, datetime, timedelta
from typing import Dict, List, Optional

from application.ports import UserMetricRepository, WorkoutSessionRepository
from domain.exceptions import NotFoundError
from domain.models import (
    ExerciseMetricType,
    SessionExercise,
    SessionSet,
    UserMetricType,
    WorkoutSession,
    WorkoutSessionStatus,
)
from domain.models.common import utc_now
from domain.services.performance_analysis import PerformanceAnalysisService

logger = logging.getLogger(__name__)

WEEKLY_FREQUENCY_WEEKS = 8
TREND_THRESHOLD_PERCENT = 2.0
TREND_METRIC_TYPES = (UserMetricType.WEIGHT, UserMetricType.PERSONAL_RECORD)
PERFORMANCE_HISTORY_SIZE = 10
SCORING_HISTORY_SIZE = 20


@dataclass
class WorkoutFrequency:
    """Completed workouts grouped by day or week start."""
    date: date
    workout_count: int
    total_duration_seconds: int


@dataclass
class MetricTrend:
    """Direction of the latest change in a metric ("up", "down" or "stable")."""
    metric_type: UserMetricType
    current_value: float
    previous_value: Optional[float]
    percentage_change: Optional[float]
    trend: str
    recorded_at: datetime


@dataclass
class PerformanceHistoryEntry:
    performed_at: datetime
    value: float


@dataclass
class ExercisePerformance:
    """A user's history with one catalog exercise."""
    exercise_id: str
    exercise_name: str
    metric_type: ExerciseMetricType
    best_value: Optional[float]
    average_value: Optional[float]
    total_sessions: int
    last_performed_at: datetime
    history: List[PerformanceHistoryEntry] = field(default_factory=list)


@dataclass
class TrackingStats:
    """Summary statistics over a user's completed sessions."""
    total_workouts: int = 0
    total_workout_seconds: int = 0
    average_workout_seconds: int = 0
    total_calories: int = 0
    workouts_this_week: int = 0
    workouts_this_month: int = 0
    average_perceived_difficulty: Optional[float] = None
    last_workout_at: Optional[datetime] = None
    current_streak: int = 0
    longest_streak: int = 0
    weekly_frequency: List[WorkoutFrequency] = field(default_factory=list)
    metric_trends: List[MetricTrend] = field(default_factory=list)


@dataclass
class SessionScore:
    """History-based score for a session."""
    session_id: str
    score: float
    description: str
    exercise_scores: Dict[str, float] = field(default_factory=dict)


# =============================================================================
# Pure helpers
# =============================================================================


def _workout_day(session: WorkoutSession) -> date:
    return (session.end_time or session.created_at).date()


def week_start(day: date) -> date:
    """Monday of the week containing `day`."""
    return day - timedelta(days=day.weekday())


def current_streak(sessions: List[WorkoutSession], today: date) -> int:
    """
    Consecutive days with a workout, ending today or yesterday.

    Several workouts on one day count as a single day.
    """
    days = sorted({_workout_day(s) for s in sessions}, reverse=True)
    if not days or days[0] < today - timedelta(days=1):
        return 0

    streak = 1
    for previous, current in zip(days, days[1:]):
        if previous - current != timedelta(days=1):
            break
        streak += 1
    return streak


def longest_streak(sessions: List[WorkoutSession]) -> int:
    days = sorted({_workout_day(s) for s in sessions})
    if not days:
        return 0

    longest = run = 1
    for previous, current in zip(days, days[1:]):
        if current - previous == timedelta(days=1):
            run += 1
        else:
            longest = max(longest, run)
            run = 1
    return max(longest, run)


def weekly_frequency(sessions: List[WorkoutSession], today: date) -> List[WorkoutFrequency]:
    """Workouts per week (Monday start) over the last eight weeks."""
    cutoff = today - timedelta(weeks=WEEKLY_FREQUENCY_WEEKS)
    return _group_by(
        [s for s in sessions if s.end_time is not None and s.end_time.date() >= cutoff],
        lambda s: week_start(_workout_day(s)),
    )


def _group_by(sessions: List[WorkoutSession], key) -> List[WorkoutFrequency]:
    groups: Dict[date, List[WorkoutSession]] = defaultdict(list)
    for session in sessions:
        groups[key(session)].append(session)
    return [
        WorkoutFrequency(
            date=day,
            workout_count=len(grouped),
            total_duration_seconds=sum(s.total_duration_seconds or 0 for s in grouped),
        )
        for day, grouped in sorted(groups.items())
    ]


def trend_direction(percentage_change: Optional[float]) -> str:
    if percentage_change is None:
        return "stable"
    if percentage_change > TREND_THRESHOLD_PERCENT:
        return "up"
    if percentage_change < -TREND_THRESHOLD_PERCENT:
        return "down"
    return "stable"


def _set_value(s: SessionSet, metric_type: ExerciseMetricType) -> Optional[float]:
    values = {
        ExerciseMetricType.WEIGHT: s.weight,
        ExerciseMetricType.REPETITIONS: s.repetitions,
        ExerciseMetricType.TIME: s.duration_seconds,
        ExerciseMetricType.DISTANCE: s.distance,
    }
    value = values.get(metric_type)
    return float(value) if value is not None else None


def _best_set_value(exercise: SessionExercise, metric_type: ExerciseMetricType) -> Optional[float]:
    values = [v for v in (_set_value(s, metric_type) for s in exercise.sets) if v is not None]
    return max(values) if values else None


class TrackingStatsUseCase:
    """
    Use case for user statistics and history-based scoring.

    Usage:
        >>> use_case = TrackingStatsUseCase(session_repo=session_repo, metric_repo=metric_repo)
        >>> stats = use_case.get_user_stats("user-123")
        >>> stats.current_streak
        3
    """

    def __init__(
        self,
        session_repo: WorkoutSessionRepository,
        metric_repo: UserMetricRepository,
        analysis: Optional[PerformanceAnalysisService] = None,
    ) -> None:
        self._session_repo = session_repo
        self._metric_repo = metric_repo
        self._analysis = analysis or PerformanceAnalysisService()

    def get_user_stats(self, user_id: str, *, now: Optional[datetime] = None) -> TrackingStats:
        """Aggregate statistics over all completed sessions of a user."""
        logger.info("Generating tracking statistics for user %s", user_id)
        now = now or utc_now()
        today = now.date()

        sessions = self._session_repo.get_user_sessions(
            user_id, status=WorkoutSessionStatus.COMPLETED, limit=None
        )
        stats = TrackingStats(
            current_streak=current_streak(sessions, today),
            longest_streak=longest_streak(sessions),
            weekly_frequency=weekly_frequency(sessions, today),
            metric_trends=self._metric_trends(user_id),
        )
        if not sessions:
            return stats

        stats.total_workouts = len(sessions)
        stats.total_workout_seconds = sum(s.total_duration_seconds or 0 for s in sessions)
        stats.average_workout_seconds = stats.total_workout_seconds // stats.total_workouts
        stats.total_calories = sum(s.calories_estimated or 0 for s in sessions)

        week_ago = now - timedelta(days=7)
        month_ago = now - timedelta(days=30)
        stats.workouts_this_week = sum(
            1 for s in sessions if s.end_time is not None and s.end_time >= week_ago
        )
        stats.workouts_this_month = sum(
            1 for s in sessions if s.end_time is not None and s.end_time >= month_ago
        )

        difficulties = [int(s.perceived_difficulty) for s in sessions if s.perceived_difficulty]
        if difficulties:
            stats.average_perceived_difficulty = sum(difficulties) / len(difficulties)

        ended = [s.end_time for s in sessions if s.end_time is not None]
        stats.last_workout_at = max(ended) if ended else None
        return stats

    def get_exercise_performance(
        self, user_id: str, exercise_id: str
    ) -> Optional[ExercisePerformance]:
        """
        A user's history with one catalog exercise across all sessions.

        Values are read per set according to the metric type (weight, reps,
        duration or distance). Returns None if the exercise was never performed.
        """
        sessions = self._session_repo.get_user_sessions(user_id, limit=None)
        performances = sorted(
            (e for s in sessions for e in s.exercises if e.exercise_id == exercise_id),
            key=lambda e: e.performed_at,
            reverse=True,
        )
        if not performances:
            return None

        latest = performances[0]
        metric_type = latest.metric_type
        values = [
            v
            for e in performances
            for v in (_set_value(s, metric_type) for s in e.sets)
            if v is not None
        ]
        return ExercisePerformance(
            exercise_id=exercise_id,
            exercise_name=latest.exercise_name,
            metric_type=metric_type,
            best_value=max(values) if values else None,
            average_value=sum(values) / len(values) if values else None,
            total_sessions=len(performances),
            last_performed_at=latest.performed_at,
            history=[
                PerformanceHistoryEntry(
                    performed_at=e.performed_at,
                    value=_best_set_value(e, metric_type) or 0.0,
                )
                for e in performances[:PERFORMANCE_HISTORY_SIZE]
            ],
        )

    def get_workout_frequency(
        self, user_id: str, start: date, end: date
    ) -> List[WorkoutFrequency]:
        """
        Completed workouts per day between two dates (inclusive).

        Sessions are selected by when they started or were planned for,
        then grouped by the day they ended.
        """
        sessions = self._session_repo.get_sessions_in_period(user_id, start, end)
        return _group_by(
            [
                s
                for s in sessions
                if s.status == WorkoutSessionStatus.COMPLETED and s.end_time is not None
            ],
            lambda s: s.end_time.date(),
        )

    def score_against_history(self, session_id: str) -> SessionScore:
        """
        Score a session against earlier completed sessions of the same user.

        Raises:
            NotFoundError: If the session does not exist.
        """
        session = self._session_repo.get_by_id(session_id)
        if session is None:
            raise NotFoundError("Workout session", session_id)

        history: Dict[str, List[SessionExercise]] = {}
        for exercise_id in {e.exercise_id for e in session.exercises}:
            earlier = self._session_repo.get_completed_sessions_with_exercise(
                session.user_id, exercise_id, limit=SCORING_HISTORY_SIZE
            )
            # Repository returns newest first; analysis expects oldest first
            history[exercise_id] = [
                e
                for past in reversed(earlier)
                if past.id != session.id
                for e in past.exercises
                if e.exercise_id == exercise_id
            ]

        score = self._analysis.score_workout(session, history)
        logger.info("Session %s scored %.1f against history", session_id, score)
        return SessionScore(
            session_id=session_id,
            score=score,
            description=self._analysis.get_performance_description(score),
            exercise_scores=self._analysis.score_exercises(session, history),
        )

    def _metric_trends(self, user_id: str) -> List[MetricTrend]:
        trends: List[MetricTrend] = []
        for metric_type in TREND_METRIC_TYPES:
            metrics = self._metric_repo.get_user_metrics(user_id, metric_type=metric_type)
            if not metrics:
                continue
            # Oldest first; compare the two most recent
            current = metrics[-1]
            previous = metrics[-2] if len(metrics) > 1 else None
            change = None
            if previous is not None and previous.value != 0:
                change = (current.value - previous.value) / previous.value * 100
            trends.append(
                MetricTrend(
                    metric_type=metric_type,
                    current_value=current.value,
                    previous_value=previous.value if previous else None,
                    percentage_change=change,
                    trend=trend_direction(change),
                    recorded_at=current.recorded_at,
                )
            )
        return trends
