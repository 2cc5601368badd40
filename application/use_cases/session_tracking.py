"""
SessionTracking Use Case.

Orchestrates live workout sessions: starting, recording exercises and sets,
and finishing or abandoning a session.

Workflow for every mutation:
1. Load the WorkoutSession aggregate via repository
2. Apply one domain transition (returns a new aggregate)
3. Persist the whole aggregate
4. Return the updated session
"""

import logging
from datetime import datetime
from typing import List, Optional

from application.ports import ExerciseCatalog, UserMetricRepository, WorkoutSessionRepository
from domain.exceptions import NotFoundError, TrackingDomainError
from domain.models import (
    ExerciseMetricType,
    PerceivedDifficulty,
    UserMetricType,
    WorkoutSession,
    WorkoutSessionStatus,
)
from domain.models.workout_session import DEFAULT_BODY_WEIGHT_KG, DEFAULT_SESSION_MET
from domain.services.units import weight_to_kg

logger = logging.getLogger(__name__)


class SessionTrackingUseCase:
    """
    Use case for tracking workout sessions.

    Domain errors propagate unchanged to the caller; a failed transition is
    never persisted.

    Usage:
        >>> use_case = SessionTrackingUseCase(
        ...     session_repo=session_repo,
        ...     metric_repo=metric_repo,
        ...     exercise_catalog=catalog,
        ... )
        >>> session = use_case.start_session(user_id="user-123", workout_id="w-1")
        >>> session = use_case.add_exercise(session.id, "bench-press", ExerciseMetricType.WEIGHT)
        >>> session = use_case.complete_session(session.id, PerceivedDifficulty.HARD)
    """

    def __init__(
        self,
        session_repo: WorkoutSessionRepository,
        metric_repo: UserMetricRepository,
        exercise_catalog: ExerciseCatalog,
        *,
        default_body_weight_kg: float = DEFAULT_BODY_WEIGHT_KG,
        session_met: float = DEFAULT_SESSION_MET,
    ) -> None:
        """
        Initialize the use case with required dependencies.

        Args:
            session_repo: Repository for session persistence
            metric_repo: Repository for user metrics (latest body weight lookup)
            exercise_catalog: Read-only exercise name lookup
            default_body_weight_kg: Body weight used when the user has no Weight metric
            session_met: MET value used for session calorie estimates
        """
        self._session_repo = session_repo
        self._metric_repo = metric_repo
        self._exercise_catalog = exercise_catalog
        self._default_body_weight_kg = default_body_weight_kg
        self._session_met = session_met

    # =========================================================================
    # Lifecycle
    # =========================================================================

    def start_session(
        self,
        user_id: str,
        workout_id: str,
        planned_date: Optional[datetime] = None,
        is_from_program: bool = False,
        program_id: Optional[str] = None,
        *,
        now: Optional[datetime] = None,
    ) -> WorkoutSession:
        """
        Create a session, in progress immediately unless a planned date is given.

        Raises:
            TrackingDomainError: If the user already has a session in progress
                and the new one would start immediately.
        """
        logger.info("Starting workout session for user %s with workout %s", user_id, workout_id)

        if planned_date is None:
            self._ensure_no_active_session(user_id)

        session = WorkoutSession.create(
            user_id=user_id,
            workout_id=workout_id,
            planned_date=planned_date,
            is_from_program=is_from_program,
            program_id=program_id,
            now=now,
        )
        saved = self._session_repo.add(session)
        logger.info("Workout session %s created with status %s", saved.id, saved.status.value)
        return saved

    def start_planned_session(self, session_id: str, *, now: Optional[datetime] = None) -> WorkoutSession:
        """Start a PLANNED session."""
        session = self.get_session(session_id)
        self._ensure_no_active_session(session.user_id)
        return self._save(session.start(now=now), "started")

    def complete_session(
        self,
        session_id: str,
        perceived_difficulty: PerceivedDifficulty,
        notes: Optional[str] = None,
        *,
        now: Optional[datetime] = None,
    ) -> WorkoutSession:
        """
        Complete a session.

        Calories are estimated from the user's latest recorded body weight,
        or the configured default when none is recorded.
        """
        session = self.get_session(session_id)
        body_weight = self._body_weight_for(session.user_id)
        completed = session.complete(
            perceived_difficulty,
            notes,
            now=now,
            body_weight_kg=body_weight,
            met=self._session_met,
        )
        return self._save(completed, "completed")

    def abandon_session(
        self, session_id: str, reason: Optional[str] = None, *, now: Optional[datetime] = None
    ) -> WorkoutSession:
        session = self.get_session(session_id)
        return self._save(session.abandon(reason, now=now), "abandoned")

    def cancel_session(
        self, session_id: str, reason: Optional[str] = None, *, now: Optional[datetime] = None
    ) -> WorkoutSession:
        session = self.get_session(session_id)
        return self._save(session.cancel(reason, now=now), "cancelled")

    # =========================================================================
    # Exercises and Sets
    # =========================================================================

    def add_exercise(
        self,
        session_id: str,
        exercise_id: str,
        metric_type: ExerciseMetricType,
        repetitions: Optional[int] = None,
        weight: Optional[float] = None,
        duration_seconds: Optional[int] = None,
        distance: Optional[float] = None,
        *,
        now: Optional[datetime] = None,
    ) -> WorkoutSession:
        """
        Add a catalog exercise to a session.

        The exercise name is looked up once and snapshotted on the session.

        Raises:
            NotFoundError: If the session or the catalog exercise does not exist.
        """
        logger.info("Adding exercise %s to session %s", exercise_id, session_id)
        session = self.get_session(session_id)

        catalog_entry = self._exercise_catalog.get_by_id(exercise_id)
        if catalog_entry is None:
            raise NotFoundError("Exercise", exercise_id)

        updated = session.add_exercise(
            catalog_entry.id,
            catalog_entry.name,
            metric_type,
            repetitions=repetitions,
            weight=weight,
            duration_seconds=duration_seconds,
            distance=distance,
            now=now,
        )
        return self._save(updated, f"added exercise {exercise_id}")

    def remove_exercise(
        self, session_id: str, session_exercise_id: str, *, now: Optional[datetime] = None
    ) -> WorkoutSession:
        session = self.get_session(session_id)
        return self._save(
            session.remove_exercise(session_exercise_id, now=now),
            f"removed exercise {session_exercise_id}",
        )

    def add_set(
        self,
        session_id: str,
        session_exercise_id: str,
        repetitions: Optional[int] = None,
        weight: Optional[float] = None,
        duration_seconds: Optional[int] = None,
        distance: Optional[float] = None,
        rest_time_seconds: Optional[int] = None,
        *,
        now: Optional[datetime] = None,
    ) -> WorkoutSession:
        session = self.get_session(session_id)
        updated = session.add_set(
            session_exercise_id,
            repetitions=repetitions,
            weight=weight,
            duration_seconds=duration_seconds,
            distance=distance,
            rest_time_seconds=rest_time_seconds,
            now=now,
        )
        return self._save(updated, f"added set to exercise {session_exercise_id}")

    def update_set(
        self,
        session_id: str,
        session_exercise_id: str,
        set_number: int,
        repetitions: Optional[int] = None,
        weight: Optional[float] = None,
        duration_seconds: Optional[int] = None,
        distance: Optional[float] = None,
        rest_time_seconds: Optional[int] = None,
        *,
        now: Optional[datetime] = None,
    ) -> WorkoutSession:
        session = self.get_session(session_id)
        updated = session.update_set(
            session_exercise_id,
            set_number,
            repetitions=repetitions,
            weight=weight,
            duration_seconds=duration_seconds,
            distance=distance,
            rest_time_seconds=rest_time_seconds,
            now=now,
        )
        return self._save(updated, f"updated set {set_number} of exercise {session_exercise_id}")

    def remove_set(
        self,
        session_id: str,
        session_exercise_id: str,
        set_number: int,
        *,
        now: Optional[datetime] = None,
    ) -> WorkoutSession:
        session = self.get_session(session_id)
        return self._save(
            session.remove_set(session_exercise_id, set_number, now=now),
            f"removed set {set_number} of exercise {session_exercise_id}",
        )

    def set_exercise_performance_score(
        self,
        session_id: str,
        session_exercise_id: str,
        score: float,
        *,
        now: Optional[datetime] = None,
    ) -> WorkoutSession:
        session = self.get_session(session_id)
        return self._save(
            session.set_exercise_performance_score(session_exercise_id, score, now=now),
            f"scored exercise {session_exercise_id}",
        )

    # =========================================================================
    # Queries
    # =========================================================================

    def get_session(self, session_id: str) -> WorkoutSession:
        """
        Load a session.

        Raises:
            NotFoundError: If the session does not exist.
        """
        session = self._session_repo.get_by_id(session_id)
        if session is None:
            raise NotFoundError("Workout session", session_id)
        return session

    def get_active_session(self, user_id: str) -> Optional[WorkoutSession]:
        return self._session_repo.get_active_session(user_id)

    def get_history(
        self,
        user_id: str,
        *,
        status: Optional[WorkoutSessionStatus] = None,
        start: Optional[datetime] = None,
        end: Optional[datetime] = None,
        limit: Optional[int] = 50,
        offset: int = 0,
    ) -> List[WorkoutSession]:
        """A user's sessions, newest first."""
        return self._session_repo.get_user_sessions(
            user_id, status=status, start=start, end=end, limit=limit, offset=offset
        )

    def get_performance_summary(self, session_id: str) -> str:
        return self.get_session(session_id).get_performance_summary()

    # =========================================================================
    # Helpers
    # =========================================================================

    def _ensure_no_active_session(self, user_id: str) -> None:
        active = self._session_repo.get_active_session(user_id)
        if active is not None:
            logger.warning("User %s already has active session %s", user_id, active.id)
            raise TrackingDomainError("User already has an active workout session")

    def _body_weight_for(self, user_id: str) -> float:
        latest = self._metric_repo.get_latest(user_id, UserMetricType.WEIGHT)
        if latest is None or latest.value <= 0:
            return self._default_body_weight_kg
        try:
            return weight_to_kg(latest.value, latest.unit)
        except TrackingDomainError:
            logger.warning(
                "Ignoring weight metric %s with unit %r; using default body weight",
                latest.id,
                latest.unit,
            )
            return self._default_body_weight_kg

    def _save(self, session: WorkoutSession, action: str) -> WorkoutSession:
        saved = self._session_repo.update(session)
        logger.info("Workout session %s %s", saved.id, action)
        return saved
