"""
WorkoutScheduling Use Case.

Manages planned workouts: scheduling, rescheduling, cancelling and linking
a plan to the session that carries it out.
"""

import logging
from datetime import date, datetime
from typing import List, Optional, Tuple

from application.ports import PlannedWorkoutRepository, WorkoutSessionRepository
from domain.exceptions import NotFoundError, TrackingDomainError
from domain.models import PlannedWorkout, WorkoutSession
from domain.models.common import utc_now

logger = logging.getLogger(__name__)


class WorkoutSchedulingUseCase:
    """
    Use case for scheduling workouts ahead of time.

    A plan and its session have independent lifecycles. Starting a plan
    creates a new in-progress session and links its id to the plan.

    Usage:
        >>> use_case = WorkoutSchedulingUseCase(planned_repo=planned_repo, session_repo=session_repo)
        >>> planned = use_case.schedule_workout("user-123", "w-1", date(2024, 3, 4))
        >>> planned, session = use_case.start_planned_workout(planned.id)
    """

    def __init__(
        self,
        planned_repo: PlannedWorkoutRepository,
        session_repo: WorkoutSessionRepository,
    ) -> None:
        self._planned_repo = planned_repo
        self._session_repo = session_repo

    def schedule_workout(
        self,
        user_id: str,
        workout_id: str,
        scheduled_date: date,
        is_from_program: bool = False,
        program_id: Optional[str] = None,
        *,
        now: Optional[datetime] = None,
    ) -> PlannedWorkout:
        """
        Schedule a workout for a day.

        Raises:
            TrackingDomainError: If the same workout is already scheduled that day.
        """
        logger.info(
            "Scheduling workout %s for user %s on %s", workout_id, user_id, scheduled_date
        )
        planned = PlannedWorkout.create(
            user_id=user_id,
            workout_id=workout_id,
            scheduled_date=scheduled_date,
            is_from_program=is_from_program,
            program_id=program_id,
            now=now,
        )
        if self._planned_repo.exists(planned.user_id, planned.workout_id, planned.scheduled_date):
            logger.warning(
                "Workout %s already scheduled for user %s on %s",
                workout_id,
                user_id,
                planned.scheduled_date,
            )
            raise TrackingDomainError(
                f"Workout already scheduled for {planned.scheduled_date.isoformat()}"
            )

        saved = self._planned_repo.add(planned)
        logger.info("Planned workout %s scheduled for %s", saved.id, saved.scheduled_date)
        return saved

    def reschedule_workout(
        self, planned_workout_id: str, new_date: date, *, now: Optional[datetime] = None
    ) -> PlannedWorkout:
        planned = self.get_planned_workout(planned_workout_id)
        return self._save(planned.reschedule(new_date, now=now), "rescheduled")

    def cancel_planned_workout(
        self, planned_workout_id: str, *, now: Optional[datetime] = None
    ) -> PlannedWorkout:
        planned = self.get_planned_workout(planned_workout_id)
        return self._save(planned.cancel(now=now), "cancelled")

    def start_planned_workout(
        self, planned_workout_id: str, *, now: Optional[datetime] = None
    ) -> Tuple[PlannedWorkout, WorkoutSession]:
        """
        Start a planned workout.

        Creates an in-progress WorkoutSession for the plan's workout, then
        marks the plan started with a link to that session.

        Returns:
            Tuple of (updated plan, new session)
        """
        planned = self.get_planned_workout(planned_workout_id)

        active = self._session_repo.get_active_session(planned.user_id)
        if active is not None:
            logger.warning("User %s already has active session %s", planned.user_id, active.id)
            raise TrackingDomainError("User already has an active workout session")

        session = WorkoutSession.create(
            user_id=planned.user_id,
            workout_id=planned.workout_id,
            is_from_program=planned.is_from_program,
            program_id=planned.program_id,
            now=now,
        )
        # Validate the transition before anything is persisted
        started = planned.mark_as_started(session.id, now=now)

        saved_session = self._session_repo.add(session)
        saved_plan = self._save(started, f"started as session {saved_session.id}")
        return saved_plan, saved_session

    def complete_planned_workout(
        self, planned_workout_id: str, *, now: Optional[datetime] = None
    ) -> PlannedWorkout:
        planned = self.get_planned_workout(planned_workout_id)
        return self._save(planned.mark_as_completed(now=now), "completed")

    def abandon_planned_workout(
        self, planned_workout_id: str, *, now: Optional[datetime] = None
    ) -> PlannedWorkout:
        planned = self.get_planned_workout(planned_workout_id)
        return self._save(planned.mark_as_abandoned(now=now), "abandoned")

    # =========================================================================
    # Queries
    # =========================================================================

    def get_planned_workout(self, planned_workout_id: str) -> PlannedWorkout:
        planned = self._planned_repo.get_by_id(planned_workout_id)
        if planned is None:
            raise NotFoundError("Planned workout", planned_workout_id)
        return planned

    def get_upcoming(self, user_id: str, today: Optional[date] = None) -> List[PlannedWorkout]:
        """Planned workouts scheduled today or later, soonest first."""
        today = today or utc_now().date()
        workouts = self._planned_repo.get_user_planned_workouts(user_id, start_date=today)
        return [w for w in workouts if w.is_upcoming(today)]

    def get_overdue(self, user_id: str, today: Optional[date] = None) -> List[PlannedWorkout]:
        """Planned workouts whose day has passed without being started."""
        today = today or utc_now().date()
        workouts = self._planned_repo.get_user_planned_workouts(user_id)
        return [w for w in workouts if w.is_overdue(today)]

    def get_for_date(self, user_id: str, day: date) -> List[PlannedWorkout]:
        """Everything scheduled on a given day, whatever its status."""
        return self._planned_repo.get_user_planned_workouts(
            user_id, start_date=day, end_date=day
        )

    def _save(self, planned: PlannedWorkout, action: str) -> PlannedWorkout:
        saved = self._planned_repo.update(planned)
        logger.info("Planned workout %s %s", saved.id, action)
        return saved
