"""
Planned Workout Repository Interface (Port).

This module defines the abstract interface for scheduled workout persistence.
"""
from datetime import date
from typing import List, Optional, Protocol

from domain.models import PlannedWorkout


class PlannedWorkoutRepository(Protocol):
    """Abstract interface for PlannedWorkout persistence."""

    def get_by_id(self, planned_workout_id: str) -> Optional[PlannedWorkout]:
        ...

    def add(self, planned_workout: PlannedWorkout) -> PlannedWorkout:
        ...

    def update(self, planned_workout: PlannedWorkout) -> PlannedWorkout:
        ...

    def delete(self, planned_workout_id: str) -> bool:
        ...

    def get_user_planned_workouts(
        self,
        user_id: str,
        *,
        start_date: Optional[date] = None,
        end_date: Optional[date] = None,
    ) -> List[PlannedWorkout]:
        """
        Get a user's planned workouts ordered by scheduled date.

        Args:
            user_id: Owner of the schedule
            start_date: Inclusive lower bound on scheduled_date
            end_date: Inclusive upper bound on scheduled_date
        """
        ...

    def exists(self, user_id: str, workout_id: str, scheduled_date: date) -> bool:
        """
        Check whether the workout is already scheduled for the user on that day.

        Only plans still in PLANNED status count, so a plan that was cancelled
        or has moved on does not block scheduling the same workout again.
        """
        ...
