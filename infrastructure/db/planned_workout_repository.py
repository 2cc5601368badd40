"""
Supabase implementation of PlannedWorkoutRepository.

Planned workouts live in the `planned_workouts` table with `scheduled_date`
stored as an ISO date.
"""
import logging
from datetime import date
from typing import List, Optional

from supabase import Client

from domain.models import PlannedWorkout, WorkoutSessionStatus

logger = logging.getLogger(__name__)

TABLE = "planned_workouts"


class SupabasePlannedWorkoutRepository:
    """Supabase implementation of PlannedWorkoutRepository protocol."""

    def __init__(self, client: Client):
        self._client = client

    def get_by_id(self, planned_workout_id: str) -> Optional[PlannedWorkout]:
        try:
            result = self._client.table(TABLE).select("*").eq("id", planned_workout_id).execute()
        except Exception:
            logger.exception("Error fetching planned workout %s", planned_workout_id)
            raise
        if not result.data:
            return None
        return PlannedWorkout.model_validate(result.data[0])

    def add(self, planned_workout: PlannedWorkout) -> PlannedWorkout:
        try:
            result = (
                self._client.table(TABLE)
                .insert(planned_workout.model_dump(mode="json"))
                .execute()
            )
        except Exception:
            logger.exception("Error inserting planned workout %s", planned_workout.id)
            raise
        return PlannedWorkout.model_validate(result.data[0]) if result.data else planned_workout

    def update(self, planned_workout: PlannedWorkout) -> PlannedWorkout:
        row = planned_workout.model_dump(mode="json", exclude={"id"})
        try:
            result = (
                self._client.table(TABLE).update(row).eq("id", planned_workout.id).execute()
            )
        except Exception:
            logger.exception("Error updating planned workout %s", planned_workout.id)
            raise
        return PlannedWorkout.model_validate(result.data[0]) if result.data else planned_workout

    def delete(self, planned_workout_id: str) -> bool:
        try:
            result = self._client.table(TABLE).delete().eq("id", planned_workout_id).execute()
        except Exception:
            logger.exception("Error deleting planned workout %s", planned_workout_id)
            raise
        return bool(result.data)

    def get_user_planned_workouts(
        self,
        user_id: str,
        *,
        start_date: Optional[date] = None,
        end_date: Optional[date] = None,
    ) -> List[PlannedWorkout]:
        try:
            query = self._client.table(TABLE).select("*").eq("user_id", user_id)
            if start_date is not None:
                query = query.gte("scheduled_date", start_date.isoformat())
            if end_date is not None:
                query = query.lte("scheduled_date", end_date.isoformat())
            result = query.order("scheduled_date").execute()
        except Exception:
            logger.exception("Error fetching planned workouts for user %s", user_id)
            raise
        return [PlannedWorkout.model_validate(row) for row in result.data or []]

    def exists(self, user_id: str, workout_id: str, scheduled_date: date) -> bool:
        try:
            result = (
                self._client.table(TABLE)
                .select("id")
                .eq("user_id", user_id)
                .eq("workout_id", workout_id)
                .eq("scheduled_date", scheduled_date.isoformat())
                .eq("status", WorkoutSessionStatus.PLANNED.value)
                .limit(1)
                .execute()
            )
        except Exception:
            logger.exception("Error checking schedule for user %s", user_id)
            raise
        return bool(result.data)
