"""
Supabase implementation of WorkoutSessionRepository.

Each session is one row in `workout_sessions`. Exercises and their sets are
stored in the JSON `exercises` column, and the catalog ids of the exercises
are mirrored into the `exercise_ids` array column for history lookups.
Rows are rehydrated through WorkoutSession.model_validate, so stored data
that breaks the aggregate's invariants is rejected on load.
"""
import logging
from datetime import date, datetime
from typing import Any, Dict, List, Optional

from supabase import Client

from domain.models import WorkoutSession, WorkoutSessionStatus
from domain.models.common import day_bounds

logger = logging.getLogger(__name__)

TABLE = "workout_sessions"


def session_to_row(session: WorkoutSession) -> Dict[str, Any]:
    """Serialize an aggregate into a `workout_sessions` row."""
    row = session.model_dump(mode="json")
    row["exercise_ids"] = sorted({e.exercise_id for e in session.exercises})
    return row


def row_to_session(row: Dict[str, Any]) -> WorkoutSession:
    """Rehydrate an aggregate from a `workout_sessions` row."""
    data = {k: v for k, v in row.items() if k != "exercise_ids"}
    data["exercises"] = data.get("exercises") or []
    return WorkoutSession.model_validate(data)


def _between(column: str, lower: datetime, upper: datetime) -> str:
    """PostgREST filter for lower <= column <= upper, for use inside or_()."""
    return f"and({column}.gte.{lower.isoformat()},{column}.lte.{upper.isoformat()})"


class SupabaseWorkoutSessionRepository:
    """
    Supabase implementation of WorkoutSessionRepository protocol.

    Failures are logged and re-raised; callers decide how to recover.
    """

    def __init__(self, client: Client):
        """
        Initialize with Supabase client.

        Args:
            client: Supabase client instance (injected, not global)
        """
        self._client = client

    def get_by_id(self, session_id: str) -> Optional[WorkoutSession]:
        try:
            result = self._client.table(TABLE).select("*").eq("id", session_id).execute()
        except Exception:
            logger.exception("Error fetching workout session %s", session_id)
            raise
        if not result.data:
            return None
        return row_to_session(result.data[0])

    def add(self, session: WorkoutSession) -> WorkoutSession:
        try:
            result = self._client.table(TABLE).insert(session_to_row(session)).execute()
        except Exception:
            logger.exception("Error inserting workout session %s", session.id)
            raise
        logger.info("Inserted workout session %s", session.id)
        return row_to_session(result.data[0]) if result.data else session

    def update(self, session: WorkoutSession) -> WorkoutSession:
        row = session_to_row(session)
        row.pop("id")
        try:
            result = self._client.table(TABLE).update(row).eq("id", session.id).execute()
        except Exception:
            logger.exception("Error updating workout session %s", session.id)
            raise
        return row_to_session(result.data[0]) if result.data else session

    def delete(self, session_id: str) -> bool:
        try:
            result = self._client.table(TABLE).delete().eq("id", session_id).execute()
        except Exception:
            logger.exception("Error deleting workout session %s", session_id)
            raise
        return bool(result.data)

    def get_active_session(self, user_id: str) -> Optional[WorkoutSession]:
        try:
            result = (
                self._client.table(TABLE)
                .select("*")
                .eq("user_id", user_id)
                .eq("status", WorkoutSessionStatus.IN_PROGRESS.value)
                .order("start_time", desc=True)
                .limit(1)
                .execute()
            )
        except Exception:
            logger.exception("Error fetching active session for user %s", user_id)
            raise
        if not result.data:
            return None
        return row_to_session(result.data[0])

    def get_user_sessions(
        self,
        user_id: str,
        *,
        status: Optional[WorkoutSessionStatus] = None,
        start: Optional[datetime] = None,
        end: Optional[datetime] = None,
        limit: Optional[int] = 50,
        offset: int = 0,
    ) -> List[WorkoutSession]:
        try:
            query = self._client.table(TABLE).select("*").eq("user_id", user_id)
            if status is not None:
                query = query.eq("status", status.value)
            if start is not None:
                query = query.gte("created_at", start.isoformat())
            if end is not None:
                query = query.lte("created_at", end.isoformat())
            query = query.order("created_at", desc=True)
            if limit is not None:
                query = query.range(offset, offset + limit - 1)
            result = query.execute()
        except Exception:
            logger.exception("Error fetching sessions for user %s", user_id)
            raise
        return [row_to_session(row) for row in result.data or []]

    def get_sessions_in_period(
        self,
        user_id: str,
        start: date,
        end: date,
    ) -> List[WorkoutSession]:
        lower, upper = day_bounds(start, end)
        window = ",".join(_between(column, lower, upper) for column in ("start_time", "planned_date"))
        try:
            result = (
                self._client.table(TABLE)
                .select("*")
                .eq("user_id", user_id)
                .or_(window)
                .execute()
            )
        except Exception:
            logger.exception("Error fetching sessions in period for user %s", user_id)
            raise
        sessions = [row_to_session(row) for row in result.data or []]
        return sorted(sessions, key=lambda s: s.anchor_time)

    def get_completed_sessions_with_exercise(
        self,
        user_id: str,
        exercise_id: str,
        *,
        limit: int = 20,
    ) -> List[WorkoutSession]:
        try:
            result = (
                self._client.table(TABLE)
                .select("*")
                .eq("user_id", user_id)
                .eq("status", WorkoutSessionStatus.COMPLETED.value)
                .contains("exercise_ids", [exercise_id])
                .order("end_time", desc=True)
                .limit(limit)
                .execute()
            )
        except Exception:
            logger.exception(
                "Error fetching sessions with exercise %s for user %s", exercise_id, user_id
            )
            raise
        return [row_to_session(row) for row in result.data or []]
