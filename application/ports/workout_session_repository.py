"""
Workout Session Repository Interface (Port).

This module defines the abstract interface for WorkoutSession persistence.
The whole aggregate (exercises and sets included) is loaded and stored at once.
"""
from datetime import date, datetime
from typing import List, Optional, Protocol

from domain.models import WorkoutSession, WorkoutSessionStatus


class WorkoutSessionRepository(Protocol):
    """
    Abstract interface for workout session persistence.

    Implementations must persist the session together with its owned
    exercises and sets, and return fully rehydrated aggregates.
    """

    def get_by_id(self, session_id: str) -> Optional[WorkoutSession]:
        """
        Load a session with its exercises and sets.

        Args:
            session_id: Session UUID

        Returns:
            The session, or None if not found
        """
        ...

    def add(self, session: WorkoutSession) -> WorkoutSession:
        """Insert a new session and return it as stored."""
        ...

    def update(self, session: WorkoutSession) -> WorkoutSession:
        """Replace a stored session with the given state and return it."""
        ...

    def delete(self, session_id: str) -> bool:
        """
        Delete a session.

        Returns:
            True if deleted, False if not found
        """
        ...

    def get_active_session(self, user_id: str) -> Optional[WorkoutSession]:
        """Get the user's in-progress session, if any."""
        ...

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
        """
        Get a user's sessions, newest first.

        Args:
            user_id: Owner of the sessions
            status: Only sessions in this status
            start: Only sessions created at or after this time
            end: Only sessions created at or before this time
            limit: Maximum number of results (None for no limit)
            offset: Pagination offset

        Returns:
            Sessions ordered by created_at descending
        """
        ...

    def get_sessions_in_period(
        self,
        user_id: str,
        start: date,
        end: date,
    ) -> List[WorkoutSession]:
        """
        Get sessions that started, or are planned, within a range of days.

        A session matches when its start_time or its planned_date falls on
        a day between start and end (inclusive, UTC). When it was created
        does not matter.

        Returns:
            Sessions ordered by start_time, falling back to planned_date
        """
        ...

    def get_completed_sessions_with_exercise(
        self,
        user_id: str,
        exercise_id: str,
        *,
        limit: int = 20,
    ) -> List[WorkoutSession]:
        """
        Get completed sessions that include a catalog exercise, newest first.

        Used for history-based performance analysis.
        """
        ...
