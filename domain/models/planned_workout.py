"""
PlannedWorkout: a workout scheduled for a specific day.

Its lifecycle is independent of WorkoutSession, so a schedule can exist
before any tracked session does. Once started it holds the session id as a
plain reference.
"""

from datetime import date, datetime
from typing import Any, Optional

from pydantic import BaseModel, Field, field_validator, model_validator

from domain.exceptions import TrackingDomainError
from domain.models.common import new_id, require_id, utc_now
from domain.models.enums import WorkoutSessionStatus


def _as_date(value: Any) -> Any:
    # datetime is a subclass of date, so check it first
    if isinstance(value, datetime):
        return value.date()
    return value


class PlannedWorkout(BaseModel):
    """
    A workout scheduled for a given date.

    Examples:
        >>> planned = PlannedWorkout.create("u-1", "w-1", date(2024, 3, 4))
        >>> planned = planned.mark_as_started("session-1")
        >>> planned.status, planned.workout_session_id
        (<WorkoutSessionStatus.IN_PROGRESS: 'in_progress'>, 'session-1')
    """

    id: str = Field(default_factory=new_id)
    user_id: str = Field(..., min_length=1)
    workout_id: str = Field(..., min_length=1)
    scheduled_date: date = Field(..., description="Day the workout is planned for (no time part)")
    status: WorkoutSessionStatus = WorkoutSessionStatus.PLANNED
    is_from_program: bool = False
    program_id: Optional[str] = None
    workout_session_id: Optional[str] = Field(
        default=None, description="Session started from this plan, if any"
    )
    created_at: datetime = Field(default_factory=utc_now)
    updated_at: Optional[datetime] = None

    model_config = {"frozen": True}

    @field_validator("scheduled_date", mode="before")
    @classmethod
    def strip_time(cls, v: Any) -> Any:
        return _as_date(v)

    @model_validator(mode="after")
    def validate_session_link(self) -> "PlannedWorkout":
        if self.status == WorkoutSessionStatus.PLANNED and self.workout_session_id is not None:
            raise ValueError("A planned workout that has not started cannot link a session")
        return self

    @classmethod
    def create(
        cls,
        user_id: str,
        workout_id: str,
        scheduled_date: date,
        is_from_program: bool = False,
        program_id: Optional[str] = None,
        *,
        now: Optional[datetime] = None,
    ) -> "PlannedWorkout":
        """Schedule a workout. Only the date part of `scheduled_date` is kept."""
        return cls(
            user_id=require_id(user_id, "User ID"),
            workout_id=require_id(workout_id, "Workout ID"),
            scheduled_date=_as_date(scheduled_date),
            is_from_program=is_from_program,
            program_id=program_id,
            created_at=now or utc_now(),
        )

    # -------------------------------------------------------------------------
    # Status Management (return new instances for immutability)
    # -------------------------------------------------------------------------

    def _transition(
        self,
        action: str,
        allowed_from: WorkoutSessionStatus,
        to: WorkoutSessionStatus,
        now: Optional[datetime],
        **extra: Any,
    ) -> "PlannedWorkout":
        if self.status != allowed_from:
            raise TrackingDomainError.invalid_transition(action, "planned workout", self.status.value)
        return self.model_copy(update={"status": to, "updated_at": now or utc_now(), **extra})

    def mark_as_started(self, workout_session_id: str, *, now: Optional[datetime] = None) -> "PlannedWorkout":
        """Link the tracked session and move PLANNED to IN_PROGRESS."""
        if self.status != WorkoutSessionStatus.PLANNED:
            raise TrackingDomainError.invalid_transition("start", "planned workout", self.status.value)
        session_id = require_id(workout_session_id, "Workout session ID")
        return self._transition(
            "start",
            WorkoutSessionStatus.PLANNED,
            WorkoutSessionStatus.IN_PROGRESS,
            now,
            workout_session_id=session_id,
        )

    def mark_as_completed(self, *, now: Optional[datetime] = None) -> "PlannedWorkout":
        return self._transition(
            "complete", WorkoutSessionStatus.IN_PROGRESS, WorkoutSessionStatus.COMPLETED, now
        )

    def cancel(self, *, now: Optional[datetime] = None) -> "PlannedWorkout":
        return self._transition(
            "cancel", WorkoutSessionStatus.PLANNED, WorkoutSessionStatus.CANCELLED, now
        )

    def mark_as_abandoned(self, *, now: Optional[datetime] = None) -> "PlannedWorkout":
        return self._transition(
            "abandon", WorkoutSessionStatus.IN_PROGRESS, WorkoutSessionStatus.ABANDONED, now
        )

    def reschedule(self, new_date: date, *, now: Optional[datetime] = None) -> "PlannedWorkout":
        """Move a PLANNED workout to another day."""
        if self.status != WorkoutSessionStatus.PLANNED:
            raise TrackingDomainError.invalid_transition("reschedule", "planned workout", self.status.value)
        return self.model_copy(
            update={"scheduled_date": _as_date(new_date), "updated_at": now or utc_now()}
        )

    # -------------------------------------------------------------------------
    # Queries (relative to `today`, UTC today by default)
    # -------------------------------------------------------------------------

    def is_overdue(self, today: Optional[date] = None) -> bool:
        return self.status == WorkoutSessionStatus.PLANNED and self.scheduled_date < (
            today or utc_now().date()
        )

    def is_upcoming(self, today: Optional[date] = None) -> bool:
        return self.status == WorkoutSessionStatus.PLANNED and self.scheduled_date >= (
            today or utc_now().date()
        )

    def is_scheduled_for_today(self, today: Optional[date] = None) -> bool:
        return self.status == WorkoutSessionStatus.PLANNED and self.scheduled_date == (
            today or utc_now().date()
        )

    def days_until_scheduled(self, today: Optional[date] = None) -> int:
        """Signed number of days until the scheduled date (negative when overdue)."""
        return (self.scheduled_date - (today or utc_now().date())).days
