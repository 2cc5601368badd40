"""
SessionSet value object: one measured attempt within a session exercise.
"""

from datetime import datetime
from typing import List, Optional

from pydantic import BaseModel, Field

from domain.models.common import new_id, require_non_negative, utc_now

# Scoring constants
BASE_SET_SCORE = 75.0
REST_BONUS = 5.0
COMPOUND_BONUS = 5.0
MIN_GOOD_REST_SECONDS = 30
MAX_GOOD_REST_SECONDS = 300
MAX_SCORE = 100.0


class SessionSet(BaseModel):
    """
    A single set performed for an exercise during a workout session.

    Carries only the id of the owning SessionExercise, never a reference to it.
    Sets are immutable; changes produce a new instance.

    Examples:
        >>> s = SessionSet(session_exercise_id="ex-1", set_number=1, repetitions=10, weight=50)
        >>> s.get_primary_performance_value()
        500.0
        >>> s.get_performance_score()
        80.0
    """

    id: str = Field(default_factory=new_id, description="Set identifier")
    session_exercise_id: str = Field(
        ..., min_length=1, description="Owning session exercise id"
    )
    set_number: int = Field(..., ge=1, description="1-based position within the exercise")

    # Measurements
    repetitions: Optional[int] = Field(default=None, ge=0)
    weight: Optional[float] = Field(default=None, ge=0, description="Load in kg")
    duration_seconds: Optional[int] = Field(default=None, ge=0)
    distance: Optional[float] = Field(default=None, ge=0, description="Distance in meters")
    rest_time_seconds: Optional[int] = Field(default=None, ge=0)

    completed_at: datetime = Field(default_factory=utc_now)

    model_config = {"frozen": True}

    # -------------------------------------------------------------------------
    # Computed Properties
    # -------------------------------------------------------------------------

    @property
    def has_measurement(self) -> bool:
        """Check if any performance value was recorded."""
        return any(
            v is not None
            for v in (self.repetitions, self.weight, self.duration_seconds, self.distance)
        )

    @property
    def volume(self) -> Optional[float]:
        """Weight × repetitions, when both are recorded."""
        if self.weight is None or self.repetitions is None:
            return None
        return float(self.weight * self.repetitions)

    # -------------------------------------------------------------------------
    # Domain Methods (return new instances for immutability)
    # -------------------------------------------------------------------------

    def update_performance(
        self,
        repetitions: Optional[int] = None,
        weight: Optional[float] = None,
        duration_seconds: Optional[int] = None,
        distance: Optional[float] = None,
        rest_time_seconds: Optional[int] = None,
    ) -> "SessionSet":
        """
        Return a new SessionSet with the supplied measurements replaced.

        Values left as None keep their current value.

        Raises:
            TrackingDomainError: If a supplied value is negative.
        """
        require_non_negative(
            repetitions=repetitions,
            weight=weight,
            duration_seconds=duration_seconds,
            distance=distance,
            rest_time_seconds=rest_time_seconds,
        )
        changes = {
            "repetitions": repetitions,
            "weight": weight,
            "duration_seconds": duration_seconds,
            "distance": distance,
            "rest_time_seconds": rest_time_seconds,
        }
        update = {k: v for k, v in changes.items() if v is not None}
        return self.model_copy(update=update) if update else self

    def renumbered(self, set_number: int) -> "SessionSet":
        """Return a copy of this set at a new position."""
        if set_number == self.set_number:
            return self
        return self.model_copy(update={"set_number": set_number})

    # -------------------------------------------------------------------------
    # Scoring
    # -------------------------------------------------------------------------

    def get_primary_performance_value(self) -> Optional[float]:
        """
        Get the most meaningful performance value for this set.

        Priority: volume (weight × reps) > distance > duration > repetitions.

        Returns:
            The primary value, or None when nothing was measured.
        """
        if self.weight is not None and self.repetitions is not None:
            return float(self.weight * self.repetitions)
        if self.distance is not None:
            return float(self.distance)
        if self.duration_seconds is not None:
            return float(self.duration_seconds)
        if self.repetitions is not None:
            return float(self.repetitions)
        return None

    def get_performance_score(self) -> float:
        """
        Score this set from 0 to 100.

        A measured set earns a base of 75, plus 5 when the rest period was
        between 30 seconds and 5 minutes, plus 5 when both weight and reps
        were recorded. Sets without any measurement score 0.
        """
        if self.get_primary_performance_value() is None:
            return 0.0

        bonus = 0.0
        if self.rest_time_seconds is not None and (
            MIN_GOOD_REST_SECONDS <= self.rest_time_seconds <= MAX_GOOD_REST_SECONDS
        ):
            bonus += REST_BONUS
        if self.weight is not None and self.repetitions is not None:
            bonus += COMPOUND_BONUS

        return min(MAX_SCORE, BASE_SET_SCORE + bonus)

    def get_display_text(self) -> str:
        """Human-readable summary such as "10x50.0kg | 1:30"."""
        parts: List[str] = []

        if self.repetitions is not None and self.weight is not None:
            parts.append(f"{self.repetitions}x{self.weight:.1f}kg")
        elif self.repetitions is not None:
            parts.append(f"{self.repetitions} reps")

        if self.duration_seconds is not None:
            parts.append(format_duration(self.duration_seconds))

        if self.distance is not None:
            parts.append(format_distance(self.distance))

        return " | ".join(parts) if parts else "Completed"

    def __str__(self) -> str:
        return f"Set {self.set_number}: {self.get_display_text()}"


def format_duration(seconds: int) -> str:
    """Format seconds as "M:SS", or "Mmin" on a whole minute."""
    minutes, secs = divmod(seconds, 60)
    return f"{minutes}:{secs:02d}" if secs > 0 else f"{minutes}min"


def format_distance(meters: float) -> str:
    """Format meters as kilometers from 1000 m upwards."""
    if meters >= 1000:
        return f"{meters / 1000:.1f}km"
    return f"{meters:.0f}m"
