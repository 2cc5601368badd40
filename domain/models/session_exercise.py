"""
SessionExercise entity: one exercise performed within a workout session.
"""

from datetime import datetime
from typing import Any, Dict, List, Optional

from pydantic import BaseModel, Field, model_validator

from domain.exceptions import TrackingDomainError
from domain.models.common import new_id, require_id, require_non_negative, utc_now
from domain.models.enums import ExerciseMetricType
from domain.models.session_set import SessionSet, format_distance

# Calories per minute by metric type, normalized to a 70 kg person
CALORIES_PER_MINUTE: Dict[ExerciseMetricType, float] = {
    ExerciseMetricType.TIME: 8.0,
    ExerciseMetricType.REPETITIONS: 6.0,
    ExerciseMetricType.DISTANCE: 10.0,
    ExerciseMetricType.WEIGHT: 7.0,
}
DEFAULT_CALORIES_PER_MINUTE = 5.0
CALORIE_BASELINE_WEIGHT_KG = 70.0
ESTIMATED_MINUTES_PER_SET = 2.0
CONSISTENCY_BONUS = 5.0


class SessionExercise(BaseModel):
    """
    An exercise performed within a workout session with its recorded sets.

    The exercise name is a snapshot taken when the exercise was added, so later
    catalog renames do not rewrite history. Sets are kept in order with
    set numbers forming a dense 1..N sequence.

    Examples:
        >>> ex = SessionExercise.create(
        ...     workout_session_id="s-1",
        ...     exercise_id="bench-press",
        ...     exercise_name="Bench Press",
        ...     metric_type=ExerciseMetricType.WEIGHT,
        ...     order=1,
        ... )
        >>> ex = ex.add_set(repetitions=10, weight=50).add_set(repetitions=8, weight=60)
        >>> ex.get_best_performance()
        500.0
    """

    id: str = Field(default_factory=new_id)
    workout_session_id: str = Field(..., min_length=1)
    exercise_id: str = Field(..., min_length=1, description="Catalog exercise id")
    exercise_name: str = Field(..., min_length=1, description="Name snapshot at add-time")
    metric_type: ExerciseMetricType
    order: int = Field(..., ge=1, description="1-based position within the session")
    sets: List[SessionSet] = Field(default_factory=list)
    performance_score: Optional[float] = Field(default=None, ge=0, le=100)
    performed_at: datetime = Field(default_factory=utc_now)
    updated_at: Optional[datetime] = None

    model_config = {"frozen": True}

    @model_validator(mode="after")
    def validate_sets(self) -> "SessionExercise":
        """Stored sets must belong to this exercise and be numbered 1..N."""
        for position, s in enumerate(self.sets, start=1):
            if s.session_exercise_id != self.id:
                raise ValueError(f"Set {s.id} does not belong to exercise {self.id}")
            if s.set_number != position:
                raise ValueError(
                    f"Set numbers must be contiguous from 1 (found {s.set_number} at {position})"
                )
        if not self.exercise_name.strip():
            raise ValueError("Exercise name is required")
        return self

    @classmethod
    def create(
        cls,
        workout_session_id: str,
        exercise_id: str,
        exercise_name: str,
        metric_type: ExerciseMetricType,
        order: int,
        *,
        now: Optional[datetime] = None,
    ) -> "SessionExercise":
        """
        Create a new exercise entry for a session.

        Raises:
            TrackingDomainError: On empty ids, blank name or order below 1.
        """
        session_id = require_id(workout_session_id, "Workout session ID")
        catalog_id = require_id(exercise_id, "Exercise ID")
        if exercise_name is None or not exercise_name.strip():
            raise TrackingDomainError("Exercise name is required")
        if order < 1:
            raise TrackingDomainError("Order must be at least 1")

        return cls(
            workout_session_id=session_id,
            exercise_id=catalog_id,
            exercise_name=exercise_name.strip(),
            metric_type=metric_type,
            order=order,
            performed_at=now or utc_now(),
        )

    # -------------------------------------------------------------------------
    # Computed Properties
    # -------------------------------------------------------------------------

    @property
    def set_count(self) -> int:
        return len(self.sets)

    @property
    def has_sets(self) -> bool:
        return bool(self.sets)

    @property
    def last_set(self) -> Optional[SessionSet]:
        return self.sets[-1] if self.sets else None

    def get_set(self, set_number: int) -> Optional[SessionSet]:
        """Find a set by its number."""
        for s in self.sets:
            if s.set_number == set_number:
                return s
        return None

    def _evolve(self, update: Dict[str, Any]) -> "SessionExercise":
        """Frozen copy with `update` applied; the set list is never shared."""
        return self.model_copy(update={"sets": list(self.sets), **update})

    # -------------------------------------------------------------------------
    # Set Management (return new instances for immutability)
    # -------------------------------------------------------------------------

    def add_set(
        self,
        repetitions: Optional[int] = None,
        weight: Optional[float] = None,
        duration_seconds: Optional[int] = None,
        distance: Optional[float] = None,
        rest_time_seconds: Optional[int] = None,
        *,
        now: Optional[datetime] = None,
    ) -> "SessionExercise":
        """
        Return a new SessionExercise with a set appended.

        The new set is numbered len(sets) + 1 and is available as `last_set`.
        """
        require_non_negative(
            repetitions=repetitions,
            weight=weight,
            duration_seconds=duration_seconds,
            distance=distance,
            rest_time_seconds=rest_time_seconds,
        )
        timestamp = now or utc_now()
        new_set = SessionSet(
            session_exercise_id=self.id,
            set_number=len(self.sets) + 1,
            repetitions=repetitions,
            weight=weight,
            duration_seconds=duration_seconds,
            distance=distance,
            rest_time_seconds=rest_time_seconds,
            completed_at=timestamp,
        )
        return self._evolve(
            {"sets": [*self.sets, new_set], "updated_at": timestamp}
        )

    def update_set(
        self,
        set_number: int,
        repetitions: Optional[int] = None,
        weight: Optional[float] = None,
        duration_seconds: Optional[int] = None,
        distance: Optional[float] = None,
        rest_time_seconds: Optional[int] = None,
        *,
        now: Optional[datetime] = None,
    ) -> "SessionExercise":
        """
        Return a new SessionExercise with one set's measurements updated.

        Raises:
            TrackingDomainError: If the set number does not exist.
        """
        target = self.get_set(set_number)
        if target is None:
            raise TrackingDomainError(f"Set number {set_number} not found")

        updated = target.update_performance(
            repetitions=repetitions,
            weight=weight,
            duration_seconds=duration_seconds,
            distance=distance,
            rest_time_seconds=rest_time_seconds,
        )
        new_sets = [updated if s.set_number == set_number else s for s in self.sets]
        return self._evolve({"sets": new_sets, "updated_at": now or utc_now()})

    def remove_set(self, set_number: int, *, now: Optional[datetime] = None) -> "SessionExercise":
        """
        Return a new SessionExercise without the given set.

        Remaining sets are renumbered 1..N in their existing order.

        Raises:
            TrackingDomainError: If the set number does not exist.
        """
        if self.get_set(set_number) is None:
            raise TrackingDomainError(f"Set number {set_number} not found")

        remaining = [s for s in self.sets if s.set_number != set_number]
        renumbered = [s.renumbered(i) for i, s in enumerate(remaining, start=1)]
        return self._evolve({"sets": renumbered, "updated_at": now or utc_now()})

    def set_performance_score(
        self, score: float, *, now: Optional[datetime] = None
    ) -> "SessionExercise":
        """Return a copy with an explicit performance score (0-100)."""
        if score < 0 or score > 100:
            raise TrackingDomainError("Performance score must be between 0 and 100")
        return self._evolve(
            {"performance_score": score, "updated_at": now or utc_now()}
        )

    def update_order(self, new_order: int, *, now: Optional[datetime] = None) -> "SessionExercise":
        """Return a copy at a new position within the session."""
        if new_order < 1:
            raise TrackingDomainError("Order must be at least 1")
        if new_order == self.order:
            return self
        return self._evolve({"order": new_order, "updated_at": now or utc_now()})

    # -------------------------------------------------------------------------
    # Performance
    # -------------------------------------------------------------------------

    def get_best_performance(self) -> Optional[float]:
        """
        Get the best performance across all sets.

        What "best" means depends on the metric type:
        - WEIGHT: highest volume (weight × reps)
        - REPETITIONS: most reps
        - TIME: longest duration
        - DISTANCE: longest distance
        - otherwise: highest primary performance value

        Returns:
            Best value, or None when no set carries the relevant measurement.
        """
        if not self.sets:
            return None

        if self.metric_type == ExerciseMetricType.WEIGHT:
            values = [s.volume for s in self.sets]
        elif self.metric_type == ExerciseMetricType.REPETITIONS:
            values = [s.repetitions for s in self.sets]
        elif self.metric_type == ExerciseMetricType.TIME:
            values = [s.duration_seconds for s in self.sets]
        elif self.metric_type == ExerciseMetricType.DISTANCE:
            values = [s.distance for s in self.sets]
        else:
            values = [s.get_primary_performance_value() for s in self.sets]

        present = [float(v) for v in values if v is not None]
        return max(present) if present else None

    def get_overall_performance_score(self) -> float:
        """
        Average set score plus a consistency bonus of up to 5 points.

        The bonus shrinks as the spread between the best and worst set grows.
        """
        if not self.sets:
            return 0.0

        scores = [s.get_performance_score() for s in self.sets]
        average = sum(scores) / len(scores)
        consistency = 1.0 - (max(scores) - min(scores)) / 100.0
        return max(0.0, average + consistency * CONSISTENCY_BONUS)

    def get_total_volume(self) -> Optional[float]:
        """Total weight × reps across sets, for weight and rep exercises only."""
        if self.metric_type not in (ExerciseMetricType.WEIGHT, ExerciseMetricType.REPETITIONS):
            return None
        volumes = [s.volume for s in self.sets if s.volume is not None]
        return sum(volumes) if volumes else None

    def estimate_calories_burned(self, user_weight_kg: Optional[float] = None) -> int:
        """
        Estimate calories burned for this exercise.

        Uses a per-minute rate for the metric type over the recorded set
        durations, or two minutes per set when no durations were recorded.
        The result scales with body weight relative to 70 kg when known.

        Args:
            user_weight_kg: Optional body weight of the user

        Returns:
            Estimated calories (0 when there are no sets, otherwise at least 1).
        """
        if not self.sets:
            return 0

        rate = CALORIES_PER_MINUTE.get(self.metric_type, DEFAULT_CALORIES_PER_MINUTE)
        total_seconds = sum(s.duration_seconds for s in self.sets if s.duration_seconds is not None)
        minutes = (
            total_seconds / 60.0
            if total_seconds > 0
            else len(self.sets) * ESTIMATED_MINUTES_PER_SET
        )

        calories = rate * minutes
        if user_weight_kg is not None:
            calories *= user_weight_kg / CALORIE_BASELINE_WEIGHT_KG

        return max(1, round(calories))

    # -------------------------------------------------------------------------
    # Display
    # -------------------------------------------------------------------------

    def get_performance_display(self) -> str:
        """Aggregate display, e.g. "3 sets | 30 total reps | 55.0kg avg"."""
        if not self.sets:
            return "No sets recorded"

        parts = [f"{len(self.sets)} sets"]

        total_reps = sum(s.repetitions for s in self.sets if s.repetitions is not None)
        weights = [s.weight for s in self.sets if s.weight is not None]
        total_duration = sum(
            s.duration_seconds for s in self.sets if s.duration_seconds is not None
        )
        total_distance = sum(s.distance for s in self.sets if s.distance is not None)

        if total_reps > 0:
            parts.append(f"{total_reps} total reps")
        if weights and sum(weights) > 0:
            parts.append(f"{sum(weights) / len(weights):.1f}kg avg")
        if total_duration > 0:
            minutes, seconds = divmod(total_duration, 60)
            parts.append(
                f"{minutes}:{seconds:02d} total" if seconds > 0 else f"{minutes}min total"
            )
        if total_distance > 0:
            parts.append(f"{format_distance(total_distance)} total")

        return " | ".join(parts)

    def get_performance_summary(self) -> str:
        """Summary such as "2 sets | 10×50.0kg best | 80% avg"."""
        if not self.sets:
            return "No sets completed"

        summary = f"{len(self.sets)} set{'s' if len(self.sets) > 1 else ''}"

        best = self.get_best_performance()
        if best is not None:
            if self.metric_type == ExerciseMetricType.WEIGHT:
                summary += f" | {self._best_weight_summary()}"
            elif self.metric_type == ExerciseMetricType.TIME:
                summary += f" | {best:.0f}s best"
            elif self.metric_type == ExerciseMetricType.DISTANCE:
                summary += f" | {format_distance(best)} best"
            elif self.metric_type == ExerciseMetricType.REPETITIONS:
                summary += f" | {best:.0f} reps best"
            else:
                summary += f" | {best:.1f} best"

        summary += f" | {self.get_overall_performance_score():.0f}% avg"
        return summary

    def _best_weight_summary(self) -> str:
        candidates = [s for s in self.sets if s.volume is not None]
        if not candidates:
            return "No weight data"
        best = max(candidates, key=lambda s: s.volume)
        return f"{best.repetitions}×{best.weight:.1f}kg best"

    def __str__(self) -> str:
        return f"{self.order}. {self.exercise_name} ({self.get_performance_display()})"
