"""
WorkoutSession aggregate root.

A tracked workout with its state machine, the exercises performed in it,
and the whole-session performance and calorie calculations.
"""

from datetime import date, datetime, timedelta
from typing import Any, Dict, List, Optional

from pydantic import BaseModel, Field, model_validator

from domain.exceptions import TrackingDomainError
from domain.models.common import clean_text, new_id, require_id, utc_now
from domain.models.enums import ExerciseMetricType, PerceivedDifficulty, WorkoutSessionStatus
from domain.models.session_exercise import SessionExercise

# Calorie estimation defaults (MET × kg × hours)
DEFAULT_SESSION_MET = 5.0
DEFAULT_BODY_WEIGHT_KG = 70.0

# Session score bonuses
COMPLETION_BONUS = 5.0
DURATION_BONUS = 3.0
CONSISTENCY_BONUS = 2.0
MIN_REASONABLE_MINUTES = 20
MAX_REASONABLE_MINUTES = 120
CONSISTENCY_THRESHOLD = 15.0

# (lower bound, label) pairs, highest first
PERFORMANCE_DESCRIPTIONS = (
    (95, "Personal Record"),
    (85, "Excellent"),
    (75, "Great"),
    (65, "Good"),
    (55, "Solid"),
    (45, "Improving"),
    (35, "On Track"),
)
LOWEST_PERFORMANCE_DESCRIPTION = "Keep Going"


def estimate_session_calories(
    duration_seconds: Optional[int],
    body_weight_kg: float = DEFAULT_BODY_WEIGHT_KG,
    met: float = DEFAULT_SESSION_MET,
) -> int:
    """
    Estimate calories for a session of the given length.

    Uses MET × body weight (kg) × duration (hours), rounded to the nearest
    integer. Returns 0 when the duration is unknown or zero.
    """
    if not duration_seconds:
        return 0
    duration_minutes = duration_seconds / 60.0
    return round(met * body_weight_kg * (duration_minutes / 60.0))


def describe_performance(score: float) -> str:
    """Map a 0-100 score to a short encouraging label."""
    for threshold, label in PERFORMANCE_DESCRIPTIONS:
        if score >= threshold:
            return label
    return LOWEST_PERFORMANCE_DESCRIPTION


class WorkoutSession(BaseModel):
    """
    A workout session with its actual tracking data.

    Sessions created with a planned date start as PLANNED; all others start
    IN_PROGRESS immediately. Exercises can only be changed while the session
    is IN_PROGRESS. Sessions are frozen: every domain method returns a new
    instance with its own exercise list and leaves the receiver untouched,
    so a failed call never leaves partial changes.

    Examples:
        >>> session = WorkoutSession.create(user_id="u-1", workout_id="w-1")
        >>> session.status
        <WorkoutSessionStatus.IN_PROGRESS: 'in_progress'>
        >>> session = session.add_exercise("squat", "Squat", ExerciseMetricType.WEIGHT,
        ...                                repetitions=5, weight=100)
        >>> session.exercise_count
        1
    """

    id: str = Field(default_factory=new_id)
    user_id: str = Field(..., min_length=1)
    workout_id: str = Field(..., min_length=1)
    planned_date: Optional[datetime] = None
    start_time: Optional[datetime] = None
    end_time: Optional[datetime] = None
    status: WorkoutSessionStatus
    total_duration_seconds: Optional[int] = Field(default=None, ge=0)
    calories_estimated: Optional[int] = Field(default=None, ge=0)
    perceived_difficulty: Optional[PerceivedDifficulty] = None
    notes: Optional[str] = None
    is_from_program: bool = False
    program_id: Optional[str] = None
    exercises: List[SessionExercise] = Field(default_factory=list)
    created_at: datetime = Field(default_factory=utc_now)
    updated_at: Optional[datetime] = None

    model_config = {"frozen": True}

    @model_validator(mode="after")
    def validate_invariants(self) -> "WorkoutSession":
        """Reject stored state that no sequence of transitions could produce."""
        ended = self.status in (WorkoutSessionStatus.COMPLETED, WorkoutSessionStatus.ABANDONED)
        if ended and self.end_time is None:
            raise ValueError(f"Session with status {self.status.value} requires an end time")
        if not ended and self.end_time is not None:
            raise ValueError(f"Session with status {self.status.value} cannot have an end time")
        if self.status == WorkoutSessionStatus.IN_PROGRESS and self.start_time is None:
            raise ValueError("Session in progress requires a start time")

        for position, exercise in enumerate(self.exercises, start=1):
            if exercise.workout_session_id != self.id:
                raise ValueError(f"Exercise {exercise.id} does not belong to session {self.id}")
            if exercise.order != position:
                raise ValueError(
                    f"Exercise orders must be contiguous from 1 (found {exercise.order} at {position})"
                )
        return self

    @classmethod
    def create(
        cls,
        user_id: str,
        workout_id: str,
        planned_date: Optional[datetime] = None,
        is_from_program: bool = False,
        program_id: Optional[str] = None,
        *,
        now: Optional[datetime] = None,
    ) -> "WorkoutSession":
        """
        Create a new session.

        Args:
            user_id: Owner of the session
            workout_id: Catalog workout being performed
            planned_date: When supplied, the session is PLANNED; otherwise it starts now
            is_from_program: Whether the session belongs to a training program
            program_id: Program the session belongs to
            now: Clock override

        Raises:
            TrackingDomainError: If user_id or workout_id is empty.
        """
        user = require_id(user_id, "User ID")
        workout = require_id(workout_id, "Workout ID")
        timestamp = now or utc_now()

        planned = planned_date is not None
        return cls(
            user_id=user,
            workout_id=workout,
            planned_date=planned_date,
            is_from_program=is_from_program,
            program_id=program_id,
            status=WorkoutSessionStatus.PLANNED if planned else WorkoutSessionStatus.IN_PROGRESS,
            start_time=None if planned else timestamp,
            created_at=timestamp,
        )

    # -------------------------------------------------------------------------
    # Computed Properties
    # -------------------------------------------------------------------------

    @property
    def exercise_count(self) -> int:
        return len(self.exercises)

    @property
    def duration(self) -> Optional[timedelta]:
        """Elapsed time between start and end, once both are known."""
        if self.start_time is None or self.end_time is None:
            return None
        return self.end_time - self.start_time

    @property
    def is_active(self) -> bool:
        return self.status == WorkoutSessionStatus.IN_PROGRESS

    @property
    def last_exercise(self) -> Optional[SessionExercise]:
        return self.exercises[-1] if self.exercises else None

    def _evolve(self, update: Dict[str, Any]) -> "WorkoutSession":
        """Frozen copy with `update` applied; the exercise list is never shared."""
        return self.model_copy(update={"exercises": list(self.exercises), **update})

    # -------------------------------------------------------------------------
    # Session Management (return new instances for immutability)
    # -------------------------------------------------------------------------

    def start(self, *, now: Optional[datetime] = None) -> "WorkoutSession":
        """Move a PLANNED session to IN_PROGRESS."""
        if self.status != WorkoutSessionStatus.PLANNED:
            raise TrackingDomainError.invalid_transition("start", "session", self.status.value)

        timestamp = now or utc_now()
        return self._evolve(
            {
                "status": WorkoutSessionStatus.IN_PROGRESS,
                "start_time": timestamp,
                "updated_at": timestamp,
            }
        )

    def complete(
        self,
        perceived_difficulty: PerceivedDifficulty,
        notes: Optional[str] = None,
        *,
        now: Optional[datetime] = None,
        body_weight_kg: float = DEFAULT_BODY_WEIGHT_KG,
        met: float = DEFAULT_SESSION_MET,
    ) -> "WorkoutSession":
        """
        Finish an IN_PROGRESS session.

        Records the end time, the duration in whole seconds, the perceived
        difficulty and the calorie estimate for the supplied body weight.

        Raises:
            TrackingDomainError: If the session is not in progress or has no start time.
        """
        if self.status != WorkoutSessionStatus.IN_PROGRESS:
            raise TrackingDomainError.invalid_transition("complete", "session", self.status.value)
        if self.start_time is None:
            raise TrackingDomainError("Cannot complete session without start time")

        end_time = now or utc_now()
        duration_seconds = round((end_time - self.start_time).total_seconds())
        return self._evolve(
            {
                "status": WorkoutSessionStatus.COMPLETED,
                "end_time": end_time,
                "total_duration_seconds": duration_seconds,
                "perceived_difficulty": PerceivedDifficulty(perceived_difficulty),
                "notes": clean_text(notes),
                "calories_estimated": estimate_session_calories(
                    duration_seconds, body_weight_kg=body_weight_kg, met=met
                ),
                "updated_at": end_time,
            }
        )

    def abandon(self, reason: Optional[str] = None, *, now: Optional[datetime] = None) -> "WorkoutSession":
        """Stop an IN_PROGRESS session without finishing it."""
        if self.status != WorkoutSessionStatus.IN_PROGRESS:
            raise TrackingDomainError.invalid_transition("abandon", "session", self.status.value)

        timestamp = now or utc_now()
        update = {
            "status": WorkoutSessionStatus.ABANDONED,
            "end_time": timestamp,
            "notes": clean_text(reason),
            "updated_at": timestamp,
        }
        if self.start_time is not None:
            update["total_duration_seconds"] = round((timestamp - self.start_time).total_seconds())
        return self._evolve(update)

    def cancel(self, reason: Optional[str] = None, *, now: Optional[datetime] = None) -> "WorkoutSession":
        """Cancel a PLANNED session that was never started."""
        if self.status != WorkoutSessionStatus.PLANNED:
            raise TrackingDomainError.invalid_transition("cancel", "session", self.status.value)

        return self._evolve(
            {
                "status": WorkoutSessionStatus.CANCELLED,
                "notes": clean_text(reason),
                "updated_at": now or utc_now(),
            }
        )

    def update_planned_date(
        self, planned_date: Optional[datetime], *, now: Optional[datetime] = None
    ) -> "WorkoutSession":
        if self.status != WorkoutSessionStatus.PLANNED:
            raise TrackingDomainError("Can only update planned date for planned sessions")
        return self._evolve({"planned_date": planned_date, "updated_at": now or utc_now()})

    def set_estimated_calories(self, calories: int, *, now: Optional[datetime] = None) -> "WorkoutSession":
        if calories < 0:
            raise TrackingDomainError("Calories cannot be negative")
        return self._evolve({"calories_estimated": calories, "updated_at": now or utc_now()})

    def estimate_calories(
        self,
        body_weight_kg: float = DEFAULT_BODY_WEIGHT_KG,
        met: float = DEFAULT_SESSION_MET,
    ) -> int:
        """Calorie estimate for the recorded duration (0 until the session has one)."""
        return estimate_session_calories(
            self.total_duration_seconds, body_weight_kg=body_weight_kg, met=met
        )

    # -------------------------------------------------------------------------
    # Exercise Management
    # -------------------------------------------------------------------------

    def _require_in_progress(self, message: str) -> None:
        if self.status != WorkoutSessionStatus.IN_PROGRESS:
            raise TrackingDomainError(message)

    def add_exercise(
        self,
        exercise_id: str,
        exercise_name: str,
        metric_type: ExerciseMetricType,
        repetitions: Optional[int] = None,
        weight: Optional[float] = None,
        duration_seconds: Optional[int] = None,
        distance: Optional[float] = None,
        *,
        now: Optional[datetime] = None,
    ) -> "WorkoutSession":
        """
        Return a new session with an exercise appended.

        The exercise gets order = count + 1. When any measurement is supplied,
        an initial set is recorded with it. The new exercise is available as
        `last_exercise` on the returned session.

        Raises:
            TrackingDomainError: If the session is not in progress, the
                exercise id is empty or the name is blank.
        """
        self._require_in_progress("Can only add exercises to sessions in progress")
        timestamp = now or utc_now()

        exercise = SessionExercise.create(
            workout_session_id=self.id,
            exercise_id=exercise_id,
            exercise_name=exercise_name,
            metric_type=metric_type,
            order=len(self.exercises) + 1,
            now=timestamp,
        )
        if any(v is not None for v in (repetitions, weight, duration_seconds, distance)):
            exercise = exercise.add_set(
                repetitions=repetitions,
                weight=weight,
                duration_seconds=duration_seconds,
                distance=distance,
                now=timestamp,
            )

        return self._evolve(
            {"exercises": [*self.exercises, exercise], "updated_at": timestamp}
        )

    def remove_exercise(self, session_exercise_id: str, *, now: Optional[datetime] = None) -> "WorkoutSession":
        """
        Return a new session without the given exercise.

        Remaining exercises are renumbered 1..N in their existing order.
        """
        self._require_in_progress("Can only modify exercises in sessions in progress")
        if self.get_exercise(session_exercise_id) is None:
            raise TrackingDomainError(f"Exercise {session_exercise_id} not found in session")

        timestamp = now or utc_now()
        remaining = [e for e in self.exercises if e.id != session_exercise_id]
        reordered = [e.update_order(i, now=timestamp) for i, e in enumerate(remaining, start=1)]
        return self._evolve({"exercises": reordered, "updated_at": timestamp})

    def _replace_exercise(self, session_exercise_id: str, change, now: Optional[datetime]) -> "WorkoutSession":
        """Apply `change` to one exercise and return the updated session."""
        self._require_in_progress("Can only modify exercises in sessions in progress")
        target = self.get_exercise(session_exercise_id)
        if target is None:
            raise TrackingDomainError(f"Exercise {session_exercise_id} not found in session")

        timestamp = now or utc_now()
        updated = change(target, timestamp)
        exercises = [updated if e.id == session_exercise_id else e for e in self.exercises]
        return self._evolve({"exercises": exercises, "updated_at": timestamp})

    def add_set(
        self,
        session_exercise_id: str,
        repetitions: Optional[int] = None,
        weight: Optional[float] = None,
        duration_seconds: Optional[int] = None,
        distance: Optional[float] = None,
        rest_time_seconds: Optional[int] = None,
        *,
        now: Optional[datetime] = None,
    ) -> "WorkoutSession":
        return self._replace_exercise(
            session_exercise_id,
            lambda ex, ts: ex.add_set(
                repetitions=repetitions,
                weight=weight,
                duration_seconds=duration_seconds,
                distance=distance,
                rest_time_seconds=rest_time_seconds,
                now=ts,
            ),
            now,
        )

    def update_set(
        self,
        session_exercise_id: str,
        set_number: int,
        repetitions: Optional[int] = None,
        weight: Optional[float] = None,
        duration_seconds: Optional[int] = None,
        distance: Optional[float] = None,
        rest_time_seconds: Optional[int] = None,
        *,
        now: Optional[datetime] = None,
    ) -> "WorkoutSession":
        return self._replace_exercise(
            session_exercise_id,
            lambda ex, ts: ex.update_set(
                set_number,
                repetitions=repetitions,
                weight=weight,
                duration_seconds=duration_seconds,
                distance=distance,
                rest_time_seconds=rest_time_seconds,
                now=ts,
            ),
            now,
        )

    def remove_set(
        self, session_exercise_id: str, set_number: int, *, now: Optional[datetime] = None
    ) -> "WorkoutSession":
        return self._replace_exercise(
            session_exercise_id,
            lambda ex, ts: ex.remove_set(set_number, now=ts),
            now,
        )

    def set_exercise_performance_score(
        self, session_exercise_id: str, score: float, *, now: Optional[datetime] = None
    ) -> "WorkoutSession":
        return self._replace_exercise(
            session_exercise_id,
            lambda ex, ts: ex.set_performance_score(score, now=ts),
            now,
        )

    # -------------------------------------------------------------------------
    # Queries
    # -------------------------------------------------------------------------

    def get_exercise(self, session_exercise_id: str) -> Optional[SessionExercise]:
        """Find an exercise by its session-exercise id."""
        for exercise in self.exercises:
            if exercise.id == session_exercise_id:
                return exercise
        return None

    def has_exercise(self, exercise_id: str) -> bool:
        """Check whether a catalog exercise was performed in this session."""
        return any(e.exercise_id == exercise_id for e in self.exercises)

    def get_exercises_by_type(self, metric_type: ExerciseMetricType) -> List[SessionExercise]:
        return [e for e in self.exercises if e.metric_type == metric_type]

    def is_overdue(self, today: Optional[date] = None) -> bool:
        if self.status != WorkoutSessionStatus.PLANNED or self.planned_date is None:
            return False
        return self.planned_date.date() < (today or utc_now().date())

    def is_upcoming(self, today: Optional[date] = None) -> bool:
        if self.status != WorkoutSessionStatus.PLANNED or self.planned_date is None:
            return False
        return self.planned_date.date() >= (today or utc_now().date())

    @property
    def anchor_time(self) -> datetime:
        """When the session happened or is meant to happen."""
        return self.start_time or self.planned_date or self.created_at

    def falls_within(self, start: datetime, end: datetime) -> bool:
        """True when the start time or the planned date lies in [start, end]."""
        return any(
            moment is not None and start <= moment <= end
            for moment in (self.start_time, self.planned_date)
        )

    # -------------------------------------------------------------------------
    # Performance
    # -------------------------------------------------------------------------

    def calculate_performance_score(self) -> float:
        """
        Overall performance score for a completed session (0-100).

        Averages the exercise scores, then adds:
        - +5 when every exercise has at least one set
        - +3 when the session lasted between 20 and 120 minutes
        - +2 when two or more exercise scores lie within 15 points of each other

        Returns 0 for sessions that are not completed or have no exercises.
        """
        if self.status != WorkoutSessionStatus.COMPLETED or not self.exercises:
            return 0.0

        scores = [e.get_overall_performance_score() for e in self.exercises]
        average = sum(scores) / len(scores)

        bonus = 0.0
        if all(e.has_sets for e in self.exercises):
            bonus += COMPLETION_BONUS

        duration = self.duration
        if duration is not None:
            minutes = duration.total_seconds() / 60.0
            if MIN_REASONABLE_MINUTES <= minutes <= MAX_REASONABLE_MINUTES:
                bonus += DURATION_BONUS

        if len(scores) > 1 and max(scores) - min(scores) <= CONSISTENCY_THRESHOLD:
            bonus += CONSISTENCY_BONUS

        return min(100.0, average + bonus)

    def get_performance_summary(self) -> str:
        """Summary such as "Great - 78% (45min)"."""
        if self.status != WorkoutSessionStatus.COMPLETED:
            return "Workout not completed"

        score = self.calculate_performance_score()
        summary = f"{describe_performance(score)} - {score:.0f}%"
        duration = self.duration
        if duration is not None:
            summary += f" ({duration.total_seconds() / 60.0:.0f}min)"
        return summary

    def __str__(self) -> str:
        return f"WorkoutSession {self.id} ({self.status.value}, {self.exercise_count} exercises)"
