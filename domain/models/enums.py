"""
Enumerations shared by the tracking aggregates.
"""

from enum import Enum


class WorkoutSessionStatus(str, Enum):
    """
    Lifecycle states of a workout session or planned workout.

    - PLANNED: scheduled, not started yet
    - IN_PROGRESS: currently being performed
    - COMPLETED: finished successfully (terminal)
    - ABANDONED: started but not finished (terminal)
    - CANCELLED: planned but never started (terminal)
    """

    PLANNED = "planned"
    IN_PROGRESS = "in_progress"
    COMPLETED = "completed"
    ABANDONED = "abandoned"
    CANCELLED = "cancelled"

    @property
    def is_terminal(self) -> bool:
        return self in (
            WorkoutSessionStatus.COMPLETED,
            WorkoutSessionStatus.ABANDONED,
            WorkoutSessionStatus.CANCELLED,
        )


class ExerciseMetricType(str, Enum):
    """How performance is measured for an exercise."""

    REPETITIONS = "repetitions"
    WEIGHT = "weight"
    TIME = "time"
    DISTANCE = "distance"


class PerceivedDifficulty(int, Enum):
    """Perceived difficulty of a completed workout, from 1 (very easy) to 6."""

    VERY_EASY = 1
    EASY = 2
    MODERATE = 3
    HARD = 4
    VERY_HARD = 5
    MAXIMUM = 6


class UserMetricType(str, Enum):
    """Kinds of personal measurements tracked over time."""

    WEIGHT = "weight"
    HEIGHT = "height"
    PERSONAL_RECORD = "personal_record"
