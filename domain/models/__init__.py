"""
Domain models for workout tracking.

This package contains pure domain models that are independent of
infrastructure concerns (database, API, external services).

These models represent the core tracking concepts:
- WorkoutSession: The aggregate root owning the exercises performed in a session
- SessionExercise: One exercise within a session, owning its sets
- SessionSet: A single measured attempt (reps, weight, duration, distance)
- PlannedWorkout: A workout scheduled for a day, linked to a session once started
- UserMetric: A personal measurement recorded over time
- PhysicalMeasurementsUpdated: Event raised when profile measurements change

Usage:
    >>> from domain.models import WorkoutSession, ExerciseMetricType, PerceivedDifficulty

    >>> session = WorkoutSession.create(user_id="u-1", workout_id="w-1")
    >>> session = session.add_exercise(
    ...     "bench-press", "Bench Press", ExerciseMetricType.WEIGHT, repetitions=10, weight=50
    ... )
    >>> session = session.complete(PerceivedDifficulty.MODERATE)

    >>> # Serialize to JSON and back; invariants are checked on load
    >>> restored = WorkoutSession.model_validate_json(session.model_dump_json())
"""

from domain.models.enums import (
    ExerciseMetricType,
    PerceivedDifficulty,
    UserMetricType,
    WorkoutSessionStatus,
)
from domain.models.events import PhysicalMeasurementsUpdated
from domain.models.planned_workout import PlannedWorkout
from domain.models.session_exercise import SessionExercise
from domain.models.session_set import SessionSet
from domain.models.user_metric import UserMetric
from domain.models.workout_session import WorkoutSession

__all__ = [
    # Main entities
    "WorkoutSession",
    "SessionExercise",
    "SessionSet",
    "PlannedWorkout",
    "UserMetric",
    # Events
    "PhysicalMeasurementsUpdated",
    # Enums
    "WorkoutSessionStatus",
    "ExerciseMetricType",
    "PerceivedDifficulty",
    "UserMetricType",
]
