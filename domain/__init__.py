"""
Domain layer for workout tracking.

This package contains pure domain models and services that are independent
of infrastructure concerns (database, API, external services).
"""

from domain.exceptions import NotFoundError, TrackingDomainError
from domain.models import (
    ExerciseMetricType,
    PerceivedDifficulty,
    PhysicalMeasurementsUpdated,
    PlannedWorkout,
    SessionExercise,
    SessionSet,
    UserMetric,
    UserMetricType,
    WorkoutSession,
    WorkoutSessionStatus,
)

__all__ = [
    "ExerciseMetricType",
    "NotFoundError",
    "PerceivedDifficulty",
    "PhysicalMeasurementsUpdated",
    "PlannedWorkout",
    "SessionExercise",
    "SessionSet",
    "TrackingDomainError",
    "UserMetric",
    "UserMetricType",
    "WorkoutSession",
    "WorkoutSessionStatus",
]
