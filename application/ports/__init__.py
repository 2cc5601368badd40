"""
Repository Interfaces (Ports) for workout tracking.

This package defines abstract interfaces that decouple domain logic from
infrastructure (database, external services). Implementations are provided
in the infrastructure layer.

Architecture follows the Ports & Adapters (Hexagonal) pattern:
- Ports: Abstract interfaces defined here (what the domain needs)
- Adapters: Concrete implementations in infrastructure/ (how it's provided)

Usage:
    from application.ports import WorkoutSessionRepository

    class SessionService:
        def __init__(self, session_repo: WorkoutSessionRepository):
            self.session_repo = session_repo
"""

# Session persistence
from application.ports.workout_session_repository import WorkoutSessionRepository

# Scheduling persistence
from application.ports.planned_workout_repository import PlannedWorkoutRepository

# Metric persistence
from application.ports.user_metric_repository import UserMetricRepository

# Exercise catalog lookup
from application.ports.exercise_catalog import CatalogExercise, ExerciseCatalog

# Cross-module events
from application.ports.measurement_events import (
    MeasurementEventHandler,
    MeasurementEventPublisher,
)

__all__ = [
    # Sessions
    "WorkoutSessionRepository",
    # Scheduling
    "PlannedWorkoutRepository",
    # Metrics
    "UserMetricRepository",
    # Catalog
    "ExerciseCatalog",
    "CatalogExercise",
    # Events
    "MeasurementEventPublisher",
    "MeasurementEventHandler",
]
