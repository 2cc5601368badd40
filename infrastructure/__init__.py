"""
Infrastructure Layer for workout tracking.

This package contains concrete implementations of the application ports:
- db/: Supabase database implementations
- events/: In-process measurement event queue
"""

# Re-export adapters for convenient access
from infrastructure.db import (
    SupabaseExerciseCatalog,
    SupabasePlannedWorkoutRepository,
    SupabaseUserMetricRepository,
    SupabaseWorkoutSessionRepository,
)
from infrastructure.events import MeasurementEventQueue

__all__ = [
    "SupabaseWorkoutSessionRepository",
    "SupabasePlannedWorkoutRepository",
    "SupabaseUserMetricRepository",
    "SupabaseExerciseCatalog",
    "MeasurementEventQueue",
]
