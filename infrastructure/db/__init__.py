"""
Infrastructure Database Layer.

This package provides Supabase-backed implementations of the repository interfaces
defined in application.ports. These implementations are injected into the use
cases for clean separation of concerns and testability.

Usage:
    from supabase import create_client
    from infrastructure.db import (
        SupabaseWorkoutSessionRepository,
        SupabasePlannedWorkoutRepository,
        SupabaseUserMetricRepository,
        SupabaseExerciseCatalog,
    )

    # Create Supabase client
    client = create_client(SUPABASE_URL, SUPABASE_KEY)

    # Instantiate repositories with injected client
    session_repo = SupabaseWorkoutSessionRepository(client)
    planned_repo = SupabasePlannedWorkoutRepository(client)
    metric_repo = SupabaseUserMetricRepository(client)
    catalog = SupabaseExerciseCatalog(client)
"""

from infrastructure.db.workout_session_repository import SupabaseWorkoutSessionRepository
from infrastructure.db.planned_workout_repository import SupabasePlannedWorkoutRepository
from infrastructure.db.user_metric_repository import SupabaseUserMetricRepository
from infrastructure.db.exercise_catalog import SupabaseExerciseCatalog

__all__ = [
    # Session persistence
    "SupabaseWorkoutSessionRepository",

    # Scheduling
    "SupabasePlannedWorkoutRepository",

    # Metrics
    "SupabaseUserMetricRepository",

    # Exercise catalog lookup
    "SupabaseExerciseCatalog",
]
