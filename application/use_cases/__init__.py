"""
Application Use Cases for workout tracking.

This package contains application-level use cases that orchestrate domain logic
and coordinate between ports/adapters. Use cases are the entry points for
business operations and contain the application's workflow logic.

Architecture follows Clean Architecture / Hexagonal pattern:
- Use cases orchestrate domain objects and repository ports
- Dependencies are injected via constructors for testability
- Use cases return domain models, not API responses

Usage:
    from application.use_cases import (
        SessionTrackingUseCase,
        WorkoutSchedulingUseCase,
        SyncPhysicalMeasurementsUseCase,
    )

    # Track a live session
    tracking = SessionTrackingUseCase(
        session_repo=session_repo,
        metric_repo=metric_repo,
        exercise_catalog=catalog,
    )
    session = tracking.start_session(user_id="user-123", workout_id="w-1")

    # Schedule a workout
    scheduling = WorkoutSchedulingUseCase(planned_repo=planned_repo, session_repo=session_repo)
    planned = scheduling.schedule_workout("user-123", "w-1", date(2024, 3, 4))

    # Sync profile measurements
    sync = SyncPhysicalMeasurementsUseCase(metric_repo=metric_repo)
    queue.subscribe(sync.handle)
"""

from application.use_cases.session_tracking import SessionTrackingUseCase
from application.use_cases.sync_physical_measurements import (
    SyncPhysicalMeasurementsUseCase,
    SyncResult,
)
from application.use_cases.tracking_stats import (
    ExercisePerformance,
    MetricTrend,
    PerformanceHistoryEntry,
    SessionScore,
    TrackingStats,
    TrackingStatsUseCase,
    WorkoutFrequency,
)
from application.use_cases.user_metrics import UserMetricsUseCase
from application.use_cases.workout_scheduling import WorkoutSchedulingUseCase

__all__ = [
    # Sessions
    "SessionTrackingUseCase",
    # Scheduling
    "WorkoutSchedulingUseCase",
    # Metrics
    "UserMetricsUseCase",
    # Statistics
    "TrackingStatsUseCase",
    "TrackingStats",
    "WorkoutFrequency",
    "MetricTrend",
    "ExercisePerformance",
    "PerformanceHistoryEntry",
    "SessionScore",
    # Measurement sync
    "SyncPhysicalMeasurementsUseCase",
    "SyncResult",
]
