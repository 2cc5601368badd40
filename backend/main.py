"""
Composition root for the tracking module.

This module wires settings, logging, error tracking, the Supabase adapters,
the measurement event queue and the use cases into one TrackingModule.
The factory pattern allows for:
- Easy testing with custom settings and in-memory repositories
- Multiple module instances with different configurations
- Clear separation of wiring from business logic

Usage:
    from backend.main import create_tracking_module
    from backend.settings import Settings

    # Default module (uses get_settings() and Supabase)
    tracking = create_tracking_module()
    session = tracking.sessions.start_session("user-123", "w-1")

    # Test module with fakes
    tracking = create_tracking_module(
        settings=Settings(environment="test", _env_file=None),
        session_repo=FakeWorkoutSessionRepository(),
        planned_repo=FakePlannedWorkoutRepository(),
        metric_repo=FakeUserMetricRepository(),
        exercise_catalog=FakeExerciseCatalog(),
    )
"""

import logging
from dataclasses import dataclass
from typing import Optional

import sentry_sdk
from supabase import Client, create_client

from application.ports import (
    ExerciseCatalog,
    PlannedWorkoutRepository,
    UserMetricRepository,
    WorkoutSessionRepository,
)
from application.use_cases import (
    SessionTrackingUseCase,
    SyncPhysicalMeasurementsUseCase,
    TrackingStatsUseCase,
    UserMetricsUseCase,
    WorkoutSchedulingUseCase,
)
from backend.settings import Settings, get_settings
from infrastructure.db import (
    SupabaseExerciseCatalog,
    SupabasePlannedWorkoutRepository,
    SupabaseUserMetricRepository,
    SupabaseWorkoutSessionRepository,
)
from infrastructure.events import MeasurementEventQueue

logger = logging.getLogger(__name__)

LOG_FORMAT = "%(asctime)s %(levelname)s [%(name)s] %(message)s"


@dataclass
class TrackingModule:
    """Wired use cases and the measurement queue."""

    settings: Settings
    sessions: SessionTrackingUseCase
    scheduling: WorkoutSchedulingUseCase
    metrics: UserMetricsUseCase
    stats: TrackingStatsUseCase
    measurement_sync: SyncPhysicalMeasurementsUseCase
    measurement_queue: MeasurementEventQueue


def create_tracking_module(
    settings: Optional[Settings] = None,
    *,
    client: Optional[Client] = None,
    session_repo: Optional[WorkoutSessionRepository] = None,
    planned_repo: Optional[PlannedWorkoutRepository] = None,
    metric_repo: Optional[UserMetricRepository] = None,
    exercise_catalog: Optional[ExerciseCatalog] = None,
) -> TrackingModule:
    """
    Create and wire a TrackingModule instance.

    Any repository left as None is backed by Supabase.

    Args:
        settings: Optional Settings instance. If not provided, uses get_settings()
                  which loads from environment variables.
        client: Supabase client to use instead of one built from settings
        session_repo: WorkoutSession repository override
        planned_repo: PlannedWorkout repository override
        metric_repo: UserMetric repository override
        exercise_catalog: Exercise catalog override

    Returns:
        Configured TrackingModule.

    Raises:
        RuntimeError: If a Supabase-backed repository is needed but Supabase
            is not configured.
    """
    if settings is None:
        settings = get_settings()

    _configure_logging(settings)
    _init_sentry(settings)

    needs_client = None in (session_repo, planned_repo, metric_repo, exercise_catalog)
    if needs_client and client is None:
        client = _create_supabase_client(settings)

    session_repo = session_repo or SupabaseWorkoutSessionRepository(client)
    planned_repo = planned_repo or SupabasePlannedWorkoutRepository(client)
    metric_repo = metric_repo or SupabaseUserMetricRepository(client)
    exercise_catalog = exercise_catalog or SupabaseExerciseCatalog(client)

    measurement_sync = SyncPhysicalMeasurementsUseCase(metric_repo=metric_repo)
    queue = MeasurementEventQueue(max_attempts=settings.sync_max_attempts)
    queue.subscribe(measurement_sync.handle)

    module = TrackingModule(
        settings=settings,
        sessions=SessionTrackingUseCase(
            session_repo=session_repo,
            metric_repo=metric_repo,
            exercise_catalog=exercise_catalog,
            default_body_weight_kg=settings.default_body_weight_kg,
            session_met=settings.session_met,
        ),
        scheduling=WorkoutSchedulingUseCase(planned_repo=planned_repo, session_repo=session_repo),
        metrics=UserMetricsUseCase(metric_repo=metric_repo),
        stats=TrackingStatsUseCase(session_repo=session_repo, metric_repo=metric_repo),
        measurement_sync=measurement_sync,
        measurement_queue=queue,
    )
    logger.info("Tracking module created (environment=%s)", settings.environment)
    return module


def _configure_logging(settings: Settings) -> None:
    """Set the root log level from settings."""
    logging.basicConfig(level=settings.log_level, format=LOG_FORMAT)
    logging.getLogger().setLevel(settings.log_level)


def _init_sentry(settings: Settings) -> None:
    """Initialize Sentry SDK if DSN is configured."""
    if settings.sentry_dsn:
        sentry_sdk.init(
            dsn=settings.sentry_dsn,
            environment=settings.environment,
            traces_sample_rate=0.1,  # 10% of transactions for performance monitoring
            profiles_sample_rate=0.1,
            enable_tracing=True,
        )
        logger.info("Sentry initialized for workout tracking")


def _create_supabase_client(settings: Settings) -> Client:
    """Create a Supabase client from settings, failing when unconfigured."""
    if not settings.supabase_url or not settings.supabase_key:
        raise RuntimeError(
            "Supabase is not configured: set SUPABASE_URL and SUPABASE_SERVICE_ROLE_KEY"
        )
    return create_client(settings.supabase_url, settings.supabase_key)
