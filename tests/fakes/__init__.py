"""
Fake Repository Implementations for Testing.

This package provides in-memory fake implementations of repository interfaces
for fast, isolated testing. No database or external dependencies required.

Features:
- All fakes implement the same Protocol interfaces as real implementations
- Supports seeding with test data
- Supports reset() for test isolation
- Factory functions for common test scenarios

Usage:
    from tests.fakes import FakeWorkoutSessionRepository, create_session_repo

    # Direct instantiation
    repo = FakeWorkoutSessionRepository()
    repo.seed([WorkoutSession.create("user1", "w1")])

    # Factory function with pre-populated data
    repo = create_session_repo(user_id="user1", num_completed=5)
"""
from datetime import datetime, timedelta, timezone
from typing import Optional

from domain.models import PerceivedDifficulty, WorkoutSession

# Import all fake implementations
from tests.fakes.workout_session_repository import FakeWorkoutSessionRepository
from tests.fakes.planned_workout_repository import FakePlannedWorkoutRepository
from tests.fakes.user_metric_repository import FakeUserMetricRepository
from tests.fakes.exercise_catalog import FakeExerciseCatalog


# =============================================================================
# Factory Functions
# =============================================================================


def create_completed_session(
    user_id: str,
    started_at: datetime,
    minutes: int = 45,
    workout_id: str = "workout-1",
    difficulty: PerceivedDifficulty = PerceivedDifficulty.MODERATE,
) -> WorkoutSession:
    """Build a session that started at `started_at` and completed `minutes` later."""
    session = WorkoutSession.create(user_id=user_id, workout_id=workout_id, now=started_at)
    return session.complete(difficulty, now=started_at + timedelta(minutes=minutes))


def create_session_repo(
    user_id: str = "user-1",
    num_completed: int = 3,
    end: Optional[datetime] = None,
) -> FakeWorkoutSessionRepository:
    """
    Create a session repository with one completed session per day.

    The last session starts on `end` (defaults to now), earlier ones on
    the preceding days.
    """
    end = end or datetime.now(timezone.utc)
    repo = FakeWorkoutSessionRepository()
    repo.seed(
        [
            create_completed_session(user_id, end - timedelta(days=offset))
            for offset in range(num_completed)
        ]
    )
    return repo


__all__ = [
    # Fakes
    "FakeWorkoutSessionRepository",
    "FakePlannedWorkoutRepository",
    "FakeUserMetricRepository",
    "FakeExerciseCatalog",
    # Factories
    "create_completed_session",
    "create_session_repo",
]
