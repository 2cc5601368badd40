"""
Performance analysis against a user's own history.

Scores an exercise by comparing its best performance to earlier sessions
of the same catalog exercise. Three aspects are weighted:

- improvement (40%): how close the current best is to the personal best
- consistency (30%): current best vs the average of the last five sessions
- volume (30%): current best vs the average of all earlier sessions
"""

import logging
from typing import Dict, Iterable, List, Mapping, Sequence, Tuple

from domain.models.session_exercise import SessionExercise
from domain.models.workout_session import WorkoutSession, describe_performance

logger = logging.getLogger(__name__)

NO_SETS_SCORE = 0.0
UNMEASURED_SCORE = 50.0
FIRST_ATTEMPT_SCORE = 75.0
RECENT_WINDOW = 5
WORKOUT_COMPLETION_BONUS = 5.0

IMPROVEMENT_WEIGHT = 0.4
CONSISTENCY_WEIGHT = 0.3
VOLUME_WEIGHT = 0.3

# (minimum ratio, score) pairs, highest first
IMPROVEMENT_BANDS: Sequence[Tuple[float, float]] = (
    (0.95, 90.0),
    (0.90, 80.0),
    (0.85, 70.0),
    (0.80, 60.0),
    (0.70, 50.0),
)
CONSISTENCY_BANDS: Sequence[Tuple[float, float]] = (
    (1.10, 100.0),
    (1.05, 85.0),
    (0.95, 75.0),
    (0.90, 65.0),
    (0.85, 55.0),
)
VOLUME_BANDS: Sequence[Tuple[float, float]] = (
    (1.20, 100.0),
    (1.10, 90.0),
    (1.00, 80.0),
    (0.90, 70.0),
    (0.80, 60.0),
)


def _banded(ratio: float, bands: Sequence[Tuple[float, float]], floor: float, scale: float) -> float:
    for minimum, score in bands:
        if ratio >= minimum:
            return score
    return max(floor, ratio * scale)


def improvement_score(current: float, personal_best: float) -> float:
    """100 for a new personal record, otherwise banded by % of the record."""
    if current >= personal_best:
        return 100.0
    return _banded(current / personal_best, IMPROVEMENT_BANDS, floor=20.0, scale=50.0)


def consistency_score(current: float, recent_average: float) -> float:
    if recent_average <= 0:
        return 100.0
    return _banded(current / recent_average, CONSISTENCY_BANDS, floor=30.0, scale=50.0)


def volume_score(current: float, historical_values: Sequence[float]) -> float:
    average = sum(historical_values) / len(historical_values)
    if average <= 0:
        return 100.0
    return _banded(current / average, VOLUME_BANDS, floor=40.0, scale=60.0)


def progress_score(current: float, historical_values: Sequence[float]) -> float:
    """Weighted blend of improvement, consistency and volume scores."""
    recent = historical_values[-RECENT_WINDOW:]
    recent_average = sum(recent) / len(recent)
    return (
        improvement_score(current, max(historical_values)) * IMPROVEMENT_WEIGHT
        + consistency_score(current, recent_average) * CONSISTENCY_WEIGHT
        + volume_score(current, historical_values) * VOLUME_WEIGHT
    )


class PerformanceAnalysisService:
    """
    Scores exercises and whole sessions against historical performances.

    Stateless; history is passed in by the caller, oldest first.
    """

    def score_exercise(
        self,
        current: SessionExercise,
        history: Iterable[SessionExercise],
    ) -> float:
        """
        Score one exercise (0-100) against earlier performances of it.

        Args:
            current: The exercise just performed
            history: Earlier performances, oldest first. Entries for other
                catalog exercises are ignored.

        Returns:
            0 without sets, 50 when nothing measurable was recorded, 75 for a
            first attempt, otherwise the weighted progress score.
        """
        if not current.has_sets:
            return NO_SETS_SCORE

        current_best = current.get_best_performance()
        if current_best is None:
            return UNMEASURED_SCORE

        historical_values: List[float] = []
        for past in history:
            if past.exercise_id != current.exercise_id:
                continue
            best = past.get_best_performance()
            if best is not None:
                historical_values.append(best)

        if not historical_values:
            return FIRST_ATTEMPT_SCORE

        return progress_score(current_best, historical_values)

    def score_workout(
        self,
        session: WorkoutSession,
        history_by_exercise: Mapping[str, Iterable[SessionExercise]],
    ) -> float:
        """
        Score a whole session against history, keyed by catalog exercise id.

        Average of the exercise scores plus 5 when every exercise has sets,
        capped at 100.
        """
        if not session.exercises:
            return 0.0

        scores = [
            self.score_exercise(exercise, history_by_exercise.get(exercise.exercise_id, ()))
            for exercise in session.exercises
        ]
        average = sum(scores) / len(scores)
        bonus = WORKOUT_COMPLETION_BONUS if all(e.has_sets for e in session.exercises) else 0.0
        logger.debug("Scored session %s: average=%.1f bonus=%.1f", session.id, average, bonus)
        return min(100.0, average + bonus)

    def score_exercises(
        self,
        session: WorkoutSession,
        history_by_exercise: Mapping[str, Iterable[SessionExercise]],
    ) -> Dict[str, float]:
        """Per-exercise scores keyed by session-exercise id."""
        return {
            exercise.id: self.score_exercise(
                exercise, history_by_exercise.get(exercise.exercise_id, ())
            )
            for exercise in session.exercises
        }

    @staticmethod
    def get_performance_description(score: float) -> str:
        return describe_performance(score)
