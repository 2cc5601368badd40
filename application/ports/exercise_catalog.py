"""
Exercise Catalog Interface (Port).

Read-only lookup into the exercise catalog owned by another module. Tracking
only needs the name, which is snapshotted when an exercise is added to a session.
"""
from dataclasses import dataclass
from typing import Optional, Protocol


@dataclass
class CatalogExercise:
    """Catalog entry as seen by tracking."""
    id: str
    name: str


class ExerciseCatalog(Protocol):
    """Abstract interface for exercise catalog lookups."""

    def get_by_id(self, exercise_id: str) -> Optional[CatalogExercise]:
        """
        Look up a catalog exercise.

        Returns:
            The exercise id and name, or None if unknown
        """
        ...
