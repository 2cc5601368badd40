"""
Supabase implementation of ExerciseCatalog.

Reads id and name from the shared `exercises` table. Entries are cached
per instance since names are only needed once per added exercise.
"""
import logging
from typing import Dict, Optional

from supabase import Client

from application.ports import CatalogExercise

logger = logging.getLogger(__name__)


class SupabaseExerciseCatalog:
    """Supabase implementation of ExerciseCatalog protocol."""

    def __init__(self, client: Client):
        self._client = client
        self._cache: Dict[str, CatalogExercise] = {}

    def get_by_id(self, exercise_id: str) -> Optional[CatalogExercise]:
        cached = self._cache.get(exercise_id)
        if cached is not None:
            return cached

        try:
            result = (
                self._client.table("exercises").select("id, name").eq("id", exercise_id).execute()
            )
        except Exception:
            logger.exception("Error fetching exercise by id %s", exercise_id)
            raise

        if not result.data:
            return None
        row = result.data[0]
        entry = CatalogExercise(id=str(row["id"]), name=row["name"])
        self._cache[exercise_id] = entry
        return entry
