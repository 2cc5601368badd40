"""
Supabase implementation of UserMetricRepository.

Metrics are rows in the `user_metrics` table, one per measurement.
"""
import logging
from datetime import datetime
from typing import List, Optional

from supabase import Client

from domain.models import UserMetric, UserMetricType

logger = logging.getLogger(__name__)

TABLE = "user_metrics"


class SupabaseUserMetricRepository:
    """Supabase implementation of UserMetricRepository protocol."""

    def __init__(self, client: Client):
        self._client = client

    def get_by_id(self, metric_id: str) -> Optional[UserMetric]:
        try:
            result = self._client.table(TABLE).select("*").eq("id", metric_id).execute()
        except Exception:
            logger.exception("Error fetching metric %s", metric_id)
            raise
        if not result.data:
            return None
        return UserMetric.model_validate(result.data[0])

    def add(self, metric: UserMetric) -> UserMetric:
        try:
            result = self._client.table(TABLE).insert(metric.model_dump(mode="json")).execute()
        except Exception:
            logger.exception("Error inserting metric %s", metric.id)
            raise
        return UserMetric.model_validate(result.data[0]) if result.data else metric

    def update(self, metric: UserMetric) -> UserMetric:
        row = metric.model_dump(mode="json", exclude={"id"})
        try:
            result = self._client.table(TABLE).update(row).eq("id", metric.id).execute()
        except Exception:
            logger.exception("Error updating metric %s", metric.id)
            raise
        return UserMetric.model_validate(result.data[0]) if result.data else metric

    def delete(self, metric_id: str) -> bool:
        try:
            result = self._client.table(TABLE).delete().eq("id", metric_id).execute()
        except Exception:
            logger.exception("Error deleting metric %s", metric_id)
            raise
        return bool(result.data)

    def get_user_metrics(
        self,
        user_id: str,
        *,
        metric_type: Optional[UserMetricType] = None,
        start: Optional[datetime] = None,
        end: Optional[datetime] = None,
    ) -> List[UserMetric]:
        try:
            query = self._client.table(TABLE).select("*").eq("user_id", user_id)
            if metric_type is not None:
                query = query.eq("metric_type", metric_type.value)
            if start is not None:
                query = query.gte("recorded_at", start.isoformat())
            if end is not None:
                query = query.lte("recorded_at", end.isoformat())
            result = query.order("recorded_at").execute()
        except Exception:
            logger.exception("Error fetching metrics for user %s", user_id)
            raise
        return [UserMetric.model_validate(row) for row in result.data or []]

    def get_latest(self, user_id: str, metric_type: UserMetricType) -> Optional[UserMetric]:
        try:
            result = (
                self._client.table(TABLE)
                .select("*")
                .eq("user_id", user_id)
                .eq("metric_type", metric_type.value)
                .order("recorded_at", desc=True)
                .limit(1)
                .execute()
            )
        except Exception:
            logger.exception("Error fetching latest %s for user %s", metric_type.value, user_id)
            raise
        if not result.data:
            return None
        return UserMetric.model_validate(result.data[0])
