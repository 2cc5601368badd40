"""
UserMetrics Use Case.

Records and maintains personal measurements (weight, height, personal records).
"""

import logging
from datetime import datetime
from typing import List, Optional

from application.ports import UserMetricRepository
from domain.exceptions import NotFoundError
from domain.models import UserMetric, UserMetricType

logger = logging.getLogger(__name__)


class UserMetricsUseCase:
    """Use case for recording and querying user metrics."""

    def __init__(self, metric_repo: UserMetricRepository) -> None:
        self._metric_repo = metric_repo

    def record_metric(
        self,
        user_id: str,
        metric_type: UserMetricType,
        value: float,
        recorded_at: Optional[datetime] = None,
        notes: Optional[str] = None,
        unit: Optional[str] = None,
    ) -> UserMetric:
        """
        Record a new measurement.

        Raises:
            TrackingDomainError: If the value is negative or user_id is empty.
        """
        logger.info("Recording metric %s for user %s", metric_type.value, user_id)
        metric = UserMetric.create(
            user_id=user_id,
            metric_type=metric_type,
            value=value,
            recorded_at=recorded_at,
            notes=notes,
            unit=unit,
        )
        return self._metric_repo.add(metric)

    def update_metric(
        self, metric_id: str, value: float, notes: Optional[str] = None
    ) -> UserMetric:
        metric = self._get(metric_id)
        updated = self._metric_repo.update(metric.update_value(value, notes))
        logger.info("Metric %s updated", metric_id)
        return updated

    def update_recorded_at(self, metric_id: str, recorded_at: datetime) -> UserMetric:
        metric = self._get(metric_id)
        updated = self._metric_repo.update(metric.update_recorded_at(recorded_at))
        logger.info("Metric %s moved to %s", metric_id, recorded_at.isoformat())
        return updated

    def delete_metric(self, metric_id: str) -> None:
        """
        Delete a metric.

        Raises:
            NotFoundError: If the metric does not exist.
        """
        self._get(metric_id)
        self._metric_repo.delete(metric_id)
        logger.info("Metric %s deleted", metric_id)

    def get_metrics(self, user_id: str) -> List[UserMetric]:
        return self._metric_repo.get_user_metrics(user_id)

    def get_metrics_by_type(self, user_id: str, metric_type: UserMetricType) -> List[UserMetric]:
        return self._metric_repo.get_user_metrics(user_id, metric_type=metric_type)

    def get_latest_metric(self, user_id: str, metric_type: UserMetricType) -> Optional[UserMetric]:
        return self._metric_repo.get_latest(user_id, metric_type)

    def _get(self, metric_id: str) -> UserMetric:
        metric = self._metric_repo.get_by_id(metric_id)
        if metric is None:
            raise NotFoundError("Metric", metric_id)
        return metric
