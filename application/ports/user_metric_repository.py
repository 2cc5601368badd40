"""
User Metric Repository Interface (Port).

This module defines the abstract interface for personal measurement
persistence (weight, height, personal records).
"""
from datetime import datetime
from typing import List, Optional, Protocol

from domain.models import UserMetric, UserMetricType


class UserMetricRepository(Protocol):
    """
    Abstract interface for UserMetric persistence.

    Metrics form a time series per user and type; queries return them
    ordered by recorded_at.
    """

    def get_by_id(self, metric_id: str) -> Optional[UserMetric]:
        ...

    def add(self, metric: UserMetric) -> UserMetric:
        ...

    def update(self, metric: UserMetric) -> UserMetric:
        ...

    def delete(self, metric_id: str) -> bool:
        ...

    def get_user_metrics(
        self,
        user_id: str,
        *,
        metric_type: Optional[UserMetricType] = None,
        start: Optional[datetime] = None,
        end: Optional[datetime] = None,
    ) -> List[UserMetric]:
        """
        Get a user's metrics, oldest first.

        Args:
            user_id: Owner of the metrics
            metric_type: Only metrics of this type
            start: Inclusive lower bound on recorded_at
            end: Inclusive upper bound on recorded_at
        """
        ...

    def get_latest(self, user_id: str, metric_type: UserMetricType) -> Optional[UserMetric]:
        """Get the most recently recorded metric of a type."""
        ...
