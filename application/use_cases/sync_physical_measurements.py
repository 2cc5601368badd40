"""
SyncPhysicalMeasurements Use Case.

Turns PhysicalMeasurementsUpdated events from the profile module into
UserMetric rows. Height is stored in cm and weight in kg.

Handling is idempotent: each row's id is derived from the event's
revision id, user and metric type, so a redelivered event finds its rows
already present and records nothing new.
"""

import logging
import uuid
from dataclasses import dataclass, field
from typing import List

from application.ports import UserMetricRepository
from domain.models import PhysicalMeasurementsUpdated, UserMetric, UserMetricType
from domain.models.user_metric import auto_sync_note
from domain.services.units import height_to_cm, weight_to_kg

logger = logging.getLogger(__name__)

# Namespace for deterministic metric ids of synced measurements
SYNC_NAMESPACE = uuid.UUID("6f1b5c3e-2a4d-4f7e-9c1a-8d3b7e5f0a21")


def synced_metric_id(user_id: str, revision_id: str, metric_type: UserMetricType) -> str:
    """Deterministic id for the row a revision produces for one metric type."""
    return str(uuid.uuid5(SYNC_NAMESPACE, f"{user_id}:{revision_id}:{metric_type.value}"))


@dataclass
class SyncResult:
    """Outcome of handling one measurement event."""

    created: List[UserMetric] = field(default_factory=list)
    skipped: List[str] = field(default_factory=list)

    @property
    def created_count(self) -> int:
        return len(self.created)


class SyncPhysicalMeasurementsUseCase:
    """
    Use case for synchronizing profile measurements into user metrics.

    Usage:
        >>> use_case = SyncPhysicalMeasurementsUseCase(metric_repo=metric_repo)
        >>> queue.subscribe(use_case.handle)
    """

    def __init__(self, metric_repo: UserMetricRepository) -> None:
        self._metric_repo = metric_repo

    def execute(self, event: PhysicalMeasurementsUpdated) -> SyncResult:
        """
        Record one metric row per measurement supplied in the event.

        Args:
            event: The measurement change raised by the profile module

        Returns:
            SyncResult listing created rows and ids skipped as already synced

        Raises:
            TrackingDomainError: If a unit cannot be converted. Nothing is
                written for the event in that case.
        """
        logger.info(
            "Syncing physical measurements for user %s (revision %s)",
            event.user_id,
            event.revision_id,
        )

        # Convert everything first so a bad unit writes nothing
        pending: List[UserMetric] = []
        if event.has_height:
            pending.append(
                self._build(event, UserMetricType.HEIGHT, height_to_cm(event.height, event.height_unit), "cm")
            )
        if event.has_weight:
            pending.append(
                self._build(event, UserMetricType.WEIGHT, weight_to_kg(event.weight, event.weight_unit), "kg")
            )

        result = SyncResult()
        for metric in pending:
            if self._metric_repo.get_by_id(metric.id) is not None:
                logger.info(
                    "Metric %s already synced for revision %s, skipping",
                    metric.id,
                    event.revision_id,
                )
                result.skipped.append(metric.id)
                continue
            result.created.append(self._metric_repo.add(metric))

        logger.info(
            "Synced %d measurement(s) for user %s (%d already present)",
            result.created_count,
            event.user_id,
            len(result.skipped),
        )
        return result

    def handle(self, event: PhysicalMeasurementsUpdated) -> None:
        """Event handler entry point for the measurement queue."""
        self.execute(event)

    @staticmethod
    def _build(
        event: PhysicalMeasurementsUpdated,
        metric_type: UserMetricType,
        value: float,
        unit: str,
    ) -> UserMetric:
        return UserMetric.create(
            user_id=event.user_id,
            metric_type=metric_type,
            value=value,
            recorded_at=event.updated_at,
            notes=auto_sync_note(event.source),
            unit=unit,
            metric_id=synced_metric_id(event.user_id, event.revision_id, metric_type),
        )
