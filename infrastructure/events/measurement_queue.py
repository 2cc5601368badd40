"""
In-process queue delivering measurement events to tracking.

Provides at-least-once delivery of PhysicalMeasurementsUpdated events:
- MeasurementDelivery dataclass for per-event status tracking
- MeasurementEventQueue for publishing, draining and dead-lettering

An event stays pending until every subscribed handler has accepted it.
A handler failure is logged and the event is retried on the next drain, so
handlers must be idempotent. After `max_attempts` failed deliveries the
event is marked failed and kept for inspection or `requeue_failed()`.
"""

import logging
import uuid
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, List, Optional

from application.ports import MeasurementEventHandler
from domain.models import PhysicalMeasurementsUpdated

logger = logging.getLogger(__name__)

DEFAULT_MAX_ATTEMPTS = 5


class DeliveryStatus(str, Enum):
    """Status states for queued measurement events."""

    PENDING = "pending"
    PROCESSING = "processing"
    DELIVERED = "delivered"
    FAILED = "failed"


@dataclass
class MeasurementDelivery:
    """
    A single event in the queue.

    Attributes:
        event: The queued event
        id: Unique identifier for this delivery
        status: Current delivery status
        attempts: Number of delivery attempts made so far
        error: Last handler error, if any
    """

    event: PhysicalMeasurementsUpdated
    id: str = field(default_factory=lambda: str(uuid.uuid4()))
    status: DeliveryStatus = DeliveryStatus.PENDING
    attempts: int = 0
    error: Optional[str] = None


class MeasurementEventQueue:
    """
    Queue implementing MeasurementEventPublisher with at-least-once delivery.

    Usage:
        >>> queue = MeasurementEventQueue(max_attempts=5)
        >>> queue.subscribe(sync_use_case.handle)
        >>> delivery_id = queue.publish(event)
        >>> queue.drain()
        1
        >>> queue.get_status(delivery_id)["status"]
        'delivered'
    """

    def __init__(self, max_attempts: int = DEFAULT_MAX_ATTEMPTS):
        if max_attempts < 1:
            raise ValueError("max_attempts must be at least 1")
        self._max_attempts = max_attempts
        self._deliveries: Dict[str, MeasurementDelivery] = {}
        self._pending: List[str] = []
        self._handlers: List[MeasurementEventHandler] = []

    def subscribe(self, handler: MeasurementEventHandler) -> None:
        self._handlers.append(handler)

    def publish(self, event: PhysicalMeasurementsUpdated) -> str:
        """
        Add an event to the queue.

        Returns:
            The delivery ID
        """
        delivery = MeasurementDelivery(event=event)
        self._deliveries[delivery.id] = delivery
        self._pending.append(delivery.id)

        logger.info(
            f"Queued measurement event {delivery.id} for user {event.user_id} "
            f"(revision {event.revision_id})"
        )
        return delivery.id

    @property
    def pending_count(self) -> int:
        return len(self._pending)

    def get_status(self, delivery_id: str) -> Optional[Dict[str, Any]]:
        """
        Get the current status of a delivery.

        Returns:
            Dictionary with delivery status info, or None if not found
        """
        delivery = self._deliveries.get(delivery_id)
        if delivery is None:
            return None

        return {
            "id": delivery.id,
            "status": delivery.status.value,
            "attempts": delivery.attempts,
            "error": delivery.error,
            "user_id": delivery.event.user_id,
            "revision_id": delivery.event.revision_id,
        }

    def get_failed(self) -> List[MeasurementDelivery]:
        """Dead-lettered deliveries."""
        return [d for d in self._deliveries.values() if d.status == DeliveryStatus.FAILED]

    def drain(self) -> int:
        """
        Attempt delivery of every pending event once.

        Returns:
            Number of events delivered in this pass
        """
        batch, self._pending = self._pending, []
        delivered = 0
        for delivery_id in batch:
            if self._process(delivery_id):
                delivered += 1
        return delivered

    def requeue_failed(self) -> int:
        """Move dead-lettered events back to pending with a fresh attempt budget."""
        failed = self.get_failed()
        for delivery in failed:
            delivery.status = DeliveryStatus.PENDING
            delivery.attempts = 0
            self._pending.append(delivery.id)
        if failed:
            logger.info(f"Requeued {len(failed)} failed measurement event(s)")
        return len(failed)

    def _process(self, delivery_id: str) -> bool:
        """
        Deliver one event to all handlers.

        Returns:
            True if every handler accepted the event
        """
        delivery = self._deliveries.get(delivery_id)
        if delivery is None:
            logger.warning(f"Delivery {delivery_id} not found for processing")
            return False

        delivery.status = DeliveryStatus.PROCESSING
        delivery.attempts += 1

        try:
            for handler in self._handlers:
                handler(delivery.event)
        except Exception as e:
            delivery.error = str(e)
            if delivery.attempts >= self._max_attempts:
                delivery.status = DeliveryStatus.FAILED
                logger.error(
                    f"Measurement event {delivery_id} failed after "
                    f"{delivery.attempts} attempt(s): {e}"
                )
            else:
                delivery.status = DeliveryStatus.PENDING
                self._pending.append(delivery_id)
                logger.warning(
                    f"Measurement event {delivery_id} attempt {delivery.attempts} failed: {e}"
                )
            return False

        delivery.status = DeliveryStatus.DELIVERED
        delivery.error = None
        logger.info(f"Measurement event {delivery_id} delivered")
        return True
