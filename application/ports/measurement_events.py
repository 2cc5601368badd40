"""
Measurement Event Publisher Interface (Port).

The profile module publishes PhysicalMeasurementsUpdated through this port.
Delivery to the tracking synchronizer is at-least-once.
"""
from typing import Callable, Protocol

from domain.models import PhysicalMeasurementsUpdated

MeasurementEventHandler = Callable[[PhysicalMeasurementsUpdated], None]


class MeasurementEventPublisher(Protocol):
    """Abstract interface for publishing measurement change events."""

    def publish(self, event: PhysicalMeasurementsUpdated) -> str:
        """
        Queue an event for delivery.

        Returns:
            Delivery id that can be used to query status
        """
        ...

    def subscribe(self, handler: MeasurementEventHandler) -> None:
        """Register a handler to receive every published event."""
        ...
