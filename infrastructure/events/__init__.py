"""
Infrastructure Events Layer.

In-process delivery of cross-module events into the tracking module.
"""

from infrastructure.events.measurement_queue import (
    DeliveryStatus,
    MeasurementDelivery,
    MeasurementEventQueue,
)

__all__ = [
    "DeliveryStatus",
    "MeasurementDelivery",
    "MeasurementEventQueue",
]
