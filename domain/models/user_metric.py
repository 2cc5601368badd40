"""
UserMetric: a personal measurement recorded over time.
"""

from datetime import datetime
from typing import Optional

from pydantic import BaseModel, Field, field_validator

from domain.exceptions import TrackingDomainError
from domain.models.common import clean_text, new_id, require_id, utc_now
from domain.models.enums import UserMetricType

# Notes on rows written by the measurement synchronizer start with this
AUTO_SYNC_NOTE_PREFIX = "Auto-sync from profile update"

DEFAULT_UNITS = {
    UserMetricType.WEIGHT: "kg",
    UserMetricType.HEIGHT: "cm",
    UserMetricType.PERSONAL_RECORD: "kg",
}


def default_unit(metric_type: UserMetricType) -> str:
    """Unit used when none is supplied for a metric type."""
    return DEFAULT_UNITS.get(metric_type, "unit")


def auto_sync_note(source: str) -> str:
    return f"{AUTO_SYNC_NOTE_PREFIX} ({source})"


class UserMetric(BaseModel):
    """
    A time-series measurement such as body weight, height or a personal record.

    Values are never negative. Rows created by the measurement synchronizer
    carry an auto-sync note so they can be told apart from user entries.
    """

    id: str = Field(default_factory=new_id)
    user_id: str = Field(..., min_length=1)
    metric_type: UserMetricType
    value: float = Field(..., ge=0)
    unit: str = Field(..., min_length=1)
    recorded_at: datetime = Field(default_factory=utc_now)
    notes: Optional[str] = None
    created_at: datetime = Field(default_factory=utc_now)
    updated_at: Optional[datetime] = None

    model_config = {"frozen": True}

    @field_validator("unit")
    @classmethod
    def unit_not_blank(cls, v: str) -> str:
        if not v.strip():
            raise ValueError("Unit cannot be blank")
        return v.strip()

    @classmethod
    def create(
        cls,
        user_id: str,
        metric_type: UserMetricType,
        value: float,
        recorded_at: Optional[datetime] = None,
        notes: Optional[str] = None,
        unit: Optional[str] = None,
        *,
        metric_id: Optional[str] = None,
        now: Optional[datetime] = None,
    ) -> "UserMetric":
        """
        Record a new metric.

        Args:
            user_id: Owner of the metric
            metric_type: What is being measured
            value: Measured value (must be >= 0)
            recorded_at: When it was measured (defaults to now)
            notes: Free text
            unit: Unit of the value (defaults per metric type)
            metric_id: Explicit id, used for idempotent inserts
            now: Clock override

        Raises:
            TrackingDomainError: If user_id is empty or value is negative.
        """
        user = require_id(user_id, "User ID")
        if value < 0:
            raise TrackingDomainError("Metric value cannot be negative")

        timestamp = now or utc_now()
        cleaned_unit = clean_text(unit)
        fields = dict(
            user_id=user,
            metric_type=metric_type,
            value=value,
            unit=cleaned_unit or default_unit(metric_type),
            recorded_at=recorded_at or timestamp,
            notes=clean_text(notes),
            created_at=timestamp,
        )
        if metric_id is not None:
            fields["id"] = metric_id
        return cls(**fields)

    # ---- Domain Methods (return new instances for immutability) ----

    def update_value(
        self, new_value: float, notes: Optional[str] = None, *, now: Optional[datetime] = None
    ) -> "UserMetric":
        """Replace the value and notes."""
        if new_value < 0:
            raise TrackingDomainError("Metric value cannot be negative")
        return self.model_copy(
            update={"value": new_value, "notes": clean_text(notes), "updated_at": now or utc_now()}
        )

    def update_recorded_at(self, recorded_at: datetime, *, now: Optional[datetime] = None) -> "UserMetric":
        return self.model_copy(update={"recorded_at": recorded_at, "updated_at": now or utc_now()})

    # ---- Computed Properties ----

    @property
    def is_auto_synced(self) -> bool:
        return bool(self.notes) and self.notes.startswith(AUTO_SYNC_NOTE_PREFIX)

    def get_display_value(self) -> str:
        return f"{self.value:.1f} {self.unit}"

    def is_personal_record_type(self) -> bool:
        """Metrics where a higher value is tracked as progress."""
        return self.metric_type in (UserMetricType.PERSONAL_RECORD, UserMetricType.HEIGHT)

    def is_health_metric_type(self) -> bool:
        """Metrics where a lower value is often the goal."""
        return self.metric_type == UserMetricType.WEIGHT
