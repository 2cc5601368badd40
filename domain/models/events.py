"""
Domain events crossing the module boundary into tracking.
"""

from datetime import datetime
from typing import Optional

from pydantic import BaseModel, Field

from domain.models.common import new_id, utc_now


class PhysicalMeasurementsUpdated(BaseModel):
    """
    Raised by the profile module when a user's height or weight changes.

    Only the supplied fields changed. `revision_id` identifies the profile
    revision and is the idempotency key for consumers: delivering the same
    event twice must not record the measurements twice.
    """

    user_id: str = Field(..., min_length=1)
    height: Optional[float] = Field(default=None, ge=0)
    height_unit: str = "cm"
    weight: Optional[float] = Field(default=None, ge=0)
    weight_unit: str = "kg"
    updated_at: datetime = Field(default_factory=utc_now)
    source: str = "ProfileUpdate"
    revision_id: str = Field(default_factory=new_id, description="Profile revision id")

    model_config = {"frozen": True}

    @property
    def has_height(self) -> bool:
        return self.height is not None and bool(self.height_unit.strip())

    @property
    def has_weight(self) -> bool:
        return self.weight is not None and bool(self.weight_unit.strip())
