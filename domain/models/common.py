"""
Small helpers shared by the domain models.
"""

import uuid
from datetime import date, datetime, time, timezone
from typing import Optional, Tuple

from domain.exceptions import TrackingDomainError


def utc_now() -> datetime:
    """Current time as a timezone-aware UTC datetime."""
    return datetime.now(timezone.utc)


def day_bounds(start: date, end: date) -> Tuple[datetime, datetime]:
    """First and last instant (UTC) of an inclusive range of days."""
    return (
        datetime.combine(start, time.min, tzinfo=timezone.utc),
        datetime.combine(end, time.max, tzinfo=timezone.utc),
    )


def new_id() -> str:
    """Generate a new entity identifier (UUID4 string)."""
    return str(uuid.uuid4())


def require_id(value: Optional[str], label: str) -> str:
    """
    Ensure an identifier is present.

    Args:
        value: Identifier to check
        label: Human-readable name used in the error message

    Returns:
        The identifier, stripped of surrounding whitespace.

    Raises:
        TrackingDomainError: If the identifier is None or blank.
    """
    if value is None or not str(value).strip():
        raise TrackingDomainError.empty_identifier(label)
    return str(value).strip()


def require_non_negative(**values: Optional[float]) -> None:
    """Raise TrackingDomainError for the first supplied value below zero."""
    for name, value in values.items():
        if value is not None and value < 0:
            raise TrackingDomainError(f"{name} cannot be negative")


def clean_text(value: Optional[str]) -> Optional[str]:
    """Trim free text, keeping None as None."""
    return value.strip() if value is not None else None
