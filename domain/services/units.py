"""
Conversion of profile measurements into the units tracking stores.

Heights are stored in centimeters and weights in kilograms. Results are the
exact product of value and factor; no rounding is applied.
"""

from domain.exceptions import TrackingDomainError

CM_PER_FOOT = 30.48
CM_PER_INCH = 2.54
KG_PER_POUND = 0.453592

HEIGHT_FACTORS_TO_CM = {
    "cm": 1.0,
    "ft": CM_PER_FOOT,
    "in": CM_PER_INCH,
}

WEIGHT_FACTORS_TO_KG = {
    "kg": 1.0,
    "lb": KG_PER_POUND,
    "lbs": KG_PER_POUND,
}


def _normalize_unit(unit: str) -> str:
    return (unit or "").strip().lower()


def height_to_cm(value: float, unit: str) -> float:
    """
    Convert a height to centimeters.

    Examples:
        >>> height_to_cm(180, "CM")
        180.0

    Raises:
        TrackingDomainError: If the unit is not cm, ft or in.
    """
    factor = HEIGHT_FACTORS_TO_CM.get(_normalize_unit(unit))
    if factor is None:
        raise TrackingDomainError(f"Unsupported height unit: {unit}")
    return value * factor


def weight_to_kg(value: float, unit: str) -> float:
    """
    Convert a body weight to kilograms.

    Examples:
        >>> weight_to_kg(80, "KG")
        80.0

    Raises:
        TrackingDomainError: If the unit is not kg, lb or lbs.
    """
    factor = WEIGHT_FACTORS_TO_KG.get(_normalize_unit(unit))
    if factor is None:
        raise TrackingDomainError(f"Unsupported weight unit: {unit}")
    return value * factor
