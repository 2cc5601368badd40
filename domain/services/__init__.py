"""
Stateless domain services for workout tracking.
"""

from domain.services.performance_analysis import PerformanceAnalysisService
from domain.services.units import height_to_cm, weight_to_kg

__all__ = [
    "PerformanceAnalysisService",
    "height_to_cm",
    "weight_to_kg",
]
