"""Sensor fusion types and consistency tools.

This package provides:
- Time-stamped lidar/radar measurement records
- NIS computation and chi-square consistency monitoring
"""

from ctrv_tracking.fusion.consistency import (
    NISMonitor,
    chi_square_threshold,
    normalized_innovation_squared,
)
from ctrv_tracking.fusion.types import MeasurementPackage, SensorType

__all__ = [
    # Types
    "MeasurementPackage",
    "SensorType",
    # Consistency
    "normalized_innovation_squared",
    "chi_square_threshold",
    "NISMonitor",
]
