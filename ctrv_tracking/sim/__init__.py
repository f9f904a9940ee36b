"""
Simulation utilities for generating ground truth and synthetic measurements.

Modules:
    trajectories: Noiseless CTRV trajectories and lidar/radar measurement
        synthesis
"""

from ctrv_tracking.sim.trajectories import (
    MEASUREMENT_PATTERNS,
    generate_measurements,
    lidar_measurement,
    radar_measurement,
    simulate_ctrv_trajectory,
)

__all__ = [
    "MEASUREMENT_PATTERNS",
    "simulate_ctrv_trajectory",
    "lidar_measurement",
    "radar_measurement",
    "generate_measurements",
]
