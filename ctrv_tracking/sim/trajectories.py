"""
Ground-truth CTRV trajectories and synthetic lidar/radar measurements.

Trajectories are generated with the noiseless CTRV model, so a straight line
(yaw_rate = 0) and a constant-radius turn (yaw_rate != 0) are both exact
solutions of the filter's motion model. Measurement noise follows the fixed
sensor datasheet values in ctrv_tracking.models.measurement_models.

Example:
    >>> truth = simulate_ctrv_trajectory(np.array([5.0, 1.0, 3.0, 0.0, 0.2]), dt=0.05, n_steps=100)
    >>> meas = generate_measurements(truth, dt=0.05, pattern="alternate",
    ...                              rng=np.random.default_rng(42))
    >>> len(meas), meas[0].sensor_type.value, meas[1].sensor_type.value
    (101, 'lidar', 'radar')
"""

from typing import List, Optional

import numpy as np

from ctrv_tracking.fusion.types import MeasurementPackage, SensorType
from ctrv_tracking.models.measurement_models import (
    STD_LASPX,
    STD_LASPY,
    STD_RADPHI,
    STD_RADR,
    STD_RADRD,
    RadarMeasurementModel,
)
from ctrv_tracking.models.motion_models import N_X, CTRVModel
from ctrv_tracking.utils import normalize_angle


MEASUREMENT_PATTERNS = ("lidar", "radar", "alternate")


def simulate_ctrv_trajectory(x0: np.ndarray, dt: float, n_steps: int) -> np.ndarray:
    """
    Integrate the noiseless CTRV model from x0.

    Args:
        x0: Initial state [px, py, v, yaw, yaw_rate]
        dt: Time step in seconds (> 0)
        n_steps: Number of steps

    Returns:
        States at t = 0, dt, ..., n_steps*dt, shape (n_steps + 1, 5).
        Heading is not wrapped.
    """
    x0 = np.asarray(x0, dtype=float)
    if x0.shape != (N_X,):
        raise ValueError(f"Initial state must have shape ({N_X},), got {x0.shape}")
    if dt <= 0:
        raise ValueError(f"Time step must be positive, got {dt}")
    if n_steps < 0:
        raise ValueError(f"Number of steps must be non-negative, got {n_steps}")

    # Process noise is not used for the noiseless ground truth
    model = CTRVModel(std_a=0.0, std_yawdd=0.0)
    states = np.zeros((n_steps + 1, N_X))
    states[0] = x0
    for k in range(n_steps):
        states[k + 1] = model.f(states[k], dt)
    return states


def lidar_measurement(
    x: np.ndarray, rng: Optional[np.random.Generator] = None
) -> np.ndarray:
    """
    Lidar measurement [px, py] of a true state.

    Args:
        x: True state (5,)
        rng: Random generator; None gives a noiseless measurement.
    """
    z = np.array([x[0], x[1]], dtype=float)
    if rng is not None:
        z += rng.normal(0.0, [STD_LASPX, STD_LASPY])
    return z


def radar_measurement(
    x: np.ndarray, rng: Optional[np.random.Generator] = None
) -> np.ndarray:
    """
    Radar measurement [rho, phi, rho_dot] of a true state.

    Args:
        x: True state (5,)
        rng: Random generator; None gives a noiseless measurement.
    """
    z = RadarMeasurementModel().h(np.asarray(x, dtype=float))
    if rng is not None:
        z += rng.normal(0.0, [STD_RADR, STD_RADPHI, STD_RADRD])
        z[1] = normalize_angle(z[1])
    return z


def generate_measurements(
    true_states: np.ndarray,
    dt: float,
    pattern: str = "alternate",
    t0_us: int = 0,
    rng: Optional[np.random.Generator] = None,
) -> List[MeasurementPackage]:
    """
    One measurement per true state.

    Args:
        true_states: Ground truth, shape (N, 5), sampled every dt seconds
        dt: Sample period in seconds
        pattern: 'lidar', 'radar', or 'alternate' (lidar first)
        t0_us: Timestamp of the first sample in microseconds
        rng: Random generator; None gives noiseless measurements.

    Returns:
        List of N MeasurementPackage records with increasing timestamps.
    """
    if pattern not in MEASUREMENT_PATTERNS:
        raise ValueError(f"Unknown pattern '{pattern}', expected one of {MEASUREMENT_PATTERNS}")

    measurements = []
    for k, x in enumerate(np.asarray(true_states, dtype=float)):
        timestamp = t0_us + int(round(k * dt * 1e6))

        use_lidar = pattern == "lidar" or (pattern == "alternate" and k % 2 == 0)
        if use_lidar:
            measurements.append(
                MeasurementPackage(SensorType.LIDAR, lidar_measurement(x, rng), timestamp)
            )
        else:
            measurements.append(
                MeasurementPackage(SensorType.RADAR, radar_measurement(x, rng), timestamp)
            )

    return measurements
