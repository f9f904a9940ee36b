"""
Constant Turn-Rate and Velocity (CTRV) motion model.

State: x = [px, py, v, yaw, yaw_rate]
Augmented state: x_aug = [px, py, v, yaw, yaw_rate, nu_a, nu_yawdd]

where nu_a is the longitudinal acceleration noise and nu_yawdd the yaw
acceleration noise. Between two measurements the object is assumed to move
with constant speed and constant yaw rate; the noise components enter the
prediction as constant accelerations over the interval.

The deterministic position update has two cases:
    - |yaw_rate| > YAW_RATE_THRESHOLD: the object follows a circular arc
      (ctrv_curved_path).
    - otherwise: the straight-line limit of the arc (ctrv_straight_path),
      which avoids dividing by a near-zero yaw rate.
"""

from typing import Tuple

import numpy as np


N_X = 5
N_AUG = 7

# Below this yaw rate (rad/s) the arc is replaced by its straight-line limit.
YAW_RATE_THRESHOLD = 1e-3


def ctrv_curved_path(
    px: float, py: float, v: float, yaw: float, yaw_rate: float, dt: float
) -> Tuple[float, float]:
    """
    Position after dt seconds on a circular arc.

        px' = px + v/ψ̇ (sin(ψ + ψ̇Δt) - sin ψ)
        py' = py + v/ψ̇ (cos ψ - cos(ψ + ψ̇Δt))

    Args:
        px, py: Position (m)
        v: Speed (m/s)
        yaw: Heading (rad)
        yaw_rate: Yaw rate (rad/s), must be non-zero
        dt: Elapsed time (s)

    Returns:
        (px', py')
    """
    yaw_next = yaw + yaw_rate * dt
    return (
        px + v / yaw_rate * (np.sin(yaw_next) - np.sin(yaw)),
        py + v / yaw_rate * (np.cos(yaw) - np.cos(yaw_next)),
    )


def ctrv_straight_path(
    px: float, py: float, v: float, yaw: float, dt: float
) -> Tuple[float, float]:
    """
    Position after dt seconds on a straight line along the heading.

    This is the limit of ctrv_curved_path as yaw_rate -> 0.
    """
    return (
        px + v * np.cos(yaw) * dt,
        py + v * np.sin(yaw) * dt,
    )


def ctrv_process_model(x_aug: np.ndarray, dt: float) -> np.ndarray:
    """
    Propagate one augmented sigma point through the CTRV model.

    Args:
        x_aug: Augmented state [px, py, v, yaw, yaw_rate, nu_a, nu_yawdd]
        dt: Elapsed time in seconds (>= 0)

    Returns:
        Predicted state [px, py, v, yaw, yaw_rate], shape (5,)
    """
    if x_aug.shape != (N_AUG,):
        raise ValueError(f"Augmented state must have shape ({N_AUG},), got {x_aug.shape}")

    px, py, v, yaw, yaw_rate, nu_a, nu_yawdd = x_aug

    if abs(yaw_rate) > YAW_RATE_THRESHOLD:
        px_pred, py_pred = ctrv_curved_path(px, py, v, yaw, yaw_rate, dt)
    else:
        px_pred, py_pred = ctrv_straight_path(px, py, v, yaw, dt)

    v_pred = v
    yaw_pred = yaw + yaw_rate * dt
    yaw_rate_pred = yaw_rate

    # Noise acts as constant acceleration over the interval
    half_dt2 = 0.5 * dt * dt
    px_pred += half_dt2 * np.cos(yaw) * nu_a
    py_pred += half_dt2 * np.sin(yaw) * nu_a
    v_pred += dt * nu_a
    yaw_pred += half_dt2 * nu_yawdd
    yaw_rate_pred += dt * nu_yawdd

    return np.array([px_pred, py_pred, v_pred, yaw_pred, yaw_rate_pred])


def process_noise_covariance(std_a: float, std_yawdd: float) -> np.ndarray:
    """
    Covariance of the two noise components of the augmented state.

    Args:
        std_a: Longitudinal acceleration noise std (m/s^2)
        std_yawdd: Yaw acceleration noise std (rad/s^2)

    Returns:
        2x2 diagonal matrix diag(std_a^2, std_yawdd^2)
    """
    return np.diag([std_a ** 2, std_yawdd ** 2])


class CTRVModel:
    """
    CTRV motion model bound to a pair of process noise parameters.

    Example:
        >>> model = CTRVModel(std_a=2.0, std_yawdd=2.0)
        >>> x = np.array([0.0, 0.0, 1.0, 0.0, 0.0])
        >>> model.f(x, dt=0.5)
        array([0.5, 0. , 1. , 0. , 0. ])
    """

    def __init__(self, std_a: float, std_yawdd: float):
        self.std_a = std_a
        self.std_yawdd = std_yawdd

    def f(self, x: np.ndarray, dt: float) -> np.ndarray:
        """Noiseless prediction of a (non-augmented) state."""
        x = np.asarray(x, dtype=float)
        if x.shape != (N_X,):
            raise ValueError(f"State must have shape ({N_X},), got {x.shape}")
        return ctrv_process_model(np.concatenate([x, np.zeros(N_AUG - N_X)]), dt)

    def f_augmented(self, x_aug: np.ndarray, dt: float) -> np.ndarray:
        """Prediction of an augmented sigma point (noise components included)."""
        return ctrv_process_model(np.asarray(x_aug, dtype=float), dt)

    def Q(self) -> np.ndarray:
        """Noise covariance embedded in the augmented covariance."""
        return process_noise_covariance(self.std_a, self.std_yawdd)
