"""
Evaluation metrics for CTRV tracking.

The standard tracking score compares [px, py, vx, vy] against ground truth
with a per-component RMSE; the CTRV state carries speed and heading instead
of a velocity vector, so estimates are converted first.
"""

from typing import Dict

import numpy as np

from ctrv_tracking.utils import angle_diff


def state_to_cartesian(states: np.ndarray) -> np.ndarray:
    """
    Convert CTRV states to [px, py, vx, vy].

    Args:
        states: CTRV state(s) [px, py, v, yaw, yaw_rate], shape (5,) or (N, 5)

    Returns:
        Cartesian state(s), shape (4,) or (N, 4)

    Example:
        >>> state_to_cartesian(np.array([1.0, 2.0, 2.0, np.pi / 2, 0.0]))
        array([1.0000000e+00, 2.0000000e+00, 1.2246468e-16, 2.0000000e+00])
    """
    states = np.asarray(states, dtype=float)
    if states.shape[-1] != 5:
        raise ValueError(f"CTRV states must have 5 components, got shape {states.shape}")

    px = states[..., 0]
    py = states[..., 1]
    v = states[..., 2]
    yaw = states[..., 3]
    return np.stack([px, py, v * np.cos(yaw), v * np.sin(yaw)], axis=-1)


def compute_position_errors(
    truth: np.ndarray, estimated: np.ndarray
) -> np.ndarray:
    """
    Euclidean position error per sample.

    Args:
        truth: True states or positions, shape (N, >=2)
        estimated: Estimated states or positions, shape (N, >=2)

    Returns:
        errors: Position error magnitudes, shape (N,)

    Raises:
        ValueError: If inputs have incompatible shapes
    """
    truth = np.asarray(truth, dtype=float)
    estimated = np.asarray(estimated, dtype=float)

    if truth.shape[0] != estimated.shape[0]:
        raise ValueError(
            f"Length mismatch: truth {truth.shape} vs estimated {estimated.shape}"
        )

    return np.linalg.norm(estimated[:, :2] - truth[:, :2], axis=1)


def compute_heading_errors(
    truth: np.ndarray, estimated: np.ndarray
) -> np.ndarray:
    """
    Heading error per sample, normalized into (-π, π].

    Args:
        truth: True CTRV states, shape (N, 5)
        estimated: Estimated CTRV states, shape (N, 5)

    Returns:
        errors: Signed heading errors, shape (N,)
    """
    truth = np.asarray(truth, dtype=float)
    estimated = np.asarray(estimated, dtype=float)

    if truth.shape != estimated.shape:
        raise ValueError(
            f"Shape mismatch: truth {truth.shape} vs estimated {estimated.shape}"
        )

    return angle_diff(estimated[:, 3], truth[:, 3])


def compute_rmse(estimated: np.ndarray, truth: np.ndarray) -> np.ndarray:
    """
    Per-component Root Mean Square Error over a sequence.

    Args:
        estimated: Estimates, shape (N, d)
        truth: Ground truth, shape (N, d)

    Returns:
        rmse: RMSE of each component, shape (d,)

    Raises:
        ValueError: If inputs are empty or have different shapes
    """
    estimated = np.asarray(estimated, dtype=float)
    truth = np.asarray(truth, dtype=float)

    if estimated.shape != truth.shape:
        raise ValueError(
            f"Shape mismatch: estimated {estimated.shape} vs truth {truth.shape}"
        )
    if estimated.size == 0:
        raise ValueError("Cannot compute RMSE of an empty sequence")

    return np.sqrt(np.mean((estimated - truth) ** 2, axis=0))


def tracking_rmse(estimated_states: np.ndarray, true_states: np.ndarray) -> Dict[str, float]:
    """
    RMSE of [px, py, vx, vy] for CTRV state sequences.

    Args:
        estimated_states: Estimated CTRV states, shape (N, 5)
        true_states: True CTRV states, shape (N, 5)

    Returns:
        Dictionary with keys 'px', 'py', 'vx', 'vy'
    """
    rmse = compute_rmse(
        state_to_cartesian(estimated_states), state_to_cartesian(true_states)
    )
    return dict(zip(("px", "py", "vx", "vy"), (float(r) for r in rmse)))
