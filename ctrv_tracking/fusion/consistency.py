"""Filter consistency monitoring with the Normalized Innovation Squared (NIS).

For a consistent filter the NIS of an m-dimensional measurement,

    NIS = y^T S^{-1} y,

follows a chi-square distribution with m degrees of freedom. Comparing NIS
values against the 95% quantile (5.991 for lidar, 7.815 for radar) is the
usual check that the process noise parameters std_a and std_yawdd are tuned
sensibly: far more than 5% above the line means the filter is overconfident,
almost none above it means it is too conservative.
"""

from typing import Dict, List, Optional

import numpy as np
from scipy import linalg, stats

from ctrv_tracking.fusion.types import SensorType


def normalized_innovation_squared(y: np.ndarray, S: np.ndarray) -> float:
    """Compute NIS = y^T S^{-1} y.

    Args:
        y: Innovation vector (m,).
        S: Innovation covariance (m x m), symmetric positive definite.

    Returns:
        Scalar NIS value.

    Raises:
        ValueError: If shapes are inconsistent.
        numpy.linalg.LinAlgError: If S is not positive definite.

    Example:
        >>> normalized_innovation_squared(np.array([3.0, 4.0]), np.eye(2))
        25.0
    """
    y = np.asarray(y, dtype=float)
    S = np.asarray(S, dtype=float)

    if y.ndim != 1:
        raise ValueError(f"Innovation must be 1D, got shape {y.shape}")
    m = len(y)
    if S.shape != (m, m):
        raise ValueError(f"S must have shape ({m}, {m}), got {S.shape}")

    factor = linalg.cho_factor(S, lower=True)
    return float(y @ linalg.cho_solve(factor, y))


def chi_square_threshold(dof: int, confidence: float = 0.95) -> float:
    """Chi-square critical value for consistency checks.

    Args:
        dof: Degrees of freedom (measurement dimension).
        confidence: Upper quantile, in (0, 1).

    Returns:
        chi2.ppf(confidence, dof)

    Example:
        >>> round(chi_square_threshold(2), 3)
        5.991
        >>> round(chi_square_threshold(3), 3)
        7.815
    """
    if dof < 1:
        raise ValueError(f"Degrees of freedom must be positive, got {dof}")
    if not (0 < confidence < 1):
        raise ValueError(f"Confidence level must be in (0, 1), got {confidence}")
    return float(stats.chi2.ppf(confidence, dof))


class NISMonitor:
    """Accumulate NIS values per sensor and summarize consistency.

    Example:
        >>> monitor = NISMonitor()
        >>> monitor.record(SensorType.LIDAR, 1.2)
        >>> monitor.record(SensorType.LIDAR, 8.0)
        >>> monitor.fraction_above(SensorType.LIDAR)
        0.5
    """

    def __init__(self, confidence: float = 0.95):
        if not (0 < confidence < 1):
            raise ValueError(f"Confidence level must be in (0, 1), got {confidence}")
        self.confidence = confidence
        self._values: Dict[SensorType, List[float]] = {s: [] for s in SensorType}

    def record(self, sensor_type: SensorType, nis: float) -> None:
        self._values[sensor_type].append(float(nis))

    def values(self, sensor_type: SensorType) -> np.ndarray:
        return np.array(self._values[sensor_type])

    def threshold(self, sensor_type: SensorType) -> float:
        return chi_square_threshold(sensor_type.measurement_dim, self.confidence)

    def fraction_above(self, sensor_type: SensorType) -> Optional[float]:
        """Fraction of recorded NIS values above the chi-square threshold.

        Returns None when nothing has been recorded for the sensor.
        """
        values = self.values(sensor_type)
        if values.size == 0:
            return None
        return float(np.mean(values > self.threshold(sensor_type)))

    def summary(self) -> Dict[str, Dict[str, Optional[float]]]:
        """Per-sensor count, mean NIS, threshold and exceedance fraction."""
        result = {}
        for sensor_type in SensorType:
            values = self.values(sensor_type)
            result[sensor_type.value] = {
                "count": float(values.size),
                "mean": float(np.mean(values)) if values.size else None,
                "threshold": self.threshold(sensor_type),
                "fraction_above": self.fraction_above(sensor_type),
            }
        return result
