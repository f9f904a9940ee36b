"""
State estimation for CTRV object tracking.

Available estimators:
    - CTRVUnscentedKalmanFilter: UKF fusing lidar and radar measurements
"""

from ctrv_tracking.estimators.base import StateEstimator
from ctrv_tracking.estimators.exceptions import (
    CovarianceDegeneracyError,
    FilterDivergedError,
    FilterError,
    MeasurementOrderError,
)
from ctrv_tracking.estimators.unscented_kalman_filter import (
    N_SIGMA,
    CTRVUnscentedKalmanFilter,
    state_residual,
)

__all__ = [
    "StateEstimator",
    "CTRVUnscentedKalmanFilter",
    "state_residual",
    "N_SIGMA",
    # Errors
    "FilterError",
    "CovarianceDegeneracyError",
    "FilterDivergedError",
    "MeasurementOrderError",
]
