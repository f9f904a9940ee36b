"""
Motion and measurement models for CTRV tracking.

This module provides the CTRV process model used to propagate sigma points
and the lidar/radar measurement models used by the filter updates.
"""

from .motion_models import (
    N_X,
    N_AUG,
    YAW_RATE_THRESHOLD,
    CTRVModel,
    ctrv_curved_path,
    ctrv_straight_path,
    ctrv_process_model,
    process_noise_covariance,
)

from .measurement_models import (
    N_Z_LIDAR,
    N_Z_RADAR,
    STD_LASPX,
    STD_LASPY,
    STD_RADR,
    STD_RADPHI,
    STD_RADRD,
    RANGE_EPSILON,
    LidarMeasurementModel,
    RadarMeasurementModel,
    polar_to_cartesian,
)

__all__ = [
    # Motion model
    'N_X',
    'N_AUG',
    'YAW_RATE_THRESHOLD',
    'CTRVModel',
    'ctrv_curved_path',
    'ctrv_straight_path',
    'ctrv_process_model',
    'process_noise_covariance',

    # Measurement models
    'N_Z_LIDAR',
    'N_Z_RADAR',
    'STD_LASPX',
    'STD_LASPY',
    'STD_RADR',
    'STD_RADPHI',
    'STD_RADRD',
    'RANGE_EPSILON',
    'LidarMeasurementModel',
    'RadarMeasurementModel',
    'polar_to_cartesian',
]
