"""CTRV object tracking with an unscented Kalman filter.

This package fuses lidar position fixes and radar range/bearing/range-rate
measurements into an estimate of [px, py, v, yaw, yaw_rate]:
- estimators: The CTRV unscented Kalman filter and its errors
- models: CTRV motion model, lidar and radar measurement models
- fusion: Measurement records and NIS consistency monitoring
- eval: Error metrics and plots
- sim: Ground-truth trajectories and synthetic measurements
"""

__version__ = "0.1.0"
