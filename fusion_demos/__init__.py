"""
Lidar/Radar Fusion Examples.

Example scripts for the CTRV unscented Kalman filter.

Examples:
    - example_ctrv_ukf_fusion: simulated straight-line and turning targets
      tracked with alternating lidar/radar measurements
"""

__version__ = "0.1.0"
__all__ = []
