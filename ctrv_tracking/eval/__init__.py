"""
Evaluation tools for CTRV tracking runs.

Plotting helpers live in ctrv_tracking.eval.plots and are imported
explicitly so that metrics do not pull in matplotlib.
"""

from ctrv_tracking.eval.metrics import (
    compute_heading_errors,
    compute_position_errors,
    compute_rmse,
    state_to_cartesian,
    tracking_rmse,
)

__all__ = [
    "state_to_cartesian",
    "compute_position_errors",
    "compute_heading_errors",
    "compute_rmse",
    "tracking_rmse",
]
