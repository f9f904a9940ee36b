"""
Utility functions shared by the motion models, measurement models and filter.
"""

from .angles import normalize_angle, angle_diff

__all__ = [
    'normalize_angle',
    'angle_diff',
]
