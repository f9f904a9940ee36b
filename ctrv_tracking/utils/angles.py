"""
Angle normalization utilities.

Headings and radar bearings are periodic. Every residual formed between two
of them (sigma point minus mean, measured minus predicted) must be mapped back
into (-π, π] before it enters a covariance or an update, otherwise a pair of
angles such as +179° and -179° produces a 358° residual instead of 2°.
"""

from typing import Union

import numpy as np


def normalize_angle(angle: Union[float, np.ndarray]) -> Union[float, np.ndarray]:
    """
    Map an angle (or array of angles) into the half-open interval (-π, π].

    Closed form: ``π - ((π - angle) mod 2π)``. Unlike repeated add/subtract
    loops this takes constant time for arbitrarily large inputs, and unlike
    the ``atan2(sin, cos)`` trick it maps -π onto +π so the interval is
    half-open on the negative side.

    Args:
        angle: Angle in radians (any value), scalar or array.

    Returns:
        Normalized angle with the same shape as the input.

    Example:
        >>> normalize_angle(3.1 - (-3.1))
        -0.08318530717958605
        >>> normalize_angle(-np.pi)
        3.141592653589793
    """
    wrapped = np.pi - np.mod(np.pi - np.asarray(angle, dtype=float), 2.0 * np.pi)
    # np.mod can round up to exactly 2π for inputs just above π
    wrapped = np.where(wrapped <= -np.pi, np.pi, wrapped)
    if np.ndim(wrapped) == 0:
        return float(wrapped)
    return wrapped


def angle_diff(angle1: Union[float, np.ndarray],
               angle2: Union[float, np.ndarray]) -> Union[float, np.ndarray]:
    """
    Shortest signed difference ``angle1 - angle2`` in (-π, π].

    Args:
        angle1: First angle in radians (e.g. measured bearing).
        angle2: Second angle in radians (e.g. predicted bearing).

    Returns:
        Normalized difference.

    Example:
        >>> angle_diff(np.pi - 0.1, -np.pi + 0.1)
        -0.2
    """
    return normalize_angle(np.asarray(angle1, dtype=float) - np.asarray(angle2, dtype=float))
