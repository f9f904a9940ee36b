"""
Lidar and radar measurement models for the CTRV state.

State: x = [px, py, v, yaw, yaw_rate]

- Lidar: z = [px, py] + noise (linear, z = H x)
- Radar: z = [rho, phi, rho_dot] + noise (nonlinear)

Measurement noise standard deviations are fixed by the sensor manufacturer
and are therefore module constants rather than filter configuration.
"""

import warnings

import numpy as np

from ctrv_tracking.utils import angle_diff


N_Z_LIDAR = 2
N_Z_RADAR = 3

# Lidar position noise (m)
STD_LASPX = 0.15
STD_LASPY = 0.15

# Radar noise: range (m), bearing (rad), range rate (m/s)
STD_RADR = 0.3
STD_RADPHI = 0.03
STD_RADRD = 0.3

# Below this range (m) the line of sight is undefined and rho_dot is set to 0
RANGE_EPSILON = 1e-6


class LidarMeasurementModel:
    """
    Direct position measurement from a lidar.

    Example:
        >>> model = LidarMeasurementModel()
        >>> model.h(np.array([5.0, 7.0, 1.0, 0.2, 0.0]))
        array([5., 7.])
    """

    def __init__(self, std_px: float = STD_LASPX, std_py: float = STD_LASPY):
        self.H = np.zeros((N_Z_LIDAR, 5))
        self.H[0, 0] = 1.0
        self.H[1, 1] = 1.0
        self.R = np.diag([std_px ** 2, std_py ** 2])

    def h(self, x: np.ndarray) -> np.ndarray:
        """Predicted measurement H x."""
        return self.H @ x

    def innovation(self, z_measured: np.ndarray, z_predicted: np.ndarray) -> np.ndarray:
        return z_measured - z_predicted


class RadarMeasurementModel:
    """
    Range, bearing and range-rate measurement from a radar at the origin.

    Measurements:
        rho     = sqrt(px^2 + py^2)
        phi     = atan2(py, px)
        rho_dot = (px v cos(yaw) + py v sin(yaw)) / rho

    Example:
        >>> model = RadarMeasurementModel()
        >>> model.h(np.array([3.0, 4.0, 5.0, np.arctan2(4, 3), 0.0]))
        array([5.        , 0.92729522, 5.        ])
    """

    def __init__(self, std_r: float = STD_RADR, std_phi: float = STD_RADPHI,
                 std_rd: float = STD_RADRD):
        self.R = np.diag([std_r ** 2, std_phi ** 2, std_rd ** 2])

    def h(self, x: np.ndarray) -> np.ndarray:
        """
        Project a state into radar measurement space.

        Args:
            x: State vector (5,)

        Returns:
            [rho, phi, rho_dot]
        """
        px, py, v, yaw = x[0], x[1], x[2], x[3]
        rho = np.sqrt(px ** 2 + py ** 2)
        phi = np.arctan2(py, px)

        if rho < RANGE_EPSILON:
            warnings.warn(
                f"State at radar singularity (range < {RANGE_EPSILON} m). "
                "Setting range rate to zero.",
                RuntimeWarning
            )
            rho_dot = 0.0
        else:
            rho_dot = (px * np.cos(yaw) * v + py * np.sin(yaw) * v) / rho

        return np.array([rho, phi, rho_dot])

    def h_sigma_points(self, sigma_points: np.ndarray) -> np.ndarray:
        """
        Project every row of a sigma point matrix.

        Bearings are unwrapped onto the branch of the first (mean) point so
        that a weighted sum of them stays meaningful when the points straddle
        the negative x-axis.

        Args:
            sigma_points: Predicted sigma points, shape (N, 5)

        Returns:
            Measurement sigma points, shape (N, 3)
        """
        Zsig = np.array([self.h(sp) for sp in sigma_points])
        Zsig[:, 1] = Zsig[0, 1] + angle_diff(Zsig[:, 1], Zsig[0, 1])
        return Zsig

    def innovation(self, z_measured: np.ndarray, z_predicted: np.ndarray) -> np.ndarray:
        """
        Residual z_measured - z_predicted with the bearing normalized.

        Also used for sigma-point deviations from the predicted measurement
        mean, where the same bearing wraparound applies.
        """
        residual = np.asarray(z_measured, dtype=float) - np.asarray(z_predicted, dtype=float)
        residual[..., 1] = angle_diff(
            np.asarray(z_measured)[..., 1], np.asarray(z_predicted)[..., 1]
        )
        return residual


def polar_to_cartesian(rho: float, phi: float) -> np.ndarray:
    """Radar range/bearing to Cartesian position [px, py]."""
    return np.array([rho * np.cos(phi), rho * np.sin(phi)])
