"""
Unit tests for the lidar and radar measurement models.
"""

import unittest
import warnings

import numpy as np
from numpy.testing import assert_allclose

from ctrv_tracking.models import (
    STD_LASPX,
    STD_RADPHI,
    STD_RADR,
    STD_RADRD,
    LidarMeasurementModel,
    RadarMeasurementModel,
    polar_to_cartesian,
)


class TestLidarMeasurementModel(unittest.TestCase):

    def test_observation_matrix(self):
        model = LidarMeasurementModel()
        expected = np.array([
            [1.0, 0.0, 0.0, 0.0, 0.0],
            [0.0, 1.0, 0.0, 0.0, 0.0],
        ])
        assert_allclose(model.H, expected)

    def test_h_extracts_position(self):
        model = LidarMeasurementModel()
        assert_allclose(model.h(np.array([5.0, 7.0, 1.0, 0.2, 0.1])), [5.0, 7.0])

    def test_noise_covariance(self):
        model = LidarMeasurementModel()
        assert_allclose(model.R, np.diag([STD_LASPX ** 2] * 2))
        assert_allclose(np.diag(model.R), [0.0225, 0.0225])


class TestRadarMeasurementModel(unittest.TestCase):

    def test_h_moving_radially(self):
        """Object moving straight away from the radar: rho_dot = v."""
        model = RadarMeasurementModel()
        yaw = np.arctan2(4.0, 3.0)
        z = model.h(np.array([3.0, 4.0, 2.0, yaw, 0.0]))
        assert_allclose(z, [5.0, yaw, 2.0], atol=1e-12)

    def test_h_moving_tangentially(self):
        """Object moving perpendicular to the line of sight: rho_dot = 0."""
        model = RadarMeasurementModel()
        z = model.h(np.array([10.0, 0.0, 3.0, np.pi / 2, 0.0]))
        assert_allclose(z, [10.0, 0.0, 0.0], atol=1e-12)

    def test_h_at_origin_warns(self):
        model = RadarMeasurementModel()
        with warnings.catch_warnings(record=True) as caught:
            warnings.simplefilter("always")
            z = model.h(np.array([0.0, 0.0, 3.0, 0.5, 0.0]))
        self.assertTrue(any(issubclass(w.category, RuntimeWarning) for w in caught))
        self.assertTrue(np.all(np.isfinite(z)))
        self.assertEqual(z[2], 0.0)

    def test_noise_covariance(self):
        model = RadarMeasurementModel()
        assert_allclose(np.diag(model.R), [STD_RADR ** 2, STD_RADPHI ** 2, STD_RADRD ** 2])

    def test_sigma_point_bearings_unwrapped(self):
        """Points straddling the negative x-axis stay on the mean's branch."""
        model = RadarMeasurementModel()
        sigma = np.array([
            [-10.0, 0.01, 0.0, 0.0, 0.0],
            [-10.0, -0.01, 0.0, 0.0, 0.0],
            [-10.0, 0.02, 0.0, 0.0, 0.0],
        ])
        Zsig = model.h_sigma_points(sigma)
        self.assertEqual(Zsig.shape, (3, 3))
        self.assertAlmostEqual(Zsig[0, 1], np.arctan2(0.01, -10.0), places=12)
        self.assertGreater(Zsig[1, 1], np.pi)
        self.assertLess(np.ptp(Zsig[:, 1]), 0.01)

    def test_innovation_wraps_bearing(self):
        model = RadarMeasurementModel()
        y = model.innovation(np.array([10.0, 3.1, 1.0]), np.array([9.0, -3.1, 0.5]))
        assert_allclose(y, [1.0, -(2 * np.pi - 6.2), 0.5], atol=1e-12)

    def test_innovation_broadcasts_over_sigma_points(self):
        model = RadarMeasurementModel()
        Zsig = np.array([[1.0, 3.1, 0.0], [1.0, -3.1, 0.0], [1.0, 0.0, 0.0]])
        z_pred = np.array([1.0, 3.0, 0.0])
        diff = model.innovation(Zsig, z_pred)
        self.assertEqual(diff.shape, (3, 3))
        self.assertTrue(np.all(np.abs(diff[:, 1]) <= np.pi))
        self.assertAlmostEqual(diff[1, 1], -3.1 - 3.0 + 2 * np.pi, places=12)


class TestPolarToCartesian(unittest.TestCase):

    def test_conversion(self):
        assert_allclose(polar_to_cartesian(2.0, np.pi / 2), [0.0, 2.0], atol=1e-12)
        assert_allclose(polar_to_cartesian(5.0, np.arctan2(4, 3)), [3.0, 4.0], atol=1e-12)


if __name__ == "__main__":
    unittest.main()
