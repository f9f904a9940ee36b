"""Unit tests for ctrv_tracking.fusion.types.

Malformed measurement records must be rejected before the filter uses them.
"""

import unittest

import numpy as np
from numpy.testing import assert_allclose

from ctrv_tracking.fusion.types import MeasurementPackage, SensorType


class TestSensorType(unittest.TestCase):

    def test_measurement_dims(self) -> None:
        self.assertEqual(SensorType.LIDAR.measurement_dim, 2)
        self.assertEqual(SensorType.RADAR.measurement_dim, 3)


class TestMeasurementPackage(unittest.TestCase):
    """Test validation and conversion of measurement records."""

    def test_valid_lidar(self) -> None:
        meas = MeasurementPackage(SensorType.LIDAR, np.array([1.0, 2.0]), 1000)
        assert_allclose(meas.raw_measurements, [1.0, 2.0])
        self.assertEqual(meas.timestamp, 1000)

    def test_valid_radar_from_list(self) -> None:
        meas = MeasurementPackage(SensorType.RADAR, [1.0, 0.1, -0.5], 0)
        self.assertIsInstance(meas.raw_measurements, np.ndarray)
        self.assertEqual(meas.raw_measurements.dtype, float)

    def test_convenience_constructors(self) -> None:
        lidar = MeasurementPackage.lidar(1.0, 2.0, timestamp=5)
        radar = MeasurementPackage.radar(3.0, 0.2, 1.0, timestamp=6)
        self.assertIs(lidar.sensor_type, SensorType.LIDAR)
        self.assertIs(radar.sensor_type, SensorType.RADAR)

    def test_timestamp_seconds(self) -> None:
        meas = MeasurementPackage.lidar(0.0, 0.0, timestamp=1_500_000)
        self.assertAlmostEqual(meas.timestamp_seconds, 1.5)

    def test_numpy_integer_timestamp(self) -> None:
        meas = MeasurementPackage.lidar(0.0, 0.0, timestamp=np.int64(42))
        self.assertIsInstance(meas.timestamp, int)

    def test_wrong_length_lidar(self) -> None:
        with self.assertRaises(ValueError):
            MeasurementPackage(SensorType.LIDAR, np.array([1.0, 2.0, 3.0]), 0)

    def test_wrong_length_radar(self) -> None:
        with self.assertRaises(ValueError):
            MeasurementPackage(SensorType.RADAR, np.array([1.0, 2.0]), 0)

    def test_non_1d_rejected(self) -> None:
        with self.assertRaises(ValueError):
            MeasurementPackage(SensorType.LIDAR, np.array([[1.0, 2.0]]), 0)

    def test_non_finite_rejected(self) -> None:
        with self.assertRaises(ValueError):
            MeasurementPackage(SensorType.RADAR, np.array([1.0, np.nan, 0.0]), 0)
        with self.assertRaises(ValueError):
            MeasurementPackage(SensorType.LIDAR, np.array([np.inf, 0.0]), 0)

    def test_float_timestamp_rejected(self) -> None:
        with self.assertRaises(TypeError):
            MeasurementPackage(SensorType.LIDAR, np.array([1.0, 2.0]), 1.5)

    def test_bool_timestamp_rejected(self) -> None:
        with self.assertRaises(TypeError):
            MeasurementPackage(SensorType.LIDAR, np.array([1.0, 2.0]), True)

    def test_negative_timestamp_rejected(self) -> None:
        with self.assertRaises(ValueError):
            MeasurementPackage(SensorType.LIDAR, np.array([1.0, 2.0]), -1)

    def test_unknown_sensor_type_rejected(self) -> None:
        with self.assertRaises(TypeError):
            MeasurementPackage("lidar", np.array([1.0, 2.0]), 0)

    def test_record_is_immutable(self) -> None:
        z = np.array([1.0, 2.0])
        meas = MeasurementPackage(SensorType.LIDAR, z, 0)
        z[0] = 99.0  # caller's array is copied
        self.assertEqual(meas.raw_measurements[0], 1.0)
        with self.assertRaises(ValueError):
            meas.raw_measurements[0] = 5.0


if __name__ == "__main__":
    unittest.main()
