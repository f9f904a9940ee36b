"""Measurement records consumed by the CTRV filter.

A measurement arrives already classified by sensor type, with its raw
measurement vector and an integer timestamp in microseconds. Records are
validated on construction so the filter never sees a malformed vector.
"""

from dataclasses import dataclass
from enum import Enum

import numpy as np


class SensorType(Enum):
    """Sensor that produced a measurement.

    LIDAR is the linear position sensor (raw [px, py]); RADAR is the
    nonlinear range/bearing/range-rate sensor (raw [rho, phi, rho_dot]).
    """

    LIDAR = "lidar"
    RADAR = "radar"

    @property
    def measurement_dim(self) -> int:
        """Length of the raw measurement vector for this sensor."""
        return 2 if self is SensorType.LIDAR else 3


@dataclass(frozen=True)
class MeasurementPackage:
    """Time-stamped raw measurement from one sensor.

    Attributes:
        sensor_type: SensorType.LIDAR or SensorType.RADAR.
        raw_measurements: 1D array, [px, py] for lidar or
            [rho, phi, rho_dot] for radar.
        timestamp: Integer timestamp in microseconds (non-negative).

    Example:
        >>> meas = MeasurementPackage(
        ...     sensor_type=SensorType.RADAR,
        ...     raw_measurements=np.array([1.0, 0.5, 0.2]),
        ...     timestamp=1477010443050000,
        ... )
        >>> meas.timestamp_seconds
        1477010443.05
    """

    sensor_type: SensorType
    raw_measurements: np.ndarray
    timestamp: int

    def __post_init__(self) -> None:
        """Validate the measurement structure."""
        if not isinstance(self.sensor_type, SensorType):
            raise TypeError(f"sensor_type must be a SensorType, got {self.sensor_type!r}")

        # bool is an int subclass but never a valid timestamp
        if isinstance(self.timestamp, bool) or not isinstance(self.timestamp, (int, np.integer)):
            raise TypeError(
                f"Timestamp must be an integer number of microseconds, got {type(self.timestamp)}"
            )
        if self.timestamp < 0:
            raise ValueError(f"Timestamp must be non-negative, got {self.timestamp}")

        z = np.asarray(self.raw_measurements, dtype=float)
        if z.ndim != 1:
            raise ValueError(f"raw_measurements must be a 1D array, got shape {z.shape}")

        expected = self.sensor_type.measurement_dim
        if z.shape[0] != expected:
            raise ValueError(
                f"{self.sensor_type.value} measurement must have {expected} components, "
                f"got {z.shape[0]}"
            )
        if not np.all(np.isfinite(z)):
            raise ValueError(f"raw_measurements must be finite, got {z}")

        # Store a private float copy so the record stays immutable
        z = z.copy()
        z.setflags(write=False)
        object.__setattr__(self, "raw_measurements", z)
        object.__setattr__(self, "timestamp", int(self.timestamp))

    @property
    def timestamp_seconds(self) -> float:
        return self.timestamp / 1e6

    @classmethod
    def lidar(cls, px: float, py: float, timestamp: int) -> "MeasurementPackage":
        """Convenience constructor for a lidar measurement."""
        return cls(SensorType.LIDAR, np.array([px, py], dtype=float), timestamp)

    @classmethod
    def radar(cls, rho: float, phi: float, rho_dot: float, timestamp: int) -> "MeasurementPackage":
        """Convenience constructor for a radar measurement."""
        return cls(SensorType.RADAR, np.array([rho, phi, rho_dot], dtype=float), timestamp)
