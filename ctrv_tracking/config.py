"""Filter configuration.

Only the process noise and the per-sensor fusion switches are configurable.
Measurement noise is fixed by the sensor datasheets and lives as constants
in ctrv_tracking.models.measurement_models.

Configuration files are plain JSON objects, e.g.::

    {"std_a": 2.0, "std_yawdd": 2.0, "use_lidar": true, "use_radar": true}
"""

import json
import math
import warnings
from dataclasses import dataclass, fields
from pathlib import Path
from typing import Any, Dict, Union


# Beyond this the "constant velocity" assumption carries little meaning
_LARGE_PROCESS_NOISE = 30.0


@dataclass(frozen=True)
class FilterConfig:
    """Construction-time parameters of the CTRV unscented Kalman filter.

    Attributes:
        std_a: Process noise std of longitudinal acceleration (m/s^2).
        std_yawdd: Process noise std of yaw acceleration (rad/s^2).
        use_lidar: Fuse lidar measurements. When False, lidar measurements
            still initialize the filter but are otherwise ignored.
        use_radar: Fuse radar measurements, with the same semantics.

    Example:
        >>> cfg = FilterConfig(std_a=1.5)
        >>> cfg.std_yawdd
        2.0
    """

    std_a: float = 2.0
    std_yawdd: float = 2.0
    use_lidar: bool = True
    use_radar: bool = True

    def __post_init__(self) -> None:
        """Validate the configuration."""
        for name in ("std_a", "std_yawdd"):
            value = getattr(self, name)
            if isinstance(value, bool) or not isinstance(value, (float, int)):
                raise TypeError(f"{name} must be numeric, got {type(value)}")
            if not math.isfinite(value) or value <= 0:
                raise ValueError(f"{name} must be positive and finite, got {value}")
            if value > _LARGE_PROCESS_NOISE:
                warnings.warn(
                    f"{name}={value} is unusually large for a CTRV process model. "
                    "Typical values are a few m/s^2 (or rad/s^2).",
                    UserWarning
                )

        for name in ("use_lidar", "use_radar"):
            if not isinstance(getattr(self, name), bool):
                raise TypeError(f"{name} must be a bool, got {type(getattr(self, name))}")

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "FilterConfig":
        """Build a config from a mapping; unknown keys are rejected."""
        known = {f.name for f in fields(cls)}
        unknown = set(data) - known
        if unknown:
            raise ValueError(
                f"Unknown filter config keys: {sorted(unknown)}. Valid keys: {sorted(known)}"
            )
        return cls(**data)

    @classmethod
    def from_json(cls, path: Union[str, Path]) -> "FilterConfig":
        """Load a config from a JSON file."""
        with open(path) as f:
            data = json.load(f)
        if not isinstance(data, dict):
            raise ValueError(f"Config file {path} must contain a JSON object")
        return cls.from_dict(data)

    def to_dict(self) -> Dict[str, Any]:
        return {f.name: getattr(self, f.name) for f in fields(self)}
