"""Unit tests for FilterConfig validation and JSON loading."""

import json
import tempfile
import unittest
import warnings
from dataclasses import FrozenInstanceError
from pathlib import Path

from ctrv_tracking.config import FilterConfig


class TestFilterConfig(unittest.TestCase):

    def test_defaults(self) -> None:
        cfg = FilterConfig()
        self.assertEqual(cfg.std_a, 2.0)
        self.assertEqual(cfg.std_yawdd, 2.0)
        self.assertTrue(cfg.use_lidar)
        self.assertTrue(cfg.use_radar)

    def test_frozen(self) -> None:
        cfg = FilterConfig()
        with self.assertRaises(FrozenInstanceError):
            cfg.std_a = 1.0

    def test_non_positive_noise_rejected(self) -> None:
        with self.assertRaises(ValueError):
            FilterConfig(std_a=0.0)
        with self.assertRaises(ValueError):
            FilterConfig(std_yawdd=-1.0)
        with self.assertRaises(ValueError):
            FilterConfig(std_a=float("nan"))

    def test_type_errors(self) -> None:
        with self.assertRaises(TypeError):
            FilterConfig(std_a="2.0")
        with self.assertRaises(TypeError):
            FilterConfig(use_lidar=1)

    def test_large_noise_warns(self) -> None:
        with warnings.catch_warnings(record=True) as caught:
            warnings.simplefilter("always")
            FilterConfig(std_a=100.0)
        self.assertTrue(any(issubclass(w.category, UserWarning) for w in caught))

    def test_from_dict_unknown_key(self) -> None:
        with self.assertRaises(ValueError):
            FilterConfig.from_dict({"std_a": 1.0, "std_laspx": 0.1})

    def test_json_round_trip(self) -> None:
        cfg = FilterConfig(std_a=1.5, std_yawdd=0.8, use_radar=False)
        with tempfile.TemporaryDirectory() as tmp:
            path = Path(tmp) / "filter.json"
            path.write_text(json.dumps(cfg.to_dict()))
            loaded = FilterConfig.from_json(path)
        self.assertEqual(loaded, cfg)

    def test_json_must_be_object(self) -> None:
        with tempfile.TemporaryDirectory() as tmp:
            path = Path(tmp) / "filter.json"
            path.write_text("[1, 2]")
            with self.assertRaises(ValueError):
                FilterConfig.from_json(path)

    def test_demo_config_file_loads(self) -> None:
        path = Path(__file__).resolve().parents[2] / "fusion_demos" / "filter_config.json"
        cfg = FilterConfig.from_json(path)
        self.assertEqual(cfg, FilterConfig())


if __name__ == "__main__":
    unittest.main()
