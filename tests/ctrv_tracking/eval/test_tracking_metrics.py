"""Unit tests for ctrv_tracking.eval.metrics and plotting helpers."""

import tempfile
import unittest

import matplotlib

matplotlib.use("Agg")

import matplotlib.pyplot as plt
import numpy as np
from numpy.testing import assert_allclose

from ctrv_tracking.eval import (
    compute_heading_errors,
    compute_position_errors,
    compute_rmse,
    state_to_cartesian,
    tracking_rmse,
)
from ctrv_tracking.eval.plots import plot_nis, plot_trajectory_2d, save_figure


class TestStateToCartesian(unittest.TestCase):

    def test_single_state(self):
        cart = state_to_cartesian(np.array([1.0, 2.0, 2.0, np.pi / 2, 0.1]))
        assert_allclose(cart, [1.0, 2.0, 0.0, 2.0], atol=1e-12)

    def test_batch(self):
        states = np.array([
            [0.0, 0.0, 1.0, 0.0, 0.0],
            [1.0, 1.0, 2.0, np.pi, 0.0],
        ])
        cart = state_to_cartesian(states)
        self.assertEqual(cart.shape, (2, 4))
        assert_allclose(cart[1], [1.0, 1.0, -2.0, 0.0], atol=1e-12)

    def test_wrong_dimension(self):
        with self.assertRaises(ValueError):
            state_to_cartesian(np.zeros((3, 4)))


class TestErrors(unittest.TestCase):

    def test_position_errors(self):
        truth = np.zeros((3, 5))
        est = np.array([
            [3.0, 4.0, 9.0, 0.0, 0.0],
            [0.0, 0.0, 0.0, 0.0, 0.0],
            [-1.0, 0.0, 0.0, 0.0, 0.0],
        ])
        assert_allclose(compute_position_errors(truth, est), [5.0, 0.0, 1.0])

    def test_position_length_mismatch(self):
        with self.assertRaises(ValueError):
            compute_position_errors(np.zeros((3, 2)), np.zeros((4, 2)))

    def test_heading_errors_wrap(self):
        truth = np.zeros((2, 5))
        truth[:, 3] = [-3.1, 0.0]
        est = np.zeros((2, 5))
        est[:, 3] = [3.1, 4 * np.pi + 0.2]
        errors = compute_heading_errors(truth, est)
        assert_allclose(errors, [-(2 * np.pi - 6.2), 0.2], atol=1e-12)


class TestRMSE(unittest.TestCase):

    def test_per_component(self):
        est = np.array([[1.0, 0.0], [-1.0, 2.0]])
        truth = np.zeros((2, 2))
        assert_allclose(compute_rmse(est, truth), [1.0, np.sqrt(2.0)])

    def test_perfect_estimate(self):
        x = np.random.default_rng(0).normal(size=(10, 4))
        assert_allclose(compute_rmse(x, x), np.zeros(4))

    def test_shape_mismatch(self):
        with self.assertRaises(ValueError):
            compute_rmse(np.zeros((3, 4)), np.zeros((3, 5)))

    def test_empty(self):
        with self.assertRaises(ValueError):
            compute_rmse(np.zeros((0, 4)), np.zeros((0, 4)))

    def test_tracking_rmse_keys(self):
        truth = np.array([[0.0, 0.0, 1.0, 0.0, 0.0]] * 4)
        est = truth.copy()
        est[:, 0] += 0.5
        rmse = tracking_rmse(est, truth)
        self.assertEqual(set(rmse), {"px", "py", "vx", "vy"})
        self.assertAlmostEqual(rmse["px"], 0.5)
        self.assertAlmostEqual(rmse["vx"], 0.0)


class TestPlots(unittest.TestCase):

    def tearDown(self):
        plt.close("all")

    def test_trajectory_and_nis_figures_saved(self):
        t = np.linspace(0, 1, 20)
        truth = np.column_stack([t, t ** 2])
        fig_traj = plot_trajectory_2d(
            truth, {"UKF": truth + 0.01},
            measurements_xy={"lidar": truth[::2], "radar": np.zeros((0, 2))},
        )
        fig_nis = plot_nis(np.abs(np.sin(t)) * 8, threshold=5.991)

        with tempfile.TemporaryDirectory() as tmp:
            paths = save_figure(fig_traj, tmp, "traj", formats=("png",))
            paths += save_figure(fig_nis, tmp, "nis", formats=("png",))
            for path in paths:
                self.assertTrue(path.exists())


if __name__ == "__main__":
    unittest.main()
