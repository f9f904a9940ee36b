"""
Visualization utilities for CTRV tracking runs.

All functions return matplotlib Figure objects for flexible display/saving.
"""

from pathlib import Path
from typing import Dict, List, Optional, Tuple, Union

import matplotlib.pyplot as plt
import numpy as np


def plot_trajectory_2d(
    truth_xy: np.ndarray,
    est_xy_dict: Dict[str, np.ndarray],
    measurements_xy: Optional[Dict[str, np.ndarray]] = None,
    title: str = "2D Trajectory",
) -> plt.Figure:
    """
    Plot 2D trajectory with true and estimated paths.

    Args:
        truth_xy: True trajectory, shape (N, 2)
        est_xy_dict: Dictionary of estimated trajectories {name: array}
        measurements_xy: Optional measurement positions {sensor name: (M, 2)}
        title: Plot title

    Returns:
        fig: Matplotlib figure
    """
    fig, ax = plt.subplots(figsize=(10, 8))

    ax.plot(truth_xy[:, 0], truth_xy[:, 1], "k-", linewidth=2,
            label="Ground Truth", zorder=10)
    ax.plot(truth_xy[0, 0], truth_xy[0, 1], "go", markersize=10,
            label="Start", zorder=11)
    ax.plot(truth_xy[-1, 0], truth_xy[-1, 1], "ro", markersize=10,
            label="End", zorder=11)

    colors = ["blue", "red", "green", "orange", "purple"]
    linestyles = ["-", "--", "-.", ":", "-"]

    for i, (name, est_xy) in enumerate(est_xy_dict.items()):
        ax.plot(
            est_xy[:, 0],
            est_xy[:, 1],
            linestyle=linestyles[i % len(linestyles)],
            color=colors[i % len(colors)],
            linewidth=1.5,
            label=name,
            alpha=0.7,
        )

    if measurements_xy:
        markers = {"lidar": "x", "radar": "+"}
        for name, meas_xy in measurements_xy.items():
            if len(meas_xy) == 0:
                continue
            ax.plot(meas_xy[:, 0], meas_xy[:, 1], markers.get(name, "."),
                    markersize=4, alpha=0.5, label=f"{name} measurements", zorder=5)

    ax.set_xlabel("X (m)", fontsize=12)
    ax.set_ylabel("Y (m)", fontsize=12)
    ax.set_title(title, fontsize=14, fontweight="bold")
    ax.legend(fontsize=10)
    ax.grid(True, alpha=0.3)
    ax.axis("equal")

    plt.tight_layout()
    return fig


def plot_nis(
    nis: np.ndarray,
    threshold: float,
    title: str = "NIS",
) -> plt.Figure:
    """
    Plot a NIS sequence against its chi-square threshold.

    Args:
        nis: NIS values, shape (N,)
        threshold: Chi-square critical value for the measurement dimension
        title: Plot title

    Returns:
        fig: Matplotlib figure
    """
    nis = np.asarray(nis)
    fig, ax = plt.subplots(figsize=(10, 4))

    ax.plot(np.arange(len(nis)), nis, "b-", linewidth=1, label="NIS")
    ax.axhline(threshold, color="r", linestyle="--", label=f"χ² threshold = {threshold:.3f}")

    if len(nis):
        above = np.mean(nis > threshold) * 100
        ax.set_title(f"{title} ({above:.1f}% above threshold)", fontsize=14, fontweight="bold")
    else:
        ax.set_title(title, fontsize=14, fontweight="bold")

    ax.set_xlabel("Update", fontsize=12)
    ax.set_ylabel("NIS", fontsize=12)
    ax.legend(fontsize=10)
    ax.grid(True, alpha=0.3)

    plt.tight_layout()
    return fig


def save_figure(
    fig: plt.Figure,
    out_dir: Union[str, Path],
    name: str,
    formats: Tuple[str, ...] = ("svg", "png"),
) -> List[Path]:
    """
    Save figure in multiple formats.

    Args:
        fig: Matplotlib figure to save
        out_dir: Output directory
        name: Base filename (without extension)
        formats: Tuple of format extensions

    Returns:
        paths: List of saved file paths
    """
    out_dir = Path(out_dir)
    out_dir.mkdir(parents=True, exist_ok=True)

    paths = []
    for fmt in formats:
        filepath = out_dir / f"{name}.{fmt}"
        fig.savefig(filepath, dpi=150, bbox_inches="tight")
        paths.append(filepath)

    return paths
