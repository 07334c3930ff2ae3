"""
Plotting functions for visualizing run results.
"""

import logging
from typing import Dict, List

import matplotlib.pyplot as plt


logger = logging.getLogger(__name__)

TRIAL_COLORS = ['#FF6B6B', '#4ECDC4', '#FFB347', '#95E1D3', '#6C5B7B']


def plot_timeseries(result: Dict, output_file: str = "flock_timeseries.png",
                    show: bool = False) -> str:
    """
    Plot cohesion, speed and terrain clearance over time for one run.

    Args:
        result: Result dictionary from HeadlessSimulation.run
        output_file: Output filename for the plot
        show: Whether to open an interactive window after saving

    Returns:
        Path to saved plot file, or "" if there was nothing to plot
    """
    series = result["timeseries"]
    if not series:
        logger.warning("Run has no time series samples; skipping plot")
        return ""

    frames = [d["frame"] for d in series]
    panels = [
        ("cohesion", 'Cohesion (avg dist to centroid)', '#4ECDC4'),
        ("avg_speed", 'Average Speed', '#FF6B6B'),
        ("avg_clearance", 'Average Clearance Above Terrain', '#FFB347'),
    ]

    fig, axes = plt.subplots(len(panels), 1, figsize=(12, 9), sharex=True)

    for ax, (key, label, color) in zip(axes, panels):
        values = [d[key] for d in series]
        ax.plot(frames, values, linewidth=2, color=color)
        ax.set_ylabel(label, fontsize=10)
        ax.grid(True, alpha=0.3, linestyle='--')
        ax.annotate(f'{values[-1]:.1f}', xy=(frames[-1], values[-1]),
                    xytext=(5, 0), textcoords='offset points',
                    fontsize=8, color=color)

    axes[-1].set_xlabel('Frame Number', fontsize=12, fontweight='bold')
    fig.suptitle(f'Flock Dynamics: {result["boid_count"]} Boids', fontsize=14, fontweight='bold')
    fig.tight_layout()

    fig.savefig(output_file, dpi=150, bbox_inches='tight')
    print(f"\nPlot saved to: {output_file}")

    if show:
        plt.show()
    plt.close(fig)
    return output_file


def plot_trial_comparison(results: List[Dict], output_file: str = "flock_trial_comparison.png",
                          show: bool = False) -> str:
    """
    Overlay the cohesion time series of several trials.

    Args:
        results: Result dictionaries, one per trial
        output_file: Output filename for the plot
        show: Whether to open an interactive window after saving

    Returns:
        Path to saved plot file, or "" if there was nothing to plot
    """
    if not results:
        logger.warning("No trials to compare; skipping plot")
        return ""

    fig, ax = plt.subplots(figsize=(12, 7))

    for index, result in enumerate(results):
        series = result["timeseries"]
        frames = [d["frame"] for d in series]
        values = [d["cohesion"] for d in series]
        ax.plot(frames, values, label=f'Trial {result.get("trial", index + 1)}',
                linewidth=2, color=TRIAL_COLORS[index % len(TRIAL_COLORS)], alpha=0.8)

    ax.set_xlabel('Frame Number', fontsize=12, fontweight='bold')
    ax.set_ylabel('Cohesion (avg dist to centroid)', fontsize=12, fontweight='bold')
    ax.set_title('Cohesion Over Time Across Trials\n(Lower values = tighter flock)',
                 fontsize=14, fontweight='bold', pad=20)
    ax.legend(fontsize=10, loc='upper right', framealpha=0.9)
    ax.grid(True, alpha=0.3, linestyle='--')
    fig.tight_layout()

    fig.savefig(output_file, dpi=150, bbox_inches='tight')
    print(f"\nComparison plot saved to: {output_file}")

    if show:
        plt.show()
    plt.close(fig)
    return output_file
