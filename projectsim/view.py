# view.py - Histogram and text report for simulated project durations
import numpy as np
import matplotlib.pyplot as plt
from typing import Any, Dict, Optional


def plot_duration_histogram(results, summary: Optional[Dict[str, Any]] = None,
                            bins: int = 30, ax=None, save_path=None):
    """Histogram of project durations with mean, threshold and percentile markers"""
    if ax is None:
        fig, ax = plt.subplots(figsize=(10, 6), facecolor='#fff')
    else:
        fig = ax.figure

    durations = results.project_durations
    ax.hist(durations, bins=bins, color='#4c72b0', alpha=0.75, edgecolor='white')

    ax.axvline(np.mean(durations), color='black', linestyle='-', linewidth=2,
               label=f"Mean {np.mean(durations):.2f}")
    ax.axvline(results.deterministic_duration, color='gray', linestyle=':', linewidth=2,
               label=f"Average-only plan {results.deterministic_duration:.2f}")

    if summary:
        ax.axvline(summary["threshold"], color='red', linestyle='--',
                   label=f"P(> {summary['threshold']:g}) = {summary['exceedance_probability']:.1%}")
        ax.axvline(summary["lower_cutoff"], color='green', linestyle='-.',
                   label=f"P{summary['lower_percentile']:g} = {summary['lower_cutoff']:.2f}")
        ax.axvline(summary["upper_cutoff"], color='green', linestyle='-.',
                   label=f"P{100 - summary['upper_percentile']:g} = {summary['upper_cutoff']:.2f}")

    ax.set_xlabel("Project duration (weeks)")
    ax.set_ylabel("Replications")
    ax.set_title(f"Simulated project duration ({results.reps} replications)")
    ax.legend(loc='upper right')
    ax.grid(True, alpha=0.3)

    if save_path is not None:
        fig.savefig(save_path, bbox_inches='tight')

    return fig


def _fmt(value, spec: str = ".2f") -> str:
    return "n/a" if value is None else format(value, spec)


def format_report(summary: Dict[str, Any], task_names=None) -> str:
    """Plain-text report of a simulation summary"""
    level = summary["confidence_level"] * 100
    lines = [
        "=" * 60,
        "PROJECT DURATION SIMULATION",
        "=" * 60,
        f"Replications:            {summary['num_simulations']}",
        f"Average-only plan:       {summary['deterministic_duration']:.2f} weeks",
        f"Mean project duration:   {summary['mean_project_duration']:.2f} weeks",
        f"Std deviation:           {_fmt(summary['std_project_duration'])} weeks",
        f"{level:g}% CI for mean:      [{_fmt(summary['ci_lower'])}, {_fmt(summary['ci_upper'])}]"
        f" (half-width {_fmt(summary['ci_half_width'], '.3f')})",
        f"P(duration > {summary['threshold']:g}):      {summary['exceedance_probability']:.3f}",
        f"P{summary['lower_percentile']:g} / P{100 - summary['upper_percentile']:g}:"
        f"             {summary['lower_cutoff']:.2f} / {summary['upper_cutoff']:.2f}",
    ]

    if summary.get("negative_duration_count"):
        lines.append(f"Negative sampled durations: {summary['negative_duration_count']}")

    criticality = summary.get("task_criticality") or []
    if criticality:
        lines.append("-" * 60)
        lines.append("Criticality (% of replications on the critical chain):")
        for i, pct in enumerate(criticality):
            name = task_names[i] if task_names else f"Activity {i + 1}"
            lines.append(f"  {name:<24} {pct:6.1f}%")

    return "\n".join(lines)
