"""
Export functions for saving run results to CSV and JSON.
"""

import csv
import json
import math
from typing import Any, Dict, List


SUMMARY_FIELDS = [
    "avg_speed", "avg_cohesion", "avg_clearance", "min_clearance",
    "total_floor_lifts", "total_wraps", "elapsed_time_seconds",
]


def export_results_to_csv(results: List[Dict], filename: str = "flock_results.csv") -> str:
    """
    Export per-trial run results to CSV format.

    Args:
        results: Result dictionaries from HeadlessSimulation.run, one per trial
        filename: Output filename

    Returns:
        Path to saved CSV file
    """
    with open(filename, 'w', newline='') as csvfile:
        fieldnames = ['simulation_id', 'frames', 'boid_count'] + SUMMARY_FIELDS
        writer = csv.DictWriter(csvfile, fieldnames=fieldnames)
        writer.writeheader()

        for index, result in enumerate(results):
            row = {
                'simulation_id': f"trial{result.get('trial', index + 1)}",
                'frames': result['frames'],
                'boid_count': result['boid_count'],
            }
            row.update({key: result[key] for key in SUMMARY_FIELDS})
            writer.writerow(row)

    print(f"\nCSV results saved to: {filename}")
    return filename


def export_timeseries_to_csv(result: Dict, filename: str = "flock_timeseries.csv") -> str:
    """
    Export the sampled time series of one run to CSV.

    Args:
        result: Result dictionary from HeadlessSimulation.run
        filename: Output filename

    Returns:
        Path to saved CSV file
    """
    with open(filename, 'w', newline='') as csvfile:
        fieldnames = ['frame', 'cohesion', 'avg_speed', 'avg_clearance', 'floor_lifts']
        writer = csv.DictWriter(csvfile, fieldnames=fieldnames)
        writer.writeheader()

        for entry in result["timeseries"]:
            writer.writerow({
                'frame': entry['frame'],
                'cohesion': f"{entry['cohesion']:.3f}",
                'avg_speed': f"{entry['avg_speed']:.3f}",
                'avg_clearance': f"{entry['avg_clearance']:.3f}",
                'floor_lifts': entry['floor_lifts'],
            })

    print(f"  Time series saved to: {filename}")
    return filename


def export_run_report(report: Dict[str, Any], filename: str = "flock_run_report.json") -> str:
    """
    Export a full run report to JSON.

    Args:
        report: Complete report dictionary
        filename: Output filename

    Returns:
        Path to saved JSON file
    """
    with open(filename, 'w') as f:
        json.dump(report, f, indent=2)

    print(f"\nRun report saved to: {filename}")
    return filename


def calculate_aggregate_stats(trial_results: List[Dict]) -> Dict[str, float]:
    """
    Calculate mean and standard deviation across trials.

    Args:
        trial_results: List of result dictionaries from multiple trials

    Returns:
        Dictionary with mean and std for each summary metric
    """
    if not trial_results:
        return {}

    aggregates = {}

    for metric in SUMMARY_FIELDS:
        values = [r[metric] for r in trial_results if r.get(metric) is not None]
        if values:
            mean = sum(values) / len(values)
            aggregates[f"{metric}_mean"] = mean
            if len(values) > 1:
                variance = sum((x - mean) ** 2 for x in values) / (len(values) - 1)
                aggregates[f"{metric}_std"] = math.sqrt(variance)
            else:
                aggregates[f"{metric}_std"] = 0

    return aggregates
