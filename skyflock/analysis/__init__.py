"""
Analysis module for plotting and exporting run results.
"""

from .export import (
    export_results_to_csv, export_timeseries_to_csv,
    export_run_report, calculate_aggregate_stats,
)

__all__ = [
    'export_results_to_csv',
    'export_timeseries_to_csv',
    'export_run_report',
    'calculate_aggregate_stats',
]
