"""
Analysis module for sleep data insights.

This module contains functions for bucketing the session history into
chart datasets and calculating rolling statistics and trends.
"""

from healthmate_sleep.core.analysis.chart_data import build_chart_data
from healthmate_sleep.core.analysis.sleep_stats import compute_stats

__all__ = ['build_chart_data', 'compute_stats']
