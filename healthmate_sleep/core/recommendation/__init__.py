"""
Recommendation module for sleep insights.

This module contains functions for generating short, rule-based
insights from recent sleep sessions and the user's goals.
"""

from healthmate_sleep.core.recommendation.insight_generator import generate_insights

__all__ = ['generate_insights']
