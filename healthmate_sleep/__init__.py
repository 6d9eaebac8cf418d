"""
HealthMate sleep tracker.

This package contains the functionality for:
- Logging sleep sessions and deriving quality, stages and efficiency
- Chart aggregation for day, week, month, 6-month and year views
- Rolling statistics, trends and insights
- Session storage and Markdown reports
"""

__version__ = '1.0.0'
