"""
Reporting module for sleep insights.

This module contains functions for rendering statistics and insights
as Markdown reports.
"""

from healthmate_sleep.core.reporting.report_generator import create_markdown_report, render_markdown_report

__all__ = ['create_markdown_report', 'render_markdown_report']
