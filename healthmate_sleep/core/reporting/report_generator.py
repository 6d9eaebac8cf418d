"""
Module for generating sleep reports in Markdown.
"""

import logging
import os
from datetime import datetime

from healthmate_sleep.core.models.output_models import BedtimeTrend, DurationTrend

logger = logging.getLogger(__name__)

TREND_ARROWS = {
    DurationTrend.IMPROVING: "↑",
    DurationTrend.DECLINING: "↓",
    DurationTrend.STABLE: "→",
    BedtimeTrend.EARLIER: "↑",
    BedtimeTrend.LATER: "↓",
    BedtimeTrend.CONSISTENT: "→",
}


def _format_average_for_display(average):
    """Format a rolling window average for display in the report."""
    return {
        'duration': f"{average.duration / 60:.1f} hours",
        'quality': f"{average.quality:.1f}/5",
        'bedtime': average.bedtime,
        'wake_time': average.wake_time,
        'sleep_efficiency': f"{average.sleep_efficiency:.0f}%",
    }


def _format_trend(trend):
    return f"{TREND_ARROWS[trend]} {trend.value}"


def render_markdown_report(stats, insights, goals, chart=None, generated_at=None):
    """
    Render statistics, insights and an optional chart dataset as Markdown.

    Args:
        stats: SleepStats for the current history
        insights: List of SleepInsight objects
        goals: Active SleepGoals
        chart: Optional list of ChartBucket objects to tabulate
        generated_at: Timestamp printed in the header

    Returns:
        str: Markdown document
    """
    generated_at = generated_at or datetime.now()
    weekly = _format_average_for_display(stats.weekly_average)
    monthly = _format_average_for_display(stats.monthly_average)

    md_content = f"""# Sleep Report

**Generated on:** {generated_at.strftime('%Y-%m-%d %H:%M')}
**Goal:** {goals.target_sleep_hours:g} hours, {goals.bedtime} to {goals.wake_time}

## Sleep Summary

| | Last 7 days | Last 30 days |
|---|---|---|
| Duration | {weekly['duration']} | {monthly['duration']} |
| Quality | {weekly['quality']} | {monthly['quality']} |
| Bedtime | {weekly['bedtime']} | {monthly['bedtime']} |
| Wake time | {weekly['wake_time']} | {monthly['wake_time']} |
| Efficiency | {weekly['sleep_efficiency']} | {monthly['sleep_efficiency']} |

- **Consistency:** {stats.consistency:.0f}%

## Sleep Trends

- **Duration:** {_format_trend(stats.trends.sleep_duration_trend)}
- **Bedtime:** {_format_trend(stats.trends.bedtime_trend)}
- **Efficiency:** {_format_trend(stats.trends.efficiency_trend)}
"""

    if chart:
        md_content += """
## Sleep Chart

| Period | Hours | Quality | Efficiency |
|---|---|---|---|
"""
        for bucket in chart:
            if bucket.has_data:
                md_content += f"| {bucket.label} | {bucket.value:.1f} | {bucket.quality:.1f} | {bucket.efficiency:.0f}% |\n"
            else:
                md_content += f"| {bucket.label} | - | - | - |\n"

    md_content += "\n## Insights\n"
    if not insights:
        md_content += "\nLog a few nights of sleep to receive insights.\n"
    for insight in insights:
        md_content += f"""
### {insight.title}
{insight.description}
"""

    return md_content


def create_markdown_report(stats, insights, goals, output_dir, chart=None, generated_at=None):
    """
    Write the Markdown report to output_dir.

    Returns:
        str: Path to the generated report
    """
    generated_at = generated_at or datetime.now()
    report_path = os.path.join(output_dir, f"sleep_report_{generated_at.strftime('%Y%m%d')}.md")

    # Create output directory if it doesn't exist
    os.makedirs(output_dir, exist_ok=True)

    with open(report_path, 'w') as f:
        f.write(render_markdown_report(stats, insights, goals, chart, generated_at))

    logger.info(f"Sleep report written to {report_path}")
    return report_path
