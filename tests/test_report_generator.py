"""Tests for Markdown report rendering."""

import os

from healthmate_sleep.core.analysis.chart_data import build_chart_data
from healthmate_sleep.core.analysis.sleep_stats import compute_stats
from healthmate_sleep.core.recommendation.insight_generator import generate_insights
from healthmate_sleep.core.reporting.report_generator import create_markdown_report, render_markdown_report


def test_render_report(week_of_sessions, goals, now):
    stats = compute_stats(week_of_sessions, goals, now)
    insights = generate_insights(week_of_sessions, goals, now)
    chart = build_chart_data("week", week_of_sessions, now)

    report = render_markdown_report(stats, insights, goals, chart, now)

    assert report.startswith("# Sleep Report")
    assert "2024-04-30 21:00" in report
    assert "| Duration | 8.0 hours |" in report
    assert "**Consistency:** 100%" in report
    assert "- **Duration:** → stable" in report
    assert "| Tue | 8.0 | 5.0 | 94% |" in report
    assert "### Great Sleep Duration!" in report


def test_render_report_without_data(goals, now):
    report = render_markdown_report(compute_stats([], goals, now), [], goals, generated_at=now)

    assert "Log a few nights of sleep" in report
    assert "## Sleep Chart" not in report


def test_create_report_file(tmp_path, goals, now):
    path = create_markdown_report(compute_stats([], goals, now), [], goals, str(tmp_path / "reports"), generated_at=now)

    assert os.path.basename(path) == "sleep_report_20240430.md"
    with open(path) as f:
        assert f.read().startswith("# Sleep Report")
