"""
Constants used throughout the HealthMate sleep module.
This includes analysis thresholds, default values, and insight presentation settings.
"""

MINUTES_PER_DAY = 24 * 60

# Default values used when a record or window has nothing to offer
default_values = {
    'bedtime': '22:00',
    'wake_time': '07:00',
    'goal_quality': 4,
    'target_sleep_hours': 8.0,
    'min_target_sleep_hours': 4.0,
    'max_target_sleep_hours': 12.0,
    'missing_efficiency': 80,  # Efficiency assumed for sessions logged without one
    'max_sessions': 365,  # Retained session history
}

# Quality banding by sleep duration in hours: (low, high, low_inclusive, high_inclusive, score)
quality_bands = [
    (7.0, 8.5, True, True, 5),
    (6.5, 7.0, True, False, 4),
    (8.5, 9.0, False, True, 4),
    (6.0, 6.5, True, False, 3),
    (9.0, 10.0, False, True, 3),
    (5.0, 6.0, True, False, 2),
]
lowest_quality = 1

quality_descriptions = {
    1: 'Very Poor Sleep',
    2: 'Poor Sleep',
    3: 'Average Sleep',
    4: 'Good Sleep',
    5: 'Excellent Sleep',
}

# Simulated sleep stage ranges (percentages)
stage_simulation = {
    'deep_base': 15,
    'deep_per_quality': 3,
    'deep_noise': 3,
    'deep_range': (12, 35),
    'rem_base': 12,
    'rem_per_quality': 2,
    'rem_noise': 2,
    'rem_range': (10, 25),
    'light_min': 45,
}

# Efficiency estimate from quality and duration
efficiency_settings = {
    'base': 60,
    'per_quality': 5,
    'short_hours': 6.0,  # Below this the duration factor is penalised
    'long_hours': 10.0,  # Above this the duration factor is penalised
    'optimal_hours': (7.0, 8.5),
    'penalty_factor': 0.9,
    'optimal_factor': 1.1,
    'range': (50, 100),
}

# Rolling statistics
stats_settings = {
    'weekly_window_days': 7,
    'monthly_window_days': 30,
    'consistency_efficiency_threshold': 80,
    'trend_block_size': 14,
    'duration_trend_threshold': 15,  # minutes
    'efficiency_trend_threshold': 5,  # percentage points
    'bedtime_trend_threshold': 15,  # minutes
}

# Insight rule thresholds
insight_settings = {
    'window_sessions': 7,
    'efficiency_excellent': 85,
    'efficiency_poor': 70,
    'quality_good': 4,
    'consistency_good': 80,
    'consistency_poor': 50,
    'weekend_min_sessions': 2,
    'weekday_min_sessions': 2,
    'weekend_bedtime_difference': 30,  # minutes
}

# Presentation for each insight id
insight_styles = {
    'sleep-duration-good': {'type': 'positive', 'title': 'Great Sleep Duration!', 'icon': 'trending-up', 'color': '#4CAF50'},
    'sleep-duration-low': {'type': 'warning', 'title': 'Sleep Duration Below Goal', 'icon': 'schedule', 'color': '#FF9800'},
    'efficiency-excellent': {'type': 'positive', 'title': 'Excellent Sleep Efficiency', 'icon': 'psychology', 'color': '#2196F3'},
    'efficiency-poor': {'type': 'warning', 'title': 'Sleep Efficiency Needs Improvement', 'icon': 'psychology', 'color': '#F44336'},
    'quality-good': {'type': 'positive', 'title': 'High Sleep Quality', 'icon': 'bedtime', 'color': '#4CAF50'},
    'consistency-good': {'type': 'positive', 'title': 'Great Sleep Consistency', 'icon': 'schedule', 'color': '#4CAF50'},
    'consistency-poor': {'type': 'warning', 'title': 'Inconsistent Sleep Pattern', 'icon': 'schedule', 'color': '#FF9800'},
    'weekend-pattern': {'type': 'neutral', 'title': 'Weekend Sleep Shift', 'icon': 'weekend', 'color': '#9C27B0'},
}
