"""Constants for sherpa.

This module centralizes magic numbers and default values used throughout the application.
"""

# Visible calendar window: days on each side of the selected day
DEFAULT_CALENDAR_SPAN_DAYS = 14

# Streak qualification: share of eligible habit instances that must be completed
STREAK_COMPLETION_RATIO = 0.4

# Recurrence bounds
MIN_INTERVAL = 1
MAX_DAY_OF_MONTH = 31
