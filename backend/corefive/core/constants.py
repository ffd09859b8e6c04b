"""Shared tracking constants.

Centralizes the fixed numbers the streak and nudge rules depend on so we can
document and adjust them in one place.
"""

# Number of pillars tracked each week
PILLAR_COUNT = 5

# Default coverage a week needs to extend a streak ("near-perfect")
NEAR_PERFECT_COVERAGE = 4

# History window bounds for /logs/history and the streak walk (weeks)
DEFAULT_HISTORY_WEEKS = 12
MAX_HISTORY_WEEKS = 52

# Hour bands (local, [start, end)) for time-of-day nudges
MORNING_HOURS = (6, 11)
LUNCH_HOURS = (11, 14)
EVENING_HOURS = (18, 22)

# Weekly review window: Sunday from this hour, Monday before this hour
REVIEW_SUNDAY_FROM_HOUR = 17
REVIEW_MONDAY_UNTIL_HOUR = 12

# Stagnation check runs while this many days (inclusive) remain in the week
STAGNATION_DAYS_LEFT = (2, 5)

# Deadline-risk check: late in the week with a material cardio gap (minutes)
DEADLINE_DAYS_LEFT = 3
CARDIO_GAP_MINUTES = 60

# Upper bound on per-user celebration latches held in memory
MAX_CELEBRATION_LATCHES = 10_000
