"""Constants and defaults.

Note: Keep constants here to avoid magic numbers spread across code.
"""

TOTAL_HOURS = 6
FIRST_HOUR = 1
LAST_HOUR = TOTAL_HOURS

# A streak chain never counts more than this many days, anchor day included.
STREAK_CHAIN_DAYS = 7
# Days scanned for the best recent chain when today is not a full day.
STREAK_SEARCH_DAYS = 30

DEFAULT_STATS_DAYS = 30
MAX_STATS_DAYS = 365

WEEKLY_LOOKBACK_DAYS = 7

DEFAULT_BATCH_WORKERS = 4
DEFAULT_STUDENT_TIMEOUT_SECONDS = 60
PROGRESS_LOG_EVERY = 10
