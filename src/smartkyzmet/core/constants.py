"""Constants and defaults.

Note: Keep constants here to avoid magic numbers spread across code.
"""

from datetime import time

# Working-day boundaries used by the attendance rules.
WORKDAY_START = time(9, 0)
WORKDAY_END_HOUR = 18

# Percent thresholds for attendance buckets (inclusive).
RISK_THRESHOLD_PERCENT = 30.0
LATE_THRESHOLD_PERCENT = 10.0

DEFAULT_LOG_DAYS = 7
DEFAULT_RECENT_LIMIT = 10
MIN_PASSWORD_LENGTH = 6

ALLOWED_PHOTO_MIMETYPES = frozenset({"image/jpeg", "image/png", "image/gif"})

ANALYTICS_UNAVAILABLE = {"error": "analysis unavailable"}
