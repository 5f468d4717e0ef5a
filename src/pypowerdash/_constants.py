"""Internal constants shared across the library."""

from datetime import timedelta

BASE_URL = "http://localhost:8080"
USER_AGENT = "pypowerdash/0.1"

LATEST_ENDPOINT = "/v1/api/power/latest"
SERIES_ENDPOINT = "/v1/api/power/time-series"
DAILY_ENDPOINT = "/v1/api/power/daily-usage"

DEFAULT_DEVICE_ID = "iot"

SERIES_WINDOW = timedelta(hours=24)
DAILY_WINDOW = timedelta(days=30)

# Non-2xx bodies are clipped to this many characters in error messages.
ERROR_BODY_LIMIT = 200
