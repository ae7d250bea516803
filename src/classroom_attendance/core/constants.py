"""Constants and defaults.

Note: Keep constants here to avoid magic numbers spread across code.
"""

SESSION_TOKEN_TTL_SECONDS = 300
SESSION_ID_BYTES = 16
SESSION_ID_MAX_LENGTH = 64
SCAN_PAGE_PATH = "/student"
SCAN_URL_PARAM = "data"
DEFAULT_EVENT_LIST_LIMIT = 500
