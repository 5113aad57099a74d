"""Internal constants shared across the library."""

BASE_URL = "http://localhost/"
NEXT_TITLE_PATH = "next_title.json"
USER_AGENT = "pytitle/1.0"

#: Primary key of the one and only persisted title row.
TITLE_ROW_ID = 0

DATABASE_NAME = "titles_db"

DEFAULT_TAP_DELAY: float = 1.0
DEFAULT_REQUEST_TIMEOUT: float = 10.0
DEFAULT_FAKE_DELAY: float = 0.5

# ------------------------------------------------------------------
# Fake network responses (picked by SkipNetworkInterceptor)
# ------------------------------------------------------------------

FAKE_TITLES: tuple[str, ...] = (
    "Hello, coroutines!",
    "My favorite feature",
    "Async made easy",
    "Coroutines by example",
    "Check out the Advanced Coroutines codelab next!",
)
FAKE_ERROR_MESSAGE = "Unable to refresh title"
