"""Timing and access constants shared by the session engine and its host."""

TICK_INTERVAL_MS: int = 1000
AUTOSAVE_INTERVAL_SECONDS: int = 30
ANSWER_SAVE_DELAY_MS: int = 1000
LOW_TIME_WARNING_SECONDS: int = 300

DEFAULT_PROGRESS_DIR: str = "data/progress"
DEFAULT_MENU_ID: str = "dashboard"
TAKE_TEST_PERMISSION: str = "tests.take"
