"""Static metadata describing SurveyCBT."""

APP_NAME = "SurveyCBT"
APP_VERSION = "0.1"
APP_LICENSE = "MIT License"
APP_ABOUT_TEXT = (
    "SurveyCBT runs timed, role-gated certification tests for survey field staff. "
    "Enumerators take tests from the web client while the desktop host keeps the clock, "
    "autosaves progress and scores submissions."
)
