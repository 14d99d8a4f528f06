"""Application entry point for the SurveyCBT test host."""

from __future__ import annotations

import socket
import sys

from PySide6.QtCore import QCoreApplication

from cbt_app.constants.network_constants import DEFAULT_HOST, DEFAULT_PORT
from cbt_app.constants.sample_data import SAMPLE_QUESTIONS, SAMPLE_SURVEY
from cbt_app.constants.session_constants import DEFAULT_PROGRESS_DIR
from cbt_app.core.services.progress_store import JsonFileProgressStore
from cbt_app.core.services.question_bank import QuestionBank
from cbt_app.core.test_manager import TestManager
from cbt_app.qt.qt_scheduler import QtScheduler
from cbt_app.server.api_server import start_api_server
from cbt_app.utils.logging_config import configure_logging


def _determine_client_url(port: int) -> str:
    """Best-effort determination of the local IP for the web client URL."""
    try:
        with socket.socket(socket.AF_INET, socket.SOCK_DGRAM) as sock:
            sock.connect(("8.8.8.8", 80))
            ip_address = sock.getsockname()[0]
    except OSError:
        ip_address = "127.0.0.1"
    return f"http://{ip_address}:{port}/"


def main() -> None:
    """Initialize logging, load the demo survey, start the API server and run the event loop."""
    logger = configure_logging()
    logger.info("Starting SurveyCBT host...")

    app = QCoreApplication(sys.argv)
    scheduler = QtScheduler()

    question_bank = QuestionBank()
    question_bank.add_survey(SAMPLE_SURVEY)
    question_bank.load_questions(SAMPLE_SURVEY.id, SAMPLE_QUESTIONS)

    test_manager = TestManager(
        question_bank=question_bank,
        progress_store=JsonFileProgressStore(DEFAULT_PROGRESS_DIR),
        scheduler=scheduler,
    )
    start_api_server(test_manager=test_manager, host=DEFAULT_HOST, port=DEFAULT_PORT)
    logger.info("Test API available at %s", _determine_client_url(DEFAULT_PORT))

    sys.exit(app.exec())


if __name__ == "__main__":
    main()
