"""Application entry point for the QuizDesk API."""

from __future__ import annotations

import os
from pathlib import Path

from quizdesk.constants.network_constants import DEFAULT_HOST, DEFAULT_PORT
from quizdesk.constants.storage_constants import DEFAULT_DATA_DIR
from quizdesk.core.demo_data import DEMO_OWNER_ID, load_demo_content
from quizdesk.core.quiz_manager import QuizManager
from quizdesk.core.storage import FileStore
from quizdesk.server.api_server import run_api_server
from quizdesk.utils.logging_config import configure_logging


def main() -> None:
    """Initialize logging, open the data directory and serve the API."""
    logger = configure_logging(os.environ.get("QUIZDESK_LOG_LEVEL", "INFO"))
    data_dir = Path(os.environ.get("QUIZDESK_DATA_DIR", DEFAULT_DATA_DIR))
    host = os.environ.get("QUIZDESK_HOST", DEFAULT_HOST)
    port = int(os.environ.get("QUIZDESK_PORT", DEFAULT_PORT))
    logger.info("Starting QuizDesk with data in %s", data_dir)

    quiz_manager = QuizManager(store=FileStore(data_dir))
    if os.environ.get("QUIZDESK_DEMO") == "1" and not quiz_manager.list_quizzes(DEMO_OWNER_ID):
        quizzes, _ = load_demo_content(quiz_manager)
        logger.info("Seeded %d demo quizzes", len(quizzes))

    logger.info("API available at http://%s:%d/", host, port)
    run_api_server(quiz_manager=quiz_manager, host=host, port=port)


if __name__ == "__main__":
    main()
