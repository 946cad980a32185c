"""Application entry point for QuizWhiz."""

from __future__ import annotations

import socket
import sys

from PySide6.QtWidgets import QApplication

from quizwhiz.constants.about import APP_NAME
from quizwhiz.constants.network_constants import DEFAULT_HOST, DEFAULT_PORT
from quizwhiz.core.quiz_manager import QuizManager
from quizwhiz.server.api_server import start_api_server
from quizwhiz.ui.main_window import MainWindow
from quizwhiz.utils.logging_config import configure_logging


def _determine_share_url(host: str, port: int) -> str:
    """Best-effort address other devices can use to reach the share server."""
    if host not in ("0.0.0.0", ""):
        return f"http://{host}:{port}/"
    try:
        with socket.socket(socket.AF_INET, socket.SOCK_DGRAM) as sock:
            sock.connect(("8.8.8.8", 80))
            ip_address = sock.getsockname()[0]
    except OSError:
        ip_address = "127.0.0.1"
    return f"http://{ip_address}:{port}/"


def main() -> None:
    """Initialize logging, start the share server, and launch the Qt UI."""
    logger = configure_logging()
    logger.info("Starting %s…", APP_NAME)

    quiz_manager = QuizManager()
    start_api_server(quiz_manager=quiz_manager, host=DEFAULT_HOST, port=DEFAULT_PORT)
    share_url = _determine_share_url(DEFAULT_HOST, DEFAULT_PORT)
    logger.info("Share server available at %s", share_url)

    app = QApplication(sys.argv)
    app.setApplicationName(APP_NAME)
    window = MainWindow(quiz_manager=quiz_manager, share_url=share_url)
    window.resize(1100, 800)
    window.show()
    sys.exit(app.exec())


if __name__ == "__main__":
    main()
