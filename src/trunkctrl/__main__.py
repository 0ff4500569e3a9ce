"""Main entry point for the TrunkCTRL application."""

import argparse
import logging
import signal
import sys
from pathlib import Path

from PySide6.QtCore import QCoreApplication, QTimer

from trunkctrl import APP_NAME
from trunkctrl.core.application import Application
from trunkctrl.core.home import HomeDirectoryResolver

logger = logging.getLogger(__name__)


def parse_args(argv: list[str]) -> argparse.Namespace:
    """Parse command line arguments.

    Args:
        argv: Arguments without the program name.

    Returns:
        Parsed arguments.
    """
    parser = argparse.ArgumentParser(
        prog="trunkctrl",
        description="TrunkCTRL - trunked radio decoding",
    )
    parser.add_argument(
        "--home",
        type=Path,
        default=None,
        help=f"base directory for the {APP_NAME} folder (default: user home)",
    )
    parser.add_argument(
        "--log-level",
        default="INFO",
        choices=["DEBUG", "INFO", "WARNING", "ERROR"],
        help="logging level (default: INFO)",
    )
    return parser.parse_args(argv)


def main() -> int:
    """Run the TrunkCTRL application.

    Returns:
        Exit code (0 for success).
    """
    QCoreApplication.setApplicationName(APP_NAME)
    QCoreApplication.setOrganizationName(APP_NAME)

    qt_app = QCoreApplication(sys.argv)
    parsed = parse_args(qt_app.arguments()[1:])

    logging.basicConfig(
        level=parsed.log_level, format="%(asctime)s %(levelname)s %(name)s: %(message)s"
    )

    # Construction errors propagate: no partially wired application is run
    app = Application(HomeDirectoryResolver(user_home=parsed.home))
    app.title_changed.connect(lambda title: logger.info("Title: %s", title))
    app.build()

    # Ctrl+C stops the event loop; the timer lets Python see the signal
    signal.signal(signal.SIGINT, lambda *_: qt_app.quit())
    wakeup = QTimer()
    wakeup.timeout.connect(lambda: None)
    wakeup.start(500)

    exit_code = qt_app.exec()

    app.shutdown()
    return exit_code


if __name__ == "__main__":
    sys.exit(main())
