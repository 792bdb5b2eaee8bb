"""
Application Initialization
==========================
Creates the Qt application, opens the demo window and starts the event loop.

Why is this file needed?
------------------------
It is the root that wires logging, the ``QApplication`` and the main window
together, so the package can be started with ``python -m socialgraph`` or the
``socialgraph`` console script.
"""
import argparse
import logging
import sys

from PySide6.QtWidgets import QApplication

from socialgraph.logging_config import setup_logging
from socialgraph.view.main_window import MainWindow, VISIBLE_APP_NAME


def main() -> None:
    parser = argparse.ArgumentParser(prog="socialgraph", description=VISIBLE_APP_NAME)
    parser.add_argument("--debug", action="store_true", help="log debug messages")
    parser.add_argument("--log-file", default=None, help="also write the log to this file")
    args, qt_args = parser.parse_known_args()

    # 1. Logging (console + optional file)
    setup_logging(level=logging.DEBUG if args.debug else logging.INFO, log_file=args.log_file)

    # 2. Qt application
    app = QApplication([sys.argv[0], *qt_args])
    app.setApplicationName(VISIBLE_APP_NAME)

    # 3. Main window with the sample network
    window = MainWindow()
    window.show()

    # 4. Event loop
    sys.exit(app.exec())


if __name__ == "__main__":
    main()
