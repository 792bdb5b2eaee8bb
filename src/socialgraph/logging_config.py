"""
Logging Setup
=============
Configures the 'socialgraph' logger used by every module of the viewer.

Ingestion, stabilization and the animation scheduler report through module
loggers (``logging.getLogger(__name__)``); this function decides where those
records end up.
"""
import logging
import sys
from typing import Optional

LOG_FORMAT = '%(asctime)s - %(name)s - %(levelname)s - %(message)s'
DATE_FORMAT = '%H:%M:%S'


def setup_logging(level: int = logging.INFO, log_file: Optional[str] = None) -> None:
    """
    Send 'socialgraph' records to stdout and, optionally, to ``log_file``.

    Calling it again replaces the handlers of the previous call.

    Args:
        level: Threshold for the logger and all of its handlers.
        log_file: File to write as well, truncated on every start.
    """
    logger = logging.getLogger("socialgraph")
    logger.setLevel(level)
    if logger.hasHandlers():
        logger.handlers.clear()

    formatter = logging.Formatter(LOG_FORMAT, datefmt=DATE_FORMAT)
    handlers: list[logging.Handler] = [logging.StreamHandler(sys.stdout)]
    if log_file:
        handlers.append(logging.FileHandler(log_file, mode='w', encoding='utf-8'))

    for handler in handlers:
        handler.setLevel(level)
        handler.setFormatter(formatter)
        logger.addHandler(handler)

    logger.info(f"Logging at {logging.getLevelName(level)}"
                + (f", also to {log_file}" if log_file else ""))
