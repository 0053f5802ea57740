# pricewatch/config/logging_config.py

"""Per-run timestamped logging configuration for pricewatch.

Each launch creates a dedicated log file inside ``logs/``, named with
the launch timestamp (e.g. ``logs/run_20260214_153045.log``).  All
``pricewatch.*`` loggers route through this file handler so that the
fetch, parse and validation steps of a run land in the same file.
"""

import logging
import sys
from collections.abc import Callable
from datetime import datetime
from pathlib import Path

from pricewatch.config.settings import Settings

_DETAILED_FORMAT = (
    "%(asctime)s | %(levelname)-8s | %(name)s | %(module)s:%(funcName)s:%(lineno)d | "
    "%(message)s"
)

_CONSOLE_FORMAT = "%(asctime)s | %(levelname)-8s | %(message)s"

_DATE_FORMAT = "%Y-%m-%d %H:%M:%S"


def setup_logging(logs_dir: Path | None = None) -> Path:
    """Initialise the root ``pricewatch`` logger for the current run.

    Returns:
        The :class:`~pathlib.Path` to the log file created for this run.
    """
    directory: Path = logs_dir or Settings.LOGS_DIR
    directory.mkdir(parents=True, exist_ok=True)

    timestamp = datetime.now().strftime("%Y%m%d_%H%M%S")
    log_file = directory / f"run_{timestamp}.log"

    root_logger = logging.getLogger("pricewatch")
    root_logger.setLevel(logging.DEBUG)

    # Repeated calls (e.g. tests) must not stack handlers
    if root_logger.handlers:
        return log_file

    file_handler = logging.FileHandler(log_file, encoding="utf-8")
    file_handler.setLevel(logging.DEBUG)
    file_handler.setFormatter(
        logging.Formatter(_DETAILED_FORMAT, datefmt=_DATE_FORMAT)
    )

    console_handler = logging.StreamHandler(sys.stderr)
    console_handler.setLevel(logging.WARNING)
    console_handler.setFormatter(
        logging.Formatter(_CONSOLE_FORMAT, datefmt=_DATE_FORMAT)
    )

    root_logger.addHandler(file_handler)
    root_logger.addHandler(console_handler)

    root_logger.info("Logging initialised, log file: %s", log_file)

    return log_file


class StepLog:
    """Mirror pipeline step messages to an optional external sink.

    Every message goes to the given module logger first.  When a sink
    is attached (e.g. a dashboard console stream) the formatted message
    is also handed to it; a failing sink is logged and otherwise ignored.
    """

    def __init__(self, sink: Callable[[str], None] | None = None) -> None:
        self.sink = sink

    def emit(
        self,
        logger: logging.Logger,
        message: str,
        *args: object,
        level: int = logging.INFO,
    ) -> None:
        """Log ``message % args`` and forward it to the sink."""
        logger.log(level, message, *args)
        if self.sink is None:
            return
        text = message % args if args else message
        try:
            self.sink(text)
        except Exception:
            logger.warning("Log sink raised; message dropped", exc_info=True)
