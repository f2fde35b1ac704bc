import logging
import os
import sys
from datetime import datetime

LOGGER_NAME = "suggestion_patcher"


def setup_logger(log_dir: str | None = ".suggestion_patcher/logs",
                 verbose: bool = False) -> tuple[logging.Logger, str | None]:
    """Configure the package logger for a CLI run.

    Progress goes to stdout; everything (DEBUG and up) also goes to a
    timestamped file in *log_dir* unless *log_dir* is ``None``.
    Returns ``(logger, log_file)``.
    """
    logger = logging.getLogger(LOGGER_NAME)
    logger.setLevel(logging.DEBUG)

    # Repeated runs in one process must not stack handlers
    for handler in list(logger.handlers):
        logger.removeHandler(handler)
        handler.close()

    console = logging.StreamHandler(sys.stdout)
    console.setLevel(logging.DEBUG if verbose else logging.INFO)
    console.setFormatter(logging.Formatter("%(message)s"))
    logger.addHandler(console)

    log_file = None
    if log_dir:
        os.makedirs(log_dir, exist_ok=True)
        timestamp = datetime.now().strftime("%Y%m%d_%H%M%S")
        log_file = os.path.join(log_dir, f"apply_{timestamp}.log")

        # File handler captures everything
        fh = logging.FileHandler(log_file, encoding="utf-8")
        fh.setLevel(logging.DEBUG)
        fh.setFormatter(logging.Formatter(
            "%(asctime)s [%(levelname)s] %(name)s: %(message)s",
            datefmt="%H:%M:%S",
        ))
        logger.addHandler(fh)

    return logger, log_file
