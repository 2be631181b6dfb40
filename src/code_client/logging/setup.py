"""Dual-handler logging: JSON rotating file + human-readable console.

    1. RotatingFileHandler -- JSON lines, DEBUG level, rotated by size
    2. StreamHandler -- text, INFO level, for the operator's terminal

Call setup_logging() once at process start.  Library modules only ever use
logging.getLogger(__name__) and never configure handlers themselves.
"""

import logging
import logging.handlers
from pathlib import Path

from pythonjsonlogger.json import JsonFormatter

# Third-party loggers that emit one INFO line per HTTP request.
_CHATTY_LOGGERS = ("httpx", "httpcore")


def setup_logging(
    log_dir: str = "logs",
    log_file: str = "code_client.log",
    log_level_file: int = logging.DEBUG,
    log_level_console: int = logging.INFO,
    max_bytes: int = 10_485_760,
    backup_count: int = 5,
    console: bool = True,
) -> Path:
    """Install the file (and optionally console) handlers on the root logger.

    Existing root handlers are removed first, so repeated calls do not
    duplicate output.

    Args:
        log_dir: Directory for log files; created if missing.
        log_file: File name inside *log_dir*.
        log_level_file: Level for the JSON file handler.
        log_level_console: Level for the console handler.
        max_bytes: Size at which the log file rotates.
        backup_count: Rotated files to keep.
        console: Attach the console handler.

    Returns:
        Path of the active log file.
    """
    log_path = Path(log_dir) / log_file
    log_path.parent.mkdir(parents=True, exist_ok=True)

    root_logger = logging.getLogger()
    root_logger.setLevel(logging.DEBUG)
    for handler in list(root_logger.handlers):
        root_logger.removeHandler(handler)
        handler.close()

    file_handler = logging.handlers.RotatingFileHandler(
        filename=str(log_path),
        maxBytes=max_bytes,
        backupCount=backup_count,
        encoding="utf-8",
    )
    file_handler.setLevel(log_level_file)
    file_handler.setFormatter(
        JsonFormatter(
            fmt="%(asctime)s %(name)s %(levelname)s %(message)s",
            rename_fields={
                "asctime": "timestamp",
                "levelname": "level",
                "name": "component",
            },
            datefmt="%Y-%m-%dT%H:%M:%S",
        )
    )
    root_logger.addHandler(file_handler)

    if console:
        console_handler = logging.StreamHandler()
        console_handler.setLevel(log_level_console)
        console_handler.setFormatter(
            logging.Formatter(
                fmt="%(asctime)s [%(levelname)-8s] %(name)s: %(message)s",
                datefmt="%Y-%m-%d %H:%M:%S",
            )
        )
        root_logger.addHandler(console_handler)

    for name in _CHATTY_LOGGERS:
        logging.getLogger(name).setLevel(logging.WARNING)

    return log_path
