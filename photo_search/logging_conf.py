import logging
import sys
from datetime import datetime

# ANSI escape codes for colors
RESET = "\033[0m"
GREEN = "\033[32m"
YELLOW = "\033[33m"
BLUE = "\033[34m"
RED = "\033[31m"

LOGGER_NAME = "photo_search"


class ColoredFormatter(logging.Formatter):
    COLORS = {
        logging.DEBUG: BLUE,
        logging.INFO: GREEN,
        logging.WARNING: YELLOW,
        logging.ERROR: RED,
        logging.CRITICAL: RED,
    }

    def __init__(self, use_color: bool = True):
        super().__init__()
        self.use_color = use_color

    def format(self, record):
        timestamp = datetime.fromtimestamp(record.created).strftime("%Y-%m-%d %H:%M:%S")
        level_name = record.levelname.ljust(8)
        log_message = record.getMessage()
        if record.exc_info:
            log_message = f"{log_message}\n{self.formatException(record.exc_info)}"

        if not self.use_color:
            return f"{timestamp} | {level_name} | {log_message}"
        level_color = self.COLORS.get(record.levelno, RESET)
        return f"{timestamp} | {level_color}{level_name}{RESET} | {log_message}"


def setup_logging(level=logging.INFO, stream=None):
    """Configure the package logger with color and timestamps."""
    stream = stream or sys.stdout
    pkg_logger = logging.getLogger(LOGGER_NAME)
    pkg_logger.setLevel(level)

    # Remove any existing handlers
    for handler in pkg_logger.handlers[:]:
        pkg_logger.removeHandler(handler)

    console_handler = logging.StreamHandler(stream)
    console_handler.setFormatter(ColoredFormatter(use_color=stream.isatty()))
    pkg_logger.addHandler(console_handler)
    pkg_logger.propagate = False

    return pkg_logger


logger = logging.getLogger(LOGGER_NAME)
