"""Logging helpers for treediff.

Adds a SUCCESS level between INFO and WARNING and a console formatter that colors
messages by level.
"""
import logging
from typing import TextIO

from colorama import Fore, Style, just_fix_windows_console

SUCCESS = 25
logging.addLevelName(SUCCESS, 'SUCCESS')

LOG_FILE_FORMAT = '%(asctime)s - %(name)s - %(levelname)s - %(message)s'

LEVEL_COLORS = {
    logging.DEBUG: Style.DIM,
    logging.INFO: '',
    SUCCESS: Fore.GREEN,
    logging.WARNING: Fore.YELLOW,
    logging.ERROR: Fore.RED,
    logging.CRITICAL: Fore.RED + Style.BRIGHT,
}


class ColorFormatter(logging.Formatter):
    """Formats records as "[LEVEL] message", colored by level."""

    def __init__(self, use_color: bool = True):
        super().__init__('[%(levelname)s] %(message)s')
        self._use_color = use_color

    def format(self, record: logging.LogRecord) -> str:
        message = super().format(record)
        if not self._use_color:
            return message

        color = LEVEL_COLORS.get(record.levelno, '')
        if not color:
            return message
        return f"{color}{message}{Style.RESET_ALL}"


def configure_logging(
        level: int | str = logging.INFO,
        log_file: str | None = None,
        stream: TextIO | None = None,
        use_color: bool | None = None) -> None:
    """Configure the root logger with a colored console handler and an optional log file.

    Existing root handlers are removed first, so calling this twice does not
    duplicate output.

    Args:
        level: Logging level name or number for the console and the log file
        log_file: Path of a log file that receives the plain format, or None
        stream: Console stream (defaults to stderr)
        use_color: Force colors on or off; by default colors are used when the stream
                   is a terminal
    """
    if isinstance(level, str):
        level = logging.getLevelName(level.upper())

    root = logging.getLogger()
    for handler in root.handlers[:]:
        root.removeHandler(handler)

    console = logging.StreamHandler(stream)
    if use_color is None:
        use_color = console.stream.isatty()
    if use_color:
        just_fix_windows_console()
    console.setFormatter(ColorFormatter(use_color))
    root.addHandler(console)

    if log_file:
        file_handler = logging.FileHandler(log_file, encoding='utf-8')
        file_handler.setFormatter(logging.Formatter(LOG_FILE_FORMAT))
        root.addHandler(file_handler)

    root.setLevel(level)


def log_success(logger: logging.Logger, message: str) -> None:
    logger.log(SUCCESS, message)
