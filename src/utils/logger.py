import logging
import os

from rich.logging import RichHandler


class CenteredFormatter(logging.Formatter):
    """
    Pads logger names to the longest name seen so far, so the
    gateway, session and view logs line up in the console.
    """

    longest_name_length = 14

    def __init__(self, fmt=None, datefmt=None, style="%", initial_width=14):
        super().__init__(fmt, datefmt, style)
        CenteredFormatter.longest_name_length = initial_width

    def format(self, record):
        short_name = record.name.removeprefix("quickbite.")
        CenteredFormatter.longest_name_length = max(
            CenteredFormatter.longest_name_length, len(short_name)
        )
        record.name = short_name.center(CenteredFormatter.longest_name_length)
        return super().format(record)


def _log_level() -> int:
    if os.getenv("DEBUG"):
        return logging.DEBUG
    level = logging.getLevelName(os.getenv("QUICKBITE_LOG_LEVEL", "INFO").upper())
    return level if isinstance(level, int) else logging.INFO


def get_logger(name=None) -> logging.Logger:
    """
    Return the "quickbite.<name>" logger, attaching a RichHandler on first use.

    Level is DEBUG when DEBUG is set, otherwise QUICKBITE_LOG_LEVEL (INFO by default).
    """
    name = f"quickbite.{name or 'app'}"
    logger = logging.getLogger(name)
    log_level = _log_level()
    logger.setLevel(log_level)

    if not logger.handlers:
        handler = RichHandler(
            show_time=True,
            show_level=True,
            show_path=False,
            rich_tracebacks=True,
            log_time_format="[%X]",
        )
        handler.setFormatter(CenteredFormatter("[%(name)s]  %(message)s"))
        handler.setLevel(log_level)
        logger.addHandler(handler)

        logger.propagate = False
        logger.debug(f"Logger '{name}' ready.")

    return logger
