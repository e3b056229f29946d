"""
Logging bootstrap for applications embedding argoscan.

The library itself only emits DEBUG records on the "argoscan" logger (one per
dispatched option and one per finished parse), which stay below the default
warning threshold. setup_logger() is the opt-in: it attaches a rich console
handler writing to stderr.
"""
import logging

from rich.console import Console
from rich.logging import RichHandler


def setup_logger(level=logging.DEBUG, /, *, console=None):
    """
    route the "argoscan" logger to a rich handler and return the logger.

    parameters
    - level: threshold for both the logger and the handler.
    - console: rich Console to write to (defaults to a stderr console).

    calling it again replaces the previously attached handlers.
    """
    logger = logging.getLogger("argoscan")
    logger.setLevel(level)

    for handler in list(logger.handlers):
        handler.close()
    logger.handlers.clear()

    handler = RichHandler(console=console or Console(stderr=True), show_path=False)
    handler.setLevel(level)
    logger.addHandler(handler)
    return logger


__all__ = ("setup_logger",)
