"""
Reusable logging and print setup for the command-line tools.

Functions:
    setup_logging      - Configure and return the root logger.
    set_print_logger   - Set the logger for print_and_log and print_error.
    print_and_log      - Print (rich markup) and log an info message.
    print_error        - Print and log an error message.
"""

import logging
import os
import sys
from typing import Optional

from rich import print as rich_print
from rich.logging import RichHandler

# Module-level variable to hold the logger for print_and_log and print_error
_print_logger: Optional[logging.Logger] = None


def setup_logging(
    app_name: str = "aurora",
    loglevel: int = logging.INFO,
    logfile: Optional[str] = None,
    console: bool = False,
) -> logging.Logger:
    """
    Set up logging for the application.
    - If console=True, logs go to stderr through rich.
    - Otherwise, logs go to ~/.<app_name>/log.txt or to a custom logfile.
    Returns the configured logger, also registered for print_and_log/print_error.
    """
    logger = logging.getLogger()
    logger.setLevel(loglevel)
    handler: logging.Handler
    if console:
        handler = RichHandler(rich_tracebacks=True, show_path=False)
        handler.setFormatter(logging.Formatter(f"[{app_name}] %(name)s: %(message)s"))
    else:
        if logfile is None:
            log_dir = os.path.expanduser(f"~/.{app_name}")
            os.makedirs(log_dir, exist_ok=True)
            logfile = os.path.join(log_dir, "log.txt")
        handler = logging.FileHandler(logfile)
        handler.setFormatter(logging.Formatter("%(asctime)s %(levelname)s %(process)d %(name)s %(message)s"))

    # Remove any existing handlers
    for h in logger.handlers[:]:
        logger.removeHandler(h)

    logger.addHandler(handler)
    set_print_logger(logger)
    logger.debug(f"Logging initialized for {app_name}")
    return logger


def set_print_logger(logger: Optional[logging.Logger]):
    """
    Set the logger to be used by print_and_log and print_error.
    setup_logging calls this; pass None to stop logging printed messages.
    """
    global _print_logger
    _print_logger = logger


def print_and_log(message: str, **kwargs):
    """
    Print to console (rich) and log as info.
    """
    rich_print(message, **kwargs)
    if _print_logger is not None:
        _print_logger.info(message)


def print_error(message: str, **kwargs):
    """
    Print and log an error message (stderr and error level).
    """
    rich_print(f"[bold red]{message}[/bold red]", file=sys.stderr, **kwargs)
    if _print_logger is not None:
        _print_logger.error(message)
