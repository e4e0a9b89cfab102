"""
Logging setup for Pulse Risk.

Terminal output goes through rich; scans and watch mode share one handler so
warnings from worker threads and the watcher thread interleave cleanly.
"""

import logging
from typing import Optional

from rich.console import Console
from rich.logging import RichHandler

ROOT_LOGGER = "pulse_risk"

# Chatty at INFO: watchfiles logs every change batch.
_NOISY_LOGGERS = ("watchfiles",)


def setup_logging(
    verbose: bool = False, quiet: bool = False, log_file: Optional[str] = None
) -> logging.Logger:
    """
    Install the rich handler (and optionally a file handler) on the root logger.

    Args:
        verbose: DEBUG level, with source paths and locals in tracebacks
        quiet: ERROR level only; per-file warnings are hidden
        log_file: Also append plain-text records to this file

    Returns:
        The ``pulse_risk`` logger
    """
    level = logging.ERROR if quiet else logging.DEBUG if verbose else logging.INFO

    handlers: list[logging.Handler] = [
        RichHandler(
            console=Console(stderr=True),
            rich_tracebacks=True,
            tracebacks_show_locals=verbose,
            markup=False,
            show_path=verbose,
        )
    ]

    if log_file:
        file_handler = logging.FileHandler(log_file, mode="a")
        file_handler.setFormatter(
            logging.Formatter("%(asctime)s %(threadName)s %(name)s %(levelname)s: %(message)s")
        )
        handlers.append(file_handler)

    logging.basicConfig(level=level, format="%(message)s", datefmt="[%X]", handlers=handlers, force=True)

    for name in _NOISY_LOGGERS:
        logging.getLogger(name).setLevel(logging.DEBUG if verbose else logging.WARNING)

    logger = logging.getLogger(ROOT_LOGGER)
    logger.setLevel(level)
    return logger


def get_logger(name: Optional[str] = None) -> logging.Logger:
    """Logger under the ``pulse_risk`` namespace (the root one if no name)."""
    if name is None:
        return logging.getLogger(ROOT_LOGGER)
    if not name.startswith(ROOT_LOGGER):
        name = f"{ROOT_LOGGER}.{name}"
    return logging.getLogger(name)
