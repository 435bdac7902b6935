"""
Basic logging configuration for the application.

The ``setup_logging`` function configures the root logger with a
console handler.  Log format includes the timestamp, logger name, log
level and message.  This module ensures that logging is set up
exactly once.
"""

import logging


def setup_logging(level: str = "INFO") -> None:
    """Configure root logger.

    If no handlers are attached to the root logger, attach a console
    handler.  The root logger's level is set based on the provided
    ``level``.

    Parameters
    ----------
    level : str
        Logging level name (e.g. ``"DEBUG"``, ``"INFO"``).  Case
        insensitive.
    """
    logger = logging.getLogger()
    if logger.handlers:
        # Avoid configuring logging multiple times.  This can happen when
        # running tests or when ``create_app`` is called repeatedly.
        return

    numeric_level = getattr(logging, level.upper(), logging.INFO)
    logger.setLevel(numeric_level)

    formatter = logging.Formatter(
        fmt="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
    )

    console_handler = logging.StreamHandler()
    console_handler.setFormatter(formatter)
    logger.addHandler(console_handler)

    # pymongo logs every heartbeat at DEBUG; keep it quiet unless asked.
    logging.getLogger("pymongo").setLevel(max(numeric_level, logging.WARNING))
