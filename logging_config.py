"""Shared logging configuration for the OpenAlex graph adapter.

Call ``configure_logging()`` once at a CLI entry point. The library modules only
create module loggers; they never install handlers themselves.
"""

import logging
from typing import Optional, Union

from config import config


def configure_logging(level: Optional[Union[int, str]] = None, log_file: Optional[str] = None) -> None:
    """Configure root logger with a console handler and an optional file handler.

    Only configures if the root logger has no handlers (idempotent).
    """
    root = logging.getLogger()
    if root.handlers:
        return

    if level is None:
        level = config.logging.level
    if log_file is None:
        log_file = config.logging.log_file

    formatter = logging.Formatter("%(asctime)s - %(name)s - %(levelname)s - %(message)s")

    console = logging.StreamHandler()
    console.setFormatter(formatter)
    root.addHandler(console)

    if log_file:
        fh = logging.FileHandler(log_file, mode="a")
        fh.setFormatter(formatter)
        root.addHandler(fh)

    root.setLevel(level)
