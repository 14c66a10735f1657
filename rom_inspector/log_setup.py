"""
Logging setup shared by the romkit CLI.

Console output goes through ``rich.logging.RichHandler``; an optional log
file captures everything at DEBUG with the full record format.
"""

import logging
from pathlib import Path
from typing import Optional, Union

from rich.console import Console
from rich.logging import RichHandler

FILE_FORMAT = "%(asctime)s | %(levelname)-7s | %(name)s | %(funcName)s:%(lineno)d | %(message)s"
DATE_FORMAT = "%Y-%m-%d %H:%M:%S"


def setup_logging(level: int = logging.INFO,
                  log_file: Optional[Union[str, Path]] = None,
                  rich_console: bool = True,
                  name: str = "rom_inspector") -> logging.Logger:
    """Configure the package logger and return it.

    Args:
        level: Console level (file handler always logs DEBUG).
        log_file: Optional path of a UTF-8 log file; parent dirs are created.
        rich_console: Use a RichHandler on stderr; plain StreamHandler otherwise.
        name: Logger to configure.
    """
    logger = logging.getLogger(name)
    for handler in list(logger.handlers):
        logger.removeHandler(handler)
        handler.close()
    logger.setLevel(logging.DEBUG if log_file else level)
    logger.propagate = False

    if rich_console:
        console = RichHandler(
            console=Console(stderr=True),
            show_time=False,
            show_path=False,
            markup=False,
            rich_tracebacks=True,
        )
    else:
        console = logging.StreamHandler()
        console.setFormatter(logging.Formatter("%(levelname)s: %(message)s"))
    console.setLevel(level)
    logger.addHandler(console)

    if log_file:
        log_path = Path(log_file)
        log_path.parent.mkdir(parents=True, exist_ok=True)
        file_handler = logging.FileHandler(log_path, encoding="utf-8")
        file_handler.setLevel(logging.DEBUG)
        file_handler.setFormatter(logging.Formatter(FILE_FORMAT, datefmt=DATE_FORMAT))
        logger.addHandler(file_handler)

    return logger
