"""
Logging for deepresearch runs.

Console output goes through rich on stderr, so a report printed to stdout
stays clean. A plain-text file log can be added for long runs.
"""

import logging
from pathlib import Path
from typing import Any, MutableMapping

from rich.console import Console
from rich.logging import RichHandler

FILE_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"
QUIET_LOGGERS = ("httpx", "httpcore", "anthropic", "tavily")


def setup_logging(
    level: str = "INFO",
    log_file: Path | None = None,
    rich_tracebacks: bool = True,
    show_path: bool = False,
) -> logging.Logger:
    """
    Configure the root logger for a research run.

    Args:
        level: Log level name (DEBUG, INFO, WARNING, ...)
        log_file: Also write plain-text logs here
        rich_tracebacks: Render exceptions with rich
        show_path: Show source locations in console lines

    Returns:
        The root logger
    """
    numeric_level = getattr(logging, level.upper(), logging.INFO)

    root = logging.getLogger()
    root.setLevel(numeric_level)
    root.handlers = []

    console = RichHandler(
        console=Console(stderr=True),
        rich_tracebacks=rich_tracebacks,
        show_path=show_path,
        markup=False,
    )
    console.setLevel(numeric_level)
    console.setFormatter(logging.Formatter("%(message)s", datefmt="[%X]"))
    root.addHandler(console)

    if log_file:
        log_file.parent.mkdir(parents=True, exist_ok=True)
        file_handler = logging.FileHandler(log_file, encoding="utf-8")
        file_handler.setLevel(numeric_level)
        file_handler.setFormatter(logging.Formatter(FILE_FORMAT, datefmt="%Y-%m-%d %H:%M:%S"))
        root.addHandler(file_handler)

    for name in QUIET_LOGGERS:
        logging.getLogger(name).setLevel(logging.WARNING)

    return root


class StructuredLogger(logging.LoggerAdapter):
    """
    Logger adapter that prefixes messages with key=value context.

    Usage:
        log = StructuredLogger("deepresearch.research", depth=2, breadth=4)
        log.info("Planning queries")
        # [depth=2 breadth=4] Planning queries
    """

    def __init__(self, name: str, **context: Any):
        super().__init__(logging.getLogger(name), context)

    def process(self, msg: Any, kwargs: MutableMapping[str, Any]) -> tuple[Any, MutableMapping[str, Any]]:
        if not self.extra:
            return msg, kwargs
        prefix = " ".join(f"{k}={v}" for k, v in self.extra.items())
        return f"[{prefix}] {msg}", kwargs

    def add_context(self, **context: Any) -> "StructuredLogger":
        """New logger with extra context fields merged in."""
        return StructuredLogger(self.logger.name, **{**self.extra, **context})
