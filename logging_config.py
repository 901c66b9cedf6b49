"""Logging setup shared by the CLI and library callers."""

import logging
from typing import Optional

from rich.console import Console
from rich.logging import RichHandler

from config import settings

# Third-party loggers that are chatty at INFO
NOISY_LOGGERS = ("httpx", "httpcore", "openai", "anthropic", "LiteLLM", "google_genai")


def setup_logging(level: Optional[str] = None, console: Optional[Console] = None) -> logging.Logger:
    """Install a rich handler on the root logger.

    Args:
        level: Log level name; defaults to settings.log_level.
        console: Console to render into (stderr by default so stdout stays clean).

    Returns:
        The configured root logger.
    """
    level_name = (level or settings.log_level).upper()
    root = logging.getLogger()
    root.setLevel(getattr(logging, level_name, logging.INFO))

    for handler in list(root.handlers):
        if isinstance(handler, RichHandler):
            root.removeHandler(handler)

    handler = RichHandler(
        console=console or Console(stderr=True),
        show_path=False,
        rich_tracebacks=True,
        markup=False,
    )
    handler.setFormatter(logging.Formatter("%(name)s: %(message)s"))
    root.addHandler(handler)

    for name in NOISY_LOGGERS:
        logging.getLogger(name).setLevel(logging.WARNING)

    return root
