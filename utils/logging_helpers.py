"""Helper utilities for messages the user should see."""

from __future__ import annotations

import logging
from typing import Any


def log_user_notice(message: str, *args: Any) -> str:
    """Log a user facing notice and mirror it to stdout if INFO is hidden.

    The tray application is usually started without a console, but when it
    is run from a terminal with the root level at WARNING the notice would
    otherwise vanish.  Returns the formatted message so callers can show it
    in the tray as well.
    """

    root_logger = logging.getLogger()
    root_logger.info(message, *args)

    try:
        formatted = message % args if args else message
    except (TypeError, ValueError):
        formatted = message

    if root_logger.getEffectiveLevel() > logging.INFO:
        print(formatted, flush=True)
    return formatted
