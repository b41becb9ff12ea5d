"""Root logger configuration, applied once at startup."""

import logging
import sys

from portfolio.config import settings


def setup_logging():
    """
    Configures the root logger for the application.
    This function should be called ONLY ONCE at startup in main.py.
    """
    logging.basicConfig(
        level=settings.LOG_LEVEL.upper(),
        format="%(asctime)s - %(name)s - [%(levelname)s] - %(message)s",
        stream=sys.stdout,
    )
    # Silence noisy libraries
    logging.getLogger("httpx").setLevel(logging.WARNING)
    logging.getLogger("httpcore").setLevel(logging.WARNING)
    logging.getLogger("apscheduler").setLevel(logging.WARNING)
