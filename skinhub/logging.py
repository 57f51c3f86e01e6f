"""
Logging setup for SkinHub.

    from skinhub.logging import get_logger
    logger = get_logger(__name__)
"""

import logging
import os
import sys
from functools import cache

LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"


def _configure_root_logger() -> None:
    """Attach one stdout handler at LOG_LEVEL unless the host already configured logging."""
    root = logging.getLogger()
    if root.handlers:
        return

    level = getattr(logging, os.environ.get("LOG_LEVEL", "INFO").upper(), logging.INFO)
    handler = logging.StreamHandler(sys.stdout)
    handler.setFormatter(logging.Formatter(LOG_FORMAT))
    root.setLevel(level)
    root.addHandler(handler)

    # Upstash client logs every REST call through httpx
    logging.getLogger("httpx").setLevel(logging.WARNING)


_configure_root_logger()


@cache
def get_logger(name: str) -> logging.Logger:
    return logging.getLogger(name)


def sanitize_for_logging(value: object, max_length: int = 40) -> str:
    """
    Make caller-supplied text safe to log.

    Session ids, product ids and filter values arrive from the request, so
    control characters are escaped (CWE-117) and long values are clipped.
    """
    if value is None or value == "":
        return "N/A"
    text = str(value).replace("\n", "\\n").replace("\r", "\\r").replace("\x00", "")
    return text if len(text) <= max_length else text[:max_length] + "..."


__all__ = ["get_logger", "sanitize_for_logging"]
