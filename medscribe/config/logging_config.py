# -*- coding: utf-8 -*-
"""Logging setup shared by the API process."""

import logging
import sys

LOG_FORMAT = "%(asctime)s %(levelname)s [%(name)s] %(message)s"


def setup_logging(level: str = "info") -> logging.Logger:
    """Configure the root logger once so all modules inherit the same level."""
    root_logger = logging.getLogger()
    root_logger.setLevel(getattr(logging, (level or "info").upper(), logging.INFO))

    # Replace handlers instead of stacking them on reload
    for handler in list(root_logger.handlers):
        root_logger.removeHandler(handler)

    handler = logging.StreamHandler(sys.stdout)
    handler.setFormatter(logging.Formatter(LOG_FORMAT))
    root_logger.addHandler(handler)

    # httpx logs every request at INFO
    logging.getLogger("httpx").setLevel(logging.WARNING)
    return root_logger
