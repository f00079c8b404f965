"""Process-wide logging configuration."""

from __future__ import annotations

import logging
import os
import sys

_FORMAT = "%(asctime)s %(levelname)s [%(name)s] %(message)s"


def setup_logging() -> None:
    log_level = logging.DEBUG if os.getenv("INVOICE_DEBUG") == "1" else logging.INFO
    root_logger = logging.getLogger()
    if getattr(root_logger, "_invoice_logging_configured", False):
        root_logger.setLevel(log_level)
        for handler in root_logger.handlers:
            handler.setLevel(log_level)
        return

    stream_handler = logging.StreamHandler(sys.stdout)
    stream_handler.setLevel(log_level)
    stream_handler.setFormatter(logging.Formatter(_FORMAT))

    root_logger.handlers.clear()
    root_logger.setLevel(log_level)
    root_logger.addHandler(stream_handler)
    root_logger._invoice_logging_configured = True  # type: ignore[attr-defined]
