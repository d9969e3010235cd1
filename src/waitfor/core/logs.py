"""Logging setup for the waitfor command line."""

import json
import logging
import os
import sys
from pathlib import Path

from waitfor.core.config import WaitforConfig

_EXTRA_KEYS = ("event", "attempt", "result", "elapsed", "condition")


class StructuredFormatter(logging.Formatter):
    """Formatter that appends structured extra fields as JSON when present."""
    def format(self, record):
        base = super().format(record)
        if getattr(record, "event", None):
            extras = {k: v for k, v in record.__dict__.items() if k in _EXTRA_KEYS}
            base += f" | {json.dumps(extras, default=str)}"
        return base


def setup_logging(config: WaitforConfig):
    """Configure logging with a stderr handler and an optional file handler.

    WAITFOR_LOG_LEVEL wins over the config file.
    """
    fmt = StructuredFormatter(
        fmt="%(asctime)s [%(name)s] %(levelname)s: %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
    )

    console_handler = logging.StreamHandler(sys.stderr)
    console_handler.setFormatter(fmt)
    handlers = [console_handler]

    if config.logging.file:
        log_path = Path(config.logging.file).expanduser()
        log_path.parent.mkdir(parents=True, exist_ok=True)
        file_handler = logging.FileHandler(log_path, encoding="utf-8")
        file_handler.setFormatter(fmt)
        handlers.append(file_handler)

    level_name = os.environ.get("WAITFOR_LOG_LEVEL", config.logging.level).upper()
    level = getattr(logging, level_name, logging.WARNING)
    logging.basicConfig(level=level, handlers=handlers, force=True)
