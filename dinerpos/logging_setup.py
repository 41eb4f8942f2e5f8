"""Debug log configuration."""

from __future__ import annotations

import logging
from pathlib import Path

from dinerpos.config import DEBUG_LOG_PATH, LOG_LEVEL

_FORMAT = "%(asctime)s %(levelname)s %(name)s %(message)s"


def configure_logging(path: str | Path = DEBUG_LOG_PATH, level: str = LOG_LEVEL) -> None:
    """Send ``dinerpos`` log records to the debug log file.

    The terminal belongs to the UI, so nothing is written to stderr. If the
    file cannot be opened, logging stays unconfigured.
    """
    root = logging.getLogger("dinerpos")
    root.setLevel(getattr(logging, level.upper(), logging.INFO))
    for handler in list(root.handlers):
        root.removeHandler(handler)
        handler.close()

    try:
        log_file = Path(path)
        log_file.parent.mkdir(parents=True, exist_ok=True)
        handler = logging.FileHandler(log_file, encoding="utf-8")
    except OSError:
        root.addHandler(logging.NullHandler())
        return

    handler.setFormatter(logging.Formatter(_FORMAT))
    root.addHandler(handler)
