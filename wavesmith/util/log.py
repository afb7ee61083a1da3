from __future__ import annotations

import logging
from pathlib import Path

LOG_FORMAT = "%(asctime)s %(levelname)s %(name)s %(message)s"


def setup_logging(level: int = logging.WARNING, *, log_file: Path | None = None) -> logging.Logger:
    """Attach a stderr handler (and optionally a file handler) to the package logger."""
    logger = logging.getLogger("wavesmith")
    logger.setLevel(level)
    if logger.handlers:
        return logger
    fmt = logging.Formatter(LOG_FORMAT)
    stream = logging.StreamHandler()
    stream.setFormatter(fmt)
    logger.addHandler(stream)
    if log_file is not None:
        log_file.parent.mkdir(parents=True, exist_ok=True)
        fh = logging.FileHandler(log_file)
        fh.setFormatter(fmt)
        logger.addHandler(fh)
    return logger
