from __future__ import annotations

import logging
import os
from logging.handlers import RotatingFileHandler
from typing import Optional


def setup_logging(log_dir: Optional[str] = None, level: str = "WARNING") -> logging.Logger:
    logger = logging.getLogger("dropkeys")
    logger.setLevel(getattr(logging, str(level).upper(), logging.WARNING))
    logger.propagate = False

    if log_dir:
        text_path = os.path.abspath(os.path.join(log_dir, "dropkeys.log"))
        # one file handler at a time; a new log_dir replaces the old one
        for h in [h for h in logger.handlers if isinstance(h, RotatingFileHandler)]:
            if h.baseFilename == text_path:
                continue
            logger.removeHandler(h)
            h.close()
        if not any(isinstance(h, RotatingFileHandler) for h in logger.handlers):
            os.makedirs(log_dir, exist_ok=True)
            h = RotatingFileHandler(text_path, maxBytes=1_000_000, backupCount=5, encoding="utf-8")
            fmt = logging.Formatter("%(asctime)s | %(levelname)s | %(message)s")
            h.setFormatter(fmt)
            logger.addHandler(h)

    # stdout carries records; diagnostics go to stderr only
    if not any(isinstance(h, logging.StreamHandler) and not isinstance(h, RotatingFileHandler) for h in logger.handlers):
        sh = logging.StreamHandler()
        sh.setFormatter(logging.Formatter("%(message)s"))
        logger.addHandler(sh)

    return logger
