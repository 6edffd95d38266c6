from __future__ import annotations
import logging, sys
from logging.handlers import RotatingFileHandler
from pathlib import Path
from typing import Optional

from imageresizer.config import settings_root

LOG_FORMAT = "%(asctime)s | %(levelname)s | %(message)s"

def build_logger(name: str = "image-resizer", log_dir: Optional[Path] = None,
                 level: int = logging.INFO) -> logging.Logger:
    """Root logger of the package; the image-resizer.* loggers propagate into it."""
    log_dir = Path(log_dir) if log_dir is not None else settings_root() / "logs"
    log_dir.mkdir(exist_ok=True, parents=True)

    logger = logging.getLogger(name)
    logger.setLevel(level)
    for old in list(logger.handlers):
        old.close()
        logger.removeHandler(old)

    fmt = logging.Formatter(LOG_FORMAT)

    fh = RotatingFileHandler(log_dir / "image-resizer.log", maxBytes=5_000_000, backupCount=3, encoding="utf-8")
    fh.setFormatter(fmt)
    fh.setLevel(level)
    logger.addHandler(fh)

    sh = logging.StreamHandler(sys.stdout)
    sh.setFormatter(fmt)
    sh.setLevel(level)
    logger.addHandler(sh)
    return logger
