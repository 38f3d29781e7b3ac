import logging
import os
from typing import Optional

FORMAT = "%(asctime)s | %(levelname)s | %(message)s"


def get_logger(run_id: str, log_path: Optional[str] = None) -> logging.Logger:
    logger = logging.getLogger(f"dronesafe.{run_id}")
    logger.setLevel(logging.INFO)
    logger.handlers.clear()

    fmt = logging.Formatter(FORMAT)
    ch = logging.StreamHandler()
    ch.setFormatter(fmt)
    logger.addHandler(ch)

    if log_path:
        os.makedirs(os.path.dirname(log_path), exist_ok=True)
        fh = logging.FileHandler(log_path, encoding="utf-8")
        fh.setFormatter(fmt)
        logger.addHandler(fh)
    logger.propagate = False
    return logger


def close_logger(logger: logging.Logger) -> None:
    """Detach and close every handler so log files are released."""
    for handler in list(logger.handlers):
        handler.close()
        logger.removeHandler(handler)


def log_summary(logger: logging.Logger, stats: dict) -> None:
    logger.info("summary %s", {k: v for k, v in stats.items()})
