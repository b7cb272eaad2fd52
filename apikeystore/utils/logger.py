import logging
import os
import sys

LOG_FORMAT = "%(asctime)s | %(levelname)-8s | %(name)s | %(message)s"


def apply_log_level(log: logging.Logger) -> None:
    level_name = (os.getenv("LOG_LEVEL") or "INFO").strip().upper()
    log.setLevel(getattr(logging, level_name, logging.INFO))


def setup_logger(name: str = "apikeystore") -> logging.Logger:
    log = logging.getLogger(name)
    if log.handlers:
        return log

    handler = logging.StreamHandler(sys.stdout)
    handler.setFormatter(logging.Formatter(LOG_FORMAT, datefmt="%Y-%m-%d %H:%M:%S"))
    log.addHandler(handler)
    apply_log_level(log)
    return log


logger = setup_logger()
