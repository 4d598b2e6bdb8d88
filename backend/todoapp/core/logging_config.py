import logging
import sys


def configure_logging(level: str = "INFO") -> None:
    """Route application logs to stdout; quiet chatty third-party loggers"""
    logging.basicConfig(
        level=getattr(logging, level.upper(), logging.INFO),
        format="%(asctime)s  %(levelname)-8s  %(name)s - %(message)s",
        stream=sys.stdout,
    )
    for noisy in ("passlib", "apscheduler", "httpx"):
        logging.getLogger(noisy).setLevel(logging.WARNING)
