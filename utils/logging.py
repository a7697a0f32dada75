"""Logging setup for the API process."""
import logging
import sys

# Third-party loggers that are chatty at INFO (driver heartbeats, HTTP traces).
NOISY_LOGGERS = ("pymongo", "httpx", "google_genai")

LOG_FORMAT = "%(asctime)s %(levelname)s %(name)s %(message)s"


def configure_logging(level: str = "INFO") -> None:
    """Attach a stdout handler to the root logger unless a host (uvicorn, pytest) already did."""
    root = logging.getLogger()
    root.setLevel(level.upper())

    if not root.handlers:
        handler = logging.StreamHandler(sys.stdout)
        handler.setFormatter(logging.Formatter(fmt=LOG_FORMAT, datefmt="%Y-%m-%dT%H:%M:%S%z"))
        root.addHandler(handler)

    # Quieted even when the root logger was configured elsewhere.
    for name in NOISY_LOGGERS:
        logging.getLogger(name).setLevel(logging.WARNING)
