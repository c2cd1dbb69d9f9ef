"""Root logging configuration, applied once by the entry point."""

import logging

LOG_FORMAT = "%(asctime)s %(levelname)-7s %(name)s: %(message)s"


def configure_logging(level: str = "INFO") -> None:
    logging.basicConfig(level=level, format=LOG_FORMAT)
    # httpx logs every request at INFO; the dashboard polls far too often for that.
    logging.getLogger("httpx").setLevel(logging.WARNING)
