import logging

_LOG_FORMAT = "%(asctime)s | %(levelname)s | %(name)s | %(message)s"


def configure_logging(level: str = "INFO") -> None:
    """Configure root logging level and format."""

    logging.basicConfig(level=level, format=_LOG_FORMAT)
    logging.getLogger().setLevel(level)
    # paypalrestsdk dumps whole request bodies at DEBUG
    logging.getLogger("paypalrestsdk").setLevel("INFO" if level == "DEBUG" else level)
