import logging

LOG_FORMAT = "%(asctime)s | %(levelname)-8s | %(name)s | %(message)s"


def setup_logging(level: str = "INFO") -> None:
    """Configure root logging once for the API process and the CLI."""
    logging.basicConfig(level=level.upper(), format=LOG_FORMAT)
    # Access lines come from CorrelationIDMiddleware.
    logging.getLogger("uvicorn.access").setLevel(logging.WARNING)
