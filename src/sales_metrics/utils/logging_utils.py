"""Logging setup for scripts and notebooks using the package."""
import logging
import sys


def configure_logging(level: str = "INFO"):
    logging.basicConfig(
        level=getattr(logging, level.upper()),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
        stream=sys.stdout,
    )

    # Engine echo is too chatty at INFO
    logging.getLogger("sqlalchemy").setLevel(logging.WARNING)
