"""Logging setup shared by the CLI entry point and the web app."""

import logging
import sys


def setup_logging(log_level: str = "INFO") -> None:
    """Configure the root logger with a single console handler.

    Safe to call more than once; existing handlers are replaced.
    """
    level_upper = log_level.upper()
    numeric_level = getattr(logging, level_upper, logging.INFO)

    root_logger = logging.getLogger()
    root_logger.handlers.clear()
    root_logger.setLevel(numeric_level)

    console_handler = logging.StreamHandler(sys.stdout)
    console_handler.setLevel(numeric_level)
    console_handler.setFormatter(
        logging.Formatter(
            fmt="%(asctime)s - %(levelname)s - %(name)s - %(message)s",
            datefmt="%Y-%m-%d %H:%M:%S",
        )
    )
    root_logger.addHandler(console_handler)
    root_logger.info("Logging configured: level=%s, handler=console", level_upper)

    _configure_third_party_loggers(numeric_level)


def _configure_third_party_loggers(app_level: int) -> None:
    # Keep server access logs at INFO even when the app runs at DEBUG
    logging.getLogger("uvicorn").setLevel(max(app_level, logging.INFO))
    logging.getLogger("uvicorn.access").setLevel(logging.INFO)
    logging.getLogger("uvicorn.error").setLevel(logging.WARNING)

    logging.getLogger("fastapi").setLevel(logging.INFO)
    logging.getLogger("starlette").setLevel(logging.WARNING)

    logging.getLogger("urllib3").setLevel(logging.WARNING)
    logging.getLogger("requests").setLevel(logging.WARNING)
    logging.getLogger("comtypes").setLevel(logging.WARNING)
