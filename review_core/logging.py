import logging

import structlog

from review_core import config


def configure_logging() -> None:
    """Configure structlog for application-wide logging.

    Initialises stdlib logging at LOG_LEVEL and renders structlog events with
    ISO timestamps, as JSON unless LOG_JSON is false.
    """
    level = getattr(logging, config.get_log_level(), logging.INFO)
    logging.basicConfig(level=level, format="%(message)s")
    renderer = (
        structlog.processors.JSONRenderer()
        if config.use_json_logs()
        else structlog.dev.ConsoleRenderer()
    )
    structlog.configure(
        processors=[
            structlog.stdlib.add_log_level,
            structlog.processors.TimeStamper(fmt="iso"),
            renderer,
        ],
        logger_factory=structlog.stdlib.LoggerFactory(),
    )


logger = structlog.get_logger()
