"""
Structured JSON logging with structlog.
JSON logs are easier for machines to parse and for you to filter.
"""

import logging

import structlog

_configured = False
_service_name = "pipedrive-sync"


def configure_logging(level: str = "INFO", service_name: str = "pipedrive-sync"):
    global _configured, _service_name
    _service_name = service_name
    if _configured:
        return
    log_level = logging.getLevelName(level.upper())
    if not isinstance(log_level, int):
        log_level = logging.INFO
    logging.basicConfig(level=log_level, format="%(message)s")
    structlog.configure(
        processors=[
            structlog.processors.add_log_level,
            structlog.processors.TimeStamper(fmt="iso"),
            structlog.processors.JSONRenderer(),
        ],
        wrapper_class=structlog.make_filtering_bound_logger(log_level),
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
    )
    _configured = True


def get_logger():
    return structlog.get_logger(_service_name)
