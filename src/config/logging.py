"""Structured logging configuration using structlog."""
import logging
import sys
from typing import Any

import structlog
from pythonjsonlogger import jsonlogger

from src.config.settings import settings

NOISY_LOGGERS = ("httpcore", "httpx", "redis")


def add_wizard_prefix(
    logger: Any,
    method_name: str,
    event_dict: dict[str, Any],
) -> dict[str, Any]:
    """Prefix the log message with the hotel and wizard step it concerns.

    Produces e.g. "[hotel:42][step:roomInfo] Dispatching step". Either part
    is left out when the event carries no `hotel_id` or `step`.

    Args:
        logger: The logger instance
        method_name: The name of the method being called
        event_dict: The event dictionary containing log data

    Returns:
        Modified event dictionary
    """
    prefix = ""
    hotel_id = event_dict.get("hotel_id")
    if hotel_id:
        prefix += f"[hotel:{hotel_id}]"
    step = event_dict.get("step")
    if step:
        prefix += f"[step:{getattr(step, 'value', step)}]"
    if prefix:
        event_dict["event"] = f"{prefix} {event_dict.get('event', '')}"
    return event_dict


def _build_handler(log_format: str, log_level: int) -> logging.Handler:
    handler = logging.StreamHandler(sys.stderr)
    if log_format == "json":
        handler.setFormatter(jsonlogger.JsonFormatter())
    else:
        handler.setFormatter(
            logging.Formatter("%(asctime)s - %(name)s - %(levelname)s - %(message)s")
        )
    handler.setLevel(log_level)
    return handler


def configure_logging() -> None:
    """Configure structlog and the stdlib root logger for the wizard runner.

    Output goes to stderr so stdout stays free for the JSON run summary.
    """
    log_level = getattr(logging, settings.logging.level)
    json_output = settings.logging.format == "json"

    root_logger = logging.getLogger()
    root_logger.setLevel(log_level)
    root_logger.handlers.clear()
    root_logger.addHandler(_build_handler(settings.logging.format, log_level))

    for name in NOISY_LOGGERS:
        logging.getLogger(name).setLevel(logging.WARNING)

    structlog.configure(
        processors=[
            structlog.stdlib.filter_by_level,
            structlog.stdlib.add_logger_name,
            structlog.stdlib.add_log_level,
            structlog.stdlib.PositionalArgumentsFormatter(),
            structlog.processors.TimeStamper(fmt="iso"),
            structlog.processors.StackInfoRenderer(),
            structlog.processors.format_exc_info,
            structlog.processors.UnicodeDecoder(),
            add_wizard_prefix,
            structlog.processors.JSONRenderer() if json_output else structlog.dev.ConsoleRenderer(),
        ],
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        cache_logger_on_first_use=True,
    )


def get_logger(name: str) -> structlog.typing.FilteringBoundLogger:
    return structlog.get_logger(name)
