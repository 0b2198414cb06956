"""Structured logger for observability."""

import logging
from typing import Any

_logger = logging.getLogger("autofinder")
_logger.setLevel(logging.INFO)

if not _logger.handlers:
    handler = logging.StreamHandler()
    handler.setLevel(logging.INFO)
    formatter = logging.Formatter(
        "%(asctime)s | %(levelname)s | %(name)s | %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
    )
    handler.setFormatter(formatter)
    _logger.addHandler(handler)


def log_event(component: str, level: int = logging.INFO, **kwargs: Any) -> None:
    """
    Log a structured event.

    Args:
        component: Component name (e.g., 'coordinator', 'cache', 'http')
        level: Log level (default: INFO)
        **kwargs: Additional structured fields to log
    """
    fields = {"component": component}
    fields.update(kwargs)

    log_parts = [f"{k}={v!r}" for k, v in fields.items()]
    _logger.log(level, " | ".join(log_parts))


logger = _logger
