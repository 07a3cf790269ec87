"""Logging setup for applications embedding the Vault client."""

from __future__ import annotations

import logging
import sys
from typing import Callable, Iterable

from loguru import logger

__all__ = ["StdlibBridgeHandler", "setup_logging", "BRIDGED_LOGGERS"]

BRIDGED_LOGGERS = ("httpx", "httpcore")


class StdlibBridgeHandler(logging.Handler):
    """Bridge standard logging records (httpx, httpcore) into Loguru."""

    def emit(self, record: logging.LogRecord) -> None:
        try:
            level = logger.level(record.levelname).name
        except ValueError:
            level = record.levelno
        logger.bind(location=record.name).log(level, record.getMessage())


def _base_formatter(resource: str) -> Callable[[dict], str]:
    """Create the base formatter used by Loguru.

    Args:
        resource: Logical resource name that will prefix every log line.
    """

    resource_prefix = f"{resource.upper()}| " if resource else ""

    def formatter(record: dict) -> str:
        location = record.get("extra", {}).get("location") or "{name}:{function}:{line}"
        return (
            f"{resource_prefix}"
            "<green>{time:YYYY-MM-DD HH:mm:ss.SSS}</green> | "
            "<level>{level:<8}</level> | "
            f"<cyan>{location}</cyan> - "
            "<level>{message}</level>\n"
        )

    return formatter


def setup_logging(
    log_level: str = "INFO",
    resource: str = "",
    sink=sys.stdout,
    bridged: Iterable[str] = BRIDGED_LOGGERS,
) -> int:
    """Configure Loguru with the desired level and formatter.

    Returns the id of the installed Loguru handler.
    """

    logger.remove()
    handler_id = logger.add(
        sink,
        level=log_level.upper(),
        format=_base_formatter(resource),
        backtrace=False,
        diagnose=False,
    )
    for name in bridged:
        std_logger = logging.getLogger(name)
        std_logger.handlers = [StdlibBridgeHandler()]
        std_logger.setLevel(log_level.upper())
        std_logger.propagate = False
    return handler_id
