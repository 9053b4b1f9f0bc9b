"""Logging setup."""

import sys

from loguru import logger

from egresswatch.schemas import ExternalTrafficIntent


def configure_logging(level: str = "INFO") -> None:
    """Replace loguru's default sink with one at the configured level."""
    logger.remove()
    logger.add(
        sys.stderr,
        level=level.upper(),
        format="{time:YYYY-MM-DD HH:mm:ss} | {level: <8} | {name}:{line} - {message} | {extra}",
    )


def intent_logger(intent: ExternalTrafficIntent):
    """Logger carrying the intent's identity as structured context."""
    return logger.bind(
        observed=intent.observed_date.isoformat(),
        client_name=intent.client.name,
        client_namespace=intent.client.namespace,
        client_kind=intent.client.kind or "",
        dns_name=intent.dns_name,
    )
