"""Utilities for egresswatch."""

from .cache import DayBucketCache
from .logging import configure_logging, intent_logger

__all__ = ["DayBucketCache", "configure_logging", "intent_logger"]
