"""Intent screening processors."""

from .base import BaseProcessor, ProcessorPipeline
from .filter import ExternalIPFilter, IgnoreListFilter
from .privacy import PRIVATE_CIDRS, has_external_ip

__all__ = [
    "BaseProcessor",
    "ProcessorPipeline",
    "ExternalIPFilter",
    "IgnoreListFilter",
    "PRIVATE_CIDRS",
    "has_external_ip",
]
