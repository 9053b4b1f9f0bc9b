"""Filter processors."""

from typing import Iterable, Optional, Sequence

from egresswatch.schemas import ExternalTrafficIntent
from egresswatch.utils import intent_logger
from .base import BaseProcessor
from .privacy import PRIVATE_CIDRS, has_external_ip

class ExternalIPFilter(BaseProcessor):
    """Drops intents whose addresses are all private or unparseable."""

    def __init__(self, private_cidrs: Sequence[str] = PRIVATE_CIDRS):
        self.private_cidrs = private_cidrs

    async def process(self, intent: ExternalTrafficIntent) -> Optional[ExternalTrafficIntent]:
        if not has_external_ip(intent.ips, self.private_cidrs):
            intent_logger(intent).debug("Skipping intent without external IP")
            return None
        return intent

class IgnoreListFilter(BaseProcessor):
    """Drops intents from clients listed by name or namespace."""

    def __init__(self, names: Iterable[str] = (), namespaces: Iterable[str] = ()):
        self.names = {n.strip() for n in names if n.strip()}
        self.namespaces = {n.strip() for n in namespaces if n.strip()}

    async def process(self, intent: ExternalTrafficIntent) -> Optional[ExternalTrafficIntent]:
        if intent.client.name in self.names:
            intent_logger(intent).debug("Skipping intent from ignored client")
            return None
        if intent.client.namespace in self.namespaces:
            intent_logger(intent).debug("Skipping intent from ignored namespace")
            return None
        return intent
