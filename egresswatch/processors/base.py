"""Base processor interface."""

from abc import ABC, abstractmethod
from typing import List, Optional
from egresswatch.schemas import ExternalTrafficIntent
from egresswatch.utils import intent_logger

class BaseProcessor(ABC):
    """Interface for screening intents before they reach the store."""

    @abstractmethod
    async def process(self, intent: ExternalTrafficIntent) -> Optional[ExternalTrafficIntent]:
        """
        Process an intent.
        Return the intent to keep it, or None to drop it.
        """
        pass

class ProcessorPipeline:
    """Screens an intent through each processor; the first None drops it."""

    def __init__(self, processors: List[BaseProcessor]):
        self.processors = processors
        # Name of the processor that dropped the last intent, None if it was kept
        self.dropped_by: Optional[str] = None

    async def run(self, intent: ExternalTrafficIntent) -> Optional[ExternalTrafficIntent]:
        self.dropped_by = None
        for p in self.processors:
            if await p.process(intent) is None:
                self.dropped_by = type(p).__name__
                intent_logger(intent).bind(dropped_by=self.dropped_by).debug("Intent dropped")
                return None
        return intent
