"""Base notifier interface."""

from abc import ABC, abstractmethod
from typing import List
from egresswatch.schemas import NotificationPayload

class BaseNotifier(ABC):
    """Interface for announcing newly discovered intents."""

    @abstractmethod
    async def send(self, payloads: List[NotificationPayload]) -> bool:
        """Deliver one notification for a batch. Returns True on success."""
        pass

    async def close(self) -> None:
        """Release any held resources."""
        pass
