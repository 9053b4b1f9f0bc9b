"""GitHub repository_dispatch notifier."""

import asyncio
from typing import Any, Dict, List, Optional

import aiohttp
from loguru import logger

from egresswatch.config import DispatchSettings
from egresswatch.schemas import NotificationPayload
from .base import BaseNotifier

class GitHubDispatchNotifier(BaseNotifier):
    """Triggers a workflow through the repository_dispatch API."""

    def __init__(
        self,
        dispatch: DispatchSettings,
        cluster: str,
        session: Optional[aiohttp.ClientSession] = None,
    ):
        self.dispatch = dispatch
        self.cluster = cluster
        self._session = session

    @property
    def url(self) -> str:
        return f"https://{self.dispatch.host}/repos/{self.dispatch.owner}/{self.dispatch.repo}/dispatches"

    @property
    def event_type(self) -> str:
        return f"{self.cluster}-{self.dispatch.event_type}"

    async def _get_session(self) -> aiohttp.ClientSession:
        """Get or create HTTP session."""
        if self._session is None or self._session.closed:
            self._session = aiohttp.ClientSession()
        return self._session

    async def close(self) -> None:
        """Close HTTP session."""
        if self._session and not self._session.closed:
            await self._session.close()

    def build_body(self, payloads: List[NotificationPayload]) -> Dict[str, Any]:
        return {
            "event_type": self.event_type,
            "client_payload": {
                "cluster": self.cluster,
                "intents": [p.model_dump() for p in payloads],
            },
        }

    async def send(self, payloads: List[NotificationPayload]) -> bool:
        headers = {
            "Accept": "application/vnd.github+json",
            "Authorization": f"Bearer {self.dispatch.token}",
            "Content-Type": "application/json",
        }
        timeout = aiohttp.ClientTimeout(total=self.dispatch.timeout)

        try:
            session = await self._get_session()
            async with session.post(
                self.url, json=self.build_body(payloads), headers=headers, timeout=timeout
            ) as response:
                if response.status == 204:
                    logger.info(f"Dispatch event triggered successfully ({len(payloads)} intents)")
                    return True
                error = await response.text()
                logger.error(f"Failed to trigger dispatch: HTTP {response.status} - {error}")
                return False
        except (aiohttp.ClientError, asyncio.TimeoutError) as e:
            logger.error(f"Failed to send dispatch request: {e}")
            return False
