"""Batch orchestration: screen, deduplicate, persist, notify."""

import asyncio
from datetime import datetime
from typing import Iterable, List, Optional
from loguru import logger

from egresswatch.config import Settings
from egresswatch.schemas import ExternalTrafficIntent, NotificationPayload, dedup_key
from egresswatch.store import IntentStore
from egresswatch.processors import ProcessorPipeline, ExternalIPFilter, IgnoreListFilter
from egresswatch.notifiers import BaseNotifier, GitHubDispatchNotifier
from egresswatch.utils import intent_logger

class IntentEngine:
    def __init__(
        self,
        store: IntentStore,
        pipeline: ProcessorPipeline,
        notifier: Optional[BaseNotifier] = None,
    ):
        self.store = store
        self.pipeline = pipeline
        # None disables dispatch
        self.notifier = notifier
        self._lock = asyncio.Lock()

    @classmethod
    def from_settings(cls, settings: Settings, store: IntentStore) -> "IntentEngine":
        pipeline = ProcessorPipeline([
            ExternalIPFilter(),
            IgnoreListFilter(
                names=settings.store.ignored_names,
                namespaces=settings.store.ignored_namespaces,
            ),
        ])
        notifier = None
        if settings.dispatch.enabled:
            notifier = GitHubDispatchNotifier(settings.dispatch, settings.cluster)
        return cls(store, pipeline, notifier)

    async def close(self):
        if self.notifier:
            await self.notifier.close()

    async def process_batch(
        self,
        intents: Iterable[ExternalTrafficIntent],
        now: Optional[datetime] = None,
    ) -> List[NotificationPayload]:
        """
        Store a batch of observations and dispatch the newly discovered ones.
        Returns the payloads of relationships first seen in this batch.
        """
        async with self._lock:
            payloads = await self._persist(intents, now)

        # Outside the lock so a slow endpoint cannot hold up the next batch
        if payloads and self.notifier:
            await self.notifier.send(payloads)
        return payloads

    async def _persist(
        self,
        intents: Iterable[ExternalTrafficIntent],
        now: Optional[datetime],
    ) -> List[NotificationPayload]:
        today, yesterday = self.store.roll_cache(now)
        loop = asyncio.get_running_loop()

        payloads: List[NotificationPayload] = []
        reported = set()
        for intent in intents:
            kept = await self.pipeline.run(intent)
            if not kept:
                continue

            known = await loop.run_in_executor(
                None, self.store.store_intent, kept, today, yesterday
            )
            key = dedup_key(kept)
            if not known and key not in reported:
                reported.add(key)
                intent_logger(kept).info("Received new intent")
                payloads.append(NotificationPayload.from_key(key))
            intent_logger(kept).debug("Received external traffic intent")

        logger.debug(f"Batch processed: {len(payloads)} new intents")
        return payloads
