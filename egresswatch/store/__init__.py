"""Persistence for external traffic intents."""

from .intent_store import IntentStore, create_db_engine, utc_day
from .repository import IntentRepository, external_traffic_intents

__all__ = [
    "IntentStore",
    "IntentRepository",
    "create_db_engine",
    "external_traffic_intents",
    "utc_day",
]
