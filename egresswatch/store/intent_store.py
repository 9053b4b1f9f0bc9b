"""Deduplicating store for external traffic intents."""

from datetime import date, datetime, timedelta, timezone
from typing import List, Optional, Tuple, Union

from loguru import logger
from sqlalchemy import create_engine
from sqlalchemy.engine import Engine
from sqlalchemy.exc import IntegrityError, SQLAlchemyError

from egresswatch.config import DatabaseSettings
from egresswatch.errors import StoreConnectionError
from egresswatch.schemas import DedupKey, ExternalTrafficIntent, IntentRecord, dedup_key
from egresswatch.utils import DayBucketCache, intent_logger
from .repository import IntentRepository


def utc_day(now: Optional[datetime] = None) -> date:
    """Calendar day of now in UTC. Naive datetimes are taken as UTC."""
    if now is None:
        now = datetime.now(timezone.utc)
    elif now.tzinfo is None:
        now = now.replace(tzinfo=timezone.utc)
    return now.astimezone(timezone.utc).date()


def create_db_engine(db: DatabaseSettings) -> Engine:
    url = db.sqlalchemy_url()
    connect_args = {}
    if url.startswith("mysql+pymysql"):
        connect_args = {
            "connect_timeout": db.timeout,
            "read_timeout": db.timeout,
            "write_timeout": db.timeout,
        }
    return create_engine(url, pool_pre_ping=True, connect_args=connect_args)


class IntentStore:
    """
    Persists client -> external DNS relationships and decides which are new.

    The relational backend is the source of truth; the day-bucketed cache
    only saves round-trips for keys already confirmed today or yesterday.
    """

    def __init__(self, engine: Union[Engine, str], retention_days: int = 0):
        if isinstance(engine, str):
            engine = create_engine(engine)
        self.repository = IntentRepository(engine)
        self.retention_days = retention_days
        self.cache: DayBucketCache[DedupKey] = DayBucketCache()

        try:
            self.repository.ping()
        except SQLAlchemyError as e:
            logger.error(f"Failed to connect to database: {e}")
            raise StoreConnectionError("failed to connect to database") from e

        try:
            self.repository.ensure_table()
        except SQLAlchemyError as e:
            logger.error(f"Failed to ensure table exists: {e}")
            raise StoreConnectionError("failed to ensure table exists") from e

        self.load_cache()

    @classmethod
    def from_settings(cls, db: DatabaseSettings, retention_days: int) -> "IntentStore":
        try:
            engine = create_db_engine(db)
        except (SQLAlchemyError, ImportError) as e:
            raise StoreConnectionError(f"failed to open database: {e}") from e
        return cls(engine, retention_days=retention_days)

    def close(self) -> None:
        self.repository.engine.dispose()

    def load_cache(self, now: Optional[datetime] = None) -> int:
        """Seed today's and yesterday's buckets from the backend."""
        today = utc_day(now)
        yesterday = today - timedelta(days=1)
        try:
            records = self.repository.list_seen_between(yesterday, today)
        except SQLAlchemyError as e:
            logger.error(f"Failed to load cache from db: {e}")
            return 0

        for record in records:
            self.cache.add(record.last_seen, record.key)
        logger.debug(f"Loaded {len(records)} intents into cache")
        return len(records)

    def roll_cache(self, now: Optional[datetime] = None) -> Tuple[date, date]:
        """Evict the oldest day bucket and open today's. Returns (today, yesterday)."""
        today = utc_day(now)
        self.cache.roll(today)
        return today, today - timedelta(days=1)

    def store_intent(self, intent: ExternalTrafficIntent, today: date, yesterday: date) -> bool:
        """
        Record an observation. Returns True if the relationship was already
        known, False if it was discovered (or could not be confirmed) now.
        """
        key = dedup_key(intent)
        log = intent_logger(intent)

        if self.cache.contains(today, key):
            log.debug("Cache hit: today, skipping insert")
            return True

        if self._exists(key, yesterday):
            if self._touch(key, intent, today):
                return True
            # Cached as seen but the row is gone, e.g. removed by retention
            log.debug("Cached intent missing from backend, storing again")

        try:
            self.repository.insert(key, intent.observed_date)
        except IntegrityError:
            # Another writer stored the key between our check and insert
            log.debug("Intent already stored, updating last seen")
            self._touch(key, intent, today)
            return True
        except SQLAlchemyError as e:
            log.error(f"Failed to insert intent: {e}")
            return False

        self.cache.add(today, key)
        log.debug("Stored new intent")
        return False

    def _exists(self, key: DedupKey, yesterday: date) -> bool:
        if self.cache.contains(yesterday, key):
            return True
        try:
            return self.repository.exists(key)
        except SQLAlchemyError as e:
            logger.error(f"Failed to query db for intent: {e}")
            return False

    def _touch(self, key: DedupKey, intent: ExternalTrafficIntent, today: date) -> bool:
        """Refresh last_seen. Returns False only when no row matched the key."""
        try:
            matched = self.repository.touch(key, intent.observed_date)
        except SQLAlchemyError as e:
            intent_logger(intent).error(f"Failed to update intent: {e}")
            return True
        if not matched:
            return False
        self.cache.add(today, key)
        return True

    def cleanup_expired(self, now: Optional[datetime] = None) -> int:
        """Delete rows not seen within the retention window. Returns rows deleted."""
        if self.retention_days <= 0:
            logger.debug("Retention cleanup skipped: retention days not configured")
            return 0

        cutoff = utc_day(now) - timedelta(days=self.retention_days)
        deleted = self.repository.delete_seen_before(cutoff)
        if deleted > 0:
            logger.bind(
                rows_deleted=deleted,
                retention_days=self.retention_days,
                cutoff_date=cutoff.isoformat(),
            ).info("Cleaned up expired external traffic intents")
        return deleted

    def list_all(self, now: Optional[datetime] = None) -> List[IntentRecord]:
        """All stored intents, most recently seen first, after retention cleanup."""
        try:
            self.cleanup_expired(now)
        except SQLAlchemyError as e:
            logger.warning(f"Failed to cleanup expired intents, continuing with query: {e}")
        return self.repository.list_all()
