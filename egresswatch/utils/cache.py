"""Day-bucketed key cache."""

import threading
from datetime import date, timedelta
from typing import Dict, Generic, Hashable, List, Set, TypeVar

T = TypeVar('T', bound=Hashable)

class DayBucketCache(Generic[T]):
    """Keys grouped by the calendar day they were last seen on.

    Only today's and yesterday's buckets survive a call to `roll`, so memory
    stays bounded by two days of distinct keys. Every operation holds one
    lock, which makes a lookup and the insert that follows it safe to run
    from executor threads.
    """

    def __init__(self):
        self._buckets: Dict[date, Set[T]] = {}
        self._lock = threading.Lock()

    def roll(self, today: date) -> None:
        """Drop every bucket other than today's and yesterday's, then open today's."""
        keep = (today, today - timedelta(days=1))
        with self._lock:
            for day in [d for d in self._buckets if d not in keep]:
                del self._buckets[day]
            self._buckets.setdefault(today, set())

    def add(self, day: date, item: T) -> bool:
        """
        Add item under day. Returns True if the item was added (not already
        present), False if it already existed.
        """
        with self._lock:
            bucket = self._buckets.setdefault(day, set())
            if item in bucket:
                return False
            bucket.add(item)
            return True

    def contains(self, day: date, item: T) -> bool:
        with self._lock:
            return item in self._buckets.get(day, ())

    def days(self) -> List[date]:
        with self._lock:
            return sorted(self._buckets)

    def __len__(self) -> int:
        """Return the number of cached keys across all buckets."""
        with self._lock:
            return sum(len(b) for b in self._buckets.values())
