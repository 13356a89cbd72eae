from __future__ import annotations

import logging
import threading
import time
from dataclasses import dataclass
from typing import Callable, Optional, Sequence

from ..core.constants import CATALOG_CACHE_KEY, DEFAULT_CACHE_TTL_HOURS
from ..core.exceptions import UnavailableError
from ..storage.kv_store import KeyValueStore
from .model import AcademicYear
from .repository import CatalogRepository

logger = logging.getLogger(__name__)


def epoch_millis() -> int:
    return int(time.time() * 1000)


@dataclass(frozen=True)
class CatalogSnapshot:
    years: tuple[AcademicYear, ...]
    fetched_at_ms: int
    stale: bool = False


@dataclass(frozen=True)
class _CacheEntry:
    payload: tuple[AcademicYear, ...]
    fetched_at_ms: int

    def to_dict(self) -> dict:
        return {"payload": [y.to_dict() for y in self.payload], "fetched_at": self.fetched_at_ms}

    @classmethod
    def from_dict(cls, data: object) -> Optional["_CacheEntry"]:
        if not isinstance(data, dict):
            return None
        try:
            return cls(
                payload=tuple(AcademicYear.from_dict(y) for y in data["payload"]),
                fetched_at_ms=int(data["fetched_at"]),
            )
        except (KeyError, TypeError, ValueError):
            logger.warning("Discarding malformed catalog cache entry")
            return None


def sort_by_order(items: Sequence) -> tuple:
    """Ascending by ``order``; ties keep their input order."""
    return tuple(sorted(items, key=lambda item: item.order))


class CatalogCache:
    """Durable TTL cache of the academic years.

    One instance per process; the entry is always replaced whole, so readers
    never observe a partially refreshed catalog.
    """

    def __init__(
        self,
        catalog: CatalogRepository,
        store: KeyValueStore,
        *,
        clock: Callable[[], int] = epoch_millis,
        ttl_hours: float = DEFAULT_CACHE_TTL_HOURS,
        key: str = CATALOG_CACHE_KEY,
    ):
        self._catalog = catalog
        self._store = store
        self._clock = clock
        self._ttl_ms = int(ttl_hours * 3600 * 1000)
        self._key = key
        self._lock = threading.Lock()
        self._entry: Optional[_CacheEntry] = None

    def _current_entry(self) -> Optional[_CacheEntry]:
        if self._entry is None:
            self._entry = _CacheEntry.from_dict(self._store.get(self._key))
        return self._entry

    def _is_fresh(self, entry: _CacheEntry, now_ms: int) -> bool:
        return now_ms - entry.fetched_at_ms < self._ttl_ms

    def get_years(self, force_refresh: bool = False) -> CatalogSnapshot:
        with self._lock:
            now_ms = self._clock()
            entry = self._current_entry()

            if not force_refresh and entry is not None and self._is_fresh(entry, now_ms):
                return CatalogSnapshot(years=entry.payload, fetched_at_ms=entry.fetched_at_ms)

            try:
                years = sort_by_order(self._catalog.list_years())
            except UnavailableError:
                if entry is None:
                    logger.warning("Catalog fetch failed and no cached catalog exists")
                    raise
                logger.warning("Catalog fetch failed; serving cached catalog from %s", entry.fetched_at_ms)
                return CatalogSnapshot(years=entry.payload, fetched_at_ms=entry.fetched_at_ms, stale=True)

            fresh = _CacheEntry(payload=years, fetched_at_ms=now_ms)
            self._store.set(self._key, fresh.to_dict())
            self._entry = fresh
            return CatalogSnapshot(years=fresh.payload, fetched_at_ms=fresh.fetched_at_ms)

    def invalidate(self) -> None:
        """Expire the entry so the next read goes to the repository (after admin edits).

        The payload is kept as an offline fallback.
        """

        with self._lock:
            entry = self._current_entry()
            if entry is None:
                return
            expired = _CacheEntry(payload=entry.payload, fetched_at_ms=self._clock() - self._ttl_ms)
            self._store.set(self._key, expired.to_dict())
            self._entry = expired
