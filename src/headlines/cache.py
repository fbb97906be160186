"""Single-slot, time-bounded memo of the latest headline selection."""

from collections.abc import Callable
from datetime import UTC, datetime, timedelta
from threading import Lock

import structlog
from cachetools import TTLCache

from src.arbiter.models import FinalHeadline
from src.headlines.models import CacheEntry, PipelineMetadata


logger = structlog.get_logger()

_SLOT = "headlines"


def utc_now() -> datetime:
    """Default clock."""
    return datetime.now(UTC)


class ResultCache:
    """Holds the most recent selection and serves it while fresh.

    Expiry is delegated to a one-entry ``TTLCache`` driven by the same
    clock that stamps ``created_at``. The last stored entry is also kept
    outside the TTL map so ``peek`` can report it after it goes stale.
    Access is serialized by a lock; readers see either the previous
    entry or the new one, never a mix. Lives for the process lifetime
    only.
    """

    def __init__(
        self,
        freshness: timedelta = timedelta(minutes=30),
        clock: Callable[[], datetime] = utc_now,
    ) -> None:
        """Initialize the cache.

        Args:
            freshness: Window during which an entry is served.
            clock: Returns the current aware datetime.
        """
        self._freshness = freshness
        self._clock = clock
        self._fresh: TTLCache[str, CacheEntry] = TTLCache(
            maxsize=1, ttl=freshness, timer=clock
        )
        self._latest: CacheEntry | None = None
        self._lock = Lock()
        self._log = logger.bind(component="cache")

    @property
    def freshness(self) -> timedelta:
        """Freshness window."""
        return self._freshness

    def now(self) -> datetime:
        """Current time according to the cache clock."""
        return self._clock()

    def age_seconds(self, entry: CacheEntry) -> float:
        """Age of an entry in seconds (never negative).

        Args:
            entry: Cache entry.

        Returns:
            Seconds since the entry was stored.
        """
        return max((self._clock() - entry.created_at).total_seconds(), 0.0)

    def get(self) -> CacheEntry | None:
        """Return the entry if one exists and is younger than the window.

        Returns:
            Fresh entry, or None.
        """
        with self._lock:
            entry = self._fresh.get(_SLOT)
            latest = self._latest
        if entry is None and latest is not None:
            self._log.debug("cache_stale", age_seconds=self.age_seconds(latest))
        return entry

    def peek(self) -> CacheEntry | None:
        """Return the last stored entry regardless of age."""
        with self._lock:
            return self._latest

    def store(
        self,
        headlines: list[FinalHeadline],
        metadata: PipelineMetadata,
    ) -> CacheEntry:
        """Overwrite the slot with a new selection.

        Args:
            headlines: Ordered final headlines.
            metadata: Metadata of the producing run.

        Returns:
            The stored entry.
        """
        entry = CacheEntry(
            headlines=tuple(headlines),
            metadata=metadata,
            created_at=self._clock(),
        )
        with self._lock:
            self._fresh[_SLOT] = entry
            self._latest = entry
        self._log.info("cache_stored", headlines=len(headlines))
        return entry

    def clear(self) -> None:
        """Drop the cached entry."""
        with self._lock:
            self._fresh.clear()
            self._latest = None
