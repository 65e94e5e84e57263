"""
In-process TTL cache shared by the book and search result caches.

Entries live in a dict guarded by an ``RLock``. Upstream fetches run outside
the lock and there is no in-flight marker: two threads missing the same key
at once both fetch, and the write that completes last wins.

Expired entries are not removed on read; they are overwritten by the next
fetch, or dropped by ``cleanup_expired()`` which a daemon thread runs on a
fixed interval.
"""

import atexit
import logging
import threading
import time
from collections.abc import Callable, Hashable
from typing import Generic, TypeVar

from .entry import CacheEntry, Clock

K = TypeVar("K", bound=Hashable)
V = TypeVar("V")

DEFAULT_TTL_SECONDS = 60 * 60
DEFAULT_CLEANUP_INTERVAL_SECONDS = 10 * 60

logger = logging.getLogger(__name__)


class TTLCache(Generic[K, V]):
    """
    Thread-safe key -> value cache with TTL freshness and a background sweep.

    Subclasses expose domain-specific lookups built on ``_get_or_fetch``.
    """

    #: Name used in log messages and thread names
    name = "cache"

    def __init__(
        self,
        ttl_seconds: float = DEFAULT_TTL_SECONDS,
        cleanup_interval_seconds: float = DEFAULT_CLEANUP_INTERVAL_SECONDS,
        clock: Clock = time.monotonic,
    ):
        """
        Initialize the cache.

        Args:
            ttl_seconds: Maximum age of an entry that is still served
            cleanup_interval_seconds: Period of the background sweep
            clock: Time source in seconds (injectable for tests)
        """
        if ttl_seconds < 0:
            raise ValueError(f"ttl_seconds must be >= 0, got {ttl_seconds}")
        if cleanup_interval_seconds <= 0:
            raise ValueError(f"cleanup_interval_seconds must be > 0, got {cleanup_interval_seconds}")

        self.ttl_seconds = ttl_seconds
        self.cleanup_interval_seconds = cleanup_interval_seconds
        self._clock = clock

        self._entries: dict[K, CacheEntry[V]] = {}
        self._lock = threading.RLock()

        self._cleanup_stop_event = threading.Event()
        self._cleanup_thread: threading.Thread | None = None
        self._cleanup_atexit_registered = False

    # ------------------------------------------------------------------
    # Lookup
    # ------------------------------------------------------------------

    def _get_or_fetch(self, key: K, fetch: Callable[[], V]) -> V:
        """
        Serve a fresh entry for ``key`` or fetch, store and return a new value.

        Whatever ``fetch`` returns is cached, ``None`` included. Exceptions
        raised by ``fetch`` propagate and leave the stored entry untouched.
        """
        with self._lock:
            entry = self._entries.get(key)

        if entry is not None and entry.is_fresh(self.ttl_seconds):
            logger.debug("Cache hit for %s %r", self.name, key)
            return entry.value

        if entry is not None:
            logger.debug("Cache expired for %s %r, refreshing...", self.name, key)
        else:
            logger.debug("Cache miss for %s %r, fetching from OpenLibrary", self.name, key)

        value = fetch()

        with self._lock:
            self._entries[key] = CacheEntry.create(value, self._clock)

        return value

    def peek(self, key: K) -> CacheEntry[V] | None:
        """Return the stored entry for ``key`` (fresh or not) without fetching."""
        with self._lock:
            return self._entries.get(key)

    def __contains__(self, key: object) -> bool:
        with self._lock:
            return key in self._entries

    def __len__(self) -> int:
        with self._lock:
            return len(self._entries)

    # ------------------------------------------------------------------
    # Maintenance
    # ------------------------------------------------------------------

    def cleanup_expired(self) -> int:
        """
        Remove every entry older than the TTL.

        The clock is sampled once, so all entries are judged against the same
        instant.

        Returns:
            Number of entries removed
        """
        now = self._clock()
        with self._lock:
            before = len(self._entries)
            expired = [k for k, entry in self._entries.items() if entry.is_stale(now, self.ttl_seconds)]
            for key in expired:
                del self._entries[key]
            after = len(self._entries)

        removed = before - after
        if removed > 0:
            logger.info("%s cleanup: %d expired entries removed (%d remaining)", self.name, removed, after)
        else:
            logger.debug("%s cleanup: no expired entries (%d total)", self.name, after)
        return removed

    def clear_cache(self) -> int:
        """
        Drop every entry.

        Returns:
            Number of entries removed
        """
        with self._lock:
            count = len(self._entries)
            self._entries.clear()
        logger.debug("%s cleared: %d entries removed", self.name, count)
        return count

    # ------------------------------------------------------------------
    # Background sweep
    # ------------------------------------------------------------------

    @property
    def cleanup_daemon_running(self) -> bool:
        return self._cleanup_thread is not None and self._cleanup_thread.is_alive()

    def start_cleanup_daemon(self) -> None:
        """Start sweeping expired entries every ``cleanup_interval_seconds`` on a daemon thread."""
        if self.cleanup_daemon_running:
            return

        self._cleanup_stop_event.clear()
        self._cleanup_thread = threading.Thread(
            target=self._cleanup_daemon_loop,
            name=f"mylib-{self.name}-cleanup",
            daemon=True,
        )
        self._cleanup_thread.start()
        logger.debug("%s cleanup daemon started (every %ss)", self.name, self.cleanup_interval_seconds)

        if not self._cleanup_atexit_registered:
            atexit.register(self.stop_cleanup_daemon, wait=False)
            self._cleanup_atexit_registered = True

    def stop_cleanup_daemon(self, wait: bool = True) -> None:
        """Signal the cleanup daemon to stop and optionally wait for it."""
        if self._cleanup_thread is None:
            return
        self._cleanup_stop_event.set()
        if wait and self._cleanup_thread.is_alive():
            self._cleanup_thread.join()
        self._cleanup_thread = None
        if self._cleanup_atexit_registered:
            atexit.unregister(self.stop_cleanup_daemon)
            self._cleanup_atexit_registered = False

    def _cleanup_daemon_loop(self) -> None:
        while not self._cleanup_stop_event.wait(self.cleanup_interval_seconds):
            try:
                self.cleanup_expired()
            except Exception:
                # Keep sweeping on later ticks
                logger.exception("%s cleanup failed", self.name)

    def __enter__(self):
        self.start_cleanup_daemon()
        return self

    def __exit__(self, exc_type, exc_val, exc_tb) -> None:
        self.stop_cleanup_daemon()
