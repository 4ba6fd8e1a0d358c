"""
Time-bounded in-memory cache of agent, client and consultant level records.

Keys:
- agent:{id}
- client:{id}
- consultantLevel:{level}

The cache is advisory. A miss only costs a repository lookup, so entries
can be dropped at any time. Readers may see a record up to the TTL old;
writes made by this process invalidate their key, writes made elsewhere
do not.
"""

import logging
import threading
import time
from dataclasses import dataclass
from typing import Any, Callable, Dict, Optional

logger = logging.getLogger(__name__)

DEFAULT_TTL_SECONDS = 300.0


def agent_key(agent_id: int) -> str:
    return f"agent:{agent_id}"


def client_key(client_id: int) -> str:
    return f"client:{client_id}"


def consultant_level_key(level: str) -> str:
    return f"consultantLevel:{level}"


@dataclass
class CachedEntry:
    """A cached value and the monotonic time it stops being valid."""
    value: Any
    expires_at: float


class RateCache:
    """
    Thread-safe TTL cache.

    One instance is owned by the application and injected where needed;
    the scheduler calls sweep() periodically.
    """

    def __init__(
        self,
        ttl: float = DEFAULT_TTL_SECONDS,
        clock: Callable[[], float] = time.monotonic,
    ):
        """
        Args:
            ttl: seconds an entry stays valid after set()
            clock: monotonic time source, replaceable in tests
        """
        if ttl <= 0:
            raise ValueError("ttl must be positive")
        self._ttl = ttl
        self._clock = clock
        self._entries: Dict[str, CachedEntry] = {}
        self._lock = threading.Lock()
        self.hits = 0
        self.misses = 0

    @property
    def ttl(self) -> float:
        return self._ttl

    def get(self, key: str) -> Optional[Any]:
        """Return the cached value, or None on miss or expiry."""
        now = self._clock()
        with self._lock:
            entry = self._entries.get(key)
            if entry is None:
                self.misses += 1
                return None
            if entry.expires_at <= now:
                del self._entries[key]
                self.misses += 1
                return None
            self.hits += 1
            return entry.value

    def set(self, key: str, value: Any) -> None:
        """Store a value, replacing any previous entry for the key."""
        expires_at = self._clock() + self._ttl
        with self._lock:
            self._entries[key] = CachedEntry(value=value, expires_at=expires_at)

    def invalidate(self, key: str) -> bool:
        """Drop a key. Returns True if it was present."""
        with self._lock:
            return self._entries.pop(key, None) is not None

    def sweep(self) -> int:
        """Remove expired entries. Returns how many were removed."""
        now = self._clock()
        with self._lock:
            expired = [k for k, e in self._entries.items() if e.expires_at <= now]
            for key in expired:
                del self._entries[key]
        if expired:
            logger.debug(f"Rate cache sweep removed {len(expired)} entries")
        return len(expired)

    def clear(self) -> None:
        with self._lock:
            self._entries.clear()

    def __len__(self) -> int:
        with self._lock:
            return len(self._entries)
