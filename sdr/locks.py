"""Per-prospect serialization and the sweep reentrancy guard."""

from __future__ import annotations

import threading
import uuid
from contextlib import contextmanager
from typing import Dict, Iterator, Optional

import redis

from sdr.runtime import get_logger

logger = get_logger(__name__)

KEY_PREFIX = "sdr"

_RELEASE_LUA = """
if redis.call('GET', KEYS[1]) == ARGV[1] then
    return redis.call('DEL', KEYS[1])
else
    return 0
end
"""


class ProspectLocks:
    """One re-entrant lock per prospect id.

    Re-entrant because a campaign move sends the next event and sending past
    the last event moves the campaign, both under the same prospect lock.
    """

    def __init__(self) -> None:
        self._locks: Dict[str, threading.RLock] = {}
        self._registry = threading.Lock()

    def _lock_for(self, prospect_id: str) -> threading.RLock:
        with self._registry:
            lock = self._locks.get(prospect_id)
            if lock is None:
                lock = self._locks[prospect_id] = threading.RLock()
            return lock

    @contextmanager
    def hold(self, prospect_id: str) -> Iterator[None]:
        with self._lock_for(prospect_id):
            yield


class SweepGuard:
    """Skips a sweep when the same sweep is already running.

    Always guards within the process. With a Redis client it also takes an
    NX lock so a second worker skips too.
    """

    def __init__(self, redis_url: Optional[str] = None, *, ttl: int = 300, client: Optional[redis.Redis] = None):
        self.ttl = ttl
        self.r = client
        if self.r is None and redis_url:
            self.r = redis.from_url(redis_url, decode_responses=True, socket_timeout=3)
        self._local: Dict[str, threading.Lock] = {}
        self._registry = threading.Lock()

    def _local_lock(self, name: str) -> threading.Lock:
        with self._registry:
            lock = self._local.get(name)
            if lock is None:
                lock = self._local[name] = threading.Lock()
            return lock

    @contextmanager
    def acquire(self, name: str) -> Iterator[bool]:
        local = self._local_lock(name)
        if not local.acquire(blocking=False):
            yield False
            return
        try:
            with self._distributed(name) as acquired:
                yield acquired
        finally:
            local.release()

    @contextmanager
    def _distributed(self, name: str) -> Iterator[bool]:
        if self.r is None:
            yield True
            return
        key = f"{KEY_PREFIX}:lock:{name}"
        token = str(uuid.uuid4())
        try:
            acquired = bool(self.r.set(key, token, nx=True, ex=self.ttl))
        except redis.RedisError:
            logger.warning("Redis unavailable for sweep lock %s, continuing with local guard", name, exc_info=True)
            yield True
            return
        try:
            yield acquired
        finally:
            if acquired:
                try:
                    self.r.eval(_RELEASE_LUA, 1, key, token)
                except redis.RedisError:
                    logger.warning("Failed to release sweep lock %s", name, exc_info=True)
