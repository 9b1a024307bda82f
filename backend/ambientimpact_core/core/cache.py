"""
Cache backends for component definitions and rendered HTML
Flow: set(cid, data, expire, tags) → get(cid) → invalidate_tags(tags) → rebuild
"""

import time
from dataclasses import dataclass, field
from typing import Any, Dict, FrozenSet, Iterable, Optional, Protocol

import structlog

logger = structlog.get_logger()

# Items stored with this expiry never expire; only tag invalidation or an
# explicit delete removes them.
PERMANENT = -1


@dataclass(frozen=True)
class CacheItem:
    """A single cache entry."""
    cid: str
    data: Any
    expire: float = PERMANENT
    tags: FrozenSet[str] = field(default_factory=frozenset)
    created: float = field(default_factory=time.time)

    def is_expired(self, now: Optional[float] = None) -> bool:
        if self.expire == PERMANENT:
            return False
        return (now if now is not None else time.time()) >= self.expire


class CacheBackend(Protocol):
    """Contract the registry relies on; any store providing these will do."""

    def get(self, cid: str) -> Optional[CacheItem]: ...

    def set(
        self,
        cid: str,
        data: Any,
        expire: float = PERMANENT,
        tags: Iterable[str] = (),
    ) -> None: ...

    def delete(self, cid: str) -> None: ...

    def delete_all(self) -> None: ...

    def invalidate_tags(self, tags: Iterable[str]) -> int: ...


class MemoryCacheBackend:
    """
    Process-local cache backend.

    Expiry is an absolute timestamp (or PERMANENT). Writes are last-write-wins;
    concurrent renders of the same fragment produce identical data so no
    locking is done.
    """

    def __init__(self, bin_name: str = "default"):
        self.bin_name = bin_name
        self._items: Dict[str, CacheItem] = {}
        self.logger = logger.bind(cache_bin=bin_name)

    def get(self, cid: str) -> Optional[CacheItem]:
        item = self._items.get(cid)
        if item is None:
            return None
        if item.is_expired():
            del self._items[cid]
            return None
        return item

    def set(
        self,
        cid: str,
        data: Any,
        expire: float = PERMANENT,
        tags: Iterable[str] = (),
    ) -> None:
        self._items[cid] = CacheItem(
            cid=cid,
            data=data,
            expire=expire,
            tags=frozenset(tags),
        )
        self.logger.debug("Cache item set", cid=cid, expire=expire)

    def delete(self, cid: str) -> None:
        self._items.pop(cid, None)

    def delete_all(self) -> None:
        self._items.clear()
        self.logger.info("Cache bin emptied")

    def invalidate_tags(self, tags: Iterable[str]) -> int:
        """Remove every item carrying at least one of the tags."""
        tags = frozenset(tags)
        stale = [cid for cid, item in self._items.items() if item.tags & tags]
        for cid in stale:
            del self._items[cid]

        if stale:
            self.logger.info("Cache tags invalidated", tags=sorted(tags), removed=len(stale))
        return len(stale)

    def __len__(self) -> int:
        return len(self._items)
