import logging
import time
from collections import OrderedDict
from typing import Any, Awaitable, Callable

logger = logging.getLogger(__name__)

DEFAULT_TTL = 60  # seconds
DEFAULT_MAX_ENTRIES = 1024


def _base_path(path: str) -> str:
    return path.split("?", 1)[0]


class PageCache:
    """
    Path-keyed cache of content fetched from the CMS.

    Entries go stale after ``ttl`` seconds. ``revalidate`` drops an entry so
    the next request loads fresh data; dropping a missing entry is a no-op.
    At most ``max_entries`` are kept; the least recently used goes first.
    """

    def __init__(self, ttl: float = DEFAULT_TTL, max_entries: int = DEFAULT_MAX_ENTRIES):
        self.ttl = ttl
        self.max_entries = max_entries
        self._entries: OrderedDict[str, tuple[float, Any]] = OrderedDict()
        # Bumped by revalidate; a load that started under an older
        # generation must not store its result.
        self._generations: dict[str, int] = {}

    def _fresh(self, path: str) -> tuple[float, Any] | None:
        entry = self._entries.get(path)
        if entry is None:
            return None
        stored_at, _ = entry
        if time.time() - stored_at >= self.ttl:
            del self._entries[path]
            return None
        self._entries.move_to_end(path)
        return entry

    def _sweep(self) -> None:
        now = time.time()
        expired = [k for k, (stored_at, _) in self._entries.items() if now - stored_at >= self.ttl]
        for key in expired:
            del self._entries[key]
        while len(self._entries) > self.max_entries:
            key, _ = self._entries.popitem(last=False)
            logger.debug(f"Evicted {key}")

    def get(self, path: str) -> Any | None:
        entry = self._fresh(path)
        return entry[1] if entry else None

    def set(self, path: str, value: Any) -> None:
        self._entries[path] = (time.time(), value)
        self._entries.move_to_end(path)
        if len(self._entries) > self.max_entries:
            self._sweep()

    def generation(self, path: str) -> int:
        return self._generations.get(_base_path(path), 0)

    async def get_or_load(self, path: str, loader: Callable[[], Awaitable[Any]]) -> Any:
        entry = self._fresh(path)
        if entry is not None:
            logger.debug(f"Cache hit for {path}")
            return entry[1]

        logger.debug(f"Cache miss for {path}")
        started = self.generation(path)
        value = await loader()
        if self.generation(path) == started:
            self.set(path, value)
        else:
            logger.info(f"Not caching {path}: revalidated while loading")
        return value

    def revalidate(self, path: str) -> bool:
        """Drop ``path`` and any query-qualified variants of it (``path?...``)."""
        base = _base_path(path)
        self._generations[base] = self._generations.get(base, 0) + 1
        keys = [k for k in self._entries if k == path or k.startswith(f"{path}?")]
        for key in keys:
            del self._entries[key]
        logger.info(f"Revalidated {path} (cached entries dropped: {len(keys)})")
        return bool(keys)

    def clear(self) -> None:
        self._entries.clear()

    def __contains__(self, path: str) -> bool:
        return self._fresh(path) is not None

    def __len__(self) -> int:
        return len(self._entries)
