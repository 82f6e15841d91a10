import time
from collections import OrderedDict
from typing import Callable, Generic, Iterable, Optional, TypeVar

V = TypeVar("V")


class ItemCache(Generic[V]):
    """Bounded TTL cache keyed by listing id.

    Owned by whoever fills it and handed to collaborators by reference; there
    is no module-level instance.
    """

    def __init__(self, ttl_s: float, max_entries: int = 512, clock: Callable[[], float] = time.monotonic) -> None:
        if max_entries < 1:
            raise ValueError("max_entries must be positive")
        self.ttl_s = ttl_s
        self.max_entries = max_entries
        self._clock = clock
        self._data: "OrderedDict[str, tuple[float, V]]" = OrderedDict()

    def __len__(self) -> int:
        return len(self._data)

    def get(self, key: str) -> Optional[V]:
        entry = self._data.get(key)
        if entry is None:
            return None
        expires_at, value = entry
        if self._clock() >= expires_at:
            del self._data[key]
            return None
        self._data.move_to_end(key)
        return value

    def set(self, key: str, value: V) -> None:
        self._data[key] = (self._clock() + self.ttl_s, value)
        self._data.move_to_end(key)
        while len(self._data) > self.max_entries:
            self._data.popitem(last=False)

    def get_many(self, keys: Iterable[str]) -> tuple[dict[str, V], list[str]]:
        hits: dict[str, V] = {}
        misses: list[str] = []
        for key in keys:
            val = self.get(key)
            if val is None:
                misses.append(key)
            else:
                hits[key] = val
        return hits, misses

    def clear(self) -> None:
        self._data.clear()
