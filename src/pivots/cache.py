"""
Shared mutable state for an engine: render memoization and choice usage.

Both are guarded by a lock so one engine can be used from several
threads. Neither ever evicts: they grow for the engine's lifetime.
"""

import logging
import threading
from dataclasses import dataclass
from typing import Callable, Dict, FrozenSet, Hashable, Set

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class CacheInfo:
    hits: int
    misses: int
    size: int


class RenderCache:
    """
    Memoizes rendered strings.

    Keys are (scope, canonical expression, template), so two
    spellings of the same condition share one entry.
    """

    def __init__(self):
        self._entries: Dict[Hashable, str] = {}
        self._lock = threading.Lock()
        self._hits = 0
        self._misses = 0

    def get_or_render(self, key: Hashable, render: Callable[[], str]) -> str:
        with self._lock:
            if key in self._entries:
                self._hits += 1
                return self._entries[key]
            self._misses += 1
            logger.debug("Render cache miss: %s", key)
            result = render()
            self._entries[key] = result
            return result

    def info(self) -> CacheInfo:
        with self._lock:
            return CacheInfo(hits=self._hits, misses=self._misses, size=len(self._entries))

    def __len__(self) -> int:
        with self._lock:
            return len(self._entries)


class ChoiceUsage:
    """Records which choices of which pivots expressions have referenced."""

    def __init__(self):
        self._used: Dict[str, Set[str]] = {}
        self._lock = threading.Lock()

    def mark(self, pivot: str, choice: str) -> None:
        with self._lock:
            self._used.setdefault(pivot, set()).add(choice)

    def snapshot(self) -> Dict[str, FrozenSet[str]]:
        with self._lock:
            return {pivot: frozenset(choices) for pivot, choices in self._used.items()}

    def is_used(self, pivot: str, choice: str) -> bool:
        with self._lock:
            return choice in self._used.get(pivot, ())


__all__ = ["CacheInfo", "RenderCache", "ChoiceUsage"]
