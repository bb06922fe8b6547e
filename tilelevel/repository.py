"""
Caller-side cache of decoded levels.

The loader itself is stateless. LevelRepository is an ordinary object owned
by whoever needs caching (a game session, a tool); nothing here is global.
All cache reads and writes happen under the injected lock, and decoding runs
while that lock is held, so concurrent requests for the same level decode it
once.
"""

import threading
from collections import OrderedDict
from typing import Callable, ContextManager, Optional, Tuple

from tilelevel.model import LevelDefinition

LevelKey = Tuple[int, int]


class LevelRepository:
    """
    Cache of LevelDefinitions keyed by (world, stage).

    Only successful loads are cached. A failed load raises and leaves every
    cached entry in place.

    Args:
        load: Callable (world, stage) -> LevelDefinition, e.g. a LevelLoader
        lock: Mutual exclusion used around cache access and loading
              (default: threading.Lock())
        max_entries: Maximum cached levels, oldest evicted first
                     (None = unbounded)

    Example:
        >>> repo = LevelRepository(LevelLoader(DirectoryAssetReader("assets")))
        >>> level = repo.get(1, 1)
        >>> repo.get(1, 1) is level
        True
    """

    def __init__(
        self,
        load: Callable[[int, int], LevelDefinition],
        lock: Optional[ContextManager] = None,
        max_entries: Optional[int] = 1,
    ):
        if max_entries is not None and max_entries < 1:
            raise ValueError(f"max_entries must be >= 1, got {max_entries}")
        self._load = load
        self._lock = lock if lock is not None else threading.Lock()
        self._max_entries = max_entries
        self._levels: "OrderedDict[LevelKey, LevelDefinition]" = OrderedDict()

    def get(self, world: int, stage: int) -> LevelDefinition:
        """Return the cached level, loading it first if needed."""
        key = (world, stage)
        with self._lock:
            level = self._levels.get(key)
            if level is not None:
                self._levels.move_to_end(key)
                return level

            level = self._load(world, stage)
            self._levels[key] = level
            if self._max_entries is not None:
                while len(self._levels) > self._max_entries:
                    self._levels.popitem(last=False)
            return level

    def peek(self, world: int, stage: int) -> Optional[LevelDefinition]:
        """Cached level or None; never loads."""
        with self._lock:
            return self._levels.get((world, stage))

    def invalidate(self, world: Optional[int] = None, stage: Optional[int] = None) -> int:
        """
        Drop cached levels matching world and/or stage (None matches any).

        Returns:
            Number of entries removed
        """
        with self._lock:
            doomed = [
                key for key in self._levels
                if (world is None or key[0] == world) and (stage is None or key[1] == stage)
            ]
            for key in doomed:
                del self._levels[key]
            return len(doomed)

    def clear(self) -> None:
        with self._lock:
            self._levels.clear()

    def __contains__(self, key: LevelKey) -> bool:
        with self._lock:
            return key in self._levels

    def __len__(self) -> int:
        with self._lock:
            return len(self._levels)
