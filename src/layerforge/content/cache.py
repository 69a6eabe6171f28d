"""
Per-collection cache for merged content.

One cache object is owned by one service (or generator) and passed around
explicitly. Concurrent population is tolerated: the last write wins and
in-flight loads are not deduplicated.
"""

import copy
import logging
from typing import Dict, List, Optional

from .models import Collection


class CollectionCache:
    """Read-through cache of merged collections keyed by collection name."""

    def __init__(self):
        self._entries: Dict[str, Collection] = {}
        self.logger = logging.getLogger(f"{__name__}.{self.__class__.__name__}")

    def get(self, name: str) -> Optional[Collection]:
        """Return a copy of the cached collection, or None on a miss."""
        entry = self._entries.get(name)
        if entry is None:
            return None
        return copy.deepcopy(entry)

    def put(self, name: str, records: Collection) -> None:
        """Store a collection, replacing any previous entry."""
        self._entries[name] = copy.deepcopy(records)

    def invalidate(self, name: str) -> None:
        """Forget one collection."""
        if self._entries.pop(name, None) is not None:
            self.logger.debug(f"Invalidated cached collection '{name}'")

    def clear(self) -> None:
        """Forget every collection (context switch)."""
        if self._entries:
            self.logger.debug(f"Cleared {len(self._entries)} cached collections")
        self._entries.clear()

    def names(self) -> List[str]:
        """Return the names of the cached collections."""
        return list(self._entries.keys())

    def __contains__(self, name: object) -> bool:
        return name in self._entries

    def __len__(self) -> int:
        return len(self._entries)
