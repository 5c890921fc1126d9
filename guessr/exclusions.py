"""
Titles already used as secrets.

The list lives for the whole process: it only grows, and it is reset only by
restarting the process. Sessions receive it explicitly; code that does not
pass one gets the process-wide instance from `process_exclusions()`.
"""

from __future__ import annotations
import threading
from typing import Iterable, Iterator, Optional, Tuple

from .scoring import normalize_title


class ExclusionList:
    """Append-only, ordered collection of used titles. Thread-safe."""

    def __init__(self, titles: Iterable[str] = ()):
        self._titles: list[str] = []
        self._keys: set[str] = set()
        self._lock = threading.Lock()
        for title in titles:
            self.append(title)

    def append(self, title: str) -> bool:
        """Record a title. Returns False if an equivalent title is already present."""
        key = normalize_title(title)
        with self._lock:
            if key in self._keys:
                return False
            self._keys.add(key)
            self._titles.append(title)
            return True

    def titles(self) -> Tuple[str, ...]:
        """Snapshot in insertion order."""
        with self._lock:
            return tuple(self._titles)

    def recent(self, limit: Optional[int] = 100) -> Tuple[str, ...]:
        """The last `limit` titles (all when limit is None), oldest first."""
        snapshot = self.titles()
        if limit is None:
            return snapshot
        return snapshot[-limit:] if limit > 0 else ()

    def __contains__(self, title: object) -> bool:
        if not isinstance(title, str):
            return False
        with self._lock:
            return normalize_title(title) in self._keys

    def __len__(self) -> int:
        with self._lock:
            return len(self._titles)

    def __iter__(self) -> Iterator[str]:
        return iter(self.titles())


_PROCESS_EXCLUSIONS = ExclusionList()


def process_exclusions() -> ExclusionList:
    """The exclusion list shared by every session in this process."""
    return _PROCESS_EXCLUSIONS
