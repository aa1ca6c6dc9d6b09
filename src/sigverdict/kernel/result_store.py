"""Verdict store: cache key -> verdict, with explicit presence."""

import threading
from typing import Dict, Iterator, List, Mapping, Optional, Tuple

from sigverdict.codes import PutOutcome
from sigverdict.kernel.key_deriver import CacheKey, is_cache_key


class ResultStore:
    """Write-once map from cache key to verdict.

    A key is either absent or present with a bool. Absent keys read as
    None, never as False. Once present, a key keeps its verdict for the
    life of the store: no eviction, no overwrite.
    """

    def __init__(self) -> None:
        self._entries: Dict[CacheKey, bool] = {}
        self._lock = threading.Lock()

    @classmethod
    def from_entries(cls, entries: Mapping[str, bool]) -> "ResultStore":
        """Rebuild a store from persisted entries.

        Raises:
            ValueError: If a key is malformed or a value is not a bool
        """
        store = cls()
        for key, value in entries.items():
            if not is_cache_key(key):
                raise ValueError(f"Malformed cache key: {key!r}")
            if not isinstance(value, bool):
                raise ValueError(f"Verdict for {key} must be a bool, got {type(value).__name__}")
            store._entries[key] = value
        return store

    def get(self, key: CacheKey) -> Optional[bool]:
        """Return the stored verdict, or None when the key is absent."""
        return self._entries.get(key)

    def put(self, key: CacheKey, value: bool) -> PutOutcome:
        """Insert a verdict unless one is already stored.

        Check-and-set is atomic: concurrent writers to the same key see
        exactly one INSERTED.

        Returns:
            INSERTED for a new key, ALREADY_PRESENT_SAME when the stored
            verdict matches, ALREADY_PRESENT_CONFLICT when it differs (the
            stored verdict is left untouched).
        """
        with self._lock:
            existing = self._entries.get(key)
            if existing is None:
                self._entries[key] = value
                return PutOutcome.INSERTED
            if existing == value:
                return PutOutcome.ALREADY_PRESENT_SAME
            return PutOutcome.ALREADY_PRESENT_CONFLICT

    def items(self) -> List[Tuple[CacheKey, bool]]:
        """Sorted snapshot of all stored entries."""
        with self._lock:
            return sorted(self._entries.items())

    def __contains__(self, key: object) -> bool:
        return key in self._entries

    def __len__(self) -> int:
        return len(self._entries)

    def __iter__(self) -> Iterator[CacheKey]:
        return iter([key for key, _ in self.items()])
