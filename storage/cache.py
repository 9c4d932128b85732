"""
In-memory key-value cache with no expiry
"""

import threading
from typing import Any, Dict, List


_MISSING = object()


class Cache:
    """Thread-safe key-value store; entries live until overwritten or cleared"""

    def __init__(self):
        self.entries: Dict[str, Any] = {}
        self.lock = threading.RLock()

        # Lookup metrics
        self.hits = 0
        self.misses = 0

    def set(self, key: str, value: Any):
        """Store value under key, replacing any previous value"""
        self._check_key(key)
        with self.lock:
            self.entries[key] = value

    def get(self, key: str, default: Any = None) -> Any:
        """Get the value stored under key, or default when absent"""
        self._check_key(key)
        with self.lock:
            if key in self.entries:
                self.hits += 1
                return self.entries[key]
            self.misses += 1
            return default

    def has(self, key: str) -> bool:
        """Check whether key has a stored value"""
        self._check_key(key)
        with self.lock:
            return key in self.entries

    def delete(self, key: str) -> bool:
        """Remove key, returns True if a value was removed"""
        self._check_key(key)
        with self.lock:
            return self.entries.pop(key, _MISSING) is not _MISSING

    def clear(self):
        """Remove all entries"""
        with self.lock:
            self.entries.clear()

    def keys(self) -> List[str]:
        with self.lock:
            return list(self.entries)

    def get_stats(self) -> Dict[str, Any]:
        """Get cache statistics"""
        with self.lock:
            return {
                "size": len(self.entries),
                "hits": self.hits,
                "misses": self.misses
            }

    def __contains__(self, key: str) -> bool:
        return self.has(key)

    def __len__(self) -> int:
        with self.lock:
            return len(self.entries)

    @staticmethod
    def _check_key(key):
        if not isinstance(key, str):
            raise TypeError(f"Cache keys must be strings, got {type(key).__name__}")
