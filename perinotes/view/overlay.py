"""
overlay.py
----------
Short-lived optimistic state.

After the user toggles something (a done flag), the new value is held in an
OptimisticOverlay so that a reload which still returns the old value cannot
flip the UI back. Each entry expires after a TTL; expired entries are
evicted on access or by ``evict_expired``. Callers can also clear an entry
explicitly (for a rollback).
"""
# --- Annotations ---
from __future__ import annotations

# --- Standard library imports ---
import time
from typing import Callable, Dict, Generic, Hashable, Optional, Tuple, TypeVar

K = TypeVar("K", bound=Hashable)
V = TypeVar("V")

DEFAULT_TTL = 1.0


class OptimisticOverlay(Generic[K, V]):
    """
    Key → value map with per-entry expiry.

    Args:
        ttl: Default lifetime of an entry in seconds
        clock: Monotonic clock (injectable for tests)

    Examples:
        >>> overlay = OptimisticOverlay(ttl=1.0)
        >>> overlay.set("daily-2024-12-17", True)
        >>> overlay.resolve("daily-2024-12-17", False)
        True
    """

    def __init__(
        self, ttl: float = DEFAULT_TTL, clock: Callable[[], float] = time.monotonic
    ) -> None:
        if ttl <= 0:
            raise ValueError(f"ttl must be positive, got {ttl}")
        self.ttl = ttl
        self._clock = clock
        self._entries: Dict[K, Tuple[V, float]] = {}

    def set(self, key: K, value: V, ttl: Optional[float] = None) -> None:
        self._entries[key] = (value, self._clock() + (ttl if ttl is not None else self.ttl))

    def get(self, key: K) -> Optional[V]:
        """Live value for a key, or None (expired entries are evicted)."""
        entry = self._entries.get(key)
        if entry is None:
            return None
        value, expires_at = entry
        if self._clock() >= expires_at:
            del self._entries[key]
            return None
        return value

    def __contains__(self, key: object) -> bool:
        return self.get(key) is not None  # type: ignore[arg-type]

    def resolve(self, key: K, fresh: V) -> V:
        """The overlay value if one is live, otherwise the freshly loaded value."""
        value = self.get(key)
        return fresh if value is None else value

    def clear(self, key: K) -> bool:
        """Drop an entry; True if it was present."""
        return self._entries.pop(key, None) is not None

    def evict_expired(self) -> int:
        now = self._clock()
        expired = [key for key, (_, expires_at) in self._entries.items() if now >= expires_at]
        for key in expired:
            del self._entries[key]
        return len(expired)

    def __len__(self) -> int:
        self.evict_expired()
        return len(self._entries)
