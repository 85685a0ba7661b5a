"""Keyed cache with per-entry expiry.

Injected wherever a value must be memoized (e.g. face embeddings) so that a
multi-worker deployment can back it with shared storage instead of a module
global.
"""
from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime, timedelta
from typing import Any, Callable, Dict, Optional, Protocol


class KeyedCache(Protocol):
    def get(self, key: str) -> Optional[Any]:
        raise NotImplementedError

    def set(self, key: str, value: Any, *, ttl_seconds: int) -> None:
        raise NotImplementedError

    def delete(self, key: str) -> None:
        raise NotImplementedError


@dataclass
class _Entry:
    value: Any
    expires_at: datetime


class InMemoryTTLCache(KeyedCache):
    """Per-process cache. Not shared between workers."""

    def __init__(self, *, now: Callable[[], datetime] = datetime.now):
        self._entries: Dict[str, _Entry] = {}
        self._now = now

    def get(self, key: str) -> Optional[Any]:
        entry = self._entries.get(key)
        if entry is None:
            return None
        if entry.expires_at <= self._now():
            self._entries.pop(key, None)
            return None
        return entry.value

    def set(self, key: str, value: Any, *, ttl_seconds: int) -> None:
        self._entries[key] = _Entry(value=value, expires_at=self._now() + timedelta(seconds=int(ttl_seconds)))

    def delete(self, key: str) -> None:
        self._entries.pop(key, None)
