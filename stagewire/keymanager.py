"""API key management handed to stages at run time.

The pipeline stores its key manager verbatim and never calls it; stages reach
it through their ``StageContext``.
"""

from __future__ import annotations

import threading
from collections.abc import Mapping
from dataclasses import dataclass
from typing import Protocol, runtime_checkable


@dataclass(frozen=True)
class ManagedKey:
    """A key plus the calls left on it after the request, ``None`` if unlimited."""

    value: str
    remaining_calls: int | None = None


@runtime_checkable
class KeyManager(Protocol):
    def request(self, target: str, num_calls: int = 1) -> ManagedKey | None:
        """Return a key for *target* good for *num_calls* calls, or ``None``."""
        ...


class StaticKeyManager:
    """Key manager backed by a fixed target-to-key mapping.

    *limits* optionally caps the number of calls per target. A request that
    would exceed the remaining budget gets ``None`` and consumes nothing.
    Safe to share between deployed stages running in threads.
    """

    def __init__(
        self,
        keys: Mapping[str, str] | None = None,
        limits: Mapping[str, int] | None = None,
    ) -> None:
        self._keys = dict(keys or {})
        self._remaining = dict(limits or {})
        for target, limit in self._remaining.items():
            if limit < 0:
                raise ValueError(f"Call limit for '{target}' must not be negative")
        self._lock = threading.Lock()

    def request(self, target: str, num_calls: int = 1) -> ManagedKey | None:
        if num_calls < 1:
            raise ValueError("num_calls must be at least 1")
        value = self._keys.get(target)
        if value is None:
            return None
        with self._lock:
            remaining = self._remaining.get(target)
            if remaining is None:
                return ManagedKey(value=value)
            if num_calls > remaining:
                return None
            self._remaining[target] = remaining - num_calls
            return ManagedKey(value=value, remaining_calls=remaining - num_calls)
