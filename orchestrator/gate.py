"""Admission control for concurrent requests."""

from __future__ import annotations

import math

from .errors import ClassError


class ConcurrencyGate:
    """Counter of in-flight requests checked against a maximum.

    ``admit`` and ``release`` never await, so on a single event loop they are
    atomic with respect to other requests.
    """

    def __init__(self, limit: float | None = None) -> None:
        self._max: float = math.inf
        self._current = 0
        self.set_limit(limit)

    @property
    def max(self) -> float:
        return self._max

    @property
    def current(self) -> int:
        return self._current

    @property
    def available(self) -> float:
        return self._max - self._current

    def set_limit(self, limit: float | None = None) -> None:
        """Positive finite values become the limit; zero, negatives and None mean unbounded."""
        if limit is not None and limit > 0 and math.isfinite(limit):
            self._max = limit
        else:
            self._max = math.inf

    def admit(self) -> bool:
        if self._current >= self._max:
            return False
        self._current += 1
        return True

    def release(self) -> None:
        if self._current <= 0:
            raise ClassError("release() called without a matching admit()")
        self._current -= 1

    def __repr__(self) -> str:
        return f"ConcurrencyGate(current={self._current}, max={self._max})"


__all__ = ["ConcurrencyGate"]
