"""Cancellation signal shared by the requests that use it."""

from __future__ import annotations

import asyncio


class CancellationController:
    """Owner of one cancellation signal.

    The signal is an ``asyncio.Event``; transports race their request against
    ``signal.wait()``. Once aborted a controller stays aborted.
    """

    def __init__(self) -> None:
        self._signal = asyncio.Event()

    @property
    def signal(self) -> asyncio.Event:
        return self._signal

    @property
    def aborted(self) -> bool:
        return self._signal.is_set()

    def abort(self) -> None:
        """Cancel every in-flight request using this controller's signal."""
        self._signal.set()

    def __repr__(self) -> str:
        return f"CancellationController(aborted={self.aborted})"


__all__ = ["CancellationController"]
