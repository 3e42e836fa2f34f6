"""Headers, query parameters and timeout applied to every request of an orchestrator."""

from __future__ import annotations

from typing import Any, Iterable, Mapping

from .errors import InstanceError


class DefaultStore:
    """Mutable defaults owned by one orchestrator.

    Values are copied in and copied out, so a caller never holds a reference
    into the store and a running request never sees later mutations.
    """

    def __init__(
        self,
        headers: Mapping[str, str] | None = None,
        params: Mapping[str, Any] | None = None,
        timeout: int | None = None,
    ) -> None:
        self._headers: dict[str, str] = dict(headers or {})
        self._params: dict[str, Any] = dict(params or {})
        self._timeout: int | None = None
        if timeout is not None:
            self.set_timeout(timeout)

    @property
    def headers(self) -> dict[str, str]:
        return dict(self._headers)

    @property
    def params(self) -> dict[str, Any]:
        return dict(self._params)

    @property
    def timeout(self) -> int | None:
        return self._timeout

    def add_headers(self, headers: Mapping[str, str]) -> None:
        """Insert or overwrite the given headers; others are kept."""
        self._headers.update(headers)

    def remove_headers(self, names: Iterable[str] | None = None) -> None:
        """Remove the named headers, or all of them when ``names`` is None."""
        _remove(self._headers, names)

    def add_params(self, params: Mapping[str, Any]) -> None:
        self._params.update(params)

    def remove_params(self, names: Iterable[str] | None = None) -> None:
        _remove(self._params, names)

    def set_timeout(self, timeout: int) -> None:
        """Default timeout in milliseconds."""
        if timeout < 0:
            raise InstanceError(f"Timeout must be non-negative, got {timeout}")
        self._timeout = timeout

    def remove_timeout(self) -> None:
        self._timeout = None

    def merged_headers(self, overrides: Mapping[str, str] | None = None) -> dict[str, str]:
        """Defaults with ``overrides`` applied on top (shallow)."""
        merged = dict(self._headers)
        merged.update(overrides or {})
        return merged

    def merged_params(self, overrides: Mapping[str, Any] | None = None) -> dict[str, Any]:
        merged = dict(self._params)
        merged.update(overrides or {})
        return merged

    def __repr__(self) -> str:
        return f"DefaultStore(headers={self._headers!r}, params={self._params!r}, timeout={self._timeout!r})"


def _remove(target: dict[str, Any], names: Iterable[str] | None) -> None:
    if names is None:
        target.clear()
        return
    if isinstance(names, str):
        names = [names]
    for name in names:
        target.pop(name, None)


__all__ = ["DefaultStore"]
