"""Joining of the orchestrator's base URL with per-call endpoints."""

from __future__ import annotations

from .errors import InstanceError


def normalize_url(base: str, endpoint: str) -> str:
    """Join ``base`` and ``endpoint`` with exactly one slash between them.

    Trailing slashes of ``base`` and leading slashes of ``endpoint`` are dropped.
    No encoding is applied and query strings are left alone.

    >>> normalize_url("https://api.x.com/", "/v1/items")
    'https://api.x.com/v1/items'
    >>> normalize_url("", "v1/items")
    'v1/items'
    """
    base = base or ""
    endpoint = endpoint or ""
    if not base.strip() and not endpoint.strip():
        raise InstanceError("URL cannot be null")
    clean_base = base.rstrip("/")
    clean_endpoint = endpoint.lstrip("/")
    if not clean_base:
        return clean_endpoint
    return f"{clean_base}/{clean_endpoint}"


__all__ = ["normalize_url"]
