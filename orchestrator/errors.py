"""Errors raised or returned by the request orchestrator.

Two channels are used:
    * ``InstanceError`` / ``ClassError`` are raised: misuse of the orchestrator
      (exhausted concurrency budget, unresolvable URL, bad configuration).
    * ``ClassifiedError`` is returned inside a ``RequestResult``: ordinary
      transport failures (timeouts, 4xx/5xx, network errors, cancellation).
"""

from __future__ import annotations

import logging
from typing import Any

import httpx
from pydantic import BaseModel, Field

from connectors.httpx_transport import error_code

logger = logging.getLogger(__name__)


class AuroraError(Exception):
    """Base exception with a message, optionally logged when raised."""

    def __init__(self, message: str = "An orchestrator error occurred", log: bool = False):
        self.message = message
        super().__init__(self.message)
        if log:
            logger.error(message)


class InstanceError(AuroraError):
    """Admission or configuration error of an orchestrator instance."""


class ClassError(AuroraError):
    """Internal component used out of contract."""


class ClassifiedError(BaseModel):
    """A transport failure surfaced as data instead of an exception."""

    name: str = "ClassifiedError"
    message: str
    kind: str = Field(..., description="Class name of the underlying transport exception")
    code: str | None = None
    request_state: int = Field(0, description="Status seen on the wire, 0 when no response arrived")
    response_status: int = Field(500, description="HTTP status, 500 when the failure carried none")
    original_config: dict[str, Any] = Field(default_factory=dict)

    @classmethod
    def from_exception(cls, exc: httpx.HTTPError, config: dict[str, Any] | None = None) -> ClassifiedError:
        """Build a ClassifiedError from a transport exception and the request config that produced it."""
        response = exc.response if isinstance(exc, httpx.HTTPStatusError) else None
        status = response.status_code if response is not None else None
        return cls(
            message=str(exc) or type(exc).__name__,
            kind=type(exc).__name__,
            code=error_code(exc),
            request_state=status or 0,
            response_status=status or 500,
            original_config=dict(config or {}),
        )


__all__ = [
    "AuroraError",
    "ClassError",
    "ClassifiedError",
    "InstanceError",
]
