import asyncio
from typing import Any, Mapping, Protocol

import httpx

# Any transport-layer failure (network, timeout, HTTP status, cancellation).
# Exceptions outside this hierarchy are programming errors and are not classified.
TransportError = httpx.HTTPError


class RequestCancelled(httpx.RequestError):
    """Raised by a transport when the request's cancellation signal fires."""


class Transport(Protocol):
    """
    Interface Protocol for the object that performs the network call.
    The orchestrator only needs this single async capability.

    Implementations must:
        - return an httpx.Response on success,
        - raise a TransportError (httpx.HTTPError subclass) on transport-layer failures,
        - raise RequestCancelled when ``signal`` is set before or during the request.
    """

    async def perform(
        self,
        method: str,
        url: str,
        *,
        headers: Mapping[str, str],
        params: Mapping[str, Any],
        body: Any = None,
        timeout: int | None = None,
        signal: asyncio.Event | None = None,
        **options: Any,
    ) -> httpx.Response:
        """
        Perform one request.
        :param timeout: timeout in milliseconds, None for no timeout.
        :param options: transport-level passthrough options.
        """
        ...

    async def aclose(self) -> None: ...
