import asyncio
import contextlib
import logging
from typing import Any, Callable, Mapping

import httpx

from connectors.transport_interface import RequestCancelled, Transport

logger = logging.getLogger(__name__)


##### Helpers #####

def error_code(exc: BaseException) -> str | None:
    """Machine-readable code for a transport exception, None if it has no well-known code."""
    if isinstance(exc, RequestCancelled):
        return "ERR_CANCELED"
    if isinstance(exc, httpx.TimeoutException):
        return "ETIMEDOUT"
    if isinstance(exc, httpx.HTTPStatusError):
        status = exc.response.status_code
        return "ERR_BAD_REQUEST" if 400 <= status < 500 else "ERR_BAD_RESPONSE"
    if isinstance(exc, httpx.TransportError):
        return "ERR_NETWORK"
    return None


def flatten_params(params: Mapping[str, Any], prefix: str | None = None) -> list[tuple[str, Any]]:
    """
    Turn a params mapping into query pairs httpx accepts.
    Nested mappings use bracket notation, lists/tuples repeat the key, None values are skipped.
    example: {"filter": {"a": 1}, "id": [1, 2]} -> [("filter[a]", 1), ("id", 1), ("id", 2)]
    """
    pairs: list[tuple[str, Any]] = []
    for key, value in params.items():
        name = f"{prefix}[{key}]" if prefix else str(key)
        if value is None:
            continue
        if isinstance(value, Mapping):
            pairs.extend(flatten_params(value, name))
        elif isinstance(value, (list, tuple)):
            pairs.extend((name, item) for item in value if item is not None)
        else:
            pairs.append((name, value))
    return pairs


def _body_arguments(body: Any) -> dict[str, Any]:
    if body is None:
        return {}
    if isinstance(body, (str, bytes)):
        return {"content": body}
    return {"json": body}


##### Transport #####

class HttpxTransport(Transport):
    """
    Default transport, backed by an httpx.AsyncClient.

    Args:
        client (httpx.AsyncClient | None): client to send requests with.
            If omitted, one is created with no timeout and closed by aclose().
            An injected client is left open; its owner closes it.
    """

    def __init__(self, client: httpx.AsyncClient | None = None):
        self._owns_client = client is None
        self.client = client if client is not None else httpx.AsyncClient(timeout=None)

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
        validate_status: Callable[[int], bool] | None = None,
        **options: Any,
    ) -> httpx.Response:
        """
        Send one request and return its response.
        Statuses rejected by ``validate_status`` (default: anything but 2xx) raise httpx.HTTPStatusError.

        Args:
            timeout (int | None): milliseconds for the whole request. httpx applies it to each
                phase (connect, read, write, pool) and a deadline bounds the total.
                0 disables the timeout, None keeps the client's own.
            signal (asyncio.Event | None): when set, the request is abandoned and RequestCancelled raised.
            **options: passed to httpx.AsyncClient.request (cookies, auth, follow_redirects, files...).
        """
        if signal is not None and signal.is_set():
            raise RequestCancelled(f"Request {method.upper()} {url} canceled before dispatch")

        if timeout is None:
            seconds, client_timeout = None, httpx.USE_CLIENT_DEFAULT
        else:
            # 0 means no timeout
            seconds = timeout / 1000 if timeout > 0 else None
            client_timeout = seconds

        pending = self.client.request(
            method.upper(),
            url,
            headers=dict(headers),
            params=flatten_params(params),
            timeout=client_timeout,
            **_body_arguments(body),
            **options,
        )
        if seconds is not None:
            pending = self._within(pending, seconds, method, url)
        logger.debug(f"Sending {method.upper()} {url}")
        if signal is None:
            response = await pending
        else:
            response = await self._race(pending, signal, method, url)

        accepted = validate_status(response.status_code) if validate_status else response.is_success
        if not accepted:
            raise httpx.HTTPStatusError(
                f"Request failed with status code {response.status_code}",
                request=response.request,
                response=response,
            )
        return response

    async def _within(self, pending, seconds: float, method: str, url: str) -> httpx.Response:
        """Await the request, raising httpx.TimeoutException once ``seconds`` have passed."""
        try:
            return await asyncio.wait_for(pending, seconds)
        except asyncio.TimeoutError:
            raise httpx.TimeoutException(
                f"Request {method.upper()} {url} exceeded {seconds * 1000:g} ms"
            ) from None

    async def _race(self, pending, signal: asyncio.Event, method: str, url: str) -> httpx.Response:
        """Await the request unless the signal fires first."""
        request_task = asyncio.ensure_future(pending)
        signal_task = asyncio.ensure_future(signal.wait())
        try:
            done, _ = await asyncio.wait({request_task, signal_task}, return_when=asyncio.FIRST_COMPLETED)
        except asyncio.CancelledError:
            request_task.cancel()
            signal_task.cancel()
            raise
        signal_task.cancel()
        if request_task in done:
            return request_task.result()

        request_task.cancel()
        with contextlib.suppress(asyncio.CancelledError):
            await request_task
        logger.debug(f"Canceled {method.upper()} {url}")
        raise RequestCancelled(f"Request {method.upper()} {url} canceled")

    async def aclose(self) -> None:
        """Close the underlying client if this transport created it."""
        if self._owns_client:
            await self.client.aclose()
