"""
client.py
---------
The request orchestrator.

Wraps a transport and adds, per instance:
    - a concurrency limit (requests over the limit are rejected, not queued),
    - default headers, query parameters and timeout,
    - a shared cancellation signal (``abort_all``),
    - loading notifications and replayable results (``RequestResult.recall``).

Transport failures come back as data in the RequestResult;
misuse (limit exceeded, no URL) is raised as InstanceError.
"""

from __future__ import annotations

import logging
from typing import Any, Callable, Iterable, Mapping

from pydantic import ValidationError

from connectors.httpx_transport import HttpxTransport
from connectors.transport_interface import Transport, TransportError

from .cancellation import CancellationController
from .defaults import DefaultStore
from .errors import ClassifiedError, InstanceError
from .gate import ConcurrencyGate
from .models import CallOptions, ClientConfig, RequestResult, load_config
from .urls import normalize_url

logger = logging.getLogger(__name__)


class RequestOrchestrator:
    """
    Issues HTTP requests through a transport under a concurrency limit.

    Args:
        base_url (str): prefix joined with every call's ``endpoint``.
        max_concurrent_requests (int | None): in-flight limit, 0 or None for unbounded.
        cancellation_controller (CancellationController | None): default controller used by calls
            that do not bring their own. A fresh one is created if omitted.
        transport (Transport | None): performs the network calls. Defaults to an HttpxTransport
            owned (and closed) by this orchestrator.
        headers, params, timeout: initial defaults, see DefaultStore.

    Example:
        async with RequestOrchestrator(base_url="https://api.example.com", max_concurrent_requests=3) as api:
            api.add_headers({"Authorization": "Bearer token"})
            result = await api.get(endpoint="/items", params={"page": 2})
            if result.has_error:
                print(result.error.response_status)
    """

    def __init__(
        self,
        base_url: str = "",
        max_concurrent_requests: int | None = None,
        cancellation_controller: CancellationController | None = None,
        transport: Transport | None = None,
        *,
        headers: Mapping[str, str] | None = None,
        params: Mapping[str, Any] | None = None,
        timeout: int | None = None,
    ):
        self.base_url = base_url
        self._gate = ConcurrencyGate(max_concurrent_requests)
        self._defaults = DefaultStore(headers, params, timeout)
        self._default_controller = cancellation_controller or CancellationController()
        self._owns_transport = transport is None
        self._transport: Transport = transport if transport is not None else HttpxTransport()

    ##### State #####

    @property
    def base_url(self) -> str:
        return self._base_url

    @base_url.setter
    def base_url(self, value: str | None) -> None:
        self._base_url = value or ""

    @property
    def defaults(self) -> DefaultStore:
        return self._defaults

    @property
    def in_flight(self) -> int:
        return self._gate.current

    @property
    def max_concurrent_requests(self) -> float:
        return self._gate.max

    @property
    def cancellation_controller(self) -> CancellationController:
        """The controller used by calls without their own ``cancellation`` option."""
        return self._default_controller

    @property
    def transport(self) -> Transport:
        return self._transport

    def set_max_concurrent_requests_limit(self, limit: int | None = None) -> None:
        """Set the in-flight limit. Zero or None disables it."""
        self._gate.set_limit(limit)

    ##### Defaults #####

    def add_headers(self, headers: Mapping[str, str]) -> None:
        self._defaults.add_headers(headers)

    def remove_headers(self, names: Iterable[str] | None = None) -> None:
        self._defaults.remove_headers(names)

    def add_params(self, params: Mapping[str, Any]) -> None:
        self._defaults.add_params(params)

    def remove_params(self, names: Iterable[str] | None = None) -> None:
        self._defaults.remove_params(names)

    def set_timeout(self, timeout: int) -> None:
        """Default timeout in milliseconds for subsequent calls."""
        self._defaults.set_timeout(timeout)

    def remove_timeout(self) -> None:
        self._defaults.remove_timeout()

    ##### Cancellation #####

    def abort_all(self) -> None:
        """Cancel every in-flight call that uses the default controller."""
        logger.info(f"Aborting requests on default controller ({self._gate.current} in flight)")
        self._default_controller.abort()

    def _default_signal_source(self) -> CancellationController:
        # a fired controller would cancel every later call before dispatch
        if self._default_controller.aborted:
            logger.debug("Default cancellation controller was aborted, replacing it")
            self._default_controller = CancellationController()
        return self._default_controller

    ##### Requests #####

    async def call(self, method: str, options: Mapping[str, Any] | None = None, /, **kwargs: Any) -> RequestResult:
        """
        Make a request with ``method`` and return its RequestResult.

        Options (mapping and/or keywords, keywords win):
            endpoint (str): path joined with base_url.
            headers, params (mapping): laid over the defaults for this call only.
            body: JSON-serializable object, str or bytes.
            timeout (int): milliseconds, overrides the default timeout.
            cancellation (CancellationController): use this controller instead of the default one.
            loading_callback (callable): called with True before dispatch and False afterwards.
            anything else: passed to the transport.

        Raises:
            InstanceError: the concurrency limit is reached, or there is no URL to call.
        """
        snapshot = CallOptions({**(options or {}), **kwargs}, frozen_box=True)

        if not self._gate.admit():
            logger.warning(
                f"Rejected {method.upper()} {snapshot.get('endpoint', '')!r}: "
                f"limit of {self._gate.max} concurrent requests reached"
            )
            raise InstanceError("Request limit exceeded")

        working = dict(snapshot)
        controller = working.pop("cancellation", None) or self._default_signal_source()
        loading_callback: Callable[[bool], Any] | None = working.pop("loading_callback", None)
        response = None
        error: ClassifiedError | None = None
        try:
            url = normalize_url(self._base_url, working.pop("endpoint", None) or "")
            headers = self._defaults.merged_headers(working.pop("headers", None))
            params = self._defaults.merged_params(working.pop("params", None))
            timeout = working.pop("timeout", None)
            if timeout is None:
                timeout = self._defaults.timeout
            body = working.pop("body", None)

            if loading_callback:
                loading_callback(True)
            logger.debug(f"Dispatching {method.upper()} {url} ({self._gate.current} in flight)")
            try:
                response = await self._transport.perform(
                    method,
                    url,
                    headers=headers,
                    params=params,
                    body=body,
                    timeout=timeout,
                    signal=controller.signal,
                    **working,
                )
            except TransportError as exc:
                request_config = {
                    "method": method,
                    "url": url,
                    "headers": headers,
                    "params": params,
                    "body": body,
                    "timeout": timeout,
                    **working,
                }
                error = ClassifiedError.from_exception(exc, request_config)
                logger.warning(f"{method.upper()} {url} failed: [{error.code}] {error.message}")
        finally:
            self._gate.release()
            if loading_callback:
                loading_callback(False)

        return RequestResult(
            response=response,
            error=error,
            has_error=error is not None,
            _recaller=lambda custom: self.call(method, {**snapshot, **custom}),
        )

    async def get(self, options: Mapping[str, Any] | None = None, /, **kwargs: Any) -> RequestResult:
        return await self.call("get", options, **kwargs)

    async def post(self, options: Mapping[str, Any] | None = None, /, **kwargs: Any) -> RequestResult:
        return await self.call("post", options, **kwargs)

    async def put(self, options: Mapping[str, Any] | None = None, /, **kwargs: Any) -> RequestResult:
        return await self.call("put", options, **kwargs)

    async def delete(self, options: Mapping[str, Any] | None = None, /, **kwargs: Any) -> RequestResult:
        return await self.call("delete", options, **kwargs)

    ##### Lifecycle #####

    async def aclose(self) -> None:
        """Close the transport if this orchestrator created it."""
        if self._owns_transport:
            await self._transport.aclose()

    async def __aenter__(self) -> RequestOrchestrator:
        return self

    async def __aexit__(self, *exc_info: Any) -> None:
        await self.aclose()

    def __repr__(self) -> str:
        return f"RequestOrchestrator(base_url={self._base_url!r}, gate={self._gate!r})"


def create_orchestrator(
    config: Any = None,
    *,
    cancellation_controller: CancellationController | None = None,
    transport: Transport | None = None,
    **overrides: Any,
) -> RequestOrchestrator:
    """
    Build a new, independent orchestrator.

    ``config`` is anything load_config accepts (ClientConfig, mapping, Path, YAML/JSON text);
    keyword overrides are ClientConfig fields and take precedence over it.
    """
    client_config = load_config(config)
    if overrides:
        try:
            client_config = ClientConfig.model_validate({**client_config.model_dump(), **overrides})
        except ValidationError as exc:
            raise InstanceError(f"Invalid client configuration: {exc}") from exc
    return RequestOrchestrator(
        base_url=client_config.base_url,
        max_concurrent_requests=client_config.max_concurrent_requests,
        cancellation_controller=cancellation_controller,
        transport=transport,
        headers=client_config.headers,
        params=client_config.params,
        timeout=client_config.timeout,
    )


__all__ = ["RequestOrchestrator", "create_orchestrator"]
