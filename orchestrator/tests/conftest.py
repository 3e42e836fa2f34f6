import asyncio

import httpx
import pytest

from connectors.transport_interface import RequestCancelled
from orchestrator.client import RequestOrchestrator

BASE_URL = "https://api.x.com"


class FakeTransport:
    """Records every perform() call. Answers 200 unless a handler is set."""

    def __init__(self):
        self.calls = []
        self.handler = None
        self.closed = False

    async def perform(self, method, url, *, headers, params, body=None, timeout=None, signal=None, **options):
        call = {
            "method": method,
            "url": url,
            "headers": headers,
            "params": params,
            "body": body,
            "timeout": timeout,
            "signal": signal,
            "options": options,
        }
        self.calls.append(call)
        if self.handler is not None:
            return await self.handler(call)
        return httpx.Response(200, json={"ok": True}, request=httpx.Request(method.upper(), url))

    async def aclose(self):
        self.closed = True


class Blocker:
    """Handler that holds every request until released or canceled through its signal."""

    def __init__(self):
        self.released = asyncio.Event()

    def release(self):
        self.released.set()

    async def __call__(self, call):
        signal = call["signal"]
        waiters = {asyncio.ensure_future(self.released.wait()), asyncio.ensure_future(signal.wait())}
        _, pending = await asyncio.wait(waiters, return_when=asyncio.FIRST_COMPLETED)
        for waiter in pending:
            waiter.cancel()
        if signal.is_set():
            raise RequestCancelled("canceled")
        return httpx.Response(200, json={"released": True}, request=httpx.Request(call["method"].upper(), call["url"]))


@pytest.fixture
def transport():
    return FakeTransport()


@pytest.fixture
def blocker(transport):
    handler = Blocker()
    transport.handler = handler
    return handler


@pytest.fixture
def api(transport):
    return RequestOrchestrator(base_url=BASE_URL, transport=transport)
