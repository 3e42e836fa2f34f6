import pytest

from orchestrator import registry


@pytest.fixture(autouse=True)
def empty_registry():
    registry._instances.clear()
    yield
    registry._instances.clear()


def test_same_name_returns_same_instance():
    first = registry.get_orchestrator(base_url="https://a.example")
    second = registry.get_orchestrator(base_url="https://ignored.example")
    assert first is second
    assert second.base_url == "https://a.example"


def test_names_are_independent():
    default = registry.get_orchestrator()
    billing = registry.get_orchestrator("billing", {"max_concurrent_requests": 2})
    assert default is not billing
    assert billing.max_concurrent_requests == 2
    assert registry.registered_names() == ["billing", "default"]


def test_drop_orchestrator():
    created = registry.get_orchestrator("tmp")
    assert registry.drop_orchestrator("tmp") is created
    assert registry.drop_orchestrator("tmp") is None
    assert registry.get_orchestrator("tmp") is not created


@pytest.mark.asyncio
async def test_close_all():
    api = registry.get_orchestrator()
    await registry.close_all()
    assert registry.registered_names() == []
    assert api.transport.client.is_closed
