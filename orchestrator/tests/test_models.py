import json
from pathlib import Path

import httpx
import pytest

from connectors.transport_interface import RequestCancelled
from orchestrator.errors import ClassifiedError, InstanceError
from orchestrator.models import CallOptions, ClientConfig, RequestResult, load_config


def test_call_options_dot_access():
    options = CallOptions(endpoint="/items", params={"page": 2})
    assert options.endpoint == "/items"
    assert options.params.page == 2
    assert options["params"]["page"] == 2


def test_load_config_variants(tmp_path):
    assert load_config() == ClientConfig()
    assert load_config({"base_url": "https://a"}).base_url == "https://a"
    assert load_config("base_url: https://b\ntimeout: 10\n").timeout == 10
    assert load_config(b'{"max_concurrent_requests": 3}').max_concurrent_requests == 3

    path = tmp_path / "client.json"
    path.write_text(json.dumps({"headers": {"Accept": "application/json"}}))
    assert load_config(path).headers == {"Accept": "application/json"}

    config = ClientConfig(base_url="https://c")
    assert load_config(config) is config


@pytest.mark.parametrize(
    "source",
    [
        {"timeout": -1},
        {"unknown_field": 1},
        "- just\n- a list\n",
        Path("/nonexistent/aurora.yaml"),
    ],
)
def test_load_config_invalid(source):
    with pytest.raises(InstanceError):
        load_config(source)


def test_load_config_unsupported_type():
    with pytest.raises(TypeError):
        load_config(42)


def test_classified_error_from_status_error():
    request = httpx.Request("GET", "https://api.x.com/items")
    response = httpx.Response(503, request=request)
    exc = httpx.HTTPStatusError("Request failed with status code 503", request=request, response=response)

    error = ClassifiedError.from_exception(exc, {"url": "https://api.x.com/items"})

    assert error.name == "ClassifiedError"
    assert error.kind == "HTTPStatusError"
    assert error.code == "ERR_BAD_RESPONSE"
    assert error.request_state == 503
    assert error.response_status == 503
    assert error.original_config == {"url": "https://api.x.com/items"}


def test_classified_error_synthesizes_status():
    error = ClassifiedError.from_exception(RequestCancelled("canceled"))
    assert error.response_status == 500
    assert error.request_state == 0
    assert error.code == "ERR_CANCELED"
    assert error.original_config == {}


@pytest.mark.asyncio
async def test_result_without_call_cannot_recall():
    with pytest.raises(InstanceError):
        await RequestResult().recall()
