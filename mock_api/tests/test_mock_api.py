import pytest
from fastapi.testclient import TestClient

from mock_api import daemon


@pytest.fixture
def client():
    daemon.received.clear()
    with TestClient(daemon.app) as c:
        yield c


def test_status(client):
    r = client.get("/status")
    assert r.status_code == 200
    assert r.json() == {"status": "ok", "received": 0}


def test_echo_get_with_query(client):
    r = client.get("/echo/books/1", params=[("tag", "a"), ("tag", "b"), ("page", "2")], headers={"X-Token": "t"})
    assert r.status_code == 200
    echoed = r.json()
    assert echoed["method"] == "GET"
    assert echoed["path"] == "/echo/books/1"
    assert echoed["query"] == {"tag": ["a", "b"], "page": ["2"]}
    assert echoed["headers"]["x-token"] == "t"
    assert echoed["body"] is None


def test_echo_post_json_and_text(client):
    r = client.post("/echo", json={"name": "Alpha"})
    assert r.json()["body"] == {"name": "Alpha"}
    r = client.patch("/echo", content=b"not json")
    assert r.json()["body"] == "not json"


def test_received_log(client):
    client.put("/echo/1")
    client.delete("/echo/2")
    r = client.get("/received")
    assert [(e["method"], e["path"]) for e in r.json()] == [("PUT", "/echo/1"), ("DELETE", "/echo/2")]
    assert client.delete("/received").status_code == 204
    assert client.get("/received").json() == []


@pytest.mark.parametrize("code", [201, 204, 400, 404, 418, 500, 503])
def test_respond_with_status(client, code):
    r = client.get(f"/status/{code}")
    assert r.status_code == code
    if code != 204:
        assert r.json() == {"status": code}


def test_respond_with_invalid_status(client):
    assert client.get("/status/999").status_code == 400
    assert client.get("/status/abc").status_code == 422


def test_slow(client):
    r = client.get("/slow", params={"delay": 0.01})
    assert r.json() == {"slept": 0.01}
    assert client.get("/slow", params={"delay": -1}).status_code == 422
