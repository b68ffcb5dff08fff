"""Tests for the HTTP bus front end"""

import pytest

from kerneltune.bus.server import BusServer


@pytest.fixture
async def client(aiohttp_client, registry):
    @registry.method("explode")
    async def explode(ctx, payload):
        raise RuntimeError("boom")

    return await aiohttp_client(BusServer(registry).create_app())


async def test_health(client):
    resp = await client.get("/health")
    assert resp.status == 200

    data = await resp.json()
    assert data["status"] == "healthy"
    assert data["service"] == "kerneltune"
    assert data["methods"] == 26


async def test_method_call(client):
    resp = await client.post("/get_scaling_governor", json={})
    assert resp.status == 200
    assert await resp.json() == {"value": "ondemand", "returnValue": True}


async def test_empty_body_is_empty_request(client):
    resp = await client.post("/status")
    assert await resp.json() == {"returnValue": True}


async def test_kernel_bytes_are_escaped(client, kernel_tree):
    (kernel_tree / "proc" / "cpuinfo").write_bytes(b"Hardware\t: caf\xe9\n")

    resp = await client.post("/get_proc_cpuinfo", json={})
    body = await resp.text()

    assert '"Hardware\\t: caf\\u00e9"' in body
    assert (await resp.json())["stdOut"] == ["Hardware\t: caf\xe9"]


@pytest.mark.parametrize("body, error_text", [
    (b"{", "Invalid JSON payload"),
    (b"[1, 2]", "Request payload must be a JSON object"),
    (b"\xff", "Request payload is not valid UTF-8"),
])
async def test_malformed_payload(client, body, error_text):
    resp = await client.post("/status", data=body)

    assert resp.status == 200
    reply = await resp.json()
    assert reply["returnValue"] is False
    assert reply["errorCode"] == -1
    assert reply["errorText"].startswith(error_text)


async def test_unexpected_exception(client):
    resp = await client.post("/explode", json={})

    assert resp.status == 500
    assert await resp.json() == {
        "returnValue": False,
        "errorCode": -1,
        "errorText": "Internal error",
    }
