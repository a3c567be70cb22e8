"""
Tests for the HTTP transport adapter.
"""

from __future__ import annotations

import httpx
import pytest

from dashinsight.errors import TransportError
from dashinsight.transport import InsightTransport, TransportResponse


@pytest.mark.asyncio
async def test_get_decodes_json(explorer):
    explorer.add("GET", "/insight-api/block/abc", json_body={"hash": "abc"})
    transport = InsightTransport("http://explorer.test/", client=explorer.http_client())

    response = await transport.get("/insight-api/block/abc")

    assert response == TransportResponse(200, {"hash": "abc"})
    assert response.ok
    assert str(explorer.requests[0].url) == "http://explorer.test/insight-api/block/abc"


@pytest.mark.asyncio
async def test_post_is_form_encoded(explorer):
    explorer.add("POST", "/insight-api/tx/send", json_body={"txid": "t"})
    transport = InsightTransport("http://explorer.test", client=explorer.http_client())

    await transport.post_form("/insight-api/tx/send", {"rawtx": "00ff"})

    request = explorer.requests[0]
    assert request.headers["content-type"] == "application/x-www-form-urlencoded"
    assert request.content == b"rawtx=00ff"


@pytest.mark.asyncio
async def test_non_json_body_returned_as_text(explorer):
    explorer.add("POST", "/insight-api/tx/send", status_code=400, text="Missing inputs")
    transport = InsightTransport("http://explorer.test", client=explorer.http_client())

    response = await transport.post_form("/insight-api/tx/send", {"rawtx": "00"})

    assert response.status_code == 400
    assert response.body == "Missing inputs"
    assert not response.ok


@pytest.mark.asyncio
async def test_empty_body_is_none(explorer):
    explorer.add("GET", "/insight-api/status?q=getInfo", status_code=503)
    transport = InsightTransport("http://explorer.test", client=explorer.http_client())

    response = await transport.get("/insight-api/status?q=getInfo")

    assert response == TransportResponse(503, None)


@pytest.mark.asyncio
async def test_connection_failure_raises_transport_error(explorer):
    cause = httpx.ConnectError("connection refused")
    explorer.add("GET", "/insight-api/status?q=getInfo", exc=cause)
    transport = InsightTransport("http://explorer.test", client=explorer.http_client())

    with pytest.raises(TransportError, match="Could not reach explorer") as exc_info:
        await transport.get("/insight-api/status?q=getInfo")

    assert exc_info.value.cause is cause


@pytest.mark.asyncio
async def test_timeout_raises_transport_error(explorer):
    explorer.add("GET", "/insight-api/status?q=getInfo", exc=httpx.ReadTimeout("too slow"))
    transport = InsightTransport("http://explorer.test", client=explorer.http_client())

    with pytest.raises(TransportError, match="Timeout"):
        await transport.get("/insight-api/status?q=getInfo")


@pytest.mark.asyncio
async def test_close_leaves_injected_client_open(explorer):
    client = explorer.http_client()
    transport = InsightTransport("http://explorer.test", client=client)

    await transport.close()

    assert not client.is_closed
    await client.aclose()


@pytest.mark.asyncio
async def test_close_own_client():
    transport = InsightTransport("http://explorer.test", timeout=5.0)

    await transport.close()

    assert transport.client.is_closed
