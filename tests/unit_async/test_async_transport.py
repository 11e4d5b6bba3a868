from __future__ import annotations

import httpx
import pytest

from restify.core.async_transport import AsyncTransport
from restify.core.errors import ClientClosedError
from tests.shared.transport import BASE_URL, RecordingHandler, build_async_transport, build_config


@pytest.mark.asyncio
async def test_async_execute_returns_transport_response():
    handler = RecordingHandler(httpx.Response(200, content=b"<ok/>"))
    transport = build_async_transport(handler)

    response = await transport.execute("GET", "/customers", params=(("q", "x"),))

    assert response.status_code == 200
    assert response.content == b"<ok/>"
    assert response.url == f"{BASE_URL}/customers?q=x"
    await transport.close()


@pytest.mark.asyncio
async def test_async_execute_captures_request_error():
    handler = RecordingHandler(httpx.ConnectError("refused"))
    response = await build_async_transport(handler).execute("GET", "/customers")

    assert response.status_code == 0
    assert response.error_message == "refused"
    assert isinstance(response.error, httpx.ConnectError)


@pytest.mark.asyncio
async def test_async_execute_after_close_raises():
    transport = build_async_transport(RecordingHandler(httpx.Response(200)))
    await transport.close()
    with pytest.raises(ClientClosedError):
        await transport.execute("GET", "/customers")


@pytest.mark.asyncio
async def test_async_transport_can_initialize_and_close_with_real_httpx_client():
    transport = AsyncTransport(build_config())
    await transport.close()
