from __future__ import annotations

import httpx
import pytest

from restify.core.errors import ClientClosedError
from restify.core.transport import SyncTransport
from restify.core.transport_shared import build_default_timeout, resolve_url
from tests.shared.transport import BASE_URL, RecordingHandler, build_config, build_sync_transport


def test_execute_returns_transport_response():
    handler = RecordingHandler(httpx.Response(201, content=b"<ok/>"))
    response = build_sync_transport(handler).execute("POST", "/customers", content=b"<Customer/>")

    assert response.status_code == 201
    assert response.reason_phrase == "Created"
    assert response.content == b"<ok/>"
    assert response.url == f"{BASE_URL}/customers"
    assert response.is_success is True
    assert handler.last.content == b"<Customer/>"


def test_execute_keeps_query_pair_order():
    handler = RecordingHandler(httpx.Response(200))
    build_sync_transport(handler).execute("GET", "customers", params=(("b", "2"), ("a", "1")))
    assert handler.last.url.query == b"b=2&a=1"


def test_execute_captures_request_error():
    handler = RecordingHandler(httpx.ReadTimeout("read timed out"))
    response = build_sync_transport(handler).execute("GET", "/customers")

    assert response.status_code == 0
    assert response.error_message == "read timed out"
    assert isinstance(response.error, httpx.ReadTimeout)
    assert response.url == f"{BASE_URL}/customers"
    assert response.is_success is False


def test_execute_does_not_capture_programming_errors():
    handler = RecordingHandler(RuntimeError("boom"))
    with pytest.raises(RuntimeError):
        build_sync_transport(handler).execute("GET", "/customers")


def test_execute_after_close_raises():
    transport = build_sync_transport(RecordingHandler(httpx.Response(200)))
    transport.close()
    transport.close()
    with pytest.raises(ClientClosedError):
        transport.execute("GET", "/customers")


def test_per_request_timeout_overrides_default():
    handler = RecordingHandler(httpx.Response(200))
    build_sync_transport(handler).execute("POST", "/customers", timeout=20.0)
    assert handler.last.extensions["timeout"] == {
        "connect": 20.0,
        "read": 20.0,
        "write": 20.0,
        "pool": 20.0,
    }


def test_default_timeout_comes_from_config():
    timeout = build_default_timeout(build_config())
    assert timeout.connect == 5.0
    assert timeout.read == 30.0


def test_resolve_url_joins_without_double_slash():
    assert resolve_url("https://api.example.com/v1/", "/customers") == "https://api.example.com/v1/customers"


def test_transport_can_initialize_and_close_with_real_httpx_client():
    transport = SyncTransport(build_config())
    assert transport.base_url == BASE_URL
    transport.close()
