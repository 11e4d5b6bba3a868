from __future__ import annotations

import httpx
import pytest

from restify.core.errors import ApiAccessError
from restify.resource_set import ResourceSet
from tests.shared.payloads import FULL_URLS, Customer, customer_xml
from tests.shared.transport import RecordingHandler, build_config, build_sync_transport


def _resource_set(handler: RecordingHandler) -> ResourceSet[Customer]:
    config = build_config()
    return ResourceSet(Customer, config, FULL_URLS, transport=build_sync_transport(handler, config))


@pytest.mark.parametrize("status_code", [200, 201, 202, 300])
def test_get_accepts_statuses_up_to_300(status_code: int):
    handler = RecordingHandler(httpx.Response(status_code, content=customer_xml("1")))
    assert _resource_set(handler).get("1").id == "1"


@pytest.mark.parametrize("status_code", [301, 302, 400, 401, 403, 404, 409, 500, 503])
def test_get_raises_for_statuses_above_300(status_code: int):
    handler = RecordingHandler(httpx.Response(status_code, content=customer_xml("1")))
    with pytest.raises(ApiAccessError) as excinfo:
        _resource_set(handler).get("1")
    assert excinfo.value.status_code == status_code
    assert handler.calls == 1


@pytest.mark.parametrize(
    ("status_code", "expected"),
    [(200, True), (202, True), (204, True), (299, True), (300, False)],
)
def test_delete_success_flag_follows_status(status_code: int, expected: bool):
    handler = RecordingHandler(httpx.Response(status_code))
    assert _resource_set(handler).delete("1") is expected


@pytest.mark.parametrize(
    ("status_code", "expected"),
    [(201, True), (300, False)],
)
def test_file_upload_success_flag_follows_status(status_code: int, expected: bool):
    handler = RecordingHandler(httpx.Response(status_code))
    assert _resource_set(handler).create_file(b"x") is expected


def test_failed_request_is_not_retried():
    handler = RecordingHandler([httpx.Response(503), httpx.Response(200, content=customer_xml())])
    with pytest.raises(ApiAccessError):
        _resource_set(handler).get("1")
    assert handler.calls == 1
