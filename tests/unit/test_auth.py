from __future__ import annotations

import base64
from urllib.parse import parse_qs

import httpx
import pytest

from restify.auth import Authorizer
from restify.auth_shared import build_first_party_form, parse_token_body
from restify.core.errors import ApiAccessError, SerializationError
from restify.credentials import Credential, RequestToken
from tests.shared.transport import RecordingHandler

REQUEST_TOKEN_URL = "https://api.example.com/oauth/request_token"
ACCESS_TOKEN_URL = "https://api.example.com/oauth/access_token"


def _authorizer(handler: RecordingHandler) -> Authorizer:
    return Authorizer("ck", "cs", client=httpx.Client(transport=httpx.MockTransport(handler)))


def test_fetch_request_token_parses_token_pair():
    handler = RecordingHandler(
        httpx.Response(
            200,
            text="oauth_token=rt&oauth_token_secret=rts&oauth_callback_confirmed=true",
        )
    )
    token = _authorizer(handler).fetch_request_token(REQUEST_TOKEN_URL, callback_uri="https://app/cb")

    assert token == RequestToken("rt", "rts", callback_confirmed=True)
    authorization = handler.last.headers["Authorization"]
    assert handler.last.method == "POST"
    assert 'oauth_consumer_key="ck"' in authorization
    assert "oauth_callback=" in authorization


def test_fetch_access_token_signs_with_request_token_and_verifier():
    handler = RecordingHandler(httpx.Response(200, text="oauth_token=at&oauth_token_secret=ats"))
    credential = _authorizer(handler).fetch_access_token(
        ACCESS_TOKEN_URL,
        RequestToken("rt", "rts"),
        verifier="v123",
    )

    assert credential == Credential("ck", "cs", "at", "ats")
    authorization = handler.last.headers["Authorization"]
    assert 'oauth_token="rt"' in authorization
    assert 'oauth_verifier="v123"' in authorization


def test_authorize_first_party_posts_client_auth_form():
    handler = RecordingHandler(httpx.Response(200, text="oauth_token=at&oauth_token_secret=ats"))
    credential = _authorizer(handler).authorize_first_party("ada", "s3cret", ACCESS_TOKEN_URL)

    form = parse_qs(handler.last.content.decode("utf-8"))
    assert credential.access_token == "at"
    assert form["x_auth_username"] == ["ada"]
    assert form["x_auth_password"] == ["s3cret"]
    assert form["x_auth_mode"] == ["client_auth"]
    assert form["ec"] == [base64.b64encode(b"ada s3cret").decode("ascii")]


@pytest.mark.parametrize("status_code", [201, 401, 500])
def test_non_200_token_response_is_access_error(status_code: int):
    handler = RecordingHandler(httpx.Response(status_code, text="oauth_token=at&oauth_token_secret=ats"))
    with pytest.raises(ApiAccessError) as excinfo:
        _authorizer(handler).authorize_first_party("ada", "pw", ACCESS_TOKEN_URL)
    assert excinfo.value.status_code == status_code


def test_token_transport_failure_is_access_error():
    handler = RecordingHandler(httpx.ConnectTimeout("timed out"))
    with pytest.raises(ApiAccessError) as excinfo:
        _authorizer(handler).fetch_request_token(REQUEST_TOKEN_URL)
    assert isinstance(excinfo.value.__cause__, httpx.ConnectTimeout)
    assert excinfo.value.request_url == REQUEST_TOKEN_URL


def test_token_body_without_tokens_is_rejected():
    with pytest.raises(SerializationError):
        parse_token_body(b"error=denied")


def test_first_party_form_encodes_user_and_password():
    form = build_first_party_form("u", "p")
    assert form["ec"] == "dSBw"


def test_authorizer_does_not_close_injected_client():
    client = httpx.Client(transport=httpx.MockTransport(RecordingHandler(httpx.Response(200))))
    with Authorizer("ck", "cs", client=client):
        pass
    assert client.is_closed is False
