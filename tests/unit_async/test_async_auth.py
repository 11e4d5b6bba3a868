from __future__ import annotations

import httpx
import pytest

from restify.async_auth import AsyncAuthorizer
from restify.core.errors import ApiAccessError
from restify.credentials import Credential, RequestToken
from tests.shared.transport import RecordingHandler


def _authorizer(handler: RecordingHandler) -> AsyncAuthorizer:
    return AsyncAuthorizer("ck", "cs", client=httpx.AsyncClient(transport=httpx.MockTransport(handler)))


@pytest.mark.asyncio
async def test_async_three_legged_flow():
    handler = RecordingHandler(
        [
            httpx.Response(200, text="oauth_token=rt&oauth_token_secret=rts"),
            httpx.Response(200, text="oauth_token=at&oauth_token_secret=ats"),
        ]
    )
    authorizer = _authorizer(handler)

    request_token = await authorizer.fetch_request_token("https://api.example.com/oauth/request_token")
    credential = await authorizer.fetch_access_token(
        "https://api.example.com/oauth/access_token",
        request_token,
        verifier="v",
    )

    assert request_token == RequestToken("rt", "rts")
    assert credential == Credential("ck", "cs", "at", "ats")
    assert 'oauth_token="rt"' in handler.last.headers["Authorization"]


@pytest.mark.asyncio
async def test_async_token_endpoint_error_status():
    handler = RecordingHandler(httpx.Response(401))
    with pytest.raises(ApiAccessError) as excinfo:
        await _authorizer(handler).authorize_first_party("u", "p", "https://api.example.com/oauth/access_token")
    assert excinfo.value.status_code == 401
