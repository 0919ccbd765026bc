"""Build service client: request shape and error mapping (httpx MockTransport, no network)."""
import json

import httpx
import pytest

from apps.api.exceptions import BuildServiceException
from apps.api.services.build_client import BuildClient


def _client(handler) -> BuildClient:
    return BuildClient(
        base_url="https://builds.test/",
        api_key="sk_test",
        timeout=5.0,
        transport=httpx.MockTransport(handler),
    )


async def _build(client: BuildClient):
    return await client.build_image_from_github(
        dockerfile="FROM node:18\n",
        dockerignore="node_modules\n",
        token="ghs_token",
        repository="acme/web",
        branch="main",
    )


@pytest.mark.asyncio
async def test_build_posts_expected_body_and_returns_build_id():
    seen = {}

    def handler(request: httpx.Request) -> httpx.Response:
        seen["method"] = request.method
        seen["url"] = str(request.url)
        seen["auth"] = request.headers.get("Authorization")
        seen["body"] = json.loads(request.content)
        return httpx.Response(200, json={"buildId": "bld_42"})

    client = _client(handler)
    result = await _build(client)
    await client.close()

    assert result.build_id == "bld_42"
    assert seen["method"] == "POST"
    assert seen["url"] == "https://builds.test/v1/images/github"
    assert seen["auth"] == "Bearer sk_test"
    assert seen["body"] == {
        "dockerfile": "FROM node:18\n",
        "dockerignore": "node_modules\n",
        "token": "ghs_token",
        "repository": "acme/web",
        "branch": "main",
    }


@pytest.mark.asyncio
async def test_build_without_api_key_sends_no_auth_header():
    seen = {}

    def handler(request: httpx.Request) -> httpx.Response:
        seen["auth"] = request.headers.get("Authorization")
        return httpx.Response(200, json={"buildId": "bld_1"})

    client = BuildClient(base_url="https://builds.test", api_key="", transport=httpx.MockTransport(handler))
    await _build(client)
    await client.close()

    assert seen["auth"] is None


@pytest.mark.asyncio
async def test_build_error_status_raises():
    client = _client(lambda request: httpx.Response(422, json={"error": "bad dockerfile"}))
    with pytest.raises(BuildServiceException) as exc_info:
        await _build(client)
    await client.close()

    assert exc_info.value.status_code == 502
    assert exc_info.value.details == {"upstream_status": 422}


@pytest.mark.asyncio
async def test_build_missing_build_id_raises():
    client = _client(lambda request: httpx.Response(200, json={"status": "queued"}))
    with pytest.raises(BuildServiceException):
        await _build(client)
    await client.close()


@pytest.mark.asyncio
async def test_build_invalid_json_raises():
    client = _client(lambda request: httpx.Response(200, text="<html>oops</html>"))
    with pytest.raises(BuildServiceException):
        await _build(client)
    await client.close()


@pytest.mark.asyncio
async def test_build_transport_error_raises():
    def handler(request: httpx.Request) -> httpx.Response:
        raise httpx.ConnectError("connection refused", request=request)

    client = _client(handler)
    with pytest.raises(BuildServiceException) as exc_info:
        await _build(client)
    await client.close()

    assert "unreachable" in exc_info.value.message
