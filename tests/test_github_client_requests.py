"""GitHub client request construction tests."""

from __future__ import annotations

import json

import httpx
import pytest
from github_milestones_mcp.config import LimitsConfig
from github_milestones_mcp.github_client import GitHubClient


def _client(handler) -> GitHubClient:  # noqa: ANN001
    return GitHubClient(
        token="tok",
        limits=LimitsConfig(),
        user_agent="github-milestones-mcp/test",
        transport=httpx.MockTransport(handler),
    )


@pytest.mark.asyncio
async def test_github_client_sends_auth_and_identification_headers() -> None:
    seen: dict[str, object] = {}

    def handler(request: httpx.Request) -> httpx.Response:
        seen["url"] = str(request.url)
        seen["auth"] = request.headers.get("Authorization")
        seen["agent"] = request.headers.get("User-Agent")
        seen["accept"] = request.headers.get("Accept")
        seen["version"] = request.headers.get("X-GitHub-Api-Version")
        return httpx.Response(200, json={"number": 1})

    out = await _client(handler).request_json(method="GET", path="/repos/acme/widgets/milestones/1")

    assert out == {"number": 1}
    assert seen["url"] == "https://api.github.com/repos/acme/widgets/milestones/1"
    assert seen["auth"] == "Bearer tok"
    assert seen["agent"] == "github-milestones-mcp/test"
    assert seen["accept"] == "application/vnd.github+json"
    assert seen["version"] == "2022-11-28"


@pytest.mark.asyncio
async def test_github_client_encodes_query_params_and_json_body() -> None:
    seen: dict[str, object] = {}

    def handler(request: httpx.Request) -> httpx.Response:
        seen["method"] = request.method
        seen["query"] = dict(request.url.params)
        seen["body"] = json.loads(request.content) if request.content else None
        return httpx.Response(201, json={"number": 9})

    client = _client(handler)
    _ = await client.request_json(
        method="POST",
        path="/repos/acme/widgets/milestones",
        params={"page": 2},
        json_body={"title": "v1.0"},
    )

    assert seen["method"] == "POST"
    assert seen["query"] == {"page": "2"}
    assert seen["body"] == {"title": "v1.0"}


@pytest.mark.asyncio
async def test_github_client_returns_none_for_no_content() -> None:
    def handler(_request: httpx.Request) -> httpx.Response:
        return httpx.Response(204)

    out = await _client(handler).request_json(method="DELETE", path="/repos/acme/widgets/milestones/7")
    assert out is None


@pytest.mark.asyncio
async def test_github_client_returns_lists_as_is() -> None:
    def handler(_request: httpx.Request) -> httpx.Response:
        return httpx.Response(200, json=[{"number": 1}, {"number": 2}])

    out = await _client(handler).request_json(method="GET", path="/repos/acme/widgets/milestones")
    assert out == [{"number": 1}, {"number": 2}]


def test_github_client_repr_does_not_leak_token() -> None:
    client = GitHubClient(token="super-secret-value", limits=LimitsConfig())
    assert "super-secret-value" not in repr(client)
