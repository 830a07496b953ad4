from __future__ import annotations

import asyncio
import json

import httpx
import pytest

from hacs_check.errors import GitHubError
from hacs_check.github import GitHubClient, load_event_payload, pull_request_number

API = "https://api.github.test"


def _client(handler) -> GitHubClient:
    return GitHubClient("secret", api_url=API, transport=httpx.MockTransport(handler))


def test_get_repository_sends_token_and_preview_header() -> None:
    seen: list[httpx.Request] = []

    def handler(request: httpx.Request) -> httpx.Response:
        seen.append(request)
        return httpx.Response(200, json={"full_name": "owner/repo"})

    async def scenario():
        async with _client(handler) as client:
            return await client.get_repository("owner", "repo")

    data = asyncio.run(scenario())

    assert data == {"full_name": "owner/repo"}
    assert seen[0].url.path == "/repos/owner/repo"
    assert seen[0].headers["Authorization"] == "Bearer secret"
    assert "mercy-preview" in seen[0].headers["Accept"]


def test_errors_raise_github_error() -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(404, json={"message": "Not Found"})

    async def scenario():
        async with _client(handler) as client:
            await client.get_repository("owner", "missing")

    with pytest.raises(GitHubError, match="404: Not Found") as excinfo:
        asyncio.run(scenario())
    assert excinfo.value.status_code == 404


def test_list_issue_comments_follows_pagination() -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        if request.url.params.get("page") == "2":
            return httpx.Response(200, json=[{"id": 2, "body": "second"}])
        next_url = f"{API}/repos/owner/repo/issues/7/comments?per_page=100&page=2"
        return httpx.Response(
            200,
            json=[{"id": 1, "body": "first"}],
            headers={"Link": f'<{next_url}>; rel="next"'},
        )

    async def scenario():
        async with _client(handler) as client:
            return await client.list_issue_comments("owner", "repo", 7)

    comments = asyncio.run(scenario())

    assert [comment["id"] for comment in comments] == [1, 2]


def test_head_ok_does_not_leak_token() -> None:
    seen: list[httpx.Request] = []

    def handler(request: httpx.Request) -> httpx.Response:
        seen.append(request)
        return httpx.Response(404)

    async def scenario():
        async with _client(handler) as client:
            return await client.head_ok("https://example.org/brands/demo")

    assert asyncio.run(scenario()) is False
    assert seen[0].method == "HEAD"
    assert "Authorization" not in seen[0].headers


def test_pull_request_number_from_event_file(tmp_path) -> None:
    event = tmp_path / "event.json"
    event.write_text(json.dumps({"pull_request": {"number": 12}}))

    assert pull_request_number(load_event_payload(event)) == 12
    assert pull_request_number(load_event_payload(tmp_path / "missing.json")) is None
    assert pull_request_number({"ref": "refs/heads/main"}) is None
