"""Minimal asynchronous client for the GitHub REST endpoints a run needs."""

from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Any

import httpx

from .config import DEFAULT_API_URL
from .errors import GitHubError

logger = logging.getLogger(__name__)

# topics are only returned with the mercy preview media type on older servers
_ACCEPT = "application/vnd.github.mercy-preview+json"
_PER_PAGE = 100


class GitHubClient:
    def __init__(
        self,
        token: str | None = None,
        *,
        api_url: str = DEFAULT_API_URL,
        timeout: float = 30.0,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        headers = {"Accept": _ACCEPT, "User-Agent": "hacs-check"}
        if token:
            headers["Authorization"] = f"Bearer {token}"
        self._client = httpx.AsyncClient(
            base_url=api_url.rstrip("/"),
            headers=headers,
            timeout=timeout,
            transport=transport,
        )
        # registry probes go to other hosts and must not carry the token
        self._external = httpx.AsyncClient(
            headers={"User-Agent": "hacs-check"},
            timeout=timeout,
            transport=transport,
        )

    async def __aenter__(self) -> GitHubClient:
        return self

    async def __aexit__(self, *exc_info: object) -> None:
        await self.aclose()

    async def aclose(self) -> None:
        await self._client.aclose()
        await self._external.aclose()

    async def _request(self, method: str, url: str, **kwargs: Any) -> httpx.Response:
        response = await self._client.request(method, url, **kwargs)
        if response.is_error:
            try:
                detail = response.json().get("message", response.reason_phrase)
            except (ValueError, AttributeError):
                detail = response.reason_phrase
            raise GitHubError(
                f"{method} {response.request.url} returned "
                f"{response.status_code}: {detail}",
                status_code=response.status_code,
            )
        return response

    async def get_repository(self, owner: str, repo: str) -> dict[str, Any]:
        response = await self._request("GET", f"/repos/{owner}/{repo}")
        return response.json()

    async def list_issue_comments(
        self, owner: str, repo: str, number: int
    ) -> list[dict[str, Any]]:
        comments: list[dict[str, Any]] = []
        url: str | None = f"/repos/{owner}/{repo}/issues/{number}/comments"
        params: dict[str, Any] | None = {"per_page": _PER_PAGE}
        while url is not None:
            response = await self._request("GET", url, params=params)
            comments.extend(response.json())
            # the next link already carries the query string
            url = response.links.get("next", {}).get("url")
            params = None
        return comments

    async def create_issue_comment(
        self, owner: str, repo: str, number: int, body: str
    ) -> dict[str, Any]:
        response = await self._request(
            "POST",
            f"/repos/{owner}/{repo}/issues/{number}/comments",
            json={"body": body},
        )
        return response.json()

    async def update_issue_comment(
        self, owner: str, repo: str, comment_id: int, body: str
    ) -> dict[str, Any]:
        response = await self._request(
            "PATCH",
            f"/repos/{owner}/{repo}/issues/comments/{comment_id}",
            json={"body": body},
        )
        return response.json()

    async def head_ok(self, url: str) -> bool:
        """HEAD an arbitrary URL; True when it answers with a 2xx status.

        Transport errors propagate as ``httpx.HTTPError``.
        """
        response = await self._external.head(url, follow_redirects=True)
        logger.debug("HEAD %s -> %s", url, response.status_code)
        return response.is_success


def load_event_payload(path: Path | None) -> Any:
    if path is None or not Path(path).is_file():
        return {}
    return json.loads(Path(path).read_text(encoding="utf-8"))


def pull_request_number(payload: dict[str, Any]) -> int | None:
    pull_request = payload.get("pull_request")
    if not isinstance(pull_request, dict):
        return None
    number = pull_request.get("number")
    return number if isinstance(number, int) else None
