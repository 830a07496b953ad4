from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Any

import httpx

from .errors import GitHubError, PublishError
from .github import GitHubClient
from .models import CheckOutcome, OutcomeStatus, RunReport, RunSummary

logger = logging.getLogger(__name__)

COMMENT_MARKER = "<!-- Faster HACS action comment -->"
COMMENT_HEADER = "🎉 **Faster HACS repository validator action summary** 🎉\n"
COMMENT_FOOTER = (
    "\nThis check was completed with https://github.com/TheRealWaldo/faster-hacs-action "
    "which is designed to rapidly assess your HACS addon. If this is a release, "
    "we still recommend you use the official https://github.com/hacs/action/ action!"
)


class Reporter:
    """Collects outcomes in the order checks finish.

    Appends happen on the event loop thread only, so no locking is needed.
    """

    def __init__(self, *, repository: str = "", category: str = "") -> None:
        self.repository = repository
        self.category = category
        self._outcomes: list[CheckOutcome] = []

    def add(self, outcome: CheckOutcome) -> None:
        self._outcomes.append(outcome)
        if outcome.not_applicable:
            logger.debug(outcome.message)
        elif outcome.status == OutcomeStatus.failed:
            logger.error(outcome.render())
        else:
            logger.info(outcome.render())

    @property
    def outcomes(self) -> tuple[CheckOutcome, ...]:
        return tuple(self._outcomes)

    def summary(self) -> RunSummary:
        return RunSummary.from_outcomes(self._outcomes)

    def report(self) -> RunReport:
        outcomes = list(self._outcomes)
        return RunReport(
            repository=self.repository,
            category=self.category,
            outcomes=outcomes,
            summary=RunSummary.from_outcomes(outcomes),
        )

    def render(self) -> list[str]:
        return [outcome.render() for outcome in self._outcomes if not outcome.not_applicable]

    def comment_body(self) -> str:
        return "\n".join([COMMENT_MARKER, COMMENT_HEADER, *self.render(), COMMENT_FOOTER])


def report_to_dict(report: RunReport | dict[str, Any]) -> dict[str, Any]:
    if isinstance(report, RunReport):
        return report.to_dict()
    return report


def save_json_report(report: RunReport, path: str | Path) -> Path:
    target = Path(path)
    target.parent.mkdir(parents=True, exist_ok=True)
    target.write_text(
        json.dumps(report_to_dict(report), indent=2, ensure_ascii=False) + "\n",
        encoding="utf-8",
    )
    return target


async def publish_report(
    reporter: Reporter,
    client: GitHubClient,
    repository: str,
    pull_request: int,
) -> dict[str, Any]:
    """Create the summary comment, or update the one a previous run left."""
    owner, repo = repository.split("/", 1)
    body = reporter.comment_body()
    try:
        comments = await client.list_issue_comments(owner, repo, pull_request)
        existing = next(
            (item for item in comments if COMMENT_MARKER in (item.get("body") or "")),
            None,
        )
        if existing is not None:
            logger.info("Updating pull request comment %s", existing["id"])
            return await client.update_issue_comment(owner, repo, existing["id"], body)
        logger.info("Creating pull request comment on #%s", pull_request)
        return await client.create_issue_comment(owner, repo, pull_request, body)
    except (GitHubError, httpx.HTTPError) as exc:
        raise PublishError(f"Posting pull request comment failed with {exc}") from exc
