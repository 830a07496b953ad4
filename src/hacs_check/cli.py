from __future__ import annotations

import asyncio
import logging

from pydantic import ValidationError

from .config import Settings
from .errors import PublishError
from .github import GitHubClient, load_event_payload, pull_request_number
from .log import configure_logging
from .orchestrator import validate_repository
from .reporting import Reporter, publish_report, save_json_report

logger = logging.getLogger(__name__)


async def _publish(settings: Settings, reporter: Reporter, client: GitHubClient) -> bool:
    try:
        payload = load_event_payload(settings.event_path)
    except (OSError, ValueError) as exc:
        logger.error("Could not read event payload %s: %s", settings.event_path, exc)
        return False
    if not isinstance(payload, dict):
        logger.error("Event payload %s is not a JSON object", settings.event_path)
        return False
    number = pull_request_number(payload)
    if number is None:
        logger.info("Not running for a pull request, skipping the summary comment")
        return True
    try:
        await publish_report(reporter, client, settings.repository, number)
    except PublishError as exc:
        logger.error(str(exc))
        return False
    return True


async def run(settings: Settings, *, client: GitHubClient | None = None) -> int:
    """Validate the repository described by ``settings``; returns an exit code."""
    logger.info("Firing from %s on %s", settings.event_name or "unknown event", settings.ref)
    owns_client = client is None
    if client is None:
        client = GitHubClient(
            settings.github_token,
            api_url=settings.api_url,
            timeout=settings.http_timeout,
        )
    reporter = Reporter(repository=settings.repository, category=settings.category)
    try:
        report = await validate_repository(settings, client=client, reporter=reporter)
        summary = report.summary
        logger.info(
            "%d checks: %d passed, %d failed, %d neutral, %d skipped",
            summary.checks_run,
            summary.passed,
            summary.failed,
            summary.neutral,
            summary.skipped,
        )
        if settings.report_file is not None:
            path = save_json_report(report, settings.report_file)
            logger.info("Wrote report to %s", path)

        exit_code = 0 if report.ok else 1
        if settings.comment and not await _publish(settings, reporter, client):
            exit_code = 1
        return exit_code
    finally:
        if owns_client:
            await client.aclose()


def main() -> int:
    try:
        settings = Settings()
    except ValidationError as exc:
        configure_logging()
        logger.error("Invalid configuration: %s", exc)
        return 2
    configure_logging(settings.log_level)
    return asyncio.run(run(settings))


if __name__ == "__main__":
    raise SystemExit(main())
