"""Runs check groups against a repository and collects their outcomes.

Groups run concurrently, and so do the checks inside a group. A group that
needs repository metadata fetches it once up front; if that fetch fails the
whole group is reported as a single failed outcome. A group that blows up
for any other reason is isolated the same way, so every other group still
gets to report.
"""

from __future__ import annotations

import asyncio
import logging

import httpx

from .config import Settings
from .context import CheckContext, RunContext, load_repository_files
from .defaults import default_registry
from .errors import GitHubError
from .executor import run_check
from .github import GitHubClient
from .models import CheckOutcome, RunReport
from .registry import CheckDefinition, CheckGroup, CheckRegistry, ContextStrategy
from .reporting import Reporter

logger = logging.getLogger(__name__)


async def _resolve_context(group: CheckGroup, context: CheckContext) -> CheckContext:
    if group.context == ContextStrategy.repository_metadata:
        if context.client is None:
            raise RuntimeError("A GitHub client is required to fetch repository metadata.")
        owner, repo = context.repository.split("/", 1)
        data = await context.client.get_repository(owner, repo)
        return context.with_repository_data(data)
    return context


async def run_group(
    group: CheckGroup,
    context: CheckContext,
    reporter: Reporter,
    *,
    timeout: float | None = None,
) -> list[CheckOutcome]:
    try:
        group_context = await _resolve_context(group, context)
    except (GitHubError, httpx.HTTPError, RuntimeError, ValueError) as exc:
        outcome = CheckOutcome.failed_result(
            name=group.name,
            group=group.name,
            message=f"Failed to process {group.name} check: {exc}",
            details={"reason": "context_fetch_failed"},
        )
        reporter.add(outcome)
        return [outcome]

    async def _run_and_report(definition: CheckDefinition) -> CheckOutcome:
        outcome = await run_check(
            definition,
            group_context,
            group=group.name,
            ignored=context.run.ignored,
            timeout=timeout,
        )
        reporter.add(outcome)
        return outcome

    settled = await asyncio.gather(
        *(_run_and_report(d) for d in group.checks), return_exceptions=True
    )
    outcomes: list[CheckOutcome] = []
    for definition, result in zip(group.checks, settled):
        if isinstance(result, BaseException):
            if not isinstance(result, Exception):
                raise result
            logger.debug("Check %s raised", definition.name, exc_info=result)
            result = CheckOutcome.failed_result(
                name=definition.name,
                group=group.name,
                message=f"Check {definition.name} raised "
                f"{type(result).__name__}: {result}",
                url=definition.url,
                details={"exception_type": type(result).__name__},
            )
            reporter.add(result)
        outcomes.append(result)
    return outcomes


async def run_groups(
    registry: CheckRegistry,
    context: CheckContext,
    reporter: Reporter,
    *,
    timeout: float | None = None,
) -> list[CheckOutcome]:
    groups = registry.groups()
    settled = await asyncio.gather(
        *(run_group(group, context, reporter, timeout=timeout) for group in groups),
        return_exceptions=True,
    )

    outcomes: list[CheckOutcome] = []
    for group, result in zip(groups, settled):
        if isinstance(result, BaseException):
            if not isinstance(result, Exception):
                raise result
            logger.debug("Group %s raised", group.name, exc_info=result)
            outcome = CheckOutcome.failed_result(
                name=group.name,
                group=group.name,
                message=f"Something went wrong when processing the "
                f"{group.description}: {result}",
                details={"exception_type": type(result).__name__},
            )
            reporter.add(outcome)
            outcomes.append(outcome)
        else:
            outcomes.extend(result)
    return outcomes


async def validate_repository(
    settings: Settings,
    *,
    registry: CheckRegistry | None = None,
    client: GitHubClient | None = None,
    reporter: Reporter | None = None,
) -> RunReport:
    run_context = RunContext.from_settings(settings)
    reporter = reporter or Reporter(
        repository=settings.repository, category=settings.category
    )
    files = load_repository_files(run_context.workspace)
    owns_client = client is None
    if client is None:
        client = GitHubClient(
            settings.github_token,
            api_url=settings.api_url,
            timeout=settings.http_timeout,
        )
    try:
        context = CheckContext(run=run_context, files=files, client=client)
        await run_groups(
            registry or default_registry(),
            context,
            reporter,
            timeout=settings.check_timeout,
        )
    finally:
        if owns_client:
            await client.aclose()
    return reporter.report()
