from __future__ import annotations

from ..context import CheckContext
from ..registry import CheckDefinition, CheckGroup, ContextStrategy

_REPOSITORY_URL = "https://hacs.xyz/docs/publish/include#check-repository"
_ARCHIVED_URL = "https://hacs.xyz/docs/publish/include#check-archived"
DEFAULT_REPOSITORY = "hacs/default"


def _data(context: CheckContext) -> dict:
    if context.repository_data is None:
        raise ValueError("Repository metadata has not been fetched.")
    return context.repository_data


def _description_check(context: CheckContext) -> bool:
    return bool(_data(context).get("description"))


def _archived_check(context: CheckContext) -> bool | str:
    return not _data(context).get("archived") or "The repository is archived"


def _topics_check(context: CheckContext) -> bool | str:
    topics = _data(context).get("topics") or []
    return len(topics) > 0 or "The repository is missing topics"


def _issues_check(context: CheckContext) -> bool | str:
    return bool(_data(context).get("has_issues")) or (
        "The repository does not have issues enabled"
    )


def _fork_check(context: CheckContext) -> bool | str:
    return not _data(context).get("fork") or "The repository is a fork"


def _not_default_repository(context: CheckContext) -> bool:
    return context.repository != DEFAULT_REPOSITORY


def repository_group() -> CheckGroup:
    return CheckGroup(
        name="repo",
        description="Repository checks",
        context=ContextStrategy.repository_metadata,
        checks=(
            CheckDefinition(
                name="description",
                description="The repository has a description",
                check=_description_check,
                url=_REPOSITORY_URL,
            ),
            CheckDefinition(
                name="archived",
                description="The repository is not archived",
                check=_archived_check,
                url=_ARCHIVED_URL,
            ),
            CheckDefinition(
                name="topics",
                description="The repository has topics",
                check=_topics_check,
                url=_REPOSITORY_URL,
            ),
            CheckDefinition(
                name="issues",
                description="The repository has issues enabled",
                check=_issues_check,
                url=_REPOSITORY_URL,
            ),
            CheckDefinition(
                name="fork",
                description="The repository is not a fork",
                check=_fork_check,
                url=_REPOSITORY_URL,
                neutral=True,
                ignore=_not_default_repository,
            ),
        ),
    )
