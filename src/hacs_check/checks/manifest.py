from __future__ import annotations

import logging

from packaging.requirements import InvalidRequirement

from .. import requirements as reqs
from ..context import CheckContext
from ..registry import CheckDefinition, CheckGroup

logger = logging.getLogger(__name__)

_MANIFEST_URL = "https://hacs.xyz/docs/publish/include#check-manifest"
_HACS_MANIFEST_URL = "https://hacs.xyz/docs/publish/include#check-hacs-manifest"
_REQUIREMENTS_URL = "https://hacs.xyz/docs/publish/include#check-requirements"

REQUIRED_MANIFEST_KEYS = (
    "issue_tracker",
    "domain",
    "documentation",
    "codeowners",
    "version",
)


def _manifest_check(context: CheckContext) -> bool | str:
    files = context.files
    if files.manifest_error is not None:
        return f"manifest.json could not be parsed: {files.manifest_error}"
    if files.manifest is None:
        return "manifest.json file not found"
    missing = [key for key in REQUIRED_MANIFEST_KEYS if key not in files.manifest]
    if missing:
        return f"manifest.json is missing the key(s): {', '.join(missing)}"
    return True


def _hacs_json_check(context: CheckContext) -> bool | str:
    files = context.files
    if files.hacs_error is not None:
        return f"hacs.json could not be parsed: {files.hacs_error}"
    if files.hacs_config is None:
        return "hacs.json file not found in the root of the repository"
    return bool(files.hacs_config.get("name")) or "Missing 'name' from hacs.json"


async def _requirements_check(context: CheckContext) -> bool | str:
    run = context.run
    failed: list[str] = []
    parsed: list[reqs.ParsedRequirement] = []
    for raw in context.files.requirements:
        try:
            requirement = reqs.parse_requirement(raw)
        except InvalidRequirement as exc:
            logger.error("Could not parse requirement %r: %s", raw, exc)
            failed.append(raw)
            continue
        try:
            result = await reqs.install_requirement(
                requirement,
                index_url=run.wheels_index,
                extra_index_url=run.extra_index,
                timeout=run.pip_timeout,
            )
        except TimeoutError:
            logger.error("pip timed out installing %s", raw)
            failed.append(raw)
            continue
        if not result.ok:
            logger.error("pip failed with: %s", result.stderr.strip())
            failed.append(raw)
            continue
        parsed.append(requirement)

    if failed:
        return f"These requirement(s) failed to parse or install: {', '.join(failed)}"
    if not parsed:
        return "Something went wrong while checking requirements"

    tree = await reqs.dependency_tree(
        [requirement.name for requirement in parsed], timeout=run.pip_timeout
    )
    collisions = reqs.stdlib_collisions(reqs.installed_package_names(tree))
    if collisions:
        return (
            f"Packages: {', '.join(collisions)} are not compatible "
            "with Python standard libraries"
        )
    return True


def requirements_not_applicable(context: CheckContext) -> bool:
    return context.category != "integration" or not context.files.requirements


def json_group() -> CheckGroup:
    return CheckGroup(
        name="json",
        description="JSON contents checks",
        checks=(
            CheckDefinition(
                name="manifest",
                description="All required keys are present in manifest.json",
                check=_manifest_check,
                url=_MANIFEST_URL,
                can_skip=False,
            ),
            CheckDefinition(
                name="hacsjson",
                description="hacs.json has the 'name' key set",
                check=_hacs_json_check,
                url=_HACS_MANIFEST_URL,
            ),
            CheckDefinition(
                name="requirements",
                description="Requirements validation",
                check=_requirements_check,
                url=_REQUIREMENTS_URL,
                ignore=requirements_not_applicable,
            ),
        ),
    )
