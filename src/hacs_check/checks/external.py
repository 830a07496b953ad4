from __future__ import annotations

import logging

import httpx

from ..context import CheckContext
from ..registry import CheckDefinition, CheckGroup
from .manifest import requirements_not_applicable

logger = logging.getLogger(__name__)

_BRANDS_URL = "https://hacs.xyz/docs/publish/include#check-brands"
_WHEELS_URL = "https://hacs.xyz/docs/publish/include#check-wheels"

BRANDS_REPOSITORY = "https://github.com/home-assistant/brands"
BRANDS_TEMPLATE = (
    "https://github.com/home-assistant/brands/tree/master/custom_integrations/{domain}"
)
WHEELS_REPOSITORY = "https://github.com/home-assistant/wheels-custom-integrations"
WHEELS_TEMPLATE = (
    "https://raw.githubusercontent.com/home-assistant/"
    "wheels-custom-integrations/master/components/{domain}.json"
)


def _manifest_domain(context: CheckContext, purpose: str) -> tuple[str | None, str | None]:
    manifest = context.files.manifest
    if manifest is None:
        return None, f"manifest.json file not found, cannot check {purpose}"
    domain = manifest.get("domain")
    if not domain:
        return None, f"domain missing from manifest.json, cannot check {purpose}"
    return str(domain), None


async def check_url(context: CheckContext, url: str) -> bool | str:
    if context.client is None:
        raise RuntimeError("No HTTP client available for external checks.")
    try:
        return await context.client.head_ok(url)
    except httpx.HTTPError as exc:
        logger.error("Failed checking %s: %s", url, exc)
        return f"Failed checking {url}: {exc}"


async def _brands_check(context: CheckContext) -> bool | str:
    domain, problem = _manifest_domain(context, "brands")
    if domain is None:
        return problem
    reachable = await check_url(context, BRANDS_TEMPLATE.format(domain=domain))
    if reachable is True:
        return True
    if isinstance(reachable, str):
        return reachable
    return f"{domain} is not added to the custom_integrations directory in {BRANDS_REPOSITORY}"


async def _wheels_check(context: CheckContext) -> bool | str:
    domain, problem = _manifest_domain(context, "wheels")
    if domain is None:
        return problem
    reachable = await check_url(context, WHEELS_TEMPLATE.format(domain=domain))
    if reachable is True:
        return True
    if isinstance(reachable, str):
        return reachable
    return f"{domain} is not added to {WHEELS_REPOSITORY}"


def _not_integration(context: CheckContext) -> bool:
    return context.category != "integration"


def external_group() -> CheckGroup:
    return CheckGroup(
        name="external",
        description="External repo checks",
        checks=(
            CheckDefinition(
                name="brands",
                description="{repository} is added to " + BRANDS_REPOSITORY,
                check=_brands_check,
                url=_BRANDS_URL,
                ignore=_not_integration,
            ),
            CheckDefinition(
                name="wheels",
                description="Python wheels are available for the requirements",
                check=_wheels_check,
                url=_WHEELS_URL,
                ignore=requirements_not_applicable,
            ),
        ),
    )
