from __future__ import annotations

import asyncio
import inspect
import logging
from typing import Any

from .context import CheckContext
from .models import CheckOutcome
from .registry import CheckDefinition
from .responses import Failed, Passed, to_response

logger = logging.getLogger(__name__)


async def _evaluate(
    definition: CheckDefinition, context: CheckContext, timeout: float | None
) -> Any:
    result = definition.check(context)
    if inspect.isawaitable(result):
        if timeout is None:
            result = await result
        else:
            result = await asyncio.wait_for(result, timeout)
    return result


async def run_check(
    definition: CheckDefinition,
    context: CheckContext,
    *,
    group: str = "",
    ignored: frozenset[str] = frozenset(),
    timeout: float | None = None,
) -> CheckOutcome:
    """Run one check and return its outcome.

    Never raises for faults inside the check: exceptions, timeouts and
    unrecognised return values all become failed outcomes.
    """
    name = definition.name

    if name in ignored and definition.can_skip:
        return CheckOutcome.skipped_result(
            name=name,
            group=group,
            message=f"Ignored check: {name}",
            details={"reason": "ignored"},
        )

    try:
        not_applicable = bool(definition.ignore(context))
    except Exception as exc:
        return CheckOutcome.failed_result(
            name=name,
            group=group,
            message=f"Could not decide whether {name} applies: "
            f"{type(exc).__name__}: {exc}",
            url=definition.url,
            details={"exception_type": type(exc).__name__},
        )
    if not_applicable:
        return CheckOutcome.skipped_result(
            name=name,
            group=group,
            message=f"Check not applicable: {name}",
            details={"reason": "not_applicable"},
        )

    try:
        raw = await _evaluate(definition, context, timeout)
    except asyncio.TimeoutError:
        return CheckOutcome.failed_result(
            name=name,
            group=group,
            message=f"Check {name} timed out after {timeout:g}s",
            url=definition.url,
            details={"reason": "timeout"},
        )
    except Exception as exc:
        logger.debug("Check %s raised", name, exc_info=True)
        return CheckOutcome.failed_result(
            name=name,
            group=group,
            message=f"Check {name} raised {type(exc).__name__}: {exc}",
            url=definition.url,
            details={"exception_type": type(exc).__name__},
        )

    response = to_response(raw)
    if isinstance(response, Passed):
        return CheckOutcome.passed_result(
            name=name,
            group=group,
            message=response.message or definition.describe(context),
        )
    if isinstance(response, Failed):
        # a plain False is always a hard failure, only messages can be neutral
        if response.message is None:
            return CheckOutcome.failed_result(
                name=name,
                group=group,
                message=definition.describe(context),
                url=definition.url,
            )
        if definition.neutral:
            return CheckOutcome.neutral_result(
                name=name, group=group, message=response.message, url=definition.url
            )
        return CheckOutcome.failed_result(
            name=name, group=group, message=response.message, url=definition.url
        )

    # only Indeterminate is left here
    raw_type = type(response.raw).__name__
    return CheckOutcome.failed_result(
        name=name,
        group=group,
        message=f"Unknown check response type: {raw_type}",
        url=definition.url,
        details={"actual": raw_type},
    )
