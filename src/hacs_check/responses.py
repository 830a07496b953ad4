"""Response variants a check function's return value is coerced into.

Check functions return ``True``/``False``, a failure message string, or a
:class:`CheckMessage`. :func:`to_response` turns that raw value into exactly
one of :class:`Passed`, :class:`Failed` or :class:`Indeterminate` so the
executor only ever deals with these three shapes.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any


@dataclass(frozen=True)
class CheckMessage:
    passed: bool
    message: str


@dataclass(frozen=True)
class Passed:
    message: str | None = None


@dataclass(frozen=True)
class Failed:
    message: str | None = None


@dataclass(frozen=True)
class Indeterminate:
    raw: Any


CheckResponse = Passed | Failed | Indeterminate


def to_response(raw: Any) -> CheckResponse:
    # bool first, a bare ``True`` carries no message of its own
    if isinstance(raw, bool):
        return Passed() if raw else Failed()
    if isinstance(raw, str):
        return Failed(message=raw)
    if isinstance(raw, CheckMessage):
        if raw.passed:
            return Passed(message=raw.message)
        return Failed(message=raw.message)
    return Indeterminate(raw=raw)
