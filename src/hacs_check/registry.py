from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Any, Callable, Iterable

from .context import CheckContext

# returns bool, str, CheckMessage, or an awaitable of one of those
CheckFn = Callable[[CheckContext], Any]
IgnoreFn = Callable[[CheckContext], bool]


def never(_context: CheckContext) -> bool:
    return False


class ContextStrategy(str, Enum):
    none = "none"
    repository_metadata = "repository_metadata"


@dataclass(frozen=True)
class CheckDefinition:
    name: str
    description: str
    check: CheckFn
    url: str
    can_skip: bool = True
    neutral: bool = False
    ignore: IgnoreFn = never

    def describe(self, context: CheckContext) -> str:
        try:
            return self.description.format(repository=context.repository)
        except (KeyError, IndexError, ValueError):
            # braces other than {repository} are literal text
            return self.description


@dataclass(frozen=True)
class CheckGroup:
    name: str
    description: str
    checks: tuple[CheckDefinition, ...]
    context: ContextStrategy = ContextStrategy.none

    def __post_init__(self) -> None:
        names = [definition.name for definition in self.checks]
        duplicates = sorted({name for name in names if names.count(name) > 1})
        if duplicates:
            raise ValueError(
                f"Group '{self.name}' declares duplicate checks: {', '.join(duplicates)}"
            )


class CheckRegistry:
    def __init__(self, groups: Iterable[CheckGroup] = ()) -> None:
        self._groups: dict[str, CheckGroup] = {}
        for group in groups:
            self.register_group(group)

    def register_group(self, group: CheckGroup) -> None:
        if group.name in self._groups:
            raise ValueError(f"Group '{group.name}' is already registered.")
        known = set(self.check_names())
        clashes = sorted(d.name for d in group.checks if d.name in known)
        if clashes:
            raise ValueError(f"Check(s) already registered: {', '.join(clashes)}.")
        self._groups[group.name] = group

    def groups(self) -> tuple[CheckGroup, ...]:
        return tuple(self._groups.values())

    def get_group(self, name: str) -> CheckGroup:
        try:
            return self._groups[name]
        except KeyError as exc:
            known = ", ".join(self._groups)
            raise KeyError(f"Unknown group '{name}'. Registered groups: {known}") from exc

    def check_names(self) -> tuple[str, ...]:
        return tuple(
            definition.name
            for group in self._groups.values()
            for definition in group.checks
        )

    def __repr__(self) -> str:
        return f"CheckRegistry(groups={len(self._groups)}, checks={len(self.check_names())})"
