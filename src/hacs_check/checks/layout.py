"""Category specific repository layout rules.

Each category maps to an ordered tuple of :class:`LayoutRule`. The first
rule a repository violates decides the failure message, so adding or
changing a category only touches :data:`LAYOUT_RULES`.
"""

from __future__ import annotations

import glob
from dataclasses import dataclass
from enum import Enum
from pathlib import Path
from typing import Literal

from ..context import CheckContext
from ..registry import CheckDefinition, CheckGroup

_HACS_URL = "https://hacs.xyz/docs/publish/include#check-hacs"

PathKind = Literal["file", "dir"]


class Category(str, Enum):
    appdaemon = "appdaemon"
    integration = "integration"
    netdaemon = "netdaemon"
    plugin = "plugin"
    python_script = "python_script"
    themes = "themes"


class Expectation(str, Enum):
    none = "none"
    exactly_one = "exactly_one"
    at_least_one = "at_least_one"


@dataclass(frozen=True)
class LayoutRule:
    patterns: tuple[str, ...]
    expect: Expectation
    message: str
    kind: PathKind = "file"

    def matches(self, root: Path, repo: str = "") -> list[Path]:
        found: set[Path] = set()
        for pattern in self.patterns:
            for path in root.glob(pattern.format(repo=glob.escape(repo))):
                relative = path.relative_to(root)
                if any(part.startswith(".") for part in relative.parts):
                    continue
                if self.kind == "dir" and not path.is_dir():
                    continue
                if self.kind == "file" and not path.is_file():
                    continue
                found.add(relative)
        return sorted(found)

    def is_satisfied(self, root: Path, repo: str = "") -> bool:
        count = len(self.matches(root, repo))
        if self.expect == Expectation.none:
            return count == 0
        if self.expect == Expectation.exactly_one:
            return count == 1
        return count > 0


def _none(pattern: str, message: str) -> LayoutRule:
    return LayoutRule(patterns=(pattern,), expect=Expectation.none, message=message)


def _app_rules(container: str, extension: str, language: str, noun: str) -> tuple[LayoutRule, ...]:
    return (
        _none(
            f"*.{extension}",
            f"Should not be any {language} files in the root of the repository",
        ),
        _none(
            f"{container}/*.{extension}",
            f"Should not be any {language} files in the {container} directory "
            "of the repository",
        ),
        LayoutRule(
            patterns=(f"{container}/*",),
            expect=Expectation.exactly_one,
            kind="dir",
            message=f"Should only be one {noun} in the {container} directory "
            "of the repository",
        ),
        LayoutRule(
            patterns=(f"{container}/*/*.{extension}",),
            expect=Expectation.at_least_one,
            message=f"The {noun} {language} files are not present in the "
            f"{container}/{noun.upper()}_NAME/ directory of the repository",
        ),
    )


_NO_ROOT_PYTHON = _none("*.py", "Should not be any python files in the root of the repository")

LAYOUT_RULES: dict[Category, tuple[LayoutRule, ...]] = {
    Category.appdaemon: _app_rules("apps", "py", "python", "app"),
    Category.integration: _app_rules(
        "custom_components", "py", "python", "integration"
    ),
    Category.netdaemon: _app_rules("apps", "cs", "cs", "app"),
    Category.plugin: (
        LayoutRule(
            patterns=(
                "{repo}.js",
                "lovelace-{repo}.js",
                "dist/{repo}.js",
                "dist/lovelace-{repo}.js",
            ),
            expect=Expectation.exactly_one,
            message="The plugin should follow the rules at "
            "https://hacs.xyz/docs/publish/plugin",
        ),
    ),
    Category.python_script: (
        _NO_ROOT_PYTHON,
        LayoutRule(
            patterns=("python_scripts/*.py",),
            expect=Expectation.exactly_one,
            message="Should only be one python file in the python_scripts "
            "directory of the repository",
        ),
    ),
    Category.themes: (
        _NO_ROOT_PYTHON,
        LayoutRule(
            patterns=("themes/*.yaml",),
            expect=Expectation.exactly_one,
            message="Should only be one yaml file in the themes directory "
            "of the repository",
        ),
    ),
}


def check_layout(root: Path, category: str, repo: str) -> bool | str:
    try:
        rules = LAYOUT_RULES[Category(category)]
    except ValueError:
        return "Invalid category."
    for rule in rules:
        if not rule.is_satisfied(root, repo):
            return rule.message
    return True


def _hacs_check(context: CheckContext) -> bool | str:
    return check_layout(context.files.root, context.category, context.run.repo_name)


def functionality_group() -> CheckGroup:
    return CheckGroup(
        name="functionality",
        description="Functionality checks",
        checks=(
            CheckDefinition(
                name="hacs",
                description="HACS load-ability check (does not try to load)",
                check=_hacs_check,
                url=_HACS_URL,
            ),
        ),
    )
