"""Installing manifest requirements and inspecting what they pull in.

Requirement strings follow the manifest convention of optional leading pip
options followed by a PEP 508 requirement, e.g.
``--extra-index-url https://example.org/simple pkg==1.0``.
"""

from __future__ import annotations

import asyncio
import json
import logging
import shlex
import sys
from dataclasses import dataclass
from typing import Any, Iterable

from packaging.requirements import InvalidRequirement, Requirement
from packaging.utils import canonicalize_name

logger = logging.getLogger(__name__)

# pip options that never take a value; every other option consumes the next token
_FLAG_OPTIONS = frozenset(
    {
        "--force-reinstall",
        "--ignore-installed",
        "--no-build-isolation",
        "--no-cache-dir",
        "--no-deps",
        "--pre",
        "--prefer-binary",
        "--upgrade",
        "--user",
    }
)


@dataclass(frozen=True)
class ParsedRequirement:
    raw: str
    install_args: tuple[str, ...]
    requirement: Requirement

    @property
    def name(self) -> str:
        return canonicalize_name(self.requirement.name)


@dataclass(frozen=True)
class CommandResult:
    args: tuple[str, ...]
    returncode: int
    stdout: str
    stderr: str

    @property
    def ok(self) -> bool:
        return self.returncode == 0


def parse_requirement(raw: str) -> ParsedRequirement:
    """Split ``raw`` into pip options and a requirement.

    Raises ``InvalidRequirement`` when the requirement part is not PEP 508.
    """
    options, requirement = _split_options(raw)
    if not requirement:
        raise InvalidRequirement(f"Empty requirement string {raw!r}")
    return ParsedRequirement(
        raw=raw,
        install_args=tuple(options),
        requirement=Requirement(requirement),
    )


def _split_options(raw: str) -> tuple[list[str], str]:
    options: list[str] = []
    rest = raw.strip()
    while rest.startswith("--"):
        option, _, rest = rest.partition(" ")
        rest = rest.lstrip()
        options.append(option)
        if "=" in option or option in _FLAG_OPTIONS or not rest:
            continue
        value, _, rest = rest.partition(" ")
        rest = rest.lstrip()
        options.append(value)
    return options, rest


async def run_command(*args: str, timeout: float) -> CommandResult:
    logger.debug("Running %s", shlex.join(args))
    process = await asyncio.create_subprocess_exec(
        *args,
        stdout=asyncio.subprocess.PIPE,
        stderr=asyncio.subprocess.PIPE,
    )
    try:
        stdout, stderr = await asyncio.wait_for(process.communicate(), timeout)
    except asyncio.TimeoutError:
        process.kill()
        await process.wait()
        raise
    return CommandResult(
        args=tuple(args),
        returncode=process.returncode if process.returncode is not None else -1,
        stdout=stdout.decode(errors="replace"),
        stderr=stderr.decode(errors="replace"),
    )


async def install_requirement(
    requirement: ParsedRequirement,
    *,
    index_url: str,
    extra_index_url: str,
    timeout: float,
    python: str = sys.executable,
) -> CommandResult:
    return await run_command(
        python,
        "-m",
        "pip",
        "--disable-pip-version-check",
        "install",
        "--quiet",
        "--no-warn-script-location",
        "--index-url",
        index_url,
        "--extra-index-url",
        extra_index_url,
        *requirement.install_args,
        str(requirement.requirement),
        timeout=timeout,
    )


async def dependency_tree(
    names: Iterable[str], *, timeout: float, python: str = sys.executable
) -> list[dict[str, Any]]:
    result = await run_command(
        python,
        "-m",
        "pipdeptree",
        "-w",
        "silence",
        "--packages",
        ",".join(names),
        "--json",
        timeout=timeout,
    )
    if not result.ok:
        raise RuntimeError(f"pipdeptree failed with: {result.stderr.strip()}")
    tree = json.loads(result.stdout or "[]")
    if not isinstance(tree, list):
        raise RuntimeError("pipdeptree returned an unexpected document")
    return tree


def installed_package_names(tree: list[dict[str, Any]]) -> set[str]:
    names: set[str] = set()
    for node in tree:
        package = node.get("package") or {}
        if package.get("key"):
            names.add(canonicalize_name(package["key"]))
        for dependency in node.get("dependencies") or []:
            if dependency.get("key"):
                names.add(canonicalize_name(dependency["key"]))
    return names


def stdlib_names() -> frozenset[str]:
    """Standard library module names of the interpreter running the check.

    Requirements are installed into this same interpreter, so it is the
    Python version the collision check targets.
    """
    return frozenset(canonicalize_name(name) for name in sys.stdlib_module_names)


def stdlib_collisions(
    packages: Iterable[str], stdlib: frozenset[str] | None = None
) -> list[str]:
    stdlib = stdlib_names() if stdlib is None else stdlib
    return sorted(name for name in packages if canonicalize_name(name) in stdlib)
