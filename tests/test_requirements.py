from __future__ import annotations

import asyncio
import sys

import pytest
from packaging.requirements import InvalidRequirement
from packaging.utils import canonicalize_name

from hacs_check import requirements as reqs
from hacs_check.checks.manifest import json_group
from hacs_check.executor import run_check
from hacs_check.models import OutcomeStatus


def test_parse_requirement_splits_pip_options() -> None:
    parsed = reqs.parse_requirement(
        "--extra-index-url https://example.org/simple Demo_Lib>=1.2"
    )

    assert parsed.install_args == ("--extra-index-url", "https://example.org/simple")
    assert str(parsed.requirement) == "Demo_Lib>=1.2"
    assert parsed.name == "demo-lib"


def test_parse_plain_requirement() -> None:
    parsed = reqs.parse_requirement("aiohttp==3.9.1")

    assert parsed.install_args == ()
    assert parsed.name == "aiohttp"


def test_parse_requirement_rejects_garbage() -> None:
    with pytest.raises(InvalidRequirement):
        reqs.parse_requirement("not a ==requirement!")


def test_installed_package_names_include_dependencies() -> None:
    tree = [
        {
            "package": {"key": "demo-lib", "package_name": "Demo_Lib"},
            "dependencies": [{"key": "typing", "package_name": "typing"}],
        }
    ]

    assert reqs.installed_package_names(tree) == {"demo-lib", "typing"}


def test_stdlib_collisions() -> None:
    assert reqs.stdlib_collisions(["typing", "requests", "asyncio"]) == [
        "asyncio",
        "typing",
    ]


def _requirements_definition():
    return next(d for d in json_group().checks if d.name == "requirements")


def _context_with_requirements(repo_tree, make_context, manifest, requirements):
    manifest["requirements"] = requirements
    root = repo_tree({"custom_components/demo/manifest.json": manifest})
    return make_context(root, category="integration")


def test_requirements_check_passes(
    monkeypatch, repo_tree, make_context, valid_manifest
) -> None:
    installed: list[str] = []

    async def fake_install(requirement, **kwargs):
        installed.append(str(requirement.requirement))
        return reqs.CommandResult(args=(), returncode=0, stdout="", stderr="")

    async def fake_tree(names, **kwargs):
        return [{"package": {"key": name}, "dependencies": []} for name in names]

    monkeypatch.setattr(reqs, "install_requirement", fake_install)
    monkeypatch.setattr(reqs, "dependency_tree", fake_tree)
    context = _context_with_requirements(
        repo_tree, make_context, valid_manifest, ["demo-lib==1.0"]
    )

    outcome = asyncio.run(run_check(_requirements_definition(), context))

    assert installed == ["demo-lib==1.0"]
    assert outcome.status == OutcomeStatus.passed


def test_requirements_check_reports_failed_installs(
    monkeypatch, repo_tree, make_context, valid_manifest
) -> None:
    async def fake_install(requirement, **kwargs):
        return reqs.CommandResult(args=(), returncode=1, stdout="", stderr="no match")

    monkeypatch.setattr(reqs, "install_requirement", fake_install)
    context = _context_with_requirements(
        repo_tree, make_context, valid_manifest, ["missing-lib==9.9", "bad lib==1"]
    )

    outcome = asyncio.run(run_check(_requirements_definition(), context))

    assert outcome.status == OutcomeStatus.failed
    assert outcome.message == (
        "These requirement(s) failed to parse or install: missing-lib==9.9, bad lib==1"
    )


def test_requirements_check_flags_stdlib_packages(
    monkeypatch, repo_tree, make_context, valid_manifest
) -> None:
    async def fake_install(requirement, **kwargs):
        return reqs.CommandResult(args=(), returncode=0, stdout="", stderr="")

    async def fake_tree(names, **kwargs):
        return [
            {
                "package": {"key": "demo-lib"},
                "dependencies": [{"key": "enum"}, {"key": "six"}],
            }
        ]

    monkeypatch.setattr(reqs, "install_requirement", fake_install)
    monkeypatch.setattr(reqs, "dependency_tree", fake_tree)
    context = _context_with_requirements(
        repo_tree, make_context, valid_manifest, ["demo-lib"]
    )

    outcome = asyncio.run(run_check(_requirements_definition(), context))

    assert outcome.status == OutcomeStatus.failed
    assert outcome.message == (
        "Packages: enum are not compatible with Python standard libraries"
    )


def test_install_requirement_builds_pip_command(monkeypatch) -> None:
    seen: dict[str, object] = {}

    async def fake_run(*args, timeout):
        seen["args"] = args
        seen["timeout"] = timeout
        return reqs.CommandResult(args=args, returncode=0, stdout="", stderr="")

    monkeypatch.setattr(reqs, "run_command", fake_run)
    parsed = reqs.parse_requirement("--pre demo-lib>=1")

    asyncio.run(
        reqs.install_requirement(
            parsed,
            index_url="https://wheels.example.org",
            extra_index_url="https://pypi.org/simple",
            timeout=5.0,
            python="python3",
        )
    )

    args = seen["args"]
    assert args[:4] == ("python3", "-m", "pip", "--disable-pip-version-check")
    assert args[-2:] == ("--pre", "demo-lib>=1")
    assert "https://wheels.example.org" in args
    assert seen["timeout"] == 5.0


def test_dependency_tree_raises_when_pipdeptree_fails(monkeypatch) -> None:
    async def fake_run(*args, timeout):
        return reqs.CommandResult(args=args, returncode=2, stdout="", stderr="boom")

    monkeypatch.setattr(reqs, "run_command", fake_run)

    with pytest.raises(RuntimeError, match="pipdeptree failed"):
        asyncio.run(reqs.dependency_tree(["demo-lib"], timeout=1.0))


def test_option_values_do_not_swallow_the_requirement() -> None:
    parsed = reqs.parse_requirement("--opt x pkg >= 1.0")

    assert parsed.install_args == ("--opt", "x")
    assert parsed.name == "pkg"
    assert str(parsed.requirement.specifier) == ">=1.0"


def test_flag_options_take_no_value() -> None:
    parsed = reqs.parse_requirement("--pre --no-deps demo-lib >= 1")

    assert parsed.install_args == ("--pre", "--no-deps")
    assert parsed.name == "demo-lib"


def test_options_without_requirement_are_rejected() -> None:
    with pytest.raises(InvalidRequirement):
        reqs.parse_requirement("--index-url https://example.org/simple")


def test_stdlib_names_follow_running_interpreter() -> None:
    names = reqs.stdlib_names()

    assert "asyncio" in names
    assert names == frozenset(
        canonicalize_name(name) for name in sys.stdlib_module_names
    )
