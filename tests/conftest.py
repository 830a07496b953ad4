from __future__ import annotations

import json
import os
from pathlib import Path
from typing import Any, Callable

import pytest

from hacs_check.context import CheckContext, RunContext, load_repository_files
from hacs_check.github import GitHubClient


@pytest.fixture
def repo_tree(tmp_path: Path) -> Callable[[dict[str, Any]], Path]:
    """Write ``{relative_path: content}`` under a new repository root per call.

    Dict and list contents are written as JSON.
    """

    roots: list[Path] = []

    def _write(files: dict[str, Any]) -> Path:
        root = tmp_path / f"repo{len(roots)}"
        root.mkdir()
        roots.append(root)
        for relative, content in files.items():
            path = root / relative
            path.parent.mkdir(parents=True, exist_ok=True)
            if isinstance(content, (dict, list)):
                content = json.dumps(content)
            path.write_text(content, encoding="utf-8")
        return root

    return _write


@pytest.fixture
def make_context() -> Callable[..., CheckContext]:
    def _make(
        root: Path,
        *,
        category: str = "integration",
        repository: str = "owner/repo",
        ignored: frozenset[str] = frozenset(),
        repository_data: dict[str, Any] | None = None,
        client: GitHubClient | None = None,
    ) -> CheckContext:
        run = RunContext(
            category=category,
            repository=repository,
            workspace=root,
            ignored=ignored,
        )
        return CheckContext(
            run=run,
            files=load_repository_files(root),
            repository_data=repository_data,
            client=client,
        )

    return _make


VALID_MANIFEST = {
    "domain": "demo",
    "name": "Demo",
    "documentation": "https://example.org/docs",
    "issue_tracker": "https://example.org/issues",
    "codeowners": ["@owner"],
    "version": "1.0.0",
}


@pytest.fixture
def valid_manifest() -> dict[str, Any]:
    return dict(VALID_MANIFEST)


@pytest.fixture(autouse=True)
def _clean_action_environment(monkeypatch: pytest.MonkeyPatch) -> None:
    # a run inside GitHub Actions would otherwise leak its own inputs into Settings
    for name in list(os.environ):
        if name.upper().startswith(("INPUT_", "GITHUB_", "HACS_CHECK_")):
            monkeypatch.delenv(name, raising=False)
