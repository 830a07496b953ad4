from __future__ import annotations

import json
import logging
from dataclasses import dataclass, field, replace
from pathlib import Path
from typing import TYPE_CHECKING, Any

from .config import DEFAULT_EXTRA_INDEX, DEFAULT_WHEELS_INDEX, Settings

if TYPE_CHECKING:
    from .github import GitHubClient

logger = logging.getLogger(__name__)

MANIFEST_FILE = "manifest.json"
HACS_FILE = "hacs.json"


@dataclass(frozen=True)
class RunContext:
    """Ambient configuration every check and ignore predicate can see."""

    category: str
    repository: str
    workspace: Path = field(default_factory=Path.cwd)
    ignored: frozenset[str] = frozenset()
    wheels_index: str = DEFAULT_WHEELS_INDEX
    extra_index: str = DEFAULT_EXTRA_INDEX
    pip_timeout: float = 600.0

    @classmethod
    def from_settings(cls, settings: Settings) -> RunContext:
        return cls(
            category=settings.category,
            repository=settings.repository,
            workspace=Path(settings.workspace),
            ignored=settings.ignored_checks,
            wheels_index=settings.wheels_index,
            extra_index=settings.extra_index,
            pip_timeout=settings.pip_timeout,
        )

    @property
    def repo_name(self) -> str:
        return self.repository.split("/", 1)[-1]


@dataclass(frozen=True)
class RepositoryFiles:
    """Repository files read once, before any check runs."""

    root: Path
    manifest: dict[str, Any] | None = None
    manifest_path: Path | None = None
    manifest_error: str | None = None
    hacs_config: dict[str, Any] | None = None
    hacs_error: str | None = None
    info_file: str | None = None

    @property
    def requirements(self) -> list[str]:
        if self.manifest is None:
            return []
        requirements = self.manifest.get("requirements")
        if not isinstance(requirements, list):
            return []
        return [str(item) for item in requirements]

    def read_info_file(self) -> str | None:
        if self.info_file is None:
            return None
        return (self.root / self.info_file).read_text(encoding="utf-8", errors="replace")


@dataclass(frozen=True)
class CheckContext:
    run: RunContext
    files: RepositoryFiles
    repository_data: dict[str, Any] | None = None
    client: GitHubClient | None = None

    @property
    def category(self) -> str:
        return self.run.category

    @property
    def repository(self) -> str:
        return self.run.repository

    def with_repository_data(self, data: dict[str, Any]) -> CheckContext:
        return replace(self, repository_data=data)


def _read_json_object(path: Path) -> tuple[dict[str, Any] | None, str | None]:
    try:
        loaded = json.loads(path.read_text(encoding="utf-8"))
    except (OSError, ValueError) as exc:
        return None, str(exc)
    if not isinstance(loaded, dict):
        return None, f"expected a JSON object, got {type(loaded).__name__}"
    return loaded, None


def _find_manifests(root: Path) -> list[Path]:
    matches = []
    for path in sorted(root.rglob(MANIFEST_FILE)):
        relative = path.relative_to(root)
        if any(part.startswith(".") for part in relative.parts[:-1]):
            continue
        if path.is_file():
            matches.append(path)
    return matches


def find_case_insensitive(directory: Path, name: str) -> str | None:
    """Return the entry of ``directory`` whose name matches ``name`` ignoring case."""
    if not directory.is_dir():
        return None
    wanted = name.lower()
    for entry in sorted(directory.iterdir()):
        if entry.is_file() and entry.name.lower() == wanted:
            return entry.name
    return None


def _which_info_file(root: Path, hacs_config: dict[str, Any] | None) -> str | None:
    if hacs_config and hacs_config.get("render_readme"):
        candidates = ("README.md", "README")
    else:
        candidates = ("INFO.md", "INFO")
    for candidate in candidates:
        found = find_case_insensitive(root, candidate)
        if found is not None:
            return found
    return None


def load_repository_files(root: Path) -> RepositoryFiles:
    root = Path(root)

    manifest = None
    manifest_path = None
    manifest_error = None
    manifests = _find_manifests(root)
    if len(manifests) == 1:
        manifest_path = manifests[0]
        manifest, manifest_error = _read_json_object(manifest_path)
    elif manifests:
        logger.debug(
            "Found %d %s files, expected exactly one", len(manifests), MANIFEST_FILE
        )

    hacs_config = None
    hacs_error = None
    hacs_path = root / HACS_FILE
    if hacs_path.is_file():
        hacs_config, hacs_error = _read_json_object(hacs_path)

    return RepositoryFiles(
        root=root,
        manifest=manifest,
        manifest_path=manifest_path,
        manifest_error=manifest_error,
        hacs_config=hacs_config,
        hacs_error=hacs_error,
        info_file=_which_info_file(root, hacs_config),
    )
