from __future__ import annotations

from .checks import (
    external_group,
    file_group,
    functionality_group,
    json_group,
    repository_group,
)
from .registry import CheckRegistry

_DEFAULT_REGISTRY: CheckRegistry | None = None


def build_default_registry() -> CheckRegistry:
    return CheckRegistry(
        [
            repository_group(),
            file_group(),
            json_group(),
            external_group(),
            functionality_group(),
        ]
    )


def default_registry() -> CheckRegistry:
    """The standard registry, built on first use and shared afterwards."""
    global _DEFAULT_REGISTRY
    if _DEFAULT_REGISTRY is None:
        _DEFAULT_REGISTRY = build_default_registry()
    return _DEFAULT_REGISTRY
