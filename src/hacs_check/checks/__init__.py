from .external import external_group
from .files import file_group
from .layout import LAYOUT_RULES, Category, Expectation, LayoutRule, functionality_group
from .manifest import json_group
from .repository import repository_group

__all__ = [
    "Category",
    "Expectation",
    "LAYOUT_RULES",
    "LayoutRule",
    "external_group",
    "file_group",
    "functionality_group",
    "json_group",
    "repository_group",
]
