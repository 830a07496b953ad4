from __future__ import annotations

import re

from ..context import CheckContext
from ..registry import CheckDefinition, CheckGroup
from ..responses import CheckMessage

_INFO_URL = "https://hacs.xyz/docs/publish/include#check-info"
_IMAGES_URL = "https://hacs.xyz/docs/publish/include#check-images"

_IMAGE_PATTERN = re.compile(r"<img[^>]+>|!\[[^\]]*\]\([^)]+\)", re.IGNORECASE)
# badges and donation buttons do not show the user anything
_IGNORED_IMAGE_SOURCES = ("-shield", "img.shields.io", "buymeacoffee.com")
_IMAGE_CATEGORIES = frozenset({"plugin", "themes"})

_NO_IMAGES = "There should be images to show the user what they get"


def _information_check(context: CheckContext) -> CheckMessage | str:
    info_file = context.files.info_file
    if info_file is None:
        return "Missing information file"
    return CheckMessage(passed=True, message=f"{info_file} exists")


def find_images(text: str) -> list[str]:
    return _IMAGE_PATTERN.findall(text)


def is_badge(image: str) -> bool:
    return any(source in image for source in _IGNORED_IMAGE_SOURCES)


def _images_check(context: CheckContext) -> bool | str:
    content = context.files.read_info_file()
    if content is None:
        return _NO_IMAGES
    images = find_images(content)
    if any(not is_badge(image) for image in images):
        return True
    return _NO_IMAGES


def _images_not_applicable(context: CheckContext) -> bool:
    return context.category not in _IMAGE_CATEGORIES


def file_group() -> CheckGroup:
    return CheckGroup(
        name="file",
        description="File existence checks",
        checks=(
            CheckDefinition(
                name="information",
                description="Information file exists",
                check=_information_check,
                url=_INFO_URL,
            ),
            CheckDefinition(
                name="images",
                description="Information file has images",
                check=_images_check,
                url=_IMAGES_URL,
                ignore=_images_not_applicable,
            ),
        ),
    )
