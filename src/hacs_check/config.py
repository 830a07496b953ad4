"""Run configuration loaded from the GitHub Actions environment."""

from __future__ import annotations

from pathlib import Path
from typing import Any

from pydantic import AliasChoices, Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

DEFAULT_API_URL = "https://api.github.com"
DEFAULT_WHEELS_INDEX = "https://wheels.home-assistant.io/alpine-3.12/amd64"
DEFAULT_EXTRA_INDEX = "https://pypi.org/simple"


class Settings(BaseSettings):
    """Inputs of a validation run.

    Action inputs arrive as ``INPUT_<NAME>`` variables, repository identity
    and event context as the ``GITHUB_*`` variables set by the runner. Every
    field can also be passed by name when constructing the model directly.
    """

    model_config = SettingsConfigDict(
        populate_by_name=True,
        extra="ignore",
        case_sensitive=False,
    )

    category: str = Field(
        validation_alias=AliasChoices("INPUT_CATEGORY"),
        description="Repository category: appdaemon, integration, netdaemon, "
        "plugin, python_script or themes",
    )
    ignore: str = Field(
        default="",
        validation_alias=AliasChoices("INPUT_IGNORE"),
        description="Space separated names of checks to skip",
    )
    github_token: str | None = Field(
        default=None,
        validation_alias=AliasChoices(
            "INPUT_GITHUB-TOKEN", "INPUT_GITHUB_TOKEN", "GITHUB_TOKEN"
        ),
        repr=False,
    )
    comment: bool = Field(
        default=False,
        validation_alias=AliasChoices("INPUT_COMMENT"),
        description="Publish the report as a pull request comment",
    )
    repository: str = Field(validation_alias=AliasChoices("GITHUB_REPOSITORY"))
    event_name: str = Field(default="", validation_alias=AliasChoices("GITHUB_EVENT_NAME"))
    ref: str = Field(default="", validation_alias=AliasChoices("GITHUB_REF"))
    event_path: Path | None = Field(
        default=None, validation_alias=AliasChoices("GITHUB_EVENT_PATH")
    )
    workspace: Path = Field(
        default_factory=Path.cwd, validation_alias=AliasChoices("GITHUB_WORKSPACE")
    )
    api_url: str = Field(
        default=DEFAULT_API_URL, validation_alias=AliasChoices("GITHUB_API_URL")
    )
    wheels_index: str = Field(
        default=DEFAULT_WHEELS_INDEX,
        validation_alias=AliasChoices("HACS_CHECK_WHEELS_INDEX"),
    )
    extra_index: str = Field(
        default=DEFAULT_EXTRA_INDEX,
        validation_alias=AliasChoices("HACS_CHECK_EXTRA_INDEX"),
    )
    http_timeout: float = Field(
        default=30.0, gt=0, validation_alias=AliasChoices("HACS_CHECK_HTTP_TIMEOUT")
    )
    pip_timeout: float = Field(
        default=600.0, gt=0, validation_alias=AliasChoices("HACS_CHECK_PIP_TIMEOUT")
    )
    check_timeout: float | None = Field(
        default=None, gt=0, validation_alias=AliasChoices("HACS_CHECK_CHECK_TIMEOUT")
    )
    report_file: Path | None = Field(
        default=None, validation_alias=AliasChoices("HACS_CHECK_REPORT_FILE")
    )
    log_level: str = Field(
        default="INFO", validation_alias=AliasChoices("HACS_CHECK_LOG_LEVEL")
    )

    @field_validator("comment", mode="before")
    @classmethod
    def _empty_comment_is_false(cls, value: Any) -> Any:
        if isinstance(value, str) and not value.strip():
            return False
        return value

    @field_validator(
        "github_token", "event_path", "check_timeout", "report_file", mode="before"
    )
    @classmethod
    def _empty_is_none(cls, value: Any) -> Any:
        if isinstance(value, str) and not value.strip():
            return None
        return value

    @field_validator("repository")
    @classmethod
    def _validate_repository(cls, value: str) -> str:
        owner, _, repo = value.strip().partition("/")
        if not owner or not repo or "/" in repo:
            raise ValueError(f"repository must look like 'owner/repo', got '{value}'")
        return f"{owner}/{repo}"

    @field_validator("category", mode="before")
    @classmethod
    def _normalize_category(cls, value: Any) -> Any:
        if isinstance(value, str):
            return value.strip().lower()
        return value

    @property
    def ignored_checks(self) -> frozenset[str]:
        return frozenset(self.ignore.split())

    @property
    def owner(self) -> str:
        return self.repository.split("/", 1)[0]

    @property
    def repo(self) -> str:
        return self.repository.split("/", 1)[1]
