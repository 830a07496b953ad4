from __future__ import annotations


class HacsCheckError(Exception):
    """Base class for errors raised by hacs_check."""


class GitHubError(HacsCheckError):
    def __init__(self, message: str, *, status_code: int | None = None) -> None:
        super().__init__(message)
        self.status_code = status_code


class PublishError(HacsCheckError):
    """Posting or updating the pull request comment failed."""
