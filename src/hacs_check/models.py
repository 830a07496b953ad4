from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Any


class OutcomeStatus(str, Enum):
    passed = "passed"
    failed = "failed"
    neutral = "neutral"
    skipped = "skipped"


_ICONS = {
    OutcomeStatus.passed: "✅",
    OutcomeStatus.failed: "❌",
    OutcomeStatus.neutral: "⚪",
    OutcomeStatus.skipped: "⚪",
}


@dataclass(frozen=True)
class CheckOutcome:
    name: str
    group: str
    status: OutcomeStatus
    message: str
    url: str | None = None
    details: dict[str, Any] = field(default_factory=dict)

    @classmethod
    def passed_result(
        cls,
        *,
        name: str,
        group: str,
        message: str,
        details: dict[str, Any] | None = None,
    ) -> CheckOutcome:
        return cls(
            name=name,
            group=group,
            status=OutcomeStatus.passed,
            message=message,
            details={} if details is None else dict(details),
        )

    @classmethod
    def failed_result(
        cls,
        *,
        name: str,
        group: str,
        message: str,
        url: str | None = None,
        details: dict[str, Any] | None = None,
    ) -> CheckOutcome:
        return cls(
            name=name,
            group=group,
            status=OutcomeStatus.failed,
            message=message,
            url=url,
            details={} if details is None else dict(details),
        )

    @classmethod
    def neutral_result(
        cls,
        *,
        name: str,
        group: str,
        message: str,
        url: str | None = None,
        details: dict[str, Any] | None = None,
    ) -> CheckOutcome:
        return cls(
            name=name,
            group=group,
            status=OutcomeStatus.neutral,
            message=message,
            url=url,
            details={} if details is None else dict(details),
        )

    @classmethod
    def skipped_result(
        cls,
        *,
        name: str,
        group: str,
        message: str,
        details: dict[str, Any] | None = None,
    ) -> CheckOutcome:
        return cls(
            name=name,
            group=group,
            status=OutcomeStatus.skipped,
            message=message,
            details={} if details is None else dict(details),
        )

    @property
    def not_applicable(self) -> bool:
        """True for skips decided by the check's own ignore predicate."""
        return (
            self.status == OutcomeStatus.skipped
            and self.details.get("reason") == "not_applicable"
        )

    def render(self) -> str:
        line = f"{_ICONS[self.status]} {self.message}"
        if self.url and self.status in {OutcomeStatus.failed, OutcomeStatus.neutral}:
            line = f"{line} (more-info: {self.url})"
        return line

    def to_dict(self) -> dict[str, Any]:
        return {
            "name": self.name,
            "group": self.group,
            "status": self.status.value,
            "message": self.message,
            "url": self.url,
            "details": self.details,
        }


@dataclass(frozen=True)
class RunSummary:
    checks_run: int
    passed: int
    failed: int
    neutral: int
    skipped: int

    @property
    def ok(self) -> bool:
        return self.failed == 0

    @classmethod
    def from_outcomes(cls, outcomes: list[CheckOutcome]) -> RunSummary:
        counts = {status: 0 for status in OutcomeStatus}
        for outcome in outcomes:
            counts[outcome.status] += 1
        return cls(
            checks_run=len(outcomes),
            passed=counts[OutcomeStatus.passed],
            failed=counts[OutcomeStatus.failed],
            neutral=counts[OutcomeStatus.neutral],
            skipped=counts[OutcomeStatus.skipped],
        )

    def to_dict(self) -> dict[str, Any]:
        return {
            "checks_run": self.checks_run,
            "passed": self.passed,
            "failed": self.failed,
            "neutral": self.neutral,
            "skipped": self.skipped,
            "ok": self.ok,
        }


@dataclass(frozen=True)
class RunReport:
    repository: str
    category: str
    outcomes: list[CheckOutcome]
    summary: RunSummary

    @property
    def ok(self) -> bool:
        return self.summary.ok

    def to_dict(self) -> dict[str, Any]:
        return {
            "repository": self.repository,
            "category": self.category,
            "outcomes": [item.to_dict() for item in self.outcomes],
            "summary": self.summary.to_dict(),
        }
