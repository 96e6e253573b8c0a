"""Pydantic models describing the outcome of a hub run."""

from __future__ import annotations

from datetime import datetime
from enum import Enum
from pathlib import Path

from pydantic import BaseModel, ConfigDict, Field

from checkhub.format import Format


class Phase(str, Enum):
    """Stage of a run a result belongs to."""

    LOAD = "load"
    CHECK = "check"


class Status(str, Enum):
    """Outcome of one checker in one phase."""

    PASS = "pass"
    FAIL = "fail"


class CheckerResult(BaseModel):
    """Result of running one checker through one phase."""

    name: str
    phase: Phase
    status: Status
    error: str | None = Field(default=None, description="Error message on failure")
    error_type: str | None = Field(default=None, description="Exception class name on failure")
    duration_seconds: float = 0.0


class Failure(BaseModel):
    """A failing checker together with the exception it raised."""

    model_config = ConfigDict(arbitrary_types_allowed=True)

    name: str
    phase: Phase
    error: str
    error_type: str
    cause: BaseException | None = Field(default=None, exclude=True)

    @classmethod
    def from_exception(cls, name: str, phase: Phase, exc: BaseException) -> Failure:
        return cls(
            name=name,
            phase=phase,
            error=str(exc),
            error_type=type(exc).__name__,
            cause=exc,
        )


class RunOutcome(BaseModel):
    """Aggregate result of a hub run."""

    directory: str
    format: Format
    selected: list[str] = Field(default_factory=list, description="Checkers chosen by the filter")
    loaded: list[str] = Field(default_factory=list, description="Checkers whose load succeeded")
    results: list[CheckerResult] = Field(default_factory=list, description="Per-checker results in run order")
    failures: list[Failure] = Field(default_factory=list, description="Failed checkers in run order")
    skipped: list[str] = Field(
        default_factory=list,
        description="Checkers left unchecked because the failure threshold was reached",
    )
    aborted: bool = Field(default=False, description="True if the check phase stopped early")
    cancelled: bool = False
    started_at: datetime = Field(default_factory=datetime.now)
    completed_at: datetime | None = None
    duration_seconds: float = 0.0

    @property
    def checked(self) -> list[CheckerResult]:
        return [r for r in self.results if r.phase == Phase.CHECK]

    @property
    def total_attempted(self) -> int:
        """Number of checkers whose check() was invoked."""
        return len(self.checked)

    @property
    def failed_count(self) -> int:
        return len(self.failures)

    @property
    def passed(self) -> list[str]:
        return [r.name for r in self.checked if r.status == Status.PASS]

    @property
    def ok(self) -> bool:
        return not self.failures and not self.cancelled

    def finish(self) -> None:
        self.completed_at = datetime.now()
        self.duration_seconds = (self.completed_at - self.started_at).total_seconds()

    def save(self, path: str | Path) -> Path:
        """Save the outcome as JSON."""
        path = Path(path)
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(self.model_dump_json(indent=2))
        return path
