"""Exceptions raised by the checker hub."""

from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from checkhub.hub.models import RunOutcome


class HubError(Exception):
    """Base class for every hub error."""


class RegistrationError(HubError):
    """Raised when a checker cannot be registered."""


class LoadError(HubError):
    """A checker failed to load its data. Fatal for the whole run."""

    def __init__(
        self,
        name: str,
        cause: BaseException | str,
        outcome: RunOutcome | None = None,
    ):
        self.name = name
        self.cause = cause
        self.outcome = outcome
        super().__init__(f"failed to load {name}: {cause}")


class UnsupportedFormatError(HubError, ValueError):
    """The data loader has no parser for the requested format."""

    def __init__(self, fmt: str):
        self.format = fmt
        super().__init__(f"unsupported format '{fmt}'")


class CheckError(HubError):
    """A checker's validation failed.

    Checkers may raise this (or any other exception) from ``check()``.
    The runner records it and keeps going until the failure threshold.
    """

    def __init__(self, name: str, cause: BaseException | str):
        self.name = name
        self.cause = cause
        super().__init__(f"{name}: {cause}")


class AggregateCheckFailure(HubError):
    """Raised at the end of a run when at least one check failed."""

    def __init__(self, outcome: RunOutcome):
        self.outcome = outcome
        names = ", ".join(f.name for f in outcome.failures)
        super().__init__(f"check failed count: {outcome.failed_count} ({names})")

    @property
    def failed_count(self) -> int:
        return self.outcome.failed_count


class RunCancelled(HubError):
    """The run's cancel event was set before it completed."""

    def __init__(self, outcome: RunOutcome):
        self.outcome = outcome
        super().__init__(
            f"run cancelled after {outcome.total_attempted} checker(s)"
        )
