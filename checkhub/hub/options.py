"""Run options.

Options can be given either as an `Options` instance or as functional
setters applied in order on top of the defaults::

    opts = parse_options(break_failed_count(3), subdir_rewrites({"a/": "b/"}))
"""

from __future__ import annotations

import threading
from collections.abc import Callable, Mapping

from pydantic import BaseModel, ConfigDict, Field, field_validator


class Options(BaseModel):
    """Settings controlling a single hub run."""

    model_config = ConfigDict(arbitrary_types_allowed=True, validate_assignment=True)

    break_failed_count: int = Field(
        default=1,
        description="Stop the check phase once this many checkers have failed (minimum 1)",
    )
    subdir_rewrites: dict[str, str] = Field(
        default_factory=dict,
        description="Logical -> physical subdirectory remapping passed to every load",
    )
    cancel_event: threading.Event | None = Field(
        default=None,
        description="When set, the run stops at the next checker boundary",
    )

    @field_validator("break_failed_count")
    @classmethod
    def _at_least_one(cls, value: int) -> int:
        return max(value, 1)


Option = Callable[[Options], None]


def break_failed_count(count: int) -> Option:
    """Set the number of failed checks after which the check phase stops."""

    def setter(opts: Options) -> None:
        opts.break_failed_count = count

    return setter


def subdir_rewrites(rewrites: Mapping[str, str]) -> Option:
    """Set the subdirectory rewrites used when loading."""

    def setter(opts: Options) -> None:
        opts.subdir_rewrites = dict(rewrites)

    return setter


def cancel_event(event: threading.Event) -> Option:
    """Attach an event that cancels the run when set."""

    def setter(opts: Options) -> None:
        opts.cancel_event = event

    return setter


def parse_options(*setters: Option, base: Options | None = None) -> Options:
    """Apply *setters* in order over the defaults (or a copy of *base*)."""
    opts = base.model_copy(deep=False) if base is not None else Options()
    for setter in setters:
        setter(opts)
    if opts.break_failed_count <= 1:
        opts.break_failed_count = 1
    return opts
