"""Checker hub.

Provides a registry of named checkers and a runner that loads each
selected checker's data and then validates it.

Usage:
    from checkhub.format import Format
    from checkhub.hub import DataChecker, break_failed_count, get_hub, register

    @register
    class ItemChecker(DataChecker):
        name = "item"

        def check(self) -> None:
            if not self.data:
                raise ValueError("no items")

    get_hub().run("testdata", None, Format.JSON, break_failed_count(3))
"""

from checkhub.hub.base import Checker, DataChecker
from checkhub.hub.errors import (
    AggregateCheckFailure,
    CheckError,
    HubError,
    LoadError,
    RegistrationError,
    RunCancelled,
    UnsupportedFormatError,
)
from checkhub.hub.filters import Filter, FuncFilter, MatchAll, NameFilter, as_filter
from checkhub.hub.models import CheckerResult, Failure, Phase, RunOutcome, Status
from checkhub.hub.options import (
    Option,
    Options,
    break_failed_count,
    cancel_event,
    parse_options,
    subdir_rewrites,
)
from checkhub.hub.registry import Hub, get_hub, register, reset_hub
from checkhub.hub.runner import Runner

__all__ = [
    "AggregateCheckFailure",
    "CheckError",
    "Checker",
    "CheckerResult",
    "DataChecker",
    "Failure",
    "Filter",
    "FuncFilter",
    "Hub",
    "HubError",
    "LoadError",
    "MatchAll",
    "NameFilter",
    "Option",
    "Options",
    "Phase",
    "RegistrationError",
    "RunCancelled",
    "RunOutcome",
    "Runner",
    "Status",
    "UnsupportedFormatError",
    "as_filter",
    "break_failed_count",
    "cancel_event",
    "get_hub",
    "parse_options",
    "register",
    "reset_hub",
    "subdir_rewrites",
]
