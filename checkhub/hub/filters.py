"""Predicates deciding which registered checkers take part in a run."""

from __future__ import annotations

from collections.abc import Callable, Iterable
from fnmatch import fnmatchcase
from typing import Protocol, runtime_checkable


@runtime_checkable
class Filter(Protocol):
    """Anything with a ``filter(name) -> bool`` method."""

    def filter(self, name: str) -> bool: ...


class MatchAll:
    """Accepts every checker."""

    def filter(self, name: str) -> bool:
        return True

    def __repr__(self) -> str:
        return "MatchAll()"


class NameFilter:
    """Select checkers by glob patterns on their names.

    A name is kept when it matches one of *include* (or *include* is
    empty) and none of *exclude*.
    """

    def __init__(self, include: Iterable[str] = (), exclude: Iterable[str] = ()):
        self.include = tuple(include)
        self.exclude = tuple(exclude)

    def filter(self, name: str) -> bool:
        if self.include and not any(fnmatchcase(name, p) for p in self.include):
            return False
        return not any(fnmatchcase(name, p) for p in self.exclude)

    def __repr__(self) -> str:
        return f"NameFilter(include={list(self.include)}, exclude={list(self.exclude)})"


class FuncFilter:
    """Adapts a plain ``Callable[[str], bool]``."""

    def __init__(self, predicate: Callable[[str], bool]):
        self.predicate = predicate

    def filter(self, name: str) -> bool:
        return bool(self.predicate(name))


def as_filter(value: Filter | Callable[[str], bool] | None) -> Filter:
    """Normalize *value* into a Filter. ``None`` means match everything."""
    if value is None:
        return MatchAll()
    if isinstance(value, Filter):
        return value
    if callable(value):
        return FuncFilter(value)
    raise TypeError(f"Expected a Filter or a callable, got {type(value).__name__}")
