"""The hub: a process-wide registry of checkers."""

from __future__ import annotations

import logging
import threading
from collections.abc import Mapping
from pathlib import Path
from typing import TYPE_CHECKING, Type, TypeVar

from checkhub.format import Format
from checkhub.hub.base import Checker
from checkhub.hub.errors import RegistrationError
from checkhub.hub.filters import Filter, as_filter
from checkhub.hub.options import Option, Options, parse_options
from checkhub.hub.runner import Runner

if TYPE_CHECKING:
    from collections.abc import Callable

    from checkhub.hub.models import RunOutcome

logger = logging.getLogger(__name__)

C = TypeVar("C", Checker, Type[Checker])


class Hub:
    """Central registry for checkers.

    Holds three mappings, all keyed by checker name:

    - ``checker_map``: every registered checker.
    - ``filtered_checker_map``: the subset selected for the current run,
      replaced at the start of every run.
    - the published messager map: checkers whose data loaded successfully
      in the last run, queried with `get_messager()`.
    """

    def __init__(self) -> None:
        self._lock = threading.RLock()
        self._run_lock = threading.Lock()
        self.checker_map: dict[str, Checker] = {}
        self.filtered_checker_map: dict[str, Checker] = {}
        self._messager_map: dict[str, Checker] = {}

    def _coerce(self, checker: Checker | Type[Checker] | None) -> Checker:
        if checker is None:
            raise RegistrationError("Cannot register None as a checker")
        if isinstance(checker, type):
            if not issubclass(checker, Checker):
                raise RegistrationError(f"{checker.__name__} is not a Checker subclass")
            checker = checker()
        if not isinstance(checker, Checker):
            raise RegistrationError(f"{type(checker).__name__} is not a Checker")
        if not checker.name:
            raise RegistrationError(f"Checker {type(checker).__name__} has no name")
        return checker

    def register(self, checker: C) -> C:
        """Register a checker instance or a Checker subclass.

        A class is instantiated with no arguments, so this also works as
        a decorator::

            @hub.register
            class ItemChecker(DataChecker):
                name = "item"
                ...

        Registering a name twice replaces the earlier checker.
        """
        instance = self._coerce(checker)
        with self._lock:
            if instance.name in self.checker_map:
                logger.warning("Overwriting checker '%s' in hub", instance.name)
            self.checker_map[instance.name] = instance
        return checker

    def override(self, checker: C) -> C:
        """Replace an already registered checker, e.g. with a mock."""
        instance = self._coerce(checker)
        with self._lock:
            if instance.name not in self.checker_map:
                raise RegistrationError(f"No checker named '{instance.name}' to override")
            self.checker_map[instance.name] = instance
        logger.debug("Overrode checker '%s'", instance.name)
        return checker

    def unregister(self, name: str) -> Checker | None:
        """Remove a checker. Returns it, or None if it was not registered."""
        with self._lock:
            return self.checker_map.pop(name, None)

    def get(self, name: str) -> Checker | None:
        """Look up a registered checker by name."""
        return self.checker_map.get(name)

    def has(self, name: str) -> bool:
        return name in self.checker_map

    def __contains__(self, name: object) -> bool:
        return name in self.checker_map

    def __len__(self) -> int:
        return len(self.checker_map)

    def all(self) -> dict[str, Checker]:
        """Return all registered checkers in registration order."""
        with self._lock:
            return dict(self.checker_map)

    def names(self) -> list[str]:
        """Return sorted list of registered checker names."""
        return sorted(self.checker_map)

    def info(self) -> list[dict[str, str]]:
        """Return metadata for every registered checker."""
        out = []
        for name, checker in self.all().items():
            out.append({
                "name": name,
                "description": checker.description,
                "class": f"{type(checker).__module__}.{type(checker).__qualname__}",
            })
        return out

    def select(self, filter: Filter | Callable[[str], bool] | None = None) -> dict[str, Checker]:
        """Return ``{name: checker.messager()}`` for every name the filter accepts."""
        predicate = as_filter(filter)
        with self._lock:
            return {
                name: checker.messager()
                for name, checker in self.checker_map.items()
                if predicate.filter(name)
            }

    def set_messager_map(self, messagers: Mapping[str, Checker]) -> None:
        """Publish the set of loaded checkers."""
        with self._lock:
            self._messager_map = dict(messagers)

    def get_messager(self, name: str) -> Checker | None:
        """Look up a checker from the last successful load phase."""
        return self._messager_map.get(name)

    def messagers(self) -> dict[str, Checker]:
        with self._lock:
            return dict(self._messager_map)

    def run(
        self,
        directory: str | Path,
        filter: Filter | Callable[[str], bool] | None = None,
        fmt: Format = Format.JSON,
        *setters: Option,
        options: Options | None = None,
    ) -> RunOutcome:
        """Load and check every checker accepted by *filter*.

        Returns the outcome when every check passed.

        Raises:
            LoadError: a checker failed to load; nothing was checked.
            AggregateCheckFailure: one or more checks failed.
            RunCancelled: the cancel event was set.
        """
        opts = parse_options(*setters, base=options)
        with self._run_lock:
            return Runner(self).run(Path(directory), filter, Format(fmt), opts)


_hub: Hub | None = None
_hub_lock = threading.Lock()


def get_hub() -> Hub:
    """Return the process-wide hub, creating it on first use."""
    global _hub
    if _hub is None:
        with _hub_lock:
            if _hub is None:
                _hub = Hub()
    return _hub


def reset_hub() -> None:
    """Drop the process-wide hub. Intended for tests."""
    global _hub
    with _hub_lock:
        _hub = None


def register(checker: C) -> C:
    """Register a checker with the process-wide hub."""
    return get_hub().register(checker)
