"""Abstract base classes for checkers."""

from __future__ import annotations

import abc
import logging
from collections.abc import Mapping
from pathlib import Path
from typing import Any

from checkhub.format import Format

logger = logging.getLogger(__name__)


class Checker(abc.ABC):
    """A named unit that loads one dataset and validates it.

    Subclasses must implement:
    - `name` (class attribute): unique checker name used in the hub.
    - `load()`: populate in-memory state from a directory.
    - `check()`: validate the loaded state, raising on failure.

    Optionally override:
    - `messager()`: return the instance the hub should actually run for
      this name (a variant or mock standing in for the registered one).
    """

    name: str = ""
    description: str = ""

    @abc.abstractmethod
    def load(
        self,
        directory: Path,
        fmt: Format,
        subdir_rewrites: Mapping[str, str],
    ) -> None:
        """Load this checker's data.

        Args:
            directory: Root directory holding the data files.
            fmt: Format of the data files.
            subdir_rewrites: Logical -> physical subdirectory remapping.

        Raises:
            Any exception; the runner wraps it into a `LoadError`.
        """
        ...

    @abc.abstractmethod
    def check(self) -> None:
        """Validate the loaded data. Raise to report a failure."""
        ...

    def messager(self) -> Checker:
        """Return the instance used for this name during a run."""
        return self

    def __repr__(self) -> str:
        return f"<{type(self).__name__} name={self.name!r}>"


class DataChecker(Checker):
    """Checker whose data is a single file parsed with `checkhub.load`.

    The file is ``<directory>/<subdir>/<filename><ext>`` where *subdir*
    goes through the run's subdir rewrites and *filename* defaults to
    the checker name. The parsed document ends up in ``self.data``.
    """

    subdir: str = ""
    filename: str | None = None

    def __init__(self) -> None:
        self.data: Any = None
        self.path: Path | None = None

    def load(
        self,
        directory: Path,
        fmt: Format,
        subdir_rewrites: Mapping[str, str],
    ) -> None:
        from checkhub.load import load_file, resolve_path

        path = resolve_path(
            directory,
            self.subdir,
            self.filename or self.name,
            fmt,
            subdir_rewrites,
        )
        logger.debug("Loading %s from %s", self.name, path)
        self.data = load_file(path, fmt)
        self.path = path
