"""Load-then-check orchestration for one hub run.

Load failures are fatal: the first checker that fails to load ends the
run and nothing is checked. Check failures are collected and the phase
keeps going until ``break_failed_count`` checkers have failed.
"""

from __future__ import annotations

import logging
import time
from collections.abc import Callable
from pathlib import Path
from typing import TYPE_CHECKING

from checkhub.format import Format
from checkhub.hub.errors import AggregateCheckFailure, LoadError, RunCancelled
from checkhub.hub.filters import Filter
from checkhub.hub.models import CheckerResult, Failure, Phase, RunOutcome, Status
from checkhub.hub.options import Options

if TYPE_CHECKING:
    from checkhub.hub.registry import Hub

logger = logging.getLogger(__name__)


class Runner:
    """Runs the checkers of a hub, one at a time, in registration order."""

    def __init__(self, hub: Hub):
        self.hub = hub

    def _cancelled(self, options: Options) -> bool:
        return options.cancel_event is not None and options.cancel_event.is_set()

    def _cancel(self, outcome: RunOutcome) -> RunCancelled:
        outcome.cancelled = True
        outcome.finish()
        logger.warning("Run cancelled")
        return RunCancelled(outcome)

    def load(self, directory: Path, fmt: Format, options: Options, outcome: RunOutcome) -> None:
        for name, checker in self.hub.filtered_checker_map.items():
            if self._cancelled(options):
                raise self._cancel(outcome)
            logger.info("=== LOAD  %s", name)
            started = time.monotonic()
            try:
                checker.load(directory, fmt, options.subdir_rewrites)
            except Exception as e:
                logger.error("--- FAIL: %s", name)
                logger.error("    %s", e, exc_info=e)
                outcome.results.append(_result(name, Phase.LOAD, started, e))
                outcome.failures.append(Failure.from_exception(name, Phase.LOAD, e))
                outcome.finish()
                raise LoadError(name, e, outcome) from e
            outcome.results.append(_result(name, Phase.LOAD, started))
            outcome.loaded.append(name)
            logger.info("--- DONE: %s", name)
        self.hub.set_messager_map(self.hub.filtered_checker_map)

    def check(self, options: Options, outcome: RunOutcome) -> None:
        names = list(self.hub.filtered_checker_map)
        for i, name in enumerate(names):
            if self._cancelled(options):
                raise self._cancel(outcome)
            checker = self.hub.filtered_checker_map[name]
            logger.info("=== RUN   %s", name)
            started = time.monotonic()
            try:
                checker.check()
            except Exception as e:
                logger.error("--- FAIL: %s", name)
                logger.error("    %s", e, exc_info=e)
                outcome.results.append(_result(name, Phase.CHECK, started, e))
                outcome.failures.append(Failure.from_exception(name, Phase.CHECK, e))
            else:
                outcome.results.append(_result(name, Phase.CHECK, started))
                logger.info("--- PASS: %s", name)

            if outcome.failed_count >= options.break_failed_count:
                outcome.skipped = names[i + 1:]
                if outcome.skipped:
                    outcome.aborted = True
                    logger.warning(
                        "Stopping after %d failed check(s), %d checker(s) not run",
                        outcome.failed_count,
                        len(outcome.skipped),
                    )
                break

    def run(
        self,
        directory: Path,
        filter: Filter | Callable[[str], bool] | None,
        fmt: Format,
        options: Options,
    ) -> RunOutcome:
        self.hub.filtered_checker_map = self.hub.select(filter)
        outcome = RunOutcome(
            directory=str(directory),
            format=fmt,
            selected=list(self.hub.filtered_checker_map),
        )
        logger.info(
            "Running %d of %d checker(s) from %s (%s)",
            len(outcome.selected),
            len(self.hub),
            directory,
            fmt.value,
        )

        self.load(directory, fmt, options, outcome)
        self.check(options, outcome)
        outcome.finish()

        if outcome.failures:
            raise AggregateCheckFailure(outcome)
        return outcome


def _result(name: str, phase: Phase, started: float, error: BaseException | None = None) -> CheckerResult:
    return CheckerResult(
        name=name,
        phase=phase,
        status=Status.FAIL if error is not None else Status.PASS,
        error=str(error) if error is not None else None,
        error_type=type(error).__name__ if error is not None else None,
        duration_seconds=time.monotonic() - started,
    )
