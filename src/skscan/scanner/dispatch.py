# Copyright (c) 2026 Veritas Aequitas Holdings LLC. All rights reserved.
"""Bounded, cancellable evaluation of (rule, file) pairs."""

from __future__ import annotations

import logging
import threading
import time
from collections.abc import Sequence
from concurrent.futures import FIRST_COMPLETED, Future, ThreadPoolExecutor, wait

from skscan.core.config import Settings, get_settings
from skscan.core.constants import Severity
from skscan.core.exceptions import RuleEvaluationError, ScanCancelledError
from skscan.detectors.rule_engine.base_rule import BaseRule
from skscan.models.finding import Finding
from skscan.models.skill import SkillFile

logger = logging.getLogger("skscan.scanner.dispatch")


class RuleDispatcher:
    """Runs every applicable rule against every file of one scan.

    Each (rule, file) pair gets ``Settings.rule_timeout`` seconds once it
    starts; pairs that overrun are abandoned and reported as a low-severity
    finding under the rule's own id. A rule that raises is reported the same
    way, so one broken rule never fails the scan. Output order follows the
    input order of rules and files and never the order in which work finished.

    Files over ``Settings.max_file_size`` are not scanned at all: each
    applicable rule reports one low-severity "skipped" finding, which is
    non-blocking, so padding a file past the limit grades it ``warn``. Run
    with ``--strict``, raise the limit, or set an ``error`` override when
    that is not acceptable.

    A dispatcher belongs to a single scan. ``cancel()`` may be called from any
    thread; the scan then stops with :class:`ScanCancelledError`.
    """

    POLL_INTERVAL = 0.05

    def __init__(
        self,
        settings: Settings | None = None,
        cancel_event: threading.Event | None = None,
    ) -> None:
        self.settings = settings or get_settings()
        self._cancel = cancel_event or threading.Event()

    @property
    def cancelled(self) -> bool:
        return self._cancel.is_set()

    def cancel(self) -> None:
        self._cancel.set()

    def run(self, rules: Sequence[BaseRule], files: Sequence[SkillFile]) -> list[Finding]:
        pairs = [(r, f) for r in rules for f in files if r.applies_to(f)]
        results: list[list[Finding] | None] = [None] * len(pairs)

        for index, (rule, file) in enumerate(pairs):
            if file.size > self.settings.max_file_size:
                results[index] = [self._skipped_finding(rule, file)]

        if self.settings.parallel:
            self._run_parallel(pairs, results)
        else:
            self._run_inline(pairs, results)

        return [f for chunk in results if chunk for f in chunk]

    def _check_cancelled(self) -> None:
        if self._cancel.is_set():
            raise ScanCancelledError("Scan cancelled")

    def _run_inline(
        self,
        pairs: list[tuple[BaseRule, SkillFile]],
        results: list[list[Finding] | None],
    ) -> None:
        for index, (rule, file) in enumerate(pairs):
            self._check_cancelled()
            if results[index] is None:
                results[index] = self._evaluate(rule, file)

    def _run_parallel(
        self,
        pairs: list[tuple[BaseRule, SkillFile]],
        results: list[list[Finding] | None],
    ) -> None:
        timeout = self.settings.rule_timeout
        started: dict[int, float] = {}

        def work(index: int) -> list[Finding]:
            started[index] = time.monotonic()
            rule, file = pairs[index]
            return self._evaluate(rule, file)

        executors = [self._new_executor()]
        pending: dict[Future[list[Finding]], int] = {
            executors[-1].submit(work, i): i for i, r in enumerate(results) if r is None
        }
        stuck = 0
        try:
            while pending:
                self._check_cancelled()
                done, _ = wait(pending, timeout=self.POLL_INTERVAL, return_when=FIRST_COMPLETED)
                for future in done:
                    results[pending.pop(future)] = future.result()

                now = time.monotonic()
                for future, index in list(pending.items()):
                    began = started.get(index)
                    if began is not None and now - began > timeout:
                        del pending[future]
                        rule, file = pairs[index]
                        logger.warning(
                            "Rule %s timed out on %s after %.1fs", rule.rule_id, file.path, timeout
                        )
                        results[index] = [self._timeout_finding(rule, file)]
                        stuck += 1

                # Abandoned threads cannot be interrupted; once they occupy
                # every worker, queued pairs move to a fresh pool.
                if pending and stuck >= self.settings.max_workers and not any(
                    i in started for i in pending.values()
                ):
                    executors[-1].shutdown(wait=False, cancel_futures=True)
                    executors.append(self._new_executor())
                    pending = {executors[-1].submit(work, i): i for i in pending.values()}
                    stuck = 0
        finally:
            for executor in executors:
                executor.shutdown(wait=False, cancel_futures=True)

    def _new_executor(self) -> ThreadPoolExecutor:
        return ThreadPoolExecutor(
            max_workers=self.settings.max_workers,
            thread_name_prefix="skscan-rule",
        )

    def _evaluate(self, rule: BaseRule, file: SkillFile) -> list[Finding]:
        try:
            return rule.check(file)
        except Exception as exc:
            error = RuleEvaluationError(rule.rule_id, file.path, exc)
            logger.warning("%s", error, exc_info=True)
            return [rule.finding(file, 1, str(error), severity=Severity.LOW)]

    def _timeout_finding(self, rule: BaseRule, file: SkillFile) -> Finding:
        return rule.finding(
            file,
            1,
            f"Rule {rule.rule_id} timed out on file {file.path}",
            severity=Severity.LOW,
        )

    def _skipped_finding(self, rule: BaseRule, file: SkillFile) -> Finding:
        return rule.finding(
            file,
            1,
            f"Rule {rule.rule_id} skipped file {file.path}: "
            f"{file.size} characters exceeds the {self.settings.max_file_size} limit",
            severity=Severity.LOW,
        )
