"""Run-level metrics aggregation from test lifecycle events."""

from __future__ import annotations

import logging
import time
from typing import Any, Callable

from uitest_support.core.exceptions import MisuseError
from uitest_support.reporting.classification import defect_report, detail_for
from uitest_support.reporting.coverage import (
    CRITICAL_MARKERS,
    FEATURE_MARKERS,
    critical_path_percentage,
    feature_tags,
    is_timeout_message,
)
from uitest_support.reporting.models import (
    FailureCategory,
    NamedDuration,
    RunConfig,
    RunContext,
    RunReport,
    TestOutcome,
    TestStatus,
)

logger = logging.getLogger(__name__)


class RunMetricsAggregator:
    """Builds a RunReport from one run's lifecycle events.

    The three entry points must be called in order: ``on_run_start`` once,
    ``on_test_end`` zero or more times, ``on_run_end`` once. The host is
    responsible for serializing calls; no locking happens here.

    Example:
        aggregator = RunMetricsAggregator()
        aggregator.on_run_start(RunConfig(worker_count=3, engines=("chromium",)))
        for outcome in outcomes:
            aggregator.on_test_end(outcome)
        report = aggregator.on_run_end()
    """

    def __init__(
        self,
        feature_markers: list[str] | None = None,
        critical_markers: list[str] | None = None,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        if feature_markers is None:
            feature_markers = list(FEATURE_MARKERS)
        if critical_markers is None:
            critical_markers = list(CRITICAL_MARKERS)
        self._feature_markers = feature_markers
        self._critical_markers = critical_markers
        self._clock = clock

        self._context: RunContext | None = None
        self._report: RunReport | None = None
        self._outcomes: list[TestOutcome] = []
        self._counts = {status: 0 for status in TestStatus}
        self._slowest: TestOutcome | None = None
        self._fastest: TestOutcome | None = None
        self._total_duration = 0.0
        self._timeouts = 0
        self._framework_errors = 0
        self._retries = 0

    @property
    def context(self) -> RunContext | None:
        return self._context

    @property
    def outcomes(self) -> list[TestOutcome]:
        """Outcomes received so far, in arrival order."""
        return list(self._outcomes)

    @property
    def is_finished(self) -> bool:
        return self._report is not None

    def on_run_start(self, config: RunConfig | dict[str, Any]) -> RunContext:
        """Initialize the run context.

        Args:
            config: Run configuration (RunConfig or dict)

        Returns:
            The new RunContext

        Raises:
            MisuseError: If the run was already started
        """
        if self._context is not None:
            raise MisuseError("Run already started", operation="on_run_start")
        if isinstance(config, dict):
            config = RunConfig.from_dict(config)

        self._context = RunContext.from_config(config, started_at=self._clock())
        logger.debug(
            f"Run started: workers={config.worker_count}, "
            f"projects={len(config.projects)}, engines={self._context.engines}"
        )
        return self._context

    def on_test_end(self, outcome: TestOutcome | dict[str, Any]) -> None:
        """Record one completed test.

        Raises:
            MisuseError: If called before on_run_start or after on_run_end
        """
        if self._context is None:
            raise MisuseError("on_test_end called before on_run_start", operation="on_test_end")
        if self._report is not None:
            raise MisuseError("on_test_end called after on_run_end", operation="on_test_end")
        if isinstance(outcome, dict):
            outcome = TestOutcome.from_dict(outcome)

        self._outcomes.append(outcome)
        self._total_duration += outcome.duration

        # Ties keep the first-seen record
        if self._slowest is None or outcome.duration > self._slowest.duration:
            self._slowest = outcome
        if self._fastest is None or outcome.duration < self._fastest.duration:
            self._fastest = outcome

        self._counts[outcome.status] += 1

        if outcome.status == TestStatus.FAILED and (
            outcome.failure_category == FailureCategory.TIMEOUT
            or is_timeout_message(outcome.error_message)
        ):
            self._timeouts += 1
        if outcome.failure_category == FailureCategory.FRAMEWORK:
            self._framework_errors += 1

        self._retries += outcome.retry_count

    def on_run_end(self) -> RunReport:
        """Finalize the run and build its report.

        Returns:
            Immutable RunReport

        Raises:
            MisuseError: If the run was never started or already finished
        """
        if self._context is None:
            raise MisuseError("on_run_end called before on_run_start", operation="on_run_end")
        if self._report is not None:
            raise MisuseError("on_run_end called twice", operation="on_run_end")

        context = self._context
        names = [outcome.name for outcome in self._outcomes]
        count = len(self._outcomes)
        tags = feature_tags(names, self._feature_markers)

        self._report = RunReport(
            timestamp=context.timestamp,
            total_tests=count,
            passed=self._counts[TestStatus.PASSED],
            failed=self._counts[TestStatus.FAILED],
            skipped=self._counts[TestStatus.SKIPPED],
            flaky=self._counts[TestStatus.FLAKY],
            execution_time=max(0.0, self._clock() - context.started_at),
            parallel_workers=context.worker_count,
            browsers=tuple(context.engines),
            projects=tuple(context.projects),
            avg_test_duration=self._total_duration / count if count else 0,
            slowest_test=self._named(self._slowest),
            fastest_test=self._named(self._fastest),
            feature_coverage=len(tags),
            critical_path_coverage=critical_path_percentage(names, self._critical_markers),
            cross_platform_coverage=len(context.engines),
            framework_errors=self._framework_errors,
            timeouts=self._timeouts,
            retries=self._retries,
            feature_tags=tuple(sorted(tags)),
            test_details=tuple(detail_for(outcome) for outcome in self._outcomes),
            defect_analysis=tuple(defect_report(self._outcomes)),
        )
        logger.info(
            f"Run finished: {count} tests, {self._report.passed} passed, "
            f"{self._report.failed} failed"
        )
        return self._report

    @staticmethod
    def _named(outcome: TestOutcome | None) -> NamedDuration | None:
        if outcome is None:
            return None
        return NamedDuration(name=outcome.name, duration=outcome.duration)
