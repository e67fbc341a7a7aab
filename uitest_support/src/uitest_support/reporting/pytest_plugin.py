"""pytest plugin that feeds session events into a RunMetricsAggregator.

Enable with ``pytest --uitest-report``. Engines under test are declared with
``--uitest-engine`` (repeatable); the report is written to
``--uitest-report-dir`` or ``UITEST_REPORT_DIR``.
"""

from __future__ import annotations

import dataclasses
import logging
from typing import Any

import pytest

from uitest_support.core.config import Config
from uitest_support.reporting.aggregator import RunMetricsAggregator
from uitest_support.reporting.models import RunConfig, RunReport, TestOutcome, TestStatus
from uitest_support.reporting.storage import ReportWriter

logger = logging.getLogger(__name__)


def pytest_addoption(parser: Any) -> None:
    group = parser.getgroup("uitest-support", "UI test run metrics")
    group.addoption(
        "--uitest-report",
        action="store_true",
        default=False,
        help="Aggregate run metrics and save a JSON report at session end",
    )
    group.addoption(
        "--uitest-engine",
        action="append",
        default=[],
        help="Browser engine under test (repeatable)",
    )
    group.addoption(
        "--uitest-report-dir",
        default=None,
        help="Directory for metrics reports (default: UITEST_REPORT_DIR)",
    )


def pytest_configure(config: Any) -> None:
    # Only the controlling process aggregates when running under xdist
    if not config.getoption("uitest_report") or hasattr(config, "workerinput"):
        return
    output_dir = config.getoption("uitest_report_dir") or Config.from_env().report_dir
    config.pluginmanager.register(
        RunMetricsPlugin(config, ReportWriter(output_dir)), "uitest-run-metrics"
    )


def outcome_from_report(report: Any) -> TestOutcome | None:
    """Map a pytest TestReport to a TestOutcome.

    Only the call phase, or a setup phase that failed or skipped, decides the
    outcome. Tests marked xfail (expected failure or unexpected pass) and
    passes that needed reruns map to flaky.

    Returns None for phases that do not decide the test's outcome.
    """
    if not (
        report.when == "call"
        or (report.when == "setup" and (report.failed or report.skipped))
    ):
        return None
    if report.outcome == "rerun":
        return None

    retries = int(getattr(report, "rerun", 0) or 0)
    if report.failed:
        status = TestStatus.FAILED
    elif getattr(report, "wasxfail", None) is not None:
        status = TestStatus.FLAKY
    elif report.skipped:
        status = TestStatus.SKIPPED
    elif retries > 0:
        status = TestStatus.FLAKY
    else:
        status = TestStatus.PASSED

    return TestOutcome(
        name=report.nodeid,
        duration=max(0.0, report.duration * 1000),
        status=status,
        retry_count=retries,
        error_message=report.longreprtext if report.failed else None,
    )


def apply_teardown(outcome: TestOutcome, report: Any) -> TestOutcome:
    """Fold a teardown report into an already decided outcome.

    A failing teardown fails a test that otherwise passed; the first failure
    message wins when the test had already failed.
    """
    if not report.failed or outcome.status == TestStatus.FAILED:
        return outcome
    return dataclasses.replace(
        outcome, status=TestStatus.FAILED, error_message=report.longreprtext
    )


class RunMetricsPlugin:
    """Host adapter between pytest's session hooks and the aggregator.

    Outcomes are held back until the test's teardown report arrives so that
    teardown errors count against the test.
    """

    def __init__(self, config: Any, writer: ReportWriter) -> None:
        self.config = config
        self.writer = writer
        self.aggregator = RunMetricsAggregator()
        self.report: RunReport | None = None
        self._pending: dict[str, TestOutcome] = {}

    def _run_config(self, session: Any) -> RunConfig:
        workers = getattr(self.config.option, "numprocesses", None) or 1
        return RunConfig(
            worker_count=int(workers),
            projects=(session.name,),
            engines=tuple(self.config.getoption("uitest_engine") or ()),
        )

    @pytest.hookimpl(tryfirst=True)
    def pytest_sessionstart(self, session: Any) -> None:
        self.aggregator.on_run_start(self._run_config(session))

    def pytest_runtest_logreport(self, report: Any) -> None:
        if report.when == "teardown":
            outcome = self._pending.pop(report.nodeid, None)
            if outcome is not None:
                self.aggregator.on_test_end(apply_teardown(outcome, report))
            return

        outcome = outcome_from_report(report)
        if outcome is not None:
            self._pending[report.nodeid] = outcome

    @pytest.hookimpl(trylast=True)
    def pytest_sessionfinish(self, session: Any, exitstatus: int) -> None:
        # Tests interrupted before teardown still count
        for outcome in self._pending.values():
            self.aggregator.on_test_end(outcome)
        self._pending.clear()

        self.report = self.aggregator.on_run_end()
        path = self.writer.save(self.report)
        logger.info(f"uitest-support report: {path}")
