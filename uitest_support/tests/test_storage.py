"""Tests for report persistence."""

import re

import pytest

from uitest_support.core.exceptions import ReportStorageError
from uitest_support.reporting.aggregator import RunMetricsAggregator
from uitest_support.reporting.models import RunConfig, TestOutcome, TestStatus
from uitest_support.reporting.storage import ReportWriter


@pytest.fixture
def report(clock):
    aggregator = RunMetricsAggregator(clock=clock)
    aggregator.on_run_start(RunConfig(worker_count=2, engines=("chromium",)))
    aggregator.on_test_end(TestOutcome("login flow", 120, TestStatus.PASSED))
    return aggregator.on_run_end()


class TestReportWriter:
    """Tests for ReportWriter."""

    def test_save_creates_directory(self, tmp_path, report):
        """Test saving into a missing directory."""
        output_dir = tmp_path / "dashboard-data"
        path = ReportWriter(output_dir).save(report)

        assert path.parent == output_dir
        assert path.exists()
        assert re.fullmatch(r"metrics-\d{4}-\d{2}-\d{2}-\d+\.json", path.name)

    def test_load_saved_report(self, tmp_path, report):
        """Test a saved report reads back in dashboard layout."""
        writer = ReportWriter(tmp_path)
        data = writer.load(writer.save(report))

        assert data["totalTests"] == 1
        assert data["browsers"] == ["chromium"]
        assert data["performance"]["fastestTest"]["name"] == "login flow"

    def test_latest(self, tmp_path, report):
        """Test latest returns the saved file."""
        writer = ReportWriter(tmp_path)
        assert writer.latest() is None

        path = writer.save(report)
        assert writer.latest() == path

    def test_latest_missing_directory(self, tmp_path):
        """Test latest on a directory that does not exist."""
        assert ReportWriter(tmp_path / "nope").latest() is None

    def test_load_missing_file(self, tmp_path):
        """Test loading a missing file raises ReportStorageError."""
        with pytest.raises(ReportStorageError) as exc_info:
            ReportWriter(tmp_path).load(tmp_path / "missing.json")
        assert exc_info.value.path.endswith("missing.json")

    def test_load_invalid_json(self, tmp_path):
        """Test loading malformed JSON raises ReportStorageError."""
        bad = tmp_path / "metrics-bad.json"
        bad.write_text("{not json")
        with pytest.raises(ReportStorageError):
            ReportWriter(tmp_path).load(bad)

    def test_save_into_file_path_fails(self, tmp_path, report):
        """Test an unwritable target raises ReportStorageError."""
        blocker = tmp_path / "blocker"
        blocker.write_text("")
        with pytest.raises(ReportStorageError):
            ReportWriter(blocker / "sub").save(report)
