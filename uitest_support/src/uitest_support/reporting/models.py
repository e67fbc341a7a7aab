"""Data models for test-run telemetry."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime, timezone
from enum import Enum
from typing import Any

from uitest_support.core.exceptions import ValidationError


class TestStatus(str, Enum):
    """Terminal status of a completed test."""

    __test__ = False

    PASSED = "passed"
    FAILED = "failed"
    SKIPPED = "skipped"
    FLAKY = "flaky"


class FailureCategory(str, Enum):
    """Optional classification of a test failure."""

    TIMEOUT = "timeout"
    ASSERTION = "assertion"
    FRAMEWORK = "framework"
    NETWORK = "network"
    OTHER = "other"


def _parse_enum(enum_cls: type[Enum], value: Any, field_name: str) -> Any:
    if isinstance(value, enum_cls):
        return value
    try:
        return enum_cls(str(value).lower())
    except ValueError:
        raise ValidationError(
            f"Unknown {field_name}: {value}", field=field_name, value=value
        ) from None


@dataclass(frozen=True)
class RunConfig:
    """Run configuration handed to the aggregator at run start.

    Attributes:
        worker_count: Number of parallel workers (>= 0)
        projects: Logical test groupings, in configuration order
        engines: Browser engines under test, in configuration order
    """

    worker_count: int = 1
    projects: tuple[str, ...] = ()
    engines: tuple[str, ...] = ()

    def __post_init__(self) -> None:
        object.__setattr__(self, "projects", tuple(self.projects))
        object.__setattr__(self, "engines", tuple(self.engines))
        if self.worker_count < 0:
            raise ValidationError(
                "worker_count must be >= 0", field="worker_count", value=self.worker_count
            )

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> RunConfig:
        """Create from a dict with snake_case or camelCase keys."""
        workers = data.get("worker_count", data.get("workerCount", data.get("workers", 1)))
        return cls(
            worker_count=int(workers),
            projects=tuple(data.get("projects", ())),
            engines=tuple(data.get("engines", data.get("browsers", ()))),
        )


@dataclass
class RunContext:
    """Aggregator state scoped to one run.

    Attributes:
        worker_count: Number of parallel workers
        engines: Distinct browser engines, first-seen order
        projects: Project names, configuration order
        started_at: Clock reading when the run started (seconds)
        timestamp: Wall-clock start of the run
    """

    worker_count: int
    engines: list[str] = field(default_factory=list)
    projects: list[str] = field(default_factory=list)
    started_at: float = 0.0
    timestamp: datetime = field(default_factory=lambda: datetime.now(timezone.utc))

    @classmethod
    def from_config(cls, config: RunConfig, started_at: float = 0.0) -> RunContext:
        return cls(
            worker_count=config.worker_count,
            engines=list(dict.fromkeys(config.engines)),
            projects=list(config.projects),
            started_at=started_at,
        )


@dataclass(frozen=True)
class TestOutcome:
    """Immutable record of one completed test.

    Attributes:
        name: Test title
        duration: Duration in milliseconds
        status: Terminal status
        retry_count: Retries the runner spent on this test
        failure_category: Optional failure classification
        error_message: Failure message, if any
        project: Project the test ran under, if known
    """

    __test__ = False

    name: str
    duration: float
    status: TestStatus
    retry_count: int = 0
    failure_category: FailureCategory | None = None
    error_message: str | None = None
    project: str | None = None

    def __post_init__(self) -> None:
        object.__setattr__(self, "status", _parse_enum(TestStatus, self.status, "status"))
        if self.failure_category is not None:
            object.__setattr__(
                self,
                "failure_category",
                _parse_enum(FailureCategory, self.failure_category, "failure_category"),
            )
        if self.duration < 0:
            raise ValidationError("duration must be >= 0", field="duration", value=self.duration)
        if self.retry_count < 0:
            raise ValidationError(
                "retry_count must be >= 0", field="retry_count", value=self.retry_count
            )

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> TestOutcome:
        """Create from a dict as emitted by a test runner or a JSON-lines feed."""
        if "name" not in data and "title" not in data:
            raise ValidationError("Test outcome needs a name", field="name")
        if "status" not in data:
            raise ValidationError("Test outcome needs a status", field="status")
        return cls(
            name=str(data.get("name", data.get("title"))),
            duration=float(data.get("duration", 0)),
            status=data["status"],
            retry_count=int(data.get("retry_count", data.get("retry", 0))),
            failure_category=data.get("failure_category", data.get("category")),
            error_message=data.get("error_message", data.get("error")),
            project=data.get("project"),
        )


@dataclass(frozen=True)
class NamedDuration:
    """A test name paired with its duration in milliseconds."""

    name: str
    duration: float

    def to_dict(self) -> dict[str, Any]:
        return {"name": self.name, "duration": self.duration}


@dataclass(frozen=True)
class TestDetail:
    """One test with its name-derived classification.

    Attributes:
        name: Test title
        status: Terminal status
        duration: Duration in milliseconds
        feature: Feature area, e.g. "Search" or "General"
        criticality: "Critical", "High", "Medium" or "Low"
        platform: "Mobile", "Desktop" or "Cross-Platform"
    """

    __test__ = False

    name: str
    status: TestStatus
    duration: float
    feature: str
    criticality: str
    platform: str

    def to_dict(self) -> dict[str, Any]:
        return {
            "name": self.name,
            "status": self.status.value,
            "duration": self.duration,
            "feature": self.feature,
            "criticality": self.criticality,
            "platform": self.platform,
        }


@dataclass(frozen=True)
class DefectAnalysis:
    """Triage of one failed test."""

    test_name: str
    issue_type: str
    risk_level: str
    description: str
    recommendation: str
    is_real_issue: bool = True

    def to_dict(self) -> dict[str, Any]:
        return {
            "testName": self.test_name,
            "issueType": self.issue_type,
            "riskLevel": self.risk_level,
            "description": self.description,
            "recommendation": self.recommendation,
            "isRealIssue": self.is_real_issue,
        }


@dataclass(frozen=True)
class RunReport:
    """Final summary of one run, produced once and never mutated."""

    timestamp: datetime
    total_tests: int
    passed: int
    failed: int
    skipped: int
    flaky: int
    execution_time: float
    parallel_workers: int
    browsers: tuple[str, ...]
    projects: tuple[str, ...]
    avg_test_duration: float
    slowest_test: NamedDuration | None
    fastest_test: NamedDuration | None
    feature_coverage: int
    critical_path_coverage: int
    cross_platform_coverage: int
    framework_errors: int
    timeouts: int
    retries: int
    feature_tags: tuple[str, ...] = ()
    test_details: tuple[TestDetail, ...] = ()
    defect_analysis: tuple[DefectAnalysis, ...] = ()

    @property
    def pass_rate(self) -> int:
        """Percentage of tests that passed, rounded half up."""
        if self.total_tests == 0:
            return 0
        return int(self.passed * 100 / self.total_tests + 0.5)

    @property
    def is_success(self) -> bool:
        return self.failed == 0

    def to_dict(self) -> dict[str, Any]:
        """Convert to the dashboard metrics layout."""
        empty = {"name": "", "duration": 0}
        return {
            "timestamp": self.timestamp.isoformat(),
            "totalTests": self.total_tests,
            "passed": self.passed,
            "failed": self.failed,
            "skipped": self.skipped,
            "flaky": self.flaky,
            "executionTime": self.execution_time,
            "parallelWorkers": self.parallel_workers,
            "browsers": list(self.browsers),
            "projects": list(self.projects),
            "performance": {
                "avgTestDuration": self.avg_test_duration,
                "slowestTest": self.slowest_test.to_dict() if self.slowest_test else empty,
                "fastestTest": self.fastest_test.to_dict() if self.fastest_test else empty,
            },
            "coverage": {
                "features": self.feature_coverage,
                "criticalPaths": self.critical_path_coverage,
                "crossPlatform": self.cross_platform_coverage,
            },
            "stability": {
                "frameworkErrors": self.framework_errors,
                "timeouts": self.timeouts,
                "retries": self.retries,
            },
            "testDetails": [detail.to_dict() for detail in self.test_details],
            "defectAnalysis": [defect.to_dict() for defect in self.defect_analysis],
        }
