"""uitest-support - Resilient element lookup and run telemetry for UI test suites.

This package provides:
- Element resolution through an ordered chain of lookup tactics
- Best-effort dismissal of popups, modals and consent banners
- Login fixture helpers
- Aggregation of test lifecycle events into a structured run report

Library Usage:
    >>> from uitest_support import ElementResolver, LookupSpec, RunMetricsAggregator
    >>>
    >>> resolver = ElementResolver(page_query)
    >>> button = resolver.resolve(LookupSpec.by_test_id("checkout"), timeout=5.0)
    >>>
    >>> aggregator = RunMetricsAggregator()
    >>> aggregator.on_run_start({"workerCount": 3, "projects": [], "engines": ["chromium"]})
    >>> aggregator.on_test_end({"name": "login flow", "duration": 120, "status": "passed"})
    >>> report = aggregator.on_run_end()

CLI Usage:
    $ uitest-support report outcomes.jsonl --engine chromium --save
    $ pytest --uitest-report --uitest-engine chromium
"""

__version__ = "0.1.0"

# Core
from uitest_support.core.config import Config
from uitest_support.core.exceptions import (
    UITestSupportError,
    ElementNotFound,
    MisuseError,
    ReportStorageError,
    ValidationError,
)

# Browser
from uitest_support.browser import (
    AccountPage,
    DismissalResult,
    ElementResolver,
    LookupSpec,
    OverlayDismisser,
    ResolvedElement,
    TacticResult,
    dismiss_transient_overlays,
)

# Reporting
from uitest_support.reporting import (
    ReportWriter,
    RunConfig,
    RunMetricsAggregator,
    RunReport,
    TestOutcome,
    TestStatus,
)

__all__ = [
    # Version
    "__version__",
    # Core
    "Config",
    "UITestSupportError",
    "ElementNotFound",
    "MisuseError",
    "ReportStorageError",
    "ValidationError",
    # Browser
    "LookupSpec",
    "ElementResolver",
    "ResolvedElement",
    "TacticResult",
    "OverlayDismisser",
    "DismissalResult",
    "dismiss_transient_overlays",
    "AccountPage",
    # Reporting
    "RunMetricsAggregator",
    "RunConfig",
    "TestOutcome",
    "TestStatus",
    "RunReport",
    "ReportWriter",
]
