"""Per-test classification and failure triage from test names.

Each rule table is checked in order; the first rule with a marker contained in
the lowercased test name wins, otherwise the fallback applies.
"""

from __future__ import annotations

from uitest_support.reporting.models import DefectAnalysis, TestDetail, TestOutcome, TestStatus

Rules = list[tuple[tuple[str, ...], str]]

FEATURE_RULES: Rules = [
    (("navigation",), "Navigation"),
    (("search",), "Search"),
    (("account",), "Account"),
    (("homepage",), "Homepage"),
    (("performance",), "Performance"),
    (("accessibility",), "Accessibility"),
]

CRITICALITY_RULES: Rules = [
    (("critical", "smoke"), "Critical"),
    (("regression",), "High"),
    (("edge", "boundary"), "Medium"),
]

PLATFORM_RULES: Rules = [
    (("mobile",), "Mobile"),
    (("desktop",), "Desktop"),
]

ISSUE_TYPE_RULES: Rules = [
    (("timeout", "connection"), "Performance/Network"),
    (("visual", "screenshot"), "Visual/UI"),
    (("accessibility",), "Accessibility"),
    (("security",), "Security"),
]

RISK_RULES: Rules = [
    (("critical", "security"), "High"),
    (("performance", "accessibility"), "Medium"),
    (("visual", "edge"), "Low"),
]

DESCRIPTION_RULES: Rules = [
    (("timeout",), "Test timed out - likely network/performance issue"),
    (
        ("visual",),
        "Visual regression detected - UI changes or screenshot baseline needs update",
    ),
    (("accessibility",), "Accessibility compliance issue detected"),
    (("performance",), "Performance metrics below expected thresholds"),
]

RECOMMENDATION_RULES: Rules = [
    (("timeout",), "Increase timeout or investigate network performance"),
    (("visual",), "Review UI changes and update baseline if intentional"),
    (("accessibility",), "Fix accessibility issues or update test expectations"),
    (("performance",), "Optimize page performance or adjust performance budgets"),
]

# Marker pairs that identify a failure caused by the test setup, not the app
KNOWN_NON_ISSUES = [
    ("visual", "baseline"),
    ("timeout", "3g"),
]


def classify(name: str, rules: Rules, fallback: str) -> str:
    """Return the label of the first rule whose marker appears in ``name``."""
    name_lower = name.lower()
    for markers, label in rules:
        if any(marker in name_lower for marker in markers):
            return label
    return fallback


def is_real_issue(name: str) -> bool:
    name_lower = name.lower()
    return not any(all(marker in name_lower for marker in pair) for pair in KNOWN_NON_ISSUES)


def detail_for(outcome: TestOutcome) -> TestDetail:
    """Classify one outcome by feature, criticality and platform."""
    return TestDetail(
        name=outcome.name,
        status=outcome.status,
        duration=outcome.duration,
        feature=classify(outcome.name, FEATURE_RULES, "General"),
        criticality=classify(outcome.name, CRITICALITY_RULES, "Low"),
        platform=classify(outcome.name, PLATFORM_RULES, "Cross-Platform"),
    )


def triage(outcome: TestOutcome) -> DefectAnalysis:
    """Triage one failed outcome."""
    name = outcome.name
    return DefectAnalysis(
        test_name=name,
        issue_type=classify(name, ISSUE_TYPE_RULES, "Functional"),
        risk_level=classify(name, RISK_RULES, "Medium"),
        description=classify(
            name, DESCRIPTION_RULES, "Functional test failure - requires investigation"
        ),
        recommendation=classify(
            name, RECOMMENDATION_RULES, "Debug test failure and fix underlying issue"
        ),
        is_real_issue=is_real_issue(name),
    )


def defect_report(outcomes: list[TestOutcome]) -> list[DefectAnalysis]:
    """Triage every failed outcome, in arrival order."""
    return [triage(o) for o in outcomes if o.status == TestStatus.FAILED]
