"""Pytest configuration and fixtures for uitest-support tests."""

import os
import re
import sys
from typing import Any

import pytest

# Add src to path for imports
sys.path.insert(0, os.path.join(os.path.dirname(__file__), "..", "src"))


class FakeClock:
    """Manually advanced monotonic clock."""

    def __init__(self, start: float = 0.0) -> None:
        self.now = start

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds


class FakeHandle:
    """Element handle that records interactions."""

    def __init__(self, name: str, visible: bool = True, on_click: Any = None) -> None:
        self.name = name
        self.visible = visible
        self.on_click = on_click
        self.clicks = 0
        self.filled: list[str] = []

    def click(self) -> None:
        self.clicks += 1
        if self.on_click:
            self.on_click()

    def fill(self, value: str) -> None:
        self.filled.append(value)

    def __repr__(self) -> str:
        return f"FakeHandle({self.name})"


class FakeQuery:
    """In-memory DomQuery.

    Invisible handles consume the whole visibility timeout on the fake clock,
    the way a real bounded wait would. ``latency`` is charged to the clock on
    every lookup call.
    """

    def __init__(self, clock: FakeClock, latency: float = 0.0) -> None:
        self.clock = clock
        self.latency = latency
        self.test_ids: dict[str, list[FakeHandle]] = {}
        self.roles: dict[str, list[tuple[str, FakeHandle]]] = {}
        self.css: dict[str, list[FakeHandle]] = {}
        self.scoped_css: dict[tuple[str, str], list[FakeHandle]] = {}
        self.errors: dict[str, Exception] = {}
        self.calls: list[tuple[str, Any]] = []
        self.visibility_timeouts: list[float] = []

    def _maybe_raise(self, key: str) -> None:
        self.clock.advance(self.latency)
        if key in self.errors:
            raise self.errors[key]

    def by_test_id(self, value: str) -> list[FakeHandle]:
        self.calls.append(("test_id", value))
        self._maybe_raise(value)
        return list(self.test_ids.get(value, []))

    def by_role(self, role: str, name: Any) -> list[FakeHandle]:
        self.calls.append(("role", role))
        self._maybe_raise(role)
        matches = []
        for label, handle in self.roles.get(role, []):
            if isinstance(name, re.Pattern):
                if name.search(label):
                    matches.append(handle)
            elif name.lower() in label.lower():
                matches.append(handle)
        return matches

    def by_css(self, selector: str, within: Any = None) -> list[FakeHandle]:
        self.calls.append(("css", selector))
        self._maybe_raise(selector)
        if within is not None:
            return list(self.scoped_css.get((within.name, selector), []))
        return list(self.css.get(selector, []))

    def is_visible(self, handle: FakeHandle, timeout: float) -> bool:
        self.visibility_timeouts.append(timeout)
        if not handle.visible:
            self.clock.advance(timeout)
        return handle.visible

    def call_kinds(self) -> list[str]:
        return [kind for kind, _ in self.calls]


@pytest.fixture
def clock() -> FakeClock:
    """Deterministic clock starting at zero."""
    return FakeClock()


@pytest.fixture
def query(clock) -> FakeQuery:
    """Empty fake page bound to the fake clock."""
    return FakeQuery(clock)


@pytest.fixture
def resolver(query, clock):
    """ElementResolver over the fake page."""
    from uitest_support.browser.element_resolver import ElementResolver
    return ElementResolver(query, clock=clock)


@pytest.fixture
def outcome_records() -> list[dict[str, Any]]:
    """A small mixed run, as a runner would report it."""
    return [
        {"name": "homepage navigation smoke", "duration": 800, "status": "passed"},
        {"name": "search for drills", "duration": 1500, "status": "passed", "retry": 1},
        {
            "name": "checkout as guest",
            "duration": 30000,
            "status": "failed",
            "error": "Test timeout of 30000ms exceeded.",
        },
        {"name": "mobile account menu", "duration": 400, "status": "skipped"},
        {"name": "store locator", "duration": 950, "status": "flaky", "retry": 2},
    ]
