"""Lookup tactics for the resolver's fallback chain."""

from __future__ import annotations

import logging
import time
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Callable, Protocol, Sequence

from uitest_support.browser.lookup import LookupSpec
from uitest_support.browser.query import DomQuery, ElementHandle

logger = logging.getLogger(__name__)

Clock = Callable[[], float]


class TacticName(str, Enum):
    """Name of a lookup tactic, in priority order."""

    TEST_ID = "test_id"
    ROLE = "role"
    CSS = "css"


@dataclass
class TacticResult:
    """Outcome of one tactic attempt.

    Attributes:
        found: Whether a visible match was confirmed
        tactic: Tactic that produced this result
        handle: The visible element, if found
        error: Query error swallowed during the attempt
        elapsed: Seconds spent in the attempt
        context: Additional context (matched selector, candidate counts)
    """

    found: bool
    tactic: str
    handle: ElementHandle | None = None
    error: str | None = None
    elapsed: float = 0.0
    context: dict[str, Any] = field(default_factory=dict)

    def __str__(self) -> str:
        if self.found:
            return f"TacticResult({self.tactic}, found)"
        if self.error:
            return f"TacticResult({self.tactic}, error={self.error})"
        return f"TacticResult({self.tactic}, no match)"


class Tactic(Protocol):
    """One lookup strategy in the fallback chain."""

    name: str

    def applies(self, spec: LookupSpec) -> bool: ...

    def attempt(
        self, query: DomQuery, spec: LookupSpec, sub_budget: float
    ) -> TacticResult: ...


def first_visible(
    query: DomQuery,
    handles: Sequence[ElementHandle],
    deadline: float,
    clock: Clock,
) -> ElementHandle | None:
    """Return the first handle (document order) that is visible before the deadline."""
    for handle in handles:
        remaining = max(0.0, deadline - clock())
        if query.is_visible(handle, remaining):
            return handle
    return None


class TestIdTactic:
    """Exact ``data-testid`` match."""

    __test__ = False  # keep pytest from collecting this class

    name = TacticName.TEST_ID.value

    def __init__(self, clock: Clock = time.monotonic) -> None:
        self._clock = clock

    def applies(self, spec: LookupSpec) -> bool:
        return bool(spec.test_id)

    def attempt(
        self, query: DomQuery, spec: LookupSpec, sub_budget: float
    ) -> TacticResult:
        start = self._clock()
        try:
            handles = query.by_test_id(spec.test_id)
            handle = first_visible(query, handles, start + sub_budget, self._clock)
        except Exception as e:
            logger.debug(f"Test id lookup failed for {spec}: {e}")
            return TacticResult(
                found=False, tactic=self.name, error=str(e), elapsed=self._clock() - start
            )

        return TacticResult(
            found=handle is not None,
            tactic=self.name,
            handle=handle,
            elapsed=self._clock() - start,
            context={"test_id": spec.test_id, "candidates": len(handles)},
        )


class RoleTactic:
    """ARIA role plus accessible-name match."""

    name = TacticName.ROLE.value

    def __init__(self, clock: Clock = time.monotonic) -> None:
        self._clock = clock

    def applies(self, spec: LookupSpec) -> bool:
        return bool(spec.role) and spec.name is not None

    def attempt(
        self, query: DomQuery, spec: LookupSpec, sub_budget: float
    ) -> TacticResult:
        start = self._clock()
        try:
            handles = query.by_role(spec.role, spec.name)
            handle = first_visible(query, handles, start + sub_budget, self._clock)
        except Exception as e:
            logger.debug(f"Role lookup failed for {spec}: {e}")
            return TacticResult(
                found=False, tactic=self.name, error=str(e), elapsed=self._clock() - start
            )

        return TacticResult(
            found=handle is not None,
            tactic=self.name,
            handle=handle,
            elapsed=self._clock() - start,
            context={"role": spec.role, "name": spec.name_text, "candidates": len(handles)},
        )


class CssCandidatesTactic:
    """Ordered CSS candidates; the first one that resolves to a visible node wins.

    The tactic's sub-budget is shared among candidates the same way the
    resolver shares its budget among tactics: each candidate gets an equal
    slice of whatever is left.
    """

    name = TacticName.CSS.value

    def __init__(self, clock: Clock = time.monotonic) -> None:
        self._clock = clock

    def applies(self, spec: LookupSpec) -> bool:
        return bool(spec.css_candidates)

    def attempt(
        self, query: DomQuery, spec: LookupSpec, sub_budget: float
    ) -> TacticResult:
        start = self._clock()
        deadline = start + sub_budget
        candidates = spec.css_candidates
        errors: list[str] = []

        for index, selector in enumerate(candidates):
            candidate_start = self._clock()
            remaining = max(0.0, deadline - candidate_start)
            share = remaining / (len(candidates) - index)
            # Query latency counts against the candidate's share
            candidate_deadline = min(deadline, candidate_start + share)
            try:
                handles = query.by_css(selector)
                handle = first_visible(query, handles, candidate_deadline, self._clock)
            except Exception as e:
                # Malformed or unsupported selector; move on to the next one
                logger.debug(f"CSS candidate {selector!r} failed: {e}")
                errors.append(f"{selector}: {e}")
                continue

            if handle is not None:
                return TacticResult(
                    found=True,
                    tactic=self.name,
                    handle=handle,
                    elapsed=self._clock() - start,
                    context={"selector": selector, "candidate_index": index},
                )

        return TacticResult(
            found=False,
            tactic=self.name,
            error="; ".join(errors) or None,
            elapsed=self._clock() - start,
            context={"candidates_tried": len(candidates)},
        )


def default_tactics(clock: Clock = time.monotonic) -> list[Tactic]:
    """Tactics in fixed priority order: test id, role, CSS candidates."""
    return [TestIdTactic(clock), RoleTactic(clock), CssCandidatesTactic(clock)]
