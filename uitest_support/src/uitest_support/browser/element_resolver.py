"""Multi-tactic element resolution for UI-change resilient targeting."""

from __future__ import annotations

import logging
import time
from dataclasses import dataclass, field

from uitest_support.browser.lookup import LookupSpec
from uitest_support.browser.query import DomQuery, ElementHandle
from uitest_support.browser.tactics import Clock, Tactic, TacticResult, default_tactics
from uitest_support.core.exceptions import ElementNotFound

logger = logging.getLogger(__name__)

DEFAULT_TIMEOUT = 10.0


@dataclass
class ResolvedElement:
    """Result of element resolution.

    Attributes:
        found: Whether the element was successfully resolved
        handle: Visible element handle, when found
        tactic: Name of the tactic that succeeded
        attempts: Every tactic attempt made, in order
        elapsed: Seconds spent resolving
    """

    found: bool
    handle: ElementHandle | None = None
    tactic: str | None = None
    attempts: list[TacticResult] = field(default_factory=list)
    elapsed: float = 0.0

    def __str__(self) -> str:
        if self.found:
            return f"ResolvedElement(tactic={self.tactic})"
        return "ResolvedElement(not found)"


class ElementResolver:
    """Resolves lookup specs through an ordered chain of tactics.

    Tries tactics in priority order until one confirms a visible match:
    1. Test id (exact ``data-testid``)
    2. ARIA role + accessible name
    3. CSS candidate list

    Each applicable tactic gets an equal share of the budget that remains
    when its turn comes, so the last tactic inherits whatever earlier
    tactics did not use.

    Example:
        resolver = ElementResolver(page_query)
        search = resolver.resolve(
            LookupSpec(
                description="search box",
                test_id="search-input",
                css_candidates=("input[type='search']", "#search"),
            ),
            timeout=5.0,
        )
        search.fill("drill")
    """

    def __init__(
        self,
        query: DomQuery,
        tactics: list[Tactic] | None = None,
        clock: Clock = time.monotonic,
    ) -> None:
        """Initialize the element resolver.

        Args:
            query: DOM-query capability for the page being tested
            tactics: Tactics in priority order (defaults to test id, role, CSS)
            clock: Monotonic clock in seconds
        """
        self._query = query
        self._clock = clock
        self._tactics = tactics if tactics is not None else default_tactics(clock)

    @property
    def tactics(self) -> list[Tactic]:
        return list(self._tactics)

    def try_resolve(
        self, spec: LookupSpec, timeout: float = DEFAULT_TIMEOUT
    ) -> ResolvedElement:
        """Resolve a lookup spec without raising.

        Args:
            spec: Description of the target element
            timeout: Total wait budget in seconds

        Returns:
            ResolvedElement with the handle and every attempt made
        """
        start = self._clock()
        deadline = start + max(0.0, timeout)
        applicable = [tactic for tactic in self._tactics if tactic.applies(spec)]
        attempts: list[TacticResult] = []

        for index, tactic in enumerate(applicable):
            remaining = max(0.0, deadline - self._clock())
            sub_budget = remaining / (len(applicable) - index)
            result = tactic.attempt(self._query, spec, sub_budget)
            attempts.append(result)

            if result.found:
                logger.debug(f"Resolved {spec} via {tactic.name}")
                return ResolvedElement(
                    found=True,
                    handle=result.handle,
                    tactic=tactic.name,
                    attempts=attempts,
                    elapsed=self._clock() - start,
                )
            logger.debug(f"Tactic {tactic.name} missed for {spec}: {result}")

        return ResolvedElement(
            found=False, attempts=attempts, elapsed=self._clock() - start
        )

    def resolve(self, spec: LookupSpec, timeout: float = DEFAULT_TIMEOUT) -> ElementHandle:
        """Resolve a lookup spec to a visible element.

        Args:
            spec: Description of the target element
            timeout: Total wait budget in seconds

        Returns:
            Handle of the first visible match

        Raises:
            ElementNotFound: If every tactic is exhausted
        """
        result = self.try_resolve(spec, timeout)
        if result.found:
            return result.handle

        logger.warning(f"Failed to resolve element: {spec}")
        raise ElementNotFound(
            spec,
            attempts=result.attempts,
            timeout=timeout,
            details={"tactics": [a.tactic for a in result.attempts]},
        )
