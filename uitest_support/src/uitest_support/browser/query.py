"""DOM-query capability consumed by the resolver.

The host browser-automation layer supplies an object satisfying ``DomQuery``.
Every lookup returns zero or more handles in document order; visibility is
checked separately with a bounded wait.
"""

from __future__ import annotations

import re
from typing import Any, Protocol, Sequence, Union

NamePattern = Union[str, "re.Pattern[str]"]


class ElementHandle(Protocol):
    """A located DOM node. Owned by the caller; stale after navigation."""

    def click(self) -> Any: ...

    def fill(self, value: str) -> Any: ...


class DomQuery(Protocol):
    """Query surface of one page or document."""

    def by_test_id(self, value: str) -> Sequence[ElementHandle]: ...

    def by_role(self, role: str, name: NamePattern) -> Sequence[ElementHandle]: ...

    def by_css(
        self, selector: str, within: ElementHandle | None = None
    ) -> Sequence[ElementHandle]: ...

    def is_visible(self, handle: ElementHandle, timeout: float) -> bool: ...
