"""Lookup targets for resilient element resolution."""

from __future__ import annotations

import re
from dataclasses import dataclass

from uitest_support.browser.query import NamePattern
from uitest_support.core.exceptions import ValidationError


@dataclass(frozen=True)
class LookupSpec:
    """Description of a target element.

    Carries any combination of a test id, an ARIA role with accessible name,
    and an ordered list of CSS candidates. Tactics are tried in that order and
    each one applies only when its fields are present.

    Example:
        search_box = LookupSpec(
            description="search box",
            test_id="search-input",
            role="textbox",
            name=re.compile("search for products", re.I),
            css_candidates=("input[type='search']", "#search"),
        )
    """

    description: str = ""  # Human-readable name for logging
    test_id: str | None = None
    role: str | None = None
    name: NamePattern | None = None
    css_candidates: tuple[str, ...] = ()

    def __post_init__(self) -> None:
        # Accept lists for convenience, store immutably
        object.__setattr__(self, "css_candidates", tuple(self.css_candidates))
        if self.role is not None and self.name is None:
            raise ValidationError(
                "Role lookup requires an accessible name", field="name", value=None
            )
        if self.name is not None and self.role is None:
            raise ValidationError(
                "Accessible name given without a role", field="role", value=None
            )
        if not (self.test_id or self.role or self.css_candidates):
            raise ValidationError(
                "LookupSpec needs a test id, a role, or CSS candidates",
                field="spec",
                value=self.description,
            )

    @classmethod
    def by_test_id(cls, value: str, description: str = "") -> LookupSpec:
        return cls(description=description or f"testId={value}", test_id=value)

    @classmethod
    def by_role(cls, role: str, name: NamePattern, description: str = "") -> LookupSpec:
        return cls(description=description or f"role={role}", role=role, name=name)

    @classmethod
    def by_css(cls, *candidates: str, description: str = "") -> LookupSpec:
        if not description and candidates:
            description = f"css={candidates[0]}"
        return cls(description=description, css_candidates=tuple(candidates))

    @property
    def name_text(self) -> str | None:
        """Accessible name as text, for logging and prompts."""
        if isinstance(self.name, re.Pattern):
            return self.name.pattern
        return self.name

    def __str__(self) -> str:
        return f"LookupSpec({self.description or 'unnamed'})"
