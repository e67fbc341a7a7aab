"""Resilient element lookup and page helpers."""

from uitest_support.browser.account import AccountPage
from uitest_support.browser.element_resolver import ElementResolver, ResolvedElement
from uitest_support.browser.lookup import LookupSpec
from uitest_support.browser.overlays import (
    DismissalResult,
    OverlayDismisser,
    dismiss_transient_overlays,
)
from uitest_support.browser.query import DomQuery, ElementHandle
from uitest_support.browser.tactics import (
    CssCandidatesTactic,
    RoleTactic,
    Tactic,
    TacticName,
    TacticResult,
    TestIdTactic,
    default_tactics,
)

__all__ = [
    # Element targeting
    "LookupSpec",
    "ElementResolver",
    "ResolvedElement",
    "DomQuery",
    "ElementHandle",
    # Tactics
    "Tactic",
    "TacticName",
    "TacticResult",
    "TestIdTactic",
    "RoleTactic",
    "CssCandidatesTactic",
    "default_tactics",
    # Overlays
    "OverlayDismisser",
    "DismissalResult",
    "dismiss_transient_overlays",
    # Fixtures
    "AccountPage",
]
