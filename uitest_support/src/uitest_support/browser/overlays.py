"""Best-effort dismissal of popups, modals and consent banners."""

from __future__ import annotations

import logging
import time
from dataclasses import dataclass, field

from uitest_support.browser.query import DomQuery
from uitest_support.browser.tactics import Clock, first_visible
from uitest_support.core.config import Config

logger = logging.getLogger(__name__)

# Selectors for transient overlays that block interaction
OVERLAY_SELECTORS = [
    '[class*="popup"]',
    '[class*="modal"]',
    '[class*="dialog"]',
    '[class*="cookie"]',
    '[class*="consent"]',
    '[data-testid*="popup"]',
    '[role="dialog"]',
]

# Dismissal buttons, tried in order inside a visible overlay
DISMISS_SELECTORS = [
    'button:has-text("Close")',
    'button:has-text("×")',
    '[aria-label="Close"]',
    'button:has-text("Accept")',
    'button:has-text("OK")',
]


@dataclass
class DismissalResult:
    """Result of one overlay sweep.

    Attributes:
        overlays_seen: Overlay selectors that had a visible match
        dismissed: (overlay selector, button selector) pairs that were clicked
        errors: Query or click failures encountered during the sweep
    """

    overlays_seen: list[str] = field(default_factory=list)
    dismissed: list[tuple[str, str]] = field(default_factory=list)
    errors: list[str] = field(default_factory=list)

    @property
    def dismissed_count(self) -> int:
        return len(self.dismissed)

    @property
    def is_noop(self) -> bool:
        """True when nothing was visible and nothing was clicked."""
        return not self.overlays_seen and not self.dismissed

    def __str__(self) -> str:
        return (
            f"DismissalResult(seen={len(self.overlays_seen)}, "
            f"dismissed={self.dismissed_count}, errors={len(self.errors)})"
        )


class OverlayDismisser:
    """Scans for transient overlays and clicks their dismissal buttons.

    Failure to dismiss anything is never an error. Calling it with no
    overlay on the page is a cheap no-op, so it is safe to call before
    every interaction.
    """

    def __init__(
        self,
        query: DomQuery,
        overlay_selectors: list[str] | None = None,
        dismiss_selectors: list[str] | None = None,
        probe_timeout: float | None = None,
        dismiss_timeout: float | None = None,
        clock: Clock = time.monotonic,
        config: Config | None = None,
    ) -> None:
        """Initialize the dismisser.

        Args:
            query: Page query surface
            overlay_selectors: Overlay selectors to scan (default OVERLAY_SELECTORS)
            dismiss_selectors: Button selectors, in click priority order
            probe_timeout: Visibility wait per overlay (default from config)
            dismiss_timeout: Visibility wait per button (default from config)
            clock: Monotonic clock
            config: Configuration (loaded from env if not provided)

        Raises:
            ValueError: If the configured timeouts are not positive
        """
        self.config = config or Config.from_env()
        self.config.validate()

        self._query = query
        if overlay_selectors is not None:
            self._overlay_selectors = list(overlay_selectors)
        else:
            self._overlay_selectors = list(OVERLAY_SELECTORS)
        if dismiss_selectors is not None:
            self._dismiss_selectors = list(dismiss_selectors)
        else:
            self._dismiss_selectors = list(DISMISS_SELECTORS)
        if probe_timeout is None:
            probe_timeout = self.config.overlay_probe_timeout
        if dismiss_timeout is None:
            dismiss_timeout = self.config.dismiss_probe_timeout
        self._probe_timeout = probe_timeout
        self._dismiss_timeout = dismiss_timeout
        self._clock = clock

    def dismiss_transient_overlays(self) -> DismissalResult:
        """Dismiss every visible overlay that offers a known close button.

        Returns:
            DismissalResult describing what was seen and clicked
        """
        result = DismissalResult()

        for overlay_selector in self._overlay_selectors:
            try:
                overlays = self._query.by_css(overlay_selector)
                overlay = first_visible(
                    self._query,
                    overlays,
                    self._clock() + self._probe_timeout,
                    self._clock,
                )
            except Exception as e:
                result.errors.append(f"{overlay_selector}: {e}")
                continue

            if overlay is None:
                continue

            result.overlays_seen.append(overlay_selector)
            self._dismiss(overlay_selector, overlay, result)

        if result.dismissed:
            logger.info(f"Dismissed {result.dismissed_count} overlay(s)")
        return result

    def _dismiss(self, overlay_selector: str, overlay, result: DismissalResult) -> None:
        """Click the first visible dismissal button inside one overlay."""
        for button_selector in self._dismiss_selectors:
            try:
                buttons = self._query.by_css(button_selector, within=overlay)
                button = first_visible(
                    self._query,
                    buttons,
                    self._clock() + self._dismiss_timeout,
                    self._clock,
                )
                if button is None:
                    continue
                button.click()
            except Exception as e:
                result.errors.append(f"{overlay_selector} > {button_selector}: {e}")
                continue

            logger.debug(f"Clicked {button_selector} in {overlay_selector}")
            result.dismissed.append((overlay_selector, button_selector))
            return


def dismiss_transient_overlays(query: DomQuery, **kwargs) -> DismissalResult:
    """Convenience wrapper around ``OverlayDismisser``."""
    return OverlayDismisser(query, **kwargs).dismiss_transient_overlays()
