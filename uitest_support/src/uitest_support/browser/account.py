"""Authentication fixture helpers built on the element resolver."""

from __future__ import annotations

import logging
import re
from typing import Any, Callable

from uitest_support.browser.element_resolver import ElementResolver
from uitest_support.browser.lookup import LookupSpec
from uitest_support.core.config import Config

logger = logging.getLogger(__name__)

EMAIL_FIELD = LookupSpec(
    description="email field",
    test_id="login-email",
    css_candidates=('[name="email"]', 'input[type="email"]'),
)
PASSWORD_FIELD = LookupSpec(
    description="password field",
    test_id="login-password",
    css_candidates=('[name="password"]', 'input[type="password"]'),
)
SUBMIT_BUTTON = LookupSpec(
    description="login submit",
    role="button",
    name=re.compile(r"log ?in|sign ?in", re.IGNORECASE),
    css_candidates=('[type="submit"]',),
)
USER_MENU = LookupSpec(description="user menu", test_id="user-menu")

Navigator = Callable[[str], Any]


class AccountPage:
    """Login flow helper for tests that need an authenticated session.

    Example:
        account = AccountPage(page.goto, ElementResolver(page_query))
        account.navigate_to_login()
        account.login()  # credentials from UITEST_EMAIL / UITEST_PASSWORD
        assert account.is_authenticated()
    """

    def __init__(
        self,
        navigate: Navigator,
        resolver: ElementResolver,
        config: Config | None = None,
    ) -> None:
        """Initialize the account page helper.

        Args:
            navigate: Function that sends the browser to a URL or path
            resolver: Resolver bound to the page under test
            config: Configuration (loaded from env if not provided)

        Raises:
            ValueError: If the configured timeouts are not positive
        """
        self._navigate = navigate
        self._resolver = resolver
        self.config = config or Config.from_env()
        self.config.validate()

    def navigate_to_login(self) -> None:
        logger.info(f"Navigating to login: {self.config.login_path}")
        self._navigate(self.config.login_path)

    def login(self, email: str | None = None, password: str | None = None) -> None:
        """Fill the login form and submit it.

        Args:
            email: Account email (defaults to configured credentials)
            password: Account password (defaults to configured credentials)

        Raises:
            ValueError: If no credentials are given or configured
            ElementNotFound: If a form element cannot be resolved
        """
        if email is None or password is None:
            email, password = self.config.require_credentials()

        timeout = self.config.resolve_timeout
        self._resolver.resolve(EMAIL_FIELD, timeout).fill(email)
        self._resolver.resolve(PASSWORD_FIELD, timeout).fill(password)
        self._resolver.resolve(SUBMIT_BUTTON, timeout).click()
        logger.info(f"Submitted login for {email}")

    def is_authenticated(self, timeout: float = 2.0) -> bool:
        """Check whether the user menu is visible."""
        return self._resolver.try_resolve(USER_MENU, timeout).found
