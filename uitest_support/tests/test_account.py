"""Tests for the AccountPage login fixture."""

from unittest.mock import Mock

import pytest

from uitest_support.browser.account import AccountPage
from uitest_support.core.config import Config
from uitest_support.core.exceptions import ElementNotFound

from conftest import FakeHandle


@pytest.fixture
def config() -> Config:
    return Config(
        resolve_timeout=2.0,
        login_path="/account/login",
        test_email="qa@example.com",
        test_password="s3cret",
    )


@pytest.fixture
def login_page(query):
    """Fake login form using plain name attributes."""
    handles = {
        "email": FakeHandle("email"),
        "password": FakeHandle("password"),
        "submit": FakeHandle("submit"),
    }
    query.css['[name="email"]'] = [handles["email"]]
    query.css['[name="password"]'] = [handles["password"]]
    query.css['[type="submit"]'] = [handles["submit"]]
    return handles


class TestAccountPage:
    """Tests for AccountPage."""

    def test_navigate_to_login(self, resolver, config):
        """Test navigation goes to the configured login path."""
        navigate = Mock()
        AccountPage(navigate, resolver, config).navigate_to_login()
        navigate.assert_called_once_with("/account/login")

    def test_login_with_configured_credentials(self, resolver, config, login_page):
        """Test login fills both fields and submits."""
        AccountPage(Mock(), resolver, config).login()

        assert login_page["email"].filled == ["qa@example.com"]
        assert login_page["password"].filled == ["s3cret"]
        assert login_page["submit"].clicks == 1

    def test_login_with_explicit_credentials(self, resolver, config, login_page):
        """Test explicit credentials override configuration."""
        AccountPage(Mock(), resolver, config).login("other@example.com", "pw")

        assert login_page["email"].filled == ["other@example.com"]
        assert login_page["password"].filled == ["pw"]

    def test_login_prefers_test_ids(self, resolver, config, query, login_page):
        """Test data-testid fields win over CSS fallbacks."""
        by_id = FakeHandle("email-by-id")
        query.test_ids["login-email"] = [by_id]

        AccountPage(Mock(), resolver, config).login()

        assert by_id.filled == ["qa@example.com"]
        assert login_page["email"].filled == []

    def test_login_without_credentials(self, resolver):
        """Test missing credentials raise before touching the page."""
        page = AccountPage(Mock(), resolver, Config(test_email="", test_password=""))
        with pytest.raises(ValueError):
            page.login()

    def test_login_missing_form(self, resolver, config):
        """Test an absent form surfaces ElementNotFound."""
        with pytest.raises(ElementNotFound):
            AccountPage(Mock(), resolver, config).login()

    def test_is_authenticated(self, resolver, config, query):
        """Test the user menu decides authentication."""
        page = AccountPage(Mock(), resolver, config)
        assert not page.is_authenticated()

        query.test_ids["user-menu"] = [FakeHandle("menu")]
        assert page.is_authenticated()

    def test_invalid_config_rejected(self, resolver):
        """Test non-positive configured timeouts are rejected up front."""
        with pytest.raises(ValueError):
            AccountPage(Mock(), resolver, Config(resolve_timeout=-1))
