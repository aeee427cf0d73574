"""Tests for FormLoginHandler."""

from __future__ import annotations

import pytest

from pagelens.core.auth.login import USERNAME_SELECTORS, FormLoginHandler
from pagelens.core.errors import ElementNotFound, LoginTimeout, NavigationTimeout
from pagelens.core.interfaces.driver import Keys
from pagelens.core.models.config import LoginConfig, LoginSelectors, LoginWait
from tests.pytest_plugins.fake_driver import FakeDocument, FakeDriver, FakeElement

LOGIN_URL = "https://example.com/login"
DASHBOARD_URL = "https://example.com/dashboard"


def login_config(**overrides) -> LoginConfig:
    data = {"login_url": LOGIN_URL, "username": "ada", "password": "hunter2"}
    data.update(overrides)
    return LoginConfig(**data)


def login_form(driver: FakeDriver, document: FakeDocument, *, redirect: bool = True) -> dict[str, FakeElement]:
    """Populate a document with a standard email/password form."""
    fields = {
        "username": FakeElement("username"),
        "password": FakeElement("password"),
        "submit": FakeElement(
            "submit",
            attributes={"type": "submit"},
            text="Sign in",
            on_click=(lambda: driver.set_url(DASHBOARD_URL)) if redirect else None,
        ),
    }
    document.add('input[type="email"]', fields["username"])
    document.add('input[type="password"]', fields["password"])
    document.add('button[type="submit"]', fields["submit"])
    return fields


@pytest.fixture
def handler(resolver, fast_auth_config) -> FormLoginHandler:
    return FormLoginHandler(resolver, fast_auth_config)


class TestLoginFlow:
    """Tests for the main login sequence."""

    @pytest.mark.asyncio
    async def test_fills_and_submits(self, handler, driver, document):
        """Test credentials are typed and the submit control is clicked."""
        fields = login_form(driver, document)

        result = await handler.login(driver, login_config())

        assert fields["username"].keys == ["ada"]
        assert fields["password"].keys == ["hunter2"]
        assert fields["submit"].clicks == 1
        assert result.url == DASHBOARD_URL
        assert result.submitted_by == "direct"
        assert result.redirect_confirmed is True
        assert driver.calls[0] == ("goto", LOGIN_URL, 0.2)

    @pytest.mark.asyncio
    async def test_caller_selectors_tried_first(self, handler, driver, document):
        """Test configured selectors take priority over the generic fallbacks."""
        user = FakeElement("user")
        document.add("#user", user)
        login_form(driver, document)

        await handler.login(driver, login_config(selectors=LoginSelectors(username_field="#user")))

        assert user.keys == ["ada"]
        assert driver.queries[0] == ("top", "#user")

    @pytest.mark.asyncio
    async def test_form_inside_iframe(self, handler, driver, document):
        """Test a form inside an iframe is found and the frame is left afterwards."""
        frame_document = FakeDocument("login-frame")
        fields = login_form(driver, frame_document)
        document.add("iframe", FakeElement("login-frame", document=frame_document))

        result = await handler.login(driver, login_config())

        assert fields["username"].keys == ["ada"]
        assert fields["submit"].clicks == 1
        assert result.submitted_by == "frames"
        assert not driver.in_frame

    @pytest.mark.asyncio
    async def test_behavioral_submit_does_not_click(self, handler, driver, document):
        """Test Enter on the password field stands in for a missing submit control."""
        password = FakeElement("password")
        document.add('input[type="email"]', FakeElement("username"))
        document.add('input[type="password"]', password)

        result = await handler.login(driver, login_config())

        assert password.keys == ["hunter2", Keys.ENTER]
        assert result.submitted_by == "behavioral"


class TestLoginWaits:
    """Tests for post-login waits."""

    @pytest.mark.asyncio
    async def test_url_fragment(self, handler, driver, document):
        """Test a configured URL fragment is awaited."""
        login_form(driver, document)

        result = await handler.login(driver, login_config(wait_for_login=LoginWait(type="url", value="/dashboard")))

        assert result.url == DASHBOARD_URL

    @pytest.mark.asyncio
    async def test_url_fragment_timeout(self, handler, driver, document):
        """Test LoginTimeout reports expected and observed URLs."""
        login_form(driver, document, redirect=False)

        with pytest.raises(LoginTimeout) as exc_info:
            await handler.login(driver, login_config(wait_for_login=LoginWait(type="url", value="/dashboard")))

        assert exc_info.value.expected == "/dashboard"
        assert exc_info.value.observed == LOGIN_URL
        assert "/dashboard" in str(exc_info.value)
        assert LOGIN_URL in str(exc_info.value)

    @pytest.mark.asyncio
    async def test_selector(self, handler, driver, document):
        """Test a configured selector is awaited."""
        login_form(driver, document)
        document.add(".welcome", FakeElement("welcome"))

        result = await handler.login(driver, login_config(wait_for_login=LoginWait(type="selector", value=".welcome")))

        assert result.redirect_confirmed is True

    @pytest.mark.asyncio
    async def test_selector_timeout(self, handler, driver, document):
        """Test a selector that never appears raises LoginTimeout."""
        login_form(driver, document)

        with pytest.raises(LoginTimeout, match="element .welcome"):
            await handler.login(driver, login_config(wait_for_login=LoginWait(type="selector", value=".welcome")))

    @pytest.mark.asyncio
    async def test_default_wait_is_best_effort(self, handler, driver, document):
        """Test staying on a login URL is reported but not fatal by default."""
        login_form(driver, document, redirect=False)

        result = await handler.login(driver, login_config())

        assert result.redirect_confirmed is False
        assert result.url == LOGIN_URL


class TestLoginFailures:
    """Tests for navigation and lookup failures."""

    @pytest.mark.asyncio
    async def test_missing_username_field(self, handler, driver):
        """Test a page without a username field raises ElementNotFound."""
        with pytest.raises(ElementNotFound) as exc_info:
            await handler.login(driver, login_config())

        error = exc_info.value
        assert error.target == "username field"
        assert error.attempted[: len(USERNAME_SELECTORS)] == list(USERNAME_SELECTORS)
        assert error.attempted[-1] == "iframe"

    @pytest.mark.asyncio
    async def test_navigation_timeout(self, handler, driver):
        """Test a slow login page raises NavigationTimeout."""
        driver.goto_delay = 5

        with pytest.raises(NavigationTimeout) as exc_info:
            await handler.login(driver, login_config())

        assert exc_info.value.url == LOGIN_URL

    @pytest.mark.asyncio
    async def test_selector_query_errors_still_time_out(self, handler, driver, document):
        """Test a wait selector whose queries keep failing still raises LoginTimeout."""
        login_form(driver, document)
        document.fail(".welcome")

        with pytest.raises(LoginTimeout, match="element .welcome"):
            await handler.login(driver, login_config(wait_for_login=LoginWait(type="selector", value=".welcome")))
