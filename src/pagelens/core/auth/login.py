"""Form-based login driven by the element resolver."""

from __future__ import annotations

import asyncio
from collections.abc import Callable, Sequence
from dataclasses import dataclass

import structlog

from pagelens.core.dom.resolver import ElementResolver, ResolveOptions, TargetKind
from pagelens.core.errors import LoginTimeout, NavigationTimeout
from pagelens.core.interfaces.driver import IDriver, IElement, LocatorSpec
from pagelens.core.models.config import AuthConfig, LoginConfig, LoginWait

logger = structlog.get_logger(__name__)


# Generic fallbacks, tried after the caller's own selector
USERNAME_SELECTORS = (
    'input[name="email"][type="email"]',
    'input[type="email"]',
    'input[name="email"]',
    'input[type="text"]',
    'input[id*="email"]',
    'input[id*="username"]',
    'input[placeholder*="email"]',
    'input[placeholder*="Email"]',
    'input[placeholder*="Username"]',
    'input[name="username"]',
    'input[id="email"]',
    'input[id="username"]',
)

PASSWORD_SELECTORS = (
    'input[name="password"][type="password"]',
    'input[type="password"]',
    'input[name="password"]',
    'input[id*="password"]',
    'input[placeholder*="password"]',
    'input[placeholder*="Password"]',
    'input[id="password"]',
)

SUBMIT_SELECTORS = (
    'button[type="submit"]',
    'input[type="submit"]',
    'input[value*="Sign"]',
    'input[value*="Login"]',
    'input[value*="Submit"]',
    'button[class*="submit"]',
    'button[class*="login"]',
    'button[class*="sign"]',
)


@dataclass
class LoginResult:
    """Outcome of a completed login."""

    url: str
    submitted_by: str
    redirect_confirmed: bool = True


def _candidates(preferred: str | None, fallbacks: Sequence[str]) -> list[LocatorSpec]:
    selectors = [preferred] if preferred else []
    selectors.extend(s for s in fallbacks if s != preferred)
    return [LocatorSpec.css(s) for s in selectors]


class FormLoginHandler:
    """
    Logs into a site through its HTML login form.

    Steps:
    1. Navigate to the login URL (bounded by ``navigation_timeout``)
    2. Resolve and fill the username and password fields, across frames
    3. Resolve the submit control and click it, unless the resolver's
       behavioral fallback already submitted
    4. Wait for the post-login URL fragment or selector
    """

    def __init__(
        self,
        resolver: ElementResolver | None = None,
        config: AuthConfig | None = None,
    ) -> None:
        """
        Initialize the handler.

        Args:
            resolver: Resolver used for every field lookup
            config: Navigation and redirect timeouts
        """
        self.resolver = resolver or ElementResolver()
        self.config = config or AuthConfig()

    async def login(self, driver: IDriver, login: LoginConfig) -> LoginResult:
        """
        Perform the login.

        Raises:
            NavigationTimeout: The login page did not load in time
            ElementNotFound: A form field or the submit control was not found
            LoginTimeout: The expected post-login state never appeared
        """
        logger.info("Logging in", login_url=login.login_url)

        await self._navigate(driver, login.login_url)

        selectors = login.selectors
        await self._fill(
            driver,
            "username field",
            _candidates(selectors.username_field, USERNAME_SELECTORS),
            login.username,
        )
        password_field = await self._fill(
            driver,
            "password field",
            _candidates(selectors.password_field, PASSWORD_SELECTORS),
            login.password.get_secret_value(),
        )

        submitted_by = await self._submit(
            driver,
            _candidates(selectors.submit_button, SUBMIT_SELECTORS),
            last_filled=password_field,
        )

        confirmed = await self._wait_for_login(driver, login.wait_for_login)
        url = await driver.current_url()

        logger.info("Login completed", url=url, submitted_by=submitted_by, confirmed=confirmed)
        return LoginResult(url=url, submitted_by=submitted_by, redirect_confirmed=confirmed)

    async def _navigate(self, driver: IDriver, url: str) -> None:
        timeout = self.config.navigation_timeout
        try:
            await asyncio.wait_for(driver.goto(url, timeout=timeout), timeout=timeout)
        except asyncio.TimeoutError as e:
            raise NavigationTimeout(url, timeout) from e

    async def _fill(
        self,
        driver: IDriver,
        description: str,
        candidates: list[LocatorSpec],
        value: str,
    ) -> IElement:
        options = ResolveOptions(across_frames=True, description=description)
        async with self.resolver.located(driver, candidates, options) as resolution:
            logger.debug("Filling field", field=description, strategy=resolution.strategy)
            await resolution.element.send_keys(value)
            return resolution.element

    async def _submit(
        self,
        driver: IDriver,
        candidates: list[LocatorSpec],
        last_filled: IElement,
    ) -> str:
        options = ResolveOptions(
            across_frames=True,
            target=TargetKind.ACTION,
            last_filled=last_filled,
            description="submit control",
        )
        async with self.resolver.located(driver, candidates, options) as resolution:
            if not resolution.acted:
                await resolution.element.click()
            return resolution.strategy

    async def _wait_for_login(self, driver: IDriver, wait: LoginWait | None) -> bool:
        """Wait for the post-login state. Returns False if the default wait lapsed."""
        if wait is None:
            timeout = self.config.default_redirect_timeout
            if await self._wait_for_url(driver, lambda url: "login" not in url, timeout):
                return True
            # Some sites keep "login" in the URL after success
            logger.warning(
                "Still on a login URL after submit, continuing",
                url=await driver.current_url(),
                timeout=timeout,
            )
            return False

        timeout = self.config.login_redirect_timeout

        if wait.type == "url":
            if not await self._wait_for_url(driver, lambda url: wait.value in url, timeout):
                raise LoginTimeout(wait.value, await driver.current_url(), timeout)
            return True

        element = await self.resolver.wait_for_visible(driver, LocatorSpec.css(wait.value), timeout)
        if element is None:
            raise LoginTimeout(f"element {wait.value}", await driver.current_url(), timeout)
        return True

    async def _wait_for_url(
        self,
        driver: IDriver,
        predicate: Callable[[str], bool],
        timeout: float,
    ) -> bool:
        async def poll() -> None:
            while not predicate(await driver.current_url()):
                await asyncio.sleep(self.resolver.config.poll_interval)

        try:
            await asyncio.wait_for(poll(), timeout=timeout)
            return True
        except asyncio.TimeoutError:
            return False
