"""Playwright implementation of the driver contract."""

from __future__ import annotations

from collections.abc import AsyncIterator
from contextlib import asynccontextmanager
from typing import Any

import structlog
from playwright.async_api import Error as PlaywrightError
from playwright.async_api import TimeoutError as PlaywrightTimeoutError
from playwright.async_api import async_playwright

from pagelens.core.errors import NavigationTimeout
from pagelens.core.interfaces.driver import IElement, Keys, LocatorKind, LocatorSpec

logger = structlog.get_logger(__name__)


def _selector(locator: LocatorSpec) -> str:
    if locator.kind == LocatorKind.XPATH:
        return f"xpath={locator.value}"
    return f"css={locator.value}"


class PlaywrightElement:
    """Wrapper around a Playwright element handle."""

    def __init__(self, handle: Any) -> None:
        self._handle = handle

    @property
    def handle(self) -> Any:
        return self._handle

    async def click(self) -> None:
        await self._handle.click()

    async def send_keys(self, text: str) -> None:
        if text == Keys.ENTER:
            await self._handle.press("Enter")
        else:
            await self._handle.type(text)

    async def get_attribute(self, name: str) -> str | None:
        return await self._handle.get_attribute(name)

    async def get_text(self) -> str:
        try:
            return await self._handle.inner_text()
        except PlaywrightError:
            # inner_text is only defined for HTML elements
            return await self._handle.text_content() or ""

    async def is_displayed(self) -> bool:
        return await self._handle.is_visible()


class PlaywrightDriver:
    """
    Drives a Playwright page.

    Frame switching is emulated by remembering the active frame; queries
    and script evaluation run against that frame until
    ``switch_to_default`` is called or the page navigates.
    """

    def __init__(self, page: Any) -> None:
        self._page = page
        self._frame: Any = None

    @property
    def page(self) -> Any:
        return self._page

    @property
    def _scope(self) -> Any:
        return self._frame if self._frame is not None else self._page

    async def goto(self, url: str, *, timeout: float | None = None) -> None:
        options: dict[str, Any] = {"wait_until": "load"}
        if timeout:
            options["timeout"] = timeout * 1000
        self._frame = None
        try:
            await self._page.goto(url, **options)
        except PlaywrightTimeoutError as e:
            raise NavigationTimeout(url, timeout or 0) from e

    async def evaluate(self, script: str, *args: Any) -> Any:
        if args and isinstance(args[0], PlaywrightElement):
            # Element-bound scripts run in the element's own frame
            rest = [a.handle if isinstance(a, PlaywrightElement) else a for a in args[1:]]
            if not rest:
                return await args[0].handle.evaluate(script)
            return await args[0].handle.evaluate(script, rest[0] if len(rest) == 1 else rest)
        unwrapped = [a.handle if isinstance(a, PlaywrightElement) else a for a in args]
        if not unwrapped:
            return await self._scope.evaluate(script)
        if len(unwrapped) == 1:
            return await self._scope.evaluate(script, unwrapped[0])
        return await self._scope.evaluate(script, unwrapped)

    async def current_url(self) -> str:
        return self._page.url

    async def title(self) -> str:
        return await self._page.title()

    async def find_element(self, locator: LocatorSpec) -> PlaywrightElement | None:
        handle = await self._scope.query_selector(_selector(locator))
        return PlaywrightElement(handle) if handle is not None else None

    async def find_elements(self, locator: LocatorSpec) -> list[PlaywrightElement]:
        handles = await self._scope.query_selector_all(_selector(locator))
        return [PlaywrightElement(h) for h in handles]

    async def switch_to_frame(self, frame: IElement) -> None:
        if not isinstance(frame, PlaywrightElement):
            raise TypeError(f"Expected a PlaywrightElement, got {type(frame).__name__}")
        content = await frame.handle.content_frame()
        if content is None:
            raise ValueError("Element is not an iframe")
        self._frame = content

    async def switch_to_default(self) -> None:
        self._frame = None


@asynccontextmanager
async def launch_driver(*, headless: bool = True, slow_mo: float = 0) -> AsyncIterator[PlaywrightDriver]:
    """Launch Chromium and yield a driver for a fresh page."""
    async with async_playwright() as playwright:
        browser = await playwright.chromium.launch(headless=headless, slow_mo=slow_mo)
        logger.info("Playwright browser launched", headless=headless)
        try:
            context = await browser.new_context()
            page = await context.new_page()
            yield PlaywrightDriver(page)
        finally:
            await browser.close()
            logger.info("Playwright browser closed")
