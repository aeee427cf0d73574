"""Multi-strategy element resolution."""

from __future__ import annotations

import asyncio
import contextlib
from abc import ABC, abstractmethod
from collections.abc import AsyncIterator, Sequence
from dataclasses import dataclass, field
from enum import Enum

import structlog

from pagelens.core.dom.scoring import (
    ACTION_RULES,
    ACTION_SYNONYMS,
    CandidateFeatures,
    ScoreRule,
    pick_best,
    score,
)
from pagelens.core.errors import ElementNotFound
from pagelens.core.interfaces.driver import IDriver, IElement, Keys, LocatorSpec
from pagelens.core.models.config import ResolverConfig

logger = structlog.get_logger(__name__)


SUBMIT_FORM_SCRIPT = """
(el) => {
    const form = el && el.closest ? el.closest('form') : null;
    if (!form) return false;
    if (form.requestSubmit) { form.requestSubmit(); } else { form.submit(); }
    return true;
}
"""


class TargetKind(str, Enum):
    """What the caller is looking for."""

    FIELD = "field"  # Plain lookup, e.g. an input to type into
    ACTION = "action"  # A control that submits or advances, e.g. a login button


@dataclass(frozen=True)
class ResolveOptions:
    """Per-call resolver options."""

    across_frames: bool = False
    target: TargetKind = TargetKind.FIELD
    last_filled: IElement | None = None
    description: str = "element"


@dataclass
class Resolution:
    """A located element and how it was found.

    ``frame`` is set when the driver was left switched into an iframe;
    ``acted`` is set when the behavioral fallback already submitted.
    """

    element: IElement
    strategy: str
    locator: LocatorSpec | None = None
    frame: IElement | None = None
    score: int | None = None
    acted: bool = False


@dataclass
class ResolveContext:
    """State shared by the strategies of one resolve call."""

    driver: IDriver
    candidates: list[LocatorSpec]
    options: ResolveOptions
    attempted: list[str] = field(default_factory=list)

    def record(self, attempt: str) -> None:
        self.attempted.append(attempt)


class ResolveStrategy(ABC):
    """One distinct way of locating an element, tried at most once per call."""

    name: str = ""

    def applies(self, options: ResolveOptions) -> bool:
        """Whether this strategy runs for the given options."""
        return True

    @abstractmethod
    async def attempt(self, ctx: ResolveContext) -> Resolution | None:
        """Try to locate the target; None hands over to the next strategy."""


async def _first_match(ctx: ResolveContext, prefix: str = "") -> tuple[LocatorSpec, IElement] | None:
    """First candidate locator that finds an element in the current document."""
    for locator in ctx.candidates:
        ctx.record(f"{prefix}{locator}")
        try:
            element = await ctx.driver.find_element(locator)
        except Exception as e:
            logger.debug("Locator failed", locator=str(locator), error=str(e))
            continue
        if element is not None:
            return locator, element
    return None


class DirectStrategy(ResolveStrategy):
    """Candidate locators, in order, against the top-level document."""

    name = "direct"

    async def attempt(self, ctx: ResolveContext) -> Resolution | None:
        match = await _first_match(ctx)
        if match is None:
            return None
        locator, element = match
        return Resolution(element=element, strategy=self.name, locator=locator)


class FrameStrategy(ResolveStrategy):
    """Candidate locators inside each top-level iframe.

    On a match the driver stays switched into that frame; otherwise it is
    switched back to default content before the next frame.
    """

    name = "frames"

    def applies(self, options: ResolveOptions) -> bool:
        return options.across_frames

    async def attempt(self, ctx: ResolveContext) -> Resolution | None:
        driver = ctx.driver
        ctx.record("iframe")
        try:
            frames = await driver.find_elements(LocatorSpec.css("iframe"))
        except Exception as e:
            logger.debug("Frame enumeration failed", error=str(e))
            return None

        for index, frame in enumerate(frames):
            try:
                await driver.switch_to_frame(frame)
            except Exception as e:
                logger.debug("Frame switch failed", frame=index, error=str(e))
                await driver.switch_to_default()
                continue

            match = await _first_match(ctx, prefix=f"iframe[{index}] ")
            if match is not None:
                locator, element = match
                logger.debug("Matched inside frame", frame=index, locator=str(locator))
                return Resolution(element=element, strategy=self.name, locator=locator, frame=frame)

            await driver.switch_to_default()

        return None


class ScoredStrategy(ResolveStrategy):
    """Scores every action-like element against the weight table.

    Falls back to an XPath text-predicate scan when the markup query yields
    no positive score. Highest score wins; ties go to document order.
    """

    name = "scored"

    def __init__(
        self,
        tag_selector: str,
        rules: Sequence[ScoreRule] = ACTION_RULES,
        synonyms: Sequence[str] = ACTION_SYNONYMS,
    ) -> None:
        self.tag_selector = tag_selector
        self.rules = rules
        self.text_xpath = action_text_xpath(synonyms)

    def applies(self, options: ResolveOptions) -> bool:
        return options.target == TargetKind.ACTION

    async def attempt(self, ctx: ResolveContext) -> Resolution | None:
        for locator in (LocatorSpec.css(self.tag_selector), LocatorSpec.xpath(self.text_xpath)):
            ctx.record(str(locator))
            try:
                elements = await ctx.driver.find_elements(locator)
            except Exception as e:
                logger.debug("Candidate query failed", locator=str(locator), error=str(e))
                continue

            resolution = await self._best(elements, locator)
            if resolution is not None:
                return resolution

        return None

    async def _best(self, elements: list[IElement], locator: LocatorSpec) -> Resolution | None:
        scored = []
        for position, element in enumerate(elements):
            try:
                features = await CandidateFeatures.from_element(element)
            except Exception as e:
                logger.debug("Could not read candidate", position=position, error=str(e))
                continue
            scored.append((score(features, self.rules), position, element))

        best = pick_best([(points, position) for points, position, _ in scored])
        if best is None:
            return None

        points, _, element = scored[best]
        return Resolution(element=element, strategy=self.name, locator=locator, score=points)


class BehavioralStrategy(ResolveStrategy):
    """Last resort for submit targets.

    Enter on the last filled input, then programmatic submit of its form,
    then a click on the first visible button-like element. Stops at the first
    attempt that does not raise.
    """

    name = "behavioral"

    def __init__(self, tag_selector: str) -> None:
        self.tag_selector = tag_selector

    def applies(self, options: ResolveOptions) -> bool:
        return options.target == TargetKind.ACTION

    async def attempt(self, ctx: ResolveContext) -> Resolution | None:
        driver = ctx.driver
        last_filled = ctx.options.last_filled

        if last_filled is not None:
            ctx.record("keypress:Enter")
            try:
                await last_filled.send_keys(Keys.ENTER)
                return Resolution(element=last_filled, strategy=self.name, acted=True)
            except Exception as e:
                logger.debug("Enter keypress failed", error=str(e))

            ctx.record("form:submit")
            try:
                if await driver.evaluate(SUBMIT_FORM_SCRIPT, last_filled):
                    return Resolution(element=last_filled, strategy=self.name, acted=True)
            except Exception as e:
                logger.debug("Form submit failed", error=str(e))

        ctx.record(f"click:{self.tag_selector}")
        try:
            buttons = await driver.find_elements(LocatorSpec.css(self.tag_selector))
        except Exception as e:
            logger.debug("Button query failed", error=str(e))
            return None

        for button in buttons:
            try:
                if await button.is_displayed():
                    await button.click()
                    return Resolution(element=button, strategy=self.name, acted=True)
            except Exception as e:
                logger.debug("Button click failed", error=str(e))
                continue

        return None


def action_text_xpath(synonyms: Sequence[str]) -> str:
    """XPath matching action-like elements whose text, value or aria-label holds a synonym."""
    lower = "translate({}, 'ABCDEFGHIJKLMNOPQRSTUVWXYZ', 'abcdefghijklmnopqrstuvwxyz')"
    sources = [lower.format("normalize-space(.)"), lower.format("@value"), lower.format("@aria-label")]
    predicates = " or ".join(
        f"contains({source}, '{word}')" for word in synonyms for source in sources
    )
    return (
        "//*[self::button or self::input or self::a or @role='button']"
        f"[{predicates}]"
    )


def default_strategies(config: ResolverConfig) -> list[ResolveStrategy]:
    """The fixed strategy chain, cheapest first."""
    return [
        DirectStrategy(),
        FrameStrategy(),
        ScoredStrategy(config.action_tag_selector),
        BehavioralStrategy(config.action_tag_selector),
    ]


class ElementResolver:
    """
    Finds one element through an ordered chain of distinct strategies.

    The chain is not a retry loop: each applicable strategy runs at most once,
    in order, and a later strategy only runs after every earlier one has
    exhausted its candidates. Failures inside a strategy are logged and only
    serve to advance the chain.
    """

    def __init__(
        self,
        config: ResolverConfig | None = None,
        strategies: Sequence[ResolveStrategy] | None = None,
    ) -> None:
        """
        Initialize the resolver.

        Args:
            config: Optional resolver configuration
            strategies: Override of the default strategy chain
        """
        self.config = config or ResolverConfig()
        self.strategies = list(strategies) if strategies is not None else default_strategies(self.config)

    async def resolve(
        self,
        driver: IDriver,
        candidates: Sequence[LocatorSpec],
        options: ResolveOptions | None = None,
    ) -> Resolution | None:
        """
        Locate an element.

        Args:
            driver: Browser capability
            candidates: Locators in priority order, caller's own first
            options: Frame search, target kind and last filled input

        Returns:
            Resolution, or None once every applicable strategy is exhausted.
            A Resolution with ``frame`` set leaves the driver inside that
            frame; use ``release`` or ``located`` to restore it.
        """
        resolution, _ = await self._run(driver, candidates, options or ResolveOptions())
        return resolution

    async def resolve_or_raise(
        self,
        driver: IDriver,
        candidates: Sequence[LocatorSpec],
        options: ResolveOptions | None = None,
    ) -> Resolution:
        """Like ``resolve`` but raises ElementNotFound with every attempt made."""
        options = options or ResolveOptions()
        resolution, attempted = await self._run(driver, candidates, options)
        if resolution is None:
            raise ElementNotFound(options.description, attempted)
        return resolution

    @contextlib.asynccontextmanager
    async def located(
        self,
        driver: IDriver,
        candidates: Sequence[LocatorSpec],
        options: ResolveOptions | None = None,
    ) -> AsyncIterator[Resolution]:
        """
        Resolve for the duration of a block.

        The driver is switched back to default content on exit, whether the
        block completes or raises.

        Raises:
            ElementNotFound: Every strategy was exhausted
        """
        try:
            yield await self.resolve_or_raise(driver, candidates, options)
        finally:
            await driver.switch_to_default()

    async def release(self, driver: IDriver, resolution: Resolution | None) -> None:
        """Restore default content after a frame match."""
        if resolution is not None and resolution.frame is not None:
            await driver.switch_to_default()

    async def wait_for_visible(
        self,
        driver: IDriver,
        locator: LocatorSpec,
        timeout: float | None = None,
    ) -> IElement | None:
        """
        Poll until an element matching ``locator`` is displayed.

        Returns:
            The element, or None when ``timeout`` seconds pass first
        """
        timeout = timeout if timeout is not None else self.config.visibility_timeout

        async def poll() -> IElement:
            while True:
                try:
                    element = await driver.find_element(locator)
                    if element is not None and await element.is_displayed():
                        return element
                except Exception as e:
                    # Queries fail while the page navigates
                    logger.debug("Visibility check failed", locator=str(locator), error=str(e))
                await asyncio.sleep(self.config.poll_interval)

        try:
            return await asyncio.wait_for(poll(), timeout=timeout)
        except asyncio.TimeoutError:
            logger.debug("Element not visible in time", locator=str(locator), timeout=timeout)
            return None

    async def _run(
        self,
        driver: IDriver,
        candidates: Sequence[LocatorSpec],
        options: ResolveOptions,
    ) -> tuple[Resolution | None, list[str]]:
        ctx = ResolveContext(driver=driver, candidates=list(candidates), options=options)

        # Strategies start from the top-level document
        await driver.switch_to_default()

        for strategy in self.strategies:
            if not strategy.applies(options):
                continue

            logger.debug("Trying strategy", strategy=strategy.name, target=options.description)
            try:
                resolution = await strategy.attempt(ctx)
            except Exception as e:
                logger.debug("Strategy failed", strategy=strategy.name, error=str(e))
                with contextlib.suppress(Exception):
                    await driver.switch_to_default()
                continue

            if resolution is not None:
                logger.info(
                    "Element resolved",
                    target=options.description,
                    strategy=resolution.strategy,
                    locator=str(resolution.locator) if resolution.locator else None,
                    in_frame=resolution.frame is not None,
                )
                return resolution, ctx.attempted

        logger.info("Element not resolved", target=options.description, attempted=len(ctx.attempted))
        return None, ctx.attempted
