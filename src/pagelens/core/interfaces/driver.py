"""Browser driver capability definitions."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Any, Protocol, runtime_checkable


class LocatorKind(str, Enum):
    """Query language of a locator."""

    CSS = "css"
    XPATH = "xpath"


@dataclass(frozen=True)
class LocatorSpec:
    """A single way of locating an element."""

    value: str
    kind: LocatorKind = LocatorKind.CSS

    @classmethod
    def css(cls, value: str) -> LocatorSpec:
        return cls(value, LocatorKind.CSS)

    @classmethod
    def xpath(cls, value: str) -> LocatorSpec:
        return cls(value, LocatorKind.XPATH)

    def __str__(self) -> str:
        if self.kind == LocatorKind.XPATH:
            return f"xpath={self.value}"
        return self.value


class Keys:
    """Special key sequences understood by ``IElement.send_keys``."""

    ENTER = "\ue007"  # WebDriver key code


@runtime_checkable
class IElement(Protocol):
    """Contract for a located element."""

    async def click(self) -> None:
        """Click the element."""
        ...

    async def send_keys(self, text: str) -> None:
        """Type text (or a ``Keys`` value) into the element."""
        ...

    async def get_attribute(self, name: str) -> str | None:
        """Get an attribute value."""
        ...

    async def get_text(self) -> str:
        """Get the rendered text."""
        ...

    async def is_displayed(self) -> bool:
        """Whether the element is currently visible."""
        ...


@runtime_checkable
class IDriver(Protocol):
    """Contract for the browser session the core operates through.

    Frame switching changes the document that subsequent ``find_*`` and
    ``evaluate`` calls run against.
    """

    async def goto(self, url: str, *, timeout: float | None = None) -> None:
        """Navigate and wait for the load event. ``timeout`` is in seconds."""
        ...

    async def evaluate(self, script: str, *args: Any) -> Any:
        """Evaluate a JavaScript function expression in the current document.

        When the first argument is an element, the script runs in the document
        that owns that element.
        """
        ...

    async def current_url(self) -> str:
        """Current top-level URL."""
        ...

    async def title(self) -> str:
        """Current page title."""
        ...

    async def find_element(self, locator: LocatorSpec) -> IElement | None:
        """First element matching the locator, or None."""
        ...

    async def find_elements(self, locator: LocatorSpec) -> list[IElement]:
        """All elements matching the locator, in document order."""
        ...

    async def switch_to_frame(self, frame: IElement) -> None:
        """Move the query scope into an iframe element."""
        ...

    async def switch_to_default(self) -> None:
        """Move the query scope back to the top-level document."""
        ...
