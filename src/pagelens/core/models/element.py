"""Data models for captured page elements."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from typing import Any


@dataclass(frozen=True)
class Position:
    """Element bounding rectangle at scan time."""

    x: float = 0
    y: float = 0
    width: float = 0
    height: float = 0

    @property
    def area(self) -> float:
        """Calculate area of the rectangle."""
        return self.width * self.height

    def to_dict(self) -> dict[str, float]:
        """Convert to dictionary."""
        return {
            "x": self.x,
            "y": self.y,
            "width": self.width,
            "height": self.height,
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any] | None) -> Position:
        """Create from dictionary."""
        data = data or {}
        return cls(
            x=data.get("x") or 0,
            y=data.get("y") or 0,
            width=data.get("width") or 0,
            height=data.get("height") or 0,
        )


@dataclass(frozen=True)
class Element:
    """One meaningful DOM node captured during a scan.

    ``id`` is the derived key used to match the same element across scans;
    the DOM ``id`` attribute lives in ``dom_id``. ``css_selector`` and
    ``xpath`` only ever come from the selector synthesizer.
    """

    id: str
    tag_name: str
    attributes: dict[str, str] = field(default_factory=dict)
    text: str | None = None
    dom_id: str | None = None
    class_name: str | None = None
    href: str | None = None
    src: str | None = None
    input_type: str | None = None
    value: str | None = None
    placeholder: str | None = None
    title: str | None = None
    alt: str | None = None
    position: Position = field(default_factory=Position)
    is_visible: bool = True
    is_interactive: bool = False
    css_selector: str = ""
    xpath: str = ""
    children: tuple[Element, ...] = ()

    @property
    def class_list(self) -> list[str]:
        """Get list of CSS classes."""
        return self.class_name.split() if self.class_name else []

    @property
    def role(self) -> str | None:
        """Get ARIA role."""
        return self.attributes.get("role") or None

    def to_dict(self) -> dict[str, Any]:
        """Convert to the JSON-serializable wire form."""
        data: dict[str, Any] = {
            "id": self.id,
            "tag_name": self.tag_name,
            "attributes": dict(self.attributes),
            "text": self.text,
            "dom_id": self.dom_id,
            "class_name": self.class_name,
            "href": self.href,
            "src": self.src,
            "type": self.input_type,
            "value": self.value,
            "placeholder": self.placeholder,
            "title": self.title,
            "alt": self.alt,
            "position": self.position.to_dict(),
            "is_visible": self.is_visible,
            "is_interactive": self.is_interactive,
            "css_selector": self.css_selector,
            "xpath": self.xpath,
        }
        if self.children:
            data["children"] = [child.to_dict() for child in self.children]
        return data

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> Element:
        """Create from the wire form."""
        return cls(
            id=data["id"],
            tag_name=data.get("tag_name", ""),
            attributes=dict(data.get("attributes") or {}),
            text=data.get("text"),
            dom_id=data.get("dom_id"),
            class_name=data.get("class_name"),
            href=data.get("href"),
            src=data.get("src"),
            input_type=data.get("type"),
            value=data.get("value"),
            placeholder=data.get("placeholder"),
            title=data.get("title"),
            alt=data.get("alt"),
            position=Position.from_dict(data.get("position")),
            is_visible=data.get("is_visible", True),
            is_interactive=data.get("is_interactive", False),
            css_selector=data.get("css_selector", ""),
            xpath=data.get("xpath", ""),
            children=tuple(cls.from_dict(c) for c in data.get("children", [])),
        )


@dataclass(frozen=True)
class PageModel:
    """Complete result of one page scan, elements in DOM traversal order."""

    url: str
    title: str = ""
    timestamp: datetime = field(default_factory=datetime.now)
    elements: tuple[Element, ...] = ()

    def __len__(self) -> int:
        return len(self.elements)

    def get(self, element_id: str) -> Element | None:
        """Get an element by its derived id."""
        for element in self.elements:
            if element.id == element_id:
                return element
        return None

    @property
    def interactive(self) -> list[Element]:
        """Elements a user can act on."""
        return [e for e in self.elements if e.is_interactive]

    def to_dict(self) -> dict[str, Any]:
        """Convert to the JSON-serializable wire form."""
        return {
            "url": self.url,
            "title": self.title,
            "timestamp": self.timestamp.isoformat(),
            "elements": [e.to_dict() for e in self.elements],
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> PageModel:
        """Create from the wire form."""
        timestamp = data.get("timestamp")
        return cls(
            url=data.get("url", ""),
            title=data.get("title", ""),
            timestamp=datetime.fromisoformat(timestamp) if timestamp else datetime.now(),
            elements=tuple(Element.from_dict(e) for e in data.get("elements", [])),
        )
