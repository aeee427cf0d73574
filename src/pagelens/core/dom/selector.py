"""Deterministic selector synthesis for captured elements."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any


@dataclass(frozen=True)
class SelectorPair:
    """CSS selector and XPath for the same element."""

    css: str
    xpath: str


class SelectorSynthesizer:
    """
    Builds a CSS selector and an XPath from an element's own attributes.

    Priority chain, identical for both outputs:
    1. DOM id (returned immediately)
    2. Class list (CSS: every class; XPath: first class)
    3. type / placeholder / title predicates, in that order
    4. Bare tag name

    No uniqueness check is made against sibling nodes. Two elements sharing a
    first class, or carrying neither id nor class, can get the same selector;
    callers that need uniqueness must disambiguate on their side.
    """

    # Attributes appended as predicates, in this order
    PREDICATE_ATTRIBUTES = (
        ("type", "input_type"),
        ("placeholder", "placeholder"),
        ("title", "title"),
    )

    def synthesize(self, node: Any) -> SelectorPair:
        """
        Generate the CSS selector and XPath for an element.

        Args:
            node: Raw node or Element exposing ``tag_name``, ``dom_id``,
                ``class_name``, ``input_type``, ``placeholder`` and ``title``

        Returns:
            SelectorPair with both selectors filled
        """
        tag = (_attr(node, "tag_name") or "*").lower()

        dom_id = _attr(node, "dom_id")
        if dom_id:
            return SelectorPair(
                css=f"#{dom_id}",
                xpath=f"//{tag}[@id={_xpath_literal(dom_id)}]",
            )

        css = tag
        xpath = f"//{tag}"

        classes = (_attr(node, "class_name") or "").split()
        if classes:
            css += "".join(f".{c}" for c in classes)
            xpath += f"[contains(@class,{_xpath_literal(classes[0])})]"

        for name, field_name in self.PREDICATE_ATTRIBUTES:
            value = _attr(node, field_name)
            if value:
                css += f'[{name}="{_css_escape(value)}"]'
                xpath += f"[@{name}={_xpath_literal(value)}]"

        return SelectorPair(css=css, xpath=xpath)


def _attr(node: Any, name: str) -> str | None:
    value = getattr(node, name, None)
    return value if isinstance(value, str) and value else None


def _css_escape(value: str) -> str:
    return value.replace("\\", "\\\\").replace('"', '\\"')


def _xpath_literal(value: str) -> str:
    # XPath 1.0 has no escape sequences; switch quote style instead
    if '"' not in value:
        return f'"{value}"'
    if "'" not in value:
        return f"'{value}'"
    parts = ", '\"', ".join(f'"{part}"' for part in value.split('"'))
    return f"concat({parts})"
