"""Meaningful element classifier."""

from __future__ import annotations

from typing import TYPE_CHECKING, Any

import structlog

from pagelens.core.models.config import ClassifierConfig

if TYPE_CHECKING:
    from pagelens.core.dom.scanner import RawNode

logger = structlog.get_logger(__name__)


class ElementClassifier:
    """
    Decides which scanned nodes are worth exposing in the page model.

    A node is meaningful when any of these holds:
    1. Interactive tag (button, input, select, textarea, a)
    2. Interaction-signalling attribute (event handlers, tabindex, test hooks)
    3. Interactive ARIA role
    4. Test hook attribute, regardless of tag
    5. Short text on a content tag, or on a node whose class/id names content

    Rule 5 is a tunable heuristic (see ``ClassifierConfig``); the other rules
    are fixed.
    """

    INTERACTIVE_TAGS = {"button", "input", "select", "textarea", "a"}

    INTERACTION_ATTRIBUTES = (
        "onclick",
        "onchange",
        "onsubmit",
        "tabindex",
        "data-testid",
        "data-cy",
        "data-selenium",
    )

    INTERACTIVE_ROLES = {"button", "link", "menuitem"}

    TEST_HOOK_ATTRIBUTES = (
        "data-testid",
        "data-cy",
        "data-selenium",
        "data-test-id",
    )

    def __init__(self, config: ClassifierConfig | None = None) -> None:
        self.config = config or ClassifierConfig()
        self._text_tags = {t.lower() for t in self.config.text_tags}

    def is_meaningful(self, node: RawNode) -> bool:
        """
        Determine if a node belongs in the page model.

        Args:
            node: Raw scanned node

        Returns:
            True if the node is interactive or semantically important
        """
        try:
            return self._classify(node)
        except (AttributeError, TypeError, ValueError) as e:
            logger.debug("Unclassifiable node", error=str(e))
            return False

    def _classify(self, node: RawNode) -> bool:
        tag = _as_str(node.tag_name).lower()
        attributes = node.attributes if isinstance(node.attributes, dict) else {}

        if tag in self.INTERACTIVE_TAGS:
            return True

        if any(_truthy(attributes.get(attr)) for attr in self.INTERACTION_ATTRIBUTES):
            return True

        if _as_str(attributes.get("role")) in self.INTERACTIVE_ROLES:
            return True

        if any(_truthy(attributes.get(attr)) for attr in self.TEST_HOOK_ATTRIBUTES):
            return True

        return self._has_important_text(node, tag)

    def _has_important_text(self, node: RawNode, tag: str) -> bool:
        text = _as_str(node.text)
        if not 0 < len(text) < self.config.max_text_length:
            return False

        if tag in self._text_tags:
            return True

        class_name = _as_str(node.class_name)
        dom_id = _as_str(node.dom_id)
        return any(
            keyword in class_name or keyword in dom_id
            for keyword in self.config.text_keywords
        )

    def is_interactive(self, node: RawNode) -> bool:
        """Whether a user can act on the node directly."""
        return _as_str(node.tag_name).lower() in self.INTERACTIVE_TAGS


def _as_str(value: Any) -> str:
    return value if isinstance(value, str) else ""


def _truthy(value: Any) -> bool:
    # Attribute presence follows DOM string semantics: empty means absent
    if isinstance(value, str):
        return value != ""
    return bool(value)
