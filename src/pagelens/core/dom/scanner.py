"""Live DOM scanning into a page model."""

from __future__ import annotations

import re
from dataclasses import dataclass, field
from datetime import datetime
from typing import TYPE_CHECKING, Any

import structlog

from pagelens.core.dom.classifier import ElementClassifier
from pagelens.core.dom.selector import SelectorSynthesizer
from pagelens.core.errors import ScanFailure
from pagelens.core.interfaces.driver import LocatorSpec
from pagelens.core.models.config import ScannerConfig
from pagelens.core.models.element import Element, PageModel, Position

if TYPE_CHECKING:
    from pagelens.core.dom.resolver import ElementResolver
    from pagelens.core.interfaces.driver import IDriver

logger = structlog.get_logger(__name__)


READY_STATE_SCRIPT = "() => document.readyState"

# JavaScript for DOM capture: one flat record per element, document order
SCAN_SCRIPT = """
() => {
    const nearestHeadingText = (el) => {
        let node = el;
        while (node && node !== document) {
            const heading = node.querySelector && node.querySelector('h1,h2,h3,h4,h5,h6');
            if (heading && heading.textContent) return heading.textContent.trim();
            if (node.getAttribute && node.getAttribute('aria-label')) return node.getAttribute('aria-label');
            node = node.parentNode;
        }
        return '';
    };

    const nearestContainer = (el) => {
        let node = el && el.parentElement;
        while (node && node !== document) {
            const testId = node.getAttribute && (node.getAttribute('data-test-id') || node.getAttribute('data-testid'));
            if (node.id) return { id: node.id, testid: '', selector: '#' + node.id };
            if (testId) return { id: '', testid: testId, selector: '[data-test-id="' + testId + '"]' };
            node = node.parentElement;
        }
        return { id: '', testid: '', selector: '' };
    };

    const nearestIframeSelector = (el) => {
        let node = el && el.parentElement;
        while (node && node !== document) {
            if (node.tagName && node.tagName.toLowerCase() === 'iframe') {
                const testId = node.getAttribute('data-test-id') || node.getAttribute('data-testid') || '';
                const name = node.getAttribute('name') || '';
                if (node.id) return 'iframe#' + node.id;
                if (testId) return 'iframe[data-test-id="' + testId + '"]';
                if (name) return 'iframe[name="' + name + '"]';
                return 'iframe';
            }
            node = node.parentElement;
        }
        return '';
    };

    const labelTextFor = (el) => {
        if (el.id) {
            const label = document.querySelector('label[for="' + CSS.escape(el.id) + '"]');
            if (label && label.textContent) return label.textContent.trim();
        }
        const parent = el.closest && el.closest('label');
        if (parent && parent.textContent) return parent.textContent.trim();
        const labelledBy = el.getAttribute && el.getAttribute('aria-labelledby');
        if (labelledBy) {
            const ref = document.getElementById(labelledBy);
            if (ref && ref.textContent) return ref.textContent.trim();
        }
        return '';
    };

    return Array.from(document.querySelectorAll('*')).map((element) => {
        const rect = element.getBoundingClientRect();
        const style = window.getComputedStyle(element);
        const rawClass = typeof element.className === 'string'
            ? element.className
            : (element.getAttribute('class') || '');

        const attributes = {};
        for (const attr of element.attributes) {
            attributes[attr.name] = attr.value;
        }
        const container = nearestContainer(element);
        Object.assign(attributes, {
            'role': element.getAttribute('role') || '',
            'aria-label': element.getAttribute('aria-label') || '',
            'data-test-id': element.getAttribute('data-test-id') || element.getAttribute('data-testid') || '',
            'label-text': labelTextFor(element),
            'section-text': nearestHeadingText(element),
            'nearest-container-id': container.id,
            'nearest-container-testid': container.testid,
            'nearest-container-selector': container.selector,
            'nearest-iframe-selector': nearestIframeSelector(element),
        });

        return {
            tagName: element.tagName.toLowerCase(),
            id: element.id || null,
            className: rawClass || null,
            text: (element.textContent || '').trim() || null,
            href: element.href || null,
            src: element.src || null,
            type: element.type || null,
            value: element.value || null,
            placeholder: element.placeholder || null,
            title: element.title || null,
            alt: element.alt || null,
            isVisible: rect.width > 0 && rect.height > 0 &&
                style.display !== 'none' &&
                style.visibility !== 'hidden',
            position: { x: rect.x, y: rect.y, width: rect.width, height: rect.height },
            attributes,
        };
    });
}
"""


@dataclass
class RawNode:
    """One DOM element as captured by the scan script, before classification."""

    tag_name: str
    dom_id: str | None = None
    class_name: str | None = None
    text: str | None = None
    href: str | None = None
    src: str | None = None
    input_type: str | None = None
    value: str | None = None
    placeholder: str | None = None
    title: str | None = None
    alt: str | None = None
    is_visible: bool = False
    position: Position = field(default_factory=Position)
    attributes: dict[str, str] = field(default_factory=dict)

    @classmethod
    def from_dict(cls, raw: dict[str, Any]) -> RawNode:
        """Create from a scan script record, tolerating missing keys."""
        attributes = raw.get("attributes")
        position = raw.get("position")
        return cls(
            tag_name=(_str_or_none(raw.get("tagName")) or "").lower(),
            dom_id=_str_or_none(raw.get("id")),
            class_name=_str_or_none(raw.get("className")),
            text=_str_or_none(raw.get("text"), strip=True),
            href=_str_or_none(raw.get("href")),
            src=_str_or_none(raw.get("src")),
            input_type=_str_or_none(raw.get("type")),
            value=_str_or_none(raw.get("value")),
            placeholder=_str_or_none(raw.get("placeholder")),
            title=_str_or_none(raw.get("title")),
            alt=_str_or_none(raw.get("alt")),
            is_visible=bool(raw.get("isVisible", False)),
            position=Position.from_dict(position if isinstance(position, dict) else None),
            attributes=dict(attributes) if isinstance(attributes, dict) else {},
        )


def derive_element_id(node: RawNode, index: int) -> str:
    """
    Derive the key used to match an element across scans.

    Built from the DOM id, first class, leading text, placeholder and input
    type, so it survives selector changes that keep the element's content.
    Nodes with none of those fall back to tag and traversal position.
    """
    parts = []

    if node.dom_id:
        parts.append(node.dom_id)

    classes = node.class_name.split() if node.class_name else []
    if classes:
        parts.append(classes[0])

    if node.text:
        parts.append(_alnum(node.text[:20]))

    if node.placeholder:
        parts.append(_alnum(node.placeholder))

    if node.input_type:
        parts.append(node.input_type)

    return "_".join(parts).lower() or f"{node.tag_name}_{index}"


class PageScanner:
    """
    Captures a page model from the live DOM.

    Pipeline: ready-state check, capture script, classification, selector
    synthesis, optional liveness validation through the resolver.
    """

    def __init__(
        self,
        config: ScannerConfig | None = None,
        classifier: ElementClassifier | None = None,
        synthesizer: SelectorSynthesizer | None = None,
        resolver: ElementResolver | None = None,
    ) -> None:
        """
        Initialize the scanner.

        Args:
            config: Optional scan configuration
            classifier: Classifier deciding which nodes are kept
            synthesizer: Selector synthesizer
            resolver: Resolver used for liveness validation
        """
        self.config = config or ScannerConfig()
        self.classifier = classifier or ElementClassifier()
        self.synthesizer = synthesizer or SelectorSynthesizer()
        self.resolver = resolver

    async def scan(self, driver: IDriver) -> PageModel:
        """
        Scan the current page.

        Args:
            driver: Browser capability positioned on the page

        Returns:
            Fresh PageModel

        Raises:
            ScanFailure: Script evaluation failed or the page is not stable
        """
        try:
            url = await driver.current_url()
            title = await driver.title()
        except Exception as e:
            raise ScanFailure(f"Page unreachable: {e}") from e

        logger.debug("Scanning page", url=url)

        try:
            ready_state = await driver.evaluate(READY_STATE_SCRIPT)
        except Exception as e:
            raise ScanFailure(f"Ready state check failed: {e}", url=url) from e

        if ready_state not in self.config.stable_ready_states:
            raise ScanFailure(f"Page not in a stable state (readyState={ready_state!r})", url=url)

        try:
            raw_nodes = await driver.evaluate(SCAN_SCRIPT)
        except Exception as e:
            raise ScanFailure(f"Scan script failed: {e}", url=url) from e

        if not isinstance(raw_nodes, list):
            raise ScanFailure(
                f"Scan script returned {type(raw_nodes).__name__}, expected a list",
                url=url,
            )

        elements = self._build_elements(raw_nodes)

        if self.config.validate_liveness:
            elements = await self._validate_liveness(driver, elements)

        logger.info(
            "Page scanned",
            url=url,
            nodes=len(raw_nodes),
            elements=len(elements),
            interactive=sum(1 for e in elements if e.is_interactive),
        )

        return PageModel(
            url=url,
            title=title or "",
            timestamp=datetime.now(),
            elements=tuple(elements),
        )

    def _build_elements(self, raw_nodes: list[Any]) -> list[Element]:
        """Classify raw records and turn the meaningful ones into Elements."""
        elements: list[Element] = []
        id_counts: dict[str, int] = {}
        seen: set[str] = set()

        for index, raw in enumerate(raw_nodes):
            if not isinstance(raw, dict):
                continue

            node = RawNode.from_dict(raw)
            if not node.tag_name:
                continue
            if not self.config.include_hidden and not node.is_visible:
                continue
            if not self.classifier.is_meaningful(node):
                continue

            base_id = derive_element_id(node, index)
            element_id = base_id
            count = id_counts.get(base_id, 1)
            # A suffixed id can collide with another node's derived id
            while element_id in seen:
                count += 1
                element_id = f"{base_id}_{count}"
            id_counts[base_id] = count
            seen.add(element_id)

            elements.append(self._to_element(node, element_id))

            if len(elements) >= self.config.max_elements:
                logger.warning("Element limit reached", limit=self.config.max_elements)
                break

        return elements

    def _to_element(self, node: RawNode, element_id: str) -> Element:
        selectors = self.synthesizer.synthesize(node)
        return Element(
            id=element_id,
            tag_name=node.tag_name,
            attributes=node.attributes,
            text=node.text,
            dom_id=node.dom_id,
            class_name=node.class_name,
            href=node.href,
            src=node.src,
            input_type=node.input_type,
            value=node.value,
            placeholder=node.placeholder,
            title=node.title,
            alt=node.alt,
            position=node.position,
            is_visible=node.is_visible,
            is_interactive=self.classifier.is_interactive(node),
            css_selector=selectors.css,
            xpath=selectors.xpath,
        )

    async def _validate_liveness(self, driver: IDriver, elements: list[Element]) -> list[Element]:
        """Drop elements whose selector no longer resolves."""
        from pagelens.core.dom.resolver import ElementResolver, ResolveOptions

        resolver = self.resolver or ElementResolver()
        live = []

        for element in elements:
            resolution = await resolver.resolve(
                driver,
                [LocatorSpec.css(element.css_selector)],
                ResolveOptions(),
            )
            if resolution is None:
                logger.debug("Dropping stale element", id=element.id, selector=element.css_selector)
                continue
            live.append(element)

        if len(live) != len(elements):
            logger.info("Liveness validation dropped elements", dropped=len(elements) - len(live))

        return live


def _str_or_none(value: Any, strip: bool = False) -> str | None:
    if value is None:
        return None
    text = value if isinstance(value, str) else str(value)
    return (text.strip() if strip else text) or None


def _alnum(text: str) -> str:
    return re.sub(r"[^a-zA-Z0-9]", "", text)
