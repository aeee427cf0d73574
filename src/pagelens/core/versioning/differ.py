"""Element-level diff between two page models."""

from __future__ import annotations

import structlog

from pagelens.core.models.diff import AttributeChange, ModelDiff, ModifiedElement
from pagelens.core.models.element import Element, PageModel

logger = structlog.get_logger(__name__)


class ModelDiffer:
    """
    Compares two page models keyed by the derived element id.

    Elements only in ``current`` are added, elements only in ``previous``
    are removed, and elements in both with a differing tracked field are
    modified. Everything else is unchanged and not reported.
    """

    # Fields compared for elements present in both versions, in report order
    TRACKED_FIELDS = (
        "text",
        "value",
        "href",
        "src",
        "placeholder",
        "title",
        "css_selector",
        "xpath",
    )

    def diff(self, previous: PageModel | None, current: PageModel | None) -> ModelDiff:
        """
        Diff two scans of the same page.

        Args:
            previous: Older model; None is treated as empty
            current: Newer model; None is treated as empty

        Returns:
            ModelDiff with added, removed and modified elements
        """
        previous_elements = previous.elements if previous is not None else ()
        current_elements = current.elements if current is not None else ()

        previous_index = _index(previous_elements)
        current_index = _index(current_elements)

        added: list[Element] = []
        modified: list[ModifiedElement] = []

        for element in current_elements:
            old = previous_index.get(element.id)
            if old is None:
                added.append(element)
                continue

            changes = self.changes_between(old, element)
            if changes:
                modified.append(ModifiedElement(element=element, changes=changes))

        removed = [e for e in previous_elements if e.id not in current_index]

        logger.debug(
            "Models diffed",
            added=len(added),
            removed=len(removed),
            modified=len(modified),
        )

        return ModelDiff(added=tuple(added), removed=tuple(removed), modified=tuple(modified))

    def changes_between(self, old: Element, new: Element) -> tuple[AttributeChange, ...]:
        """One AttributeChange per tracked field that differs."""
        changes = []
        for name in self.TRACKED_FIELDS:
            old_value = getattr(old, name)
            new_value = getattr(new, name)
            if old_value != new_value:
                changes.append(AttributeChange(attribute=name, old_value=old_value, new_value=new_value))
        return tuple(changes)


def _index(elements: tuple[Element, ...]) -> dict[str, Element]:
    # First occurrence wins; ids are unique within a scan
    index: dict[str, Element] = {}
    for element in elements:
        index.setdefault(element.id, element)
    return index
