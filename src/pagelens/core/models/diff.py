"""Models for comparing two page model versions."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Any

from pagelens.core.models.element import Element


class EffortLevel(str, Enum):
    """Estimated remediation effort for a model upgrade."""

    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"


@dataclass(frozen=True)
class AttributeChange:
    """A single tracked field that differs between two versions."""

    attribute: str
    old_value: Any
    new_value: Any

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary."""
        return {
            "attribute": self.attribute,
            "old_value": self.old_value,
            "new_value": self.new_value,
        }


@dataclass(frozen=True)
class ModifiedElement:
    """An element present in both versions with at least one change."""

    element: Element
    changes: tuple[AttributeChange, ...] = ()

    def change_for(self, attribute: str) -> AttributeChange | None:
        """Get the change for one attribute, if any."""
        for change in self.changes:
            if change.attribute == attribute:
                return change
        return None

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary."""
        return {
            "element": self.element.to_dict(),
            "changes": [c.to_dict() for c in self.changes],
        }


@dataclass(frozen=True)
class ModelDiff:
    """Added, removed and modified elements between two scans."""

    added: tuple[Element, ...] = ()
    removed: tuple[Element, ...] = ()
    modified: tuple[ModifiedElement, ...] = ()

    @property
    def is_empty(self) -> bool:
        """True when the two versions are equivalent."""
        return not (self.added or self.removed or self.modified)

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary."""
        return {
            "added": [e.to_dict() for e in self.added],
            "removed": [e.to_dict() for e in self.removed],
            "modified": [m.to_dict() for m in self.modified],
        }


@dataclass(frozen=True)
class CompatibilityReport:
    """Compatibility verdict for moving consumers to a newer model."""

    backward_compatible: bool = True
    forward_compatible: bool = True
    breaking_changes: list[str] = field(default_factory=list)
    migration_required: bool = False
    estimated_effort: EffortLevel = EffortLevel.LOW

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary."""
        return {
            "backward_compatible": self.backward_compatible,
            "forward_compatible": self.forward_compatible,
            "breaking_changes": list(self.breaking_changes),
            "migration_required": self.migration_required,
            "estimated_effort": self.estimated_effort.value,
        }
