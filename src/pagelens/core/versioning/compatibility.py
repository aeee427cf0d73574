"""Breaking-change analysis and migration notes."""

from __future__ import annotations

from collections.abc import Iterable
from datetime import datetime

import structlog

from pagelens.core.models.diff import CompatibilityReport, EffortLevel, ModelDiff, ModifiedElement

logger = structlog.get_logger(__name__)

SELECTOR_FIELDS = ("css_selector", "xpath")


def _selector_changed(modified: ModifiedElement) -> bool:
    return any(change.attribute in SELECTOR_FIELDS for change in modified.changes)


def _removed_methods(old_methods: Iterable[str] | None, new_methods: Iterable[str] | None) -> list[str]:
    new = set(new_methods or ())
    return [name for name in dict.fromkeys(old_methods or ()) if name not in new]


def estimate_effort(breaking_count: int) -> EffortLevel:
    """Effort bucket for a number of breaking changes."""
    if breaking_count == 0:
        return EffortLevel.LOW
    if breaking_count <= 3:
        return EffortLevel.MEDIUM
    return EffortLevel.HIGH


class CompatibilityAnalyzer:
    """
    Classifies a model diff as breaking or not.

    Breaking: a removed element, a modified element whose CSS selector or
    XPath changed, or a generated method name that disappeared. Text and
    value changes alone never break consumers.
    """

    def analyze(
        self,
        diff: ModelDiff | None,
        old_method_names: Iterable[str] | None = None,
        new_method_names: Iterable[str] | None = None,
    ) -> CompatibilityReport:
        """
        Build the compatibility report.

        Args:
            diff: Diff between the two model versions; None means no changes
            old_method_names: Method names generated for the older model
            new_method_names: Method names generated for the newer model

        Returns:
            CompatibilityReport
        """
        diff = diff or ModelDiff()
        old_methods = list(old_method_names or ())
        new_methods = list(new_method_names or ())

        breaking_changes: list[str] = []

        for element in diff.removed:
            breaking_changes.append(f"element {element.id} removed")

        for modified in diff.modified:
            if _selector_changed(modified):
                breaking_changes.append(f"element {modified.element.id} selector changed")

        for name in _removed_methods(old_methods, new_methods):
            breaking_changes.append(f"method {name} removed")

        added_methods = set(new_methods) - set(old_methods)
        forward_compatible = not diff.added and not added_methods

        report = CompatibilityReport(
            backward_compatible=not breaking_changes,
            forward_compatible=forward_compatible,
            breaking_changes=breaking_changes,
            migration_required=bool(breaking_changes),
            estimated_effort=estimate_effort(len(breaking_changes)),
        )

        logger.info(
            "Compatibility analyzed",
            breaking=len(breaking_changes),
            effort=report.estimated_effort.value,
        )

        return report


class MigrationNoteGenerator:
    """Turns breaking changes into human-readable migration guidance."""

    def generate(
        self,
        diff: ModelDiff | None,
        report: CompatibilityReport,
        old_method_names: Iterable[str] | None = None,
        new_method_names: Iterable[str] | None = None,
    ) -> list[str]:
        """
        One note per breaking change, in report order.

        Selector notes quote the old and new selector values verbatim.
        Returns an empty list when no migration is required.
        """
        if not report.migration_required:
            return []

        diff = diff or ModelDiff()
        notes = []

        for element in diff.removed:
            notes.append(
                f"Element {element.id} was removed; delete or update code using "
                f"{element.css_selector or element.xpath}"
            )

        for modified in diff.modified:
            if not _selector_changed(modified):
                continue
            parts = []
            for name in SELECTOR_FIELDS:
                change = modified.change_for(name)
                if change is not None:
                    parts.append(f"{name} '{change.old_value}' -> '{change.new_value}'")
            notes.append(f"Element {modified.element.id} selector changed: {'; '.join(parts)}")

        for name in _removed_methods(old_method_names, new_method_names):
            notes.append(f"Method {name} was removed; update calling code")

        return notes

    def render_script(
        self,
        old_name: str,
        new_name: str,
        report: CompatibilityReport,
        notes: list[str],
        generated_at: datetime | None = None,
    ) -> str:
        """
        Render notes as a commented migration script.

        Returns an empty string when no migration is required.
        """
        if not report.migration_required:
            return ""

        generated_at = generated_at or datetime.now()
        lines = [
            f"// Migration script for {old_name} to {new_name}",
            f"// Generated on {generated_at.isoformat()}",
            f"// Estimated effort: {report.estimated_effort.value}",
            "",
            "// Breaking Changes:",
        ]
        lines.extend(f"// - {change}" for change in report.breaking_changes)
        lines.append("")
        lines.extend(f"// {note}" for note in notes)
        return "\n".join(lines) + "\n"


def increment_version(version: str) -> str:
    """Bump the patch component of a ``major.minor.patch`` version."""
    parts = version.split(".")

    def component(i: int) -> int:
        try:
            return int(parts[i])
        except (IndexError, ValueError):
            return 0

    return f"{component(0)}.{component(1)}.{component(2) + 1}"
