"""Model versioning: diffing and compatibility analysis."""

from pagelens.core.versioning.compatibility import (
    CompatibilityAnalyzer,
    MigrationNoteGenerator,
    estimate_effort,
    increment_version,
)
from pagelens.core.versioning.differ import ModelDiffer

__all__ = [
    "CompatibilityAnalyzer",
    "MigrationNoteGenerator",
    "ModelDiffer",
    "estimate_effort",
    "increment_version",
]
