"""Core module - page models, DOM scanning, resolution and versioning."""

from pagelens.core.dom.resolver import ElementResolver
from pagelens.core.dom.scanner import PageScanner
from pagelens.core.errors import (
    ElementNotFound,
    LoginTimeout,
    NavigationTimeout,
    PageLensError,
    ScanFailure,
)
from pagelens.core.models.element import Element, PageModel
from pagelens.core.versioning.compatibility import CompatibilityAnalyzer, MigrationNoteGenerator
from pagelens.core.versioning.differ import ModelDiffer

__all__ = [
    "CompatibilityAnalyzer",
    "Element",
    "ElementNotFound",
    "ElementResolver",
    "LoginTimeout",
    "MigrationNoteGenerator",
    "ModelDiffer",
    "NavigationTimeout",
    "PageLensError",
    "PageModel",
    "PageScanner",
    "ScanFailure",
]
