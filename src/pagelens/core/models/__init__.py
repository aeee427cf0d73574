"""Core data models."""

from pagelens.core.models.config import (
    AuthConfig,
    ClassifierConfig,
    Config,
    LogConfig,
    LoginConfig,
    LoginSelectors,
    LoginWait,
    ResolverConfig,
    ScannerConfig,
)
from pagelens.core.models.diff import (
    AttributeChange,
    CompatibilityReport,
    EffortLevel,
    ModelDiff,
    ModifiedElement,
)
from pagelens.core.models.element import Element, PageModel, Position

__all__ = [
    # Page model
    "Element",
    "PageModel",
    "Position",
    # Versioning
    "AttributeChange",
    "CompatibilityReport",
    "EffortLevel",
    "ModelDiff",
    "ModifiedElement",
    # Config
    "AuthConfig",
    "ClassifierConfig",
    "Config",
    "LogConfig",
    "LoginConfig",
    "LoginSelectors",
    "LoginWait",
    "ResolverConfig",
    "ScannerConfig",
]
