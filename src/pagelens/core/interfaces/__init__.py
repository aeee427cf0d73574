"""Interface definitions for the browser capability."""

from pagelens.core.interfaces.driver import IDriver, IElement, Keys, LocatorKind, LocatorSpec

__all__ = [
    "IDriver",
    "IElement",
    "Keys",
    "LocatorKind",
    "LocatorSpec",
]
