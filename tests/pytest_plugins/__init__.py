"""Pytest plugins for pagelens testing."""

from tests.pytest_plugins.fake_driver import FakeDocument, FakeDriver, FakeElement
from tests.pytest_plugins.markers import (
    pytest_addoption,
    pytest_collection_modifyitems,
    pytest_configure,
)

__all__ = [
    "FakeDocument",
    "FakeDriver",
    "FakeElement",
    "pytest_addoption",
    "pytest_collection_modifyitems",
    "pytest_configure",
]
