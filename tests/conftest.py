"""Global test fixtures for pagelens."""

from __future__ import annotations

from collections.abc import Callable
from datetime import datetime
from typing import Any

import pytest

from pagelens.core.dom.resolver import ElementResolver
from pagelens.core.models.config import AuthConfig, ResolverConfig
from pagelens.core.models.element import Element, PageModel

# Import pytest plugins for marker handling
from tests.pytest_plugins.fake_driver import FakeDocument, FakeDriver, FakeElement
from tests.pytest_plugins.markers import (
    pytest_addoption,
    pytest_collection_modifyitems,
    pytest_configure,
)

# Re-export for pytest discovery
__all__ = [
    "pytest_addoption",
    "pytest_collection_modifyitems",
    "pytest_configure",
]


# ============================================================================
# DRIVER FIXTURES
# ============================================================================


@pytest.fixture
def document() -> FakeDocument:
    """Empty top-level document."""
    return FakeDocument()


@pytest.fixture
def driver(document: FakeDocument) -> FakeDriver:
    """Fake driver positioned on a login page."""
    return FakeDriver(document=document)


@pytest.fixture
def fast_resolver_config() -> ResolverConfig:
    """Resolver config with short waits."""
    return ResolverConfig(visibility_timeout=0.2, poll_interval=0.01)


@pytest.fixture
def resolver(fast_resolver_config: ResolverConfig) -> ElementResolver:
    """Resolver with the default strategy chain and short waits."""
    return ElementResolver(fast_resolver_config)


@pytest.fixture
def fast_auth_config() -> AuthConfig:
    """Auth config with short navigation and redirect budgets."""
    return AuthConfig(navigation_timeout=0.2, login_redirect_timeout=0.2, default_redirect_timeout=0.2)


@pytest.fixture
def make_button() -> Callable[..., FakeElement]:
    """Factory for button-like fake elements."""

    def factory(name: str, text: str = "", **attributes: str) -> FakeElement:
        return FakeElement(name, attributes=dict(attributes), text=text)

    return factory


# ============================================================================
# MODEL FIXTURES
# ============================================================================


@pytest.fixture
def make_element() -> Callable[..., Element]:
    """Factory for elements with sensible selector defaults."""

    def factory(element_id: str, **fields: Any) -> Element:
        fields.setdefault("tag_name", "div")
        fields.setdefault("css_selector", f"#{element_id}")
        fields.setdefault("xpath", f'//{fields["tag_name"]}[@id="{element_id}"]')
        return Element(id=element_id, **fields)

    return factory


@pytest.fixture
def make_model() -> Callable[..., PageModel]:
    """Factory for page models."""

    def factory(*elements: Element, url: str = "https://example.com") -> PageModel:
        return PageModel(
            url=url,
            title="Example",
            timestamp=datetime(2024, 1, 1, 12, 0, 0),
            elements=tuple(elements),
        )

    return factory
