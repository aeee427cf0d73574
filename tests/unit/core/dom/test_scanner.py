"""Tests for PageScanner and raw node handling."""

from __future__ import annotations

from typing import Any

import pytest

from pagelens.core.dom.scanner import (
    READY_STATE_SCRIPT,
    SCAN_SCRIPT,
    PageScanner,
    RawNode,
    derive_element_id,
)
from pagelens.core.errors import ScanFailure
from pagelens.core.models.config import ScannerConfig
from tests.pytest_plugins.fake_driver import FakeDriver, FakeElement


def record(tag: str, **fields: Any) -> dict[str, Any]:
    """Scan script record with the given fields."""
    data: dict[str, Any] = {
        "tagName": tag,
        "isVisible": True,
        "position": {"x": 0, "y": 0, "width": 10, "height": 10},
        "attributes": {},
    }
    data.update(fields)
    return data


def driver_with(nodes: Any, **scripts: Any) -> FakeDriver:
    return FakeDriver(scripts={SCAN_SCRIPT: nodes, **scripts})


class TestRawNode:
    """Tests for RawNode parsing."""

    def test_from_dict(self):
        """Test scan records map onto RawNode fields."""
        node = RawNode.from_dict(
            record(
                "INPUT",
                id="email",
                className="form-control",
                type="email",
                placeholder="Email",
                text="  hello  ",
                attributes={"name": "email"},
            )
        )

        assert node.tag_name == "input"
        assert node.dom_id == "email"
        assert node.class_name == "form-control"
        assert node.input_type == "email"
        assert node.placeholder == "Email"
        assert node.text == "hello"
        assert node.attributes == {"name": "email"}
        assert node.position.area == 100

    def test_from_dict_tolerates_missing_and_malformed(self):
        """Test missing keys and malformed nested values fall back to defaults."""
        node = RawNode.from_dict({"tagName": "div", "position": "nope", "attributes": None, "text": "   "})

        assert node.tag_name == "div"
        assert node.text is None
        assert node.attributes == {}
        assert node.position.width == 0
        assert node.is_visible is False


class TestDeriveElementId:
    """Tests for the cross-scan element key."""

    def test_combines_identifying_fields(self):
        """Test id, first class, text, placeholder and type are joined and lowercased."""
        node = RawNode(
            tag_name="input",
            dom_id="Email",
            class_name="form-control wide",
            placeholder="you@example.com",
            input_type="email",
        )
        assert derive_element_id(node, 3) == "email_form-control_youexamplecom_email"

    def test_text_is_truncated_and_alphanumeric(self):
        """Test only the first 20 characters of text are used, stripped to alphanumerics."""
        node = RawNode(tag_name="p", text="Hello, world! This is a long paragraph")
        assert derive_element_id(node, 0) == "helloworldthisi"

    def test_falls_back_to_tag_and_index(self):
        """Test nodes without identifying fields use tag and traversal index."""
        assert derive_element_id(RawNode(tag_name="div"), 7) == "div_7"


class TestScan:
    """Tests for the scan pipeline."""

    @pytest.mark.asyncio
    async def test_scan_builds_model(self):
        """Test meaningful nodes become elements with selectors, in order."""
        driver = driver_with(
            [
                record("html"),
                record("button", id="login-button", text="Login"),
                record("div"),  # not meaningful
                record("input", type="password", placeholder="Password"),
                record("h1", text="Welcome"),
            ]
        )

        model = await PageScanner().scan(driver)

        assert model.url == "https://example.com/login"
        assert model.title == "Test Page"
        assert [e.id for e in model.elements] == [
            "login-button_login",
            "password_password",
            "welcome",
        ]

        button = model.get("login-button_login")
        assert button.css_selector == "#login-button"
        assert button.xpath == '//button[@id="login-button"]'
        assert button.is_interactive is True

        heading = model.get("welcome")
        assert heading.css_selector == "h1"
        assert heading.is_interactive is False
        assert [e.id for e in model.interactive] == ["login-button_login", "password_password"]

    @pytest.mark.asyncio
    async def test_duplicate_ids_get_suffixes(self):
        """Test repeated derived ids are made unique in document order."""
        driver = driver_with(
            [
                record("button", className="btn", text="Save"),
                record("button", className="btn", text="Save"),
                record("button", className="btn", text="Save"),
            ]
        )

        model = await PageScanner().scan(driver)

        assert [e.id for e in model.elements] == ["btn_save", "btn_save_2", "btn_save_3"]

    @pytest.mark.asyncio
    async def test_suffixed_id_does_not_collide(self):
        """Test a suffix already taken by another node's own id is skipped."""
        driver = driver_with(
            [
                record("button", id="save"),
                record("button", id="save"),
                record("button", id="save_2"),
            ]
        )

        model = await PageScanner().scan(driver)

        ids = [e.id for e in model.elements]
        assert ids == ["save", "save_2", "save_2_2"]
        assert len(set(ids)) == len(ids)

    @pytest.mark.asyncio
    async def test_fallback_ids_use_traversal_index(self):
        """Test anonymous meaningful nodes are keyed by their position in the scan."""
        driver = driver_with(
            [
                record("body"),
                record("div", attributes={"onclick": "go()"}),
                record("div", attributes={"tabindex": "0"}),
            ]
        )

        model = await PageScanner().scan(driver)

        assert [e.id for e in model.elements] == ["div_1", "div_2"]

    @pytest.mark.asyncio
    async def test_hidden_nodes(self):
        """Test hidden nodes are kept by default and dropped when configured."""
        nodes = [
            record("button", id="visible"),
            record("button", id="hidden", isVisible=False),
        ]

        kept = await PageScanner().scan(driver_with(nodes))
        dropped = await PageScanner(ScannerConfig(include_hidden=False)).scan(driver_with(nodes))

        assert [e.dom_id for e in kept.elements] == ["visible", "hidden"]
        assert kept.get("hidden").is_visible is False
        assert [e.dom_id for e in dropped.elements] == ["visible"]

    @pytest.mark.asyncio
    async def test_max_elements(self):
        """Test the scan stops at the element limit."""
        nodes = [record("button", id=f"b{i}") for i in range(10)]

        model = await PageScanner(ScannerConfig(max_elements=3)).scan(driver_with(nodes))

        assert len(model) == 3

    @pytest.mark.asyncio
    async def test_skips_non_record_entries(self):
        """Test non-dict entries and tagless records are ignored."""
        model = await PageScanner().scan(driver_with([None, "x", {"id": "no-tag"}, record("a", id="home")]))

        assert [e.dom_id for e in model.elements] == ["home"]

    @pytest.mark.asyncio
    async def test_liveness_validation_drops_stale(self):
        """Test elements whose selector no longer resolves are dropped."""
        driver = driver_with([record("button", id="live"), record("button", id="gone")])
        driver.top.add("#live", FakeElement("live"))

        model = await PageScanner(ScannerConfig(validate_liveness=True)).scan(driver)

        assert [e.dom_id for e in model.elements] == ["live"]


class TestScanFailure:
    """Tests for scan failure reporting."""

    @pytest.mark.asyncio
    async def test_unstable_page(self):
        """Test a page that is still loading is rejected."""
        driver = driver_with([], **{READY_STATE_SCRIPT: "loading"})

        with pytest.raises(ScanFailure, match="readyState='loading'"):
            await PageScanner().scan(driver)

    @pytest.mark.asyncio
    async def test_interactive_state_allowed_when_configured(self):
        """Test extra ready states can be accepted."""
        driver = driver_with([record("a", id="x")], **{READY_STATE_SCRIPT: "interactive"})
        config = ScannerConfig(stable_ready_states=["interactive", "complete"])

        model = await PageScanner(config).scan(driver)

        assert len(model) == 1

    @pytest.mark.asyncio
    async def test_script_error(self):
        """Test a failing capture script surfaces as ScanFailure with the URL."""
        driver = driver_with(RuntimeError("Execution context was destroyed"))

        with pytest.raises(ScanFailure) as exc_info:
            await PageScanner().scan(driver)

        assert exc_info.value.url == "https://example.com/login"
        assert "Execution context was destroyed" in str(exc_info.value)

    @pytest.mark.asyncio
    async def test_non_list_result(self):
        """Test an unexpected script result is a ScanFailure."""
        with pytest.raises(ScanFailure, match="expected a list"):
            await PageScanner().scan(driver_with({"nodes": []}))

    @pytest.mark.asyncio
    async def test_unreachable_page(self):
        """Test a driver that cannot report its URL is a ScanFailure."""
        driver = driver_with([])
        driver.fail_url = True

        with pytest.raises(ScanFailure, match="Page unreachable"):
            await PageScanner().scan(driver)

    @pytest.mark.asyncio
    async def test_no_retry(self):
        """Test the capture script is evaluated exactly once on failure."""
        driver = driver_with(RuntimeError("boom"))

        with pytest.raises(ScanFailure):
            await PageScanner().scan(driver)

        scans = [c for c in driver.calls if c[0] == "evaluate" and c[1] == SCAN_SCRIPT]
        assert len(scans) == 1
