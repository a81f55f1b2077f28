"""Tests for the context and result models."""

import pytest
from pydantic import ValidationError

from visreg.models.context import (
    BrowserInfo,
    CaptureTarget,
    CaptureType,
    ScreenshotContext,
    ScreenshotMeta,
    SessionContext,
)
from visreg.models.result import ComparisonResult


class TestBrowserInfo:
    """Tests for BrowserInfo model."""

    def test_accepts_alias_and_field_name(self):
        by_alias = BrowserInfo(name="firefox", version="125.0", userAgent="Mozilla/5.0")
        by_name = BrowserInfo(name="firefox", version="125.0", user_agent="Mozilla/5.0")
        assert by_alias == by_name

    def test_dumps_camel_case(self, browser_info):
        data = browser_info.model_dump(by_alias=True)
        assert set(data) == {"name", "version", "userAgent"}

    @pytest.mark.parametrize("field", ["name", "version", "user_agent"])
    def test_rejects_empty_fields(self, field):
        values = {"name": "chromium", "version": "124", "user_agent": "UA"}
        values[field] = ""
        with pytest.raises(ValidationError):
            BrowserInfo(**values)

    def test_is_frozen(self, browser_info):
        with pytest.raises(ValidationError):
            browser_info.name = "webkit"


class TestScreenshotMeta:
    """Tests for optional-field presence tracking."""

    def test_only_url_present_by_default(self):
        meta = ScreenshotMeta(url="https://example.com")
        assert meta.has("url")
        for field in ("element", "exclude", "hide", "remove", "width", "orientation"):
            assert not meta.has(field)
        assert meta.to_dict() == {"url": "https://example.com"}

    def test_explicit_none_is_present(self):
        meta = ScreenshotMeta(url="https://example.com", hide=None)
        assert meta.has("hide")
        assert meta.to_dict() == {"url": "https://example.com", "hide": None}

    def test_passthrough_fields_keep_identity(self):
        exclude = [".ad-banner", {"x": 0, "y": 0, "width": 10, "height": 10}]
        meta = ScreenshotMeta(url="https://example.com", exclude=exclude)
        assert meta.exclude is exclude

    def test_element_accepts_list(self):
        meta = ScreenshotMeta(url="https://example.com", element=["#a", "#b"])
        assert meta.element == ["#a", "#b"]


class TestScreenshotContext:
    """Tests for ScreenshotContext model."""

    def test_to_dict_uses_wire_names(self, browser_info, test_info):
        options = {"hide": ".clock"}
        context = ScreenshotContext(
            type=CaptureType.VIEWPORT,
            browser=browser_info,
            desired_capabilities={"browserName": "chromium"},
            test=test_info,
            meta=ScreenshotMeta(url="https://example.com", hide=".clock"),
            options=options,
        )
        data = context.to_dict()
        assert data["type"] == "viewport"
        assert data["desiredCapabilities"] == {"browserName": "chromium"}
        assert data["browser"]["userAgent"] == browser_info.user_agent
        assert data["test"] == {
            "title": test_info.title,
            "parent": test_info.parent,
            "file": test_info.file,
        }
        assert data["meta"] == {"url": "https://example.com", "hide": ".clock"}
        assert data["options"] is options

    def test_is_frozen(self, browser_info, test_info):
        context = ScreenshotContext(
            type="document",
            browser=browser_info,
            desiredCapabilities={},
            test=test_info,
            meta=ScreenshotMeta(url="https://example.com"),
            options={},
        )
        with pytest.raises(ValidationError):
            context.type = CaptureType.ELEMENT


class TestSessionContext:
    def test_specs_default_empty(self, browser_info):
        session = SessionContext(browser=browser_info, desired_capabilities={})
        assert session.specs == []


class TestCaptureTarget:
    def test_labels(self):
        assert CaptureTarget().label == "default"
        assert CaptureTarget(width=320).label == "320px"
        assert CaptureTarget(width=320, orientation="landscape").label == "320px_landscape"


class TestComparisonResult:
    """Tests for ComparisonResult model."""

    def test_parses_wire_names(self):
        result = ComparisonResult(
            misMatchPercentage=10.05,
            isWithinMisMatchTolerance=False,
            isSameDimensions=True,
            isExactSameImage=False,
        )
        assert result.mismatch_percentage == 10.05
        assert result.is_within_mismatch_tolerance is False
        assert result.model_dump(by_alias=True) == {
            "misMatchPercentage": 10.05,
            "isWithinMisMatchTolerance": False,
            "isSameDimensions": True,
            "isExactSameImage": False,
        }

    @pytest.mark.parametrize("percentage", [-0.1, 100.5])
    def test_rejects_out_of_range_percentage(self, percentage):
        with pytest.raises(ValidationError):
            ComparisonResult(
                mismatch_percentage=percentage,
                is_within_mismatch_tolerance=False,
                is_same_dimensions=True,
                is_exact_same_image=False,
            )

    def test_passing(self):
        result = ComparisonResult.passing()
        assert result.mismatch_percentage == 0
        assert result.is_within_mismatch_tolerance
        assert result.is_same_dimensions
        assert result.is_exact_same_image
