"""Screenshot context builder — assembles the context passed to comparator hooks."""

from __future__ import annotations

from collections.abc import Mapping
from typing import Any, Optional

from visreg.models.context import (
    BrowserInfo,
    CaptureTarget,
    CaptureType,
    ScreenshotContext,
    ScreenshotMeta,
    TestInfo,
)

PASSTHROUGH_META = ("exclude", "hide", "remove")


def build_meta(
    capture_type: CaptureType,
    options: Mapping[str, Any],
    url: str,
    element: Any = None,
    target: Optional[CaptureTarget] = None,
) -> ScreenshotMeta:
    """Build the ``meta`` block, passing only the fields the caller asked for.

    ``width``/``orientation`` carry the single value of the current target,
    not the sweep list; the list stays reachable through ``options``.
    """
    target = target or CaptureTarget()
    fields: dict[str, Any] = {"url": url}

    if capture_type is CaptureType.ELEMENT:
        fields["element"] = element

    for key in PASSTHROUGH_META:
        if key in options:
            fields[key] = options[key]

    if "widths" in options:
        fields["width"] = target.width
    if "orientations" in options:
        fields["orientation"] = target.orientation

    return ScreenshotMeta(**fields)


def build_screenshot_context(
    capture_type: CaptureType | str,
    options: Mapping[str, Any],
    browser: BrowserInfo,
    capabilities: dict[str, Any],
    test: TestInfo,
    url: str,
    element: Any = None,
    target: Optional[CaptureTarget] = None,
) -> ScreenshotContext:
    capture_type = CaptureType(capture_type)
    return ScreenshotContext(
        type=capture_type,
        browser=browser,
        desired_capabilities=capabilities,
        test=test,
        meta=build_meta(capture_type, options, url, element=element, target=target),
        options=options,
    )
