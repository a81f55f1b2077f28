"""Playwright implementation of the driver interface."""

from __future__ import annotations

import base64
import logging
from typing import Any, Optional

from playwright.async_api import ElementHandle, Page

from visreg.models.config import VisualRegressionConfig
from visreg.models.context import BrowserInfo, CaptureType, ScreenshotContext, TestInfo

logger = logging.getLogger(__name__)

UNKNOWN_TEST = TestInfo(title="<no active test>", parent="", file="")

# Same colour Playwright paints over masked locators
_ADD_EXCLUDE_OVERLAYS = """(rects) => {
    for (const r of rects) {
        const el = document.createElement('div');
        el.setAttribute('data-visreg-exclude', '');
        Object.assign(el.style, {
            position: 'absolute',
            left: r.x + 'px',
            top: r.y + 'px',
            width: r.width + 'px',
            height: r.height + 'px',
            background: '#FF00FF',
            zIndex: '2147483647',
            pointerEvents: 'none',
        });
        document.documentElement.appendChild(el);
    }
}"""

_REMOVE_EXCLUDE_OVERLAYS = (
    "() => document.querySelectorAll('[data-visreg-exclude]').forEach(el => el.remove())"
)

_SCROLL_OFFSET = "() => [window.scrollX, window.scrollY]"


def _as_list(value: Any) -> list[Any]:
    if value is None:
        return []
    if isinstance(value, (str, dict)):
        return [value]
    return list(value)


def _build_hide_css(hide: list[str], remove: list[str]) -> str:
    rules = []
    if hide:
        rules.append(f"{', '.join(hide)} {{ visibility: hidden !important; }}")
    if remove:
        rules.append(f"{', '.join(remove)} {{ display: none !important; }}")
    return "\n".join(rules)


def _union_box(boxes: list[dict[str, float]]) -> dict[str, float]:
    left = min(b["x"] for b in boxes)
    top = min(b["y"] for b in boxes)
    right = max(b["x"] + b["width"] for b in boxes)
    bottom = max(b["y"] + b["height"] for b in boxes)
    return {"x": left, "y": top, "width": right - left, "height": bottom - top}


class PlaywrightDriver:
    """Adapts a Playwright page to the visreg driver interface.

    The test runner reports the running test through ``set_active_test``;
    it is read back for every screenshot context.

    ``exclude`` selectors become Playwright masks and ``exclude`` rectangles
    (page coordinates) are painted over with temporary overlays. ``hide``
    and ``remove`` are applied through a temporary style tag. An element
    capture with several selectors covers the bounding box of all of them.
    """

    def __init__(self, page: Page, capabilities: Optional[dict[str, Any]] = None):
        self.page = page
        self.capabilities = capabilities or {}
        self._active_test: TestInfo = UNKNOWN_TEST

    @classmethod
    def from_config(cls, page: Page, config: VisualRegressionConfig) -> "PlaywrightDriver":
        return cls(page, capabilities=dict(config.capabilities))

    def set_active_test(self, title: str, parent: str = "", file: str = "") -> None:
        self._active_test = TestInfo(title=title, parent=parent, file=file)

    async def get_session_metadata(self) -> BrowserInfo:
        browser = self.page.context.browser
        user_agent = await self.page.evaluate("() => navigator.userAgent")
        return BrowserInfo(
            name=browser.browser_type.name if browser else "unknown",
            version=browser.version if browser else "unknown",
            user_agent=user_agent,
        )

    async def get_capabilities(self) -> dict[str, Any]:
        return self.capabilities

    async def get_active_test_metadata(self) -> TestInfo:
        return self._active_test

    async def get_current_url(self) -> str:
        return self.page.url

    async def set_viewport_width(self, width: int, height: Optional[int] = None) -> None:
        if height is None:
            height = (self.page.viewport_size or {"height": 720})["height"]
        logger.debug("Resizing viewport to %dx%d", width, height)
        await self.page.set_viewport_size({"width": width, "height": height})

    async def take_screenshot(self, context: ScreenshotContext) -> str:
        meta = context.meta
        mask = []
        rects = []
        for item in _as_list(meta.exclude):
            if isinstance(item, str):
                mask.append(self.page.locator(item))
            else:
                rects.append(dict(item))

        css = _build_hide_css(_as_list(meta.hide), _as_list(meta.remove))
        style: Optional[ElementHandle] = None
        overlays = False
        try:
            if css:
                style = await self.page.add_style_tag(content=css)
            if rects:
                overlays = True
                await self.page.evaluate(_ADD_EXCLUDE_OVERLAYS, rects)

            if context.type is CaptureType.ELEMENT:
                data = await self._element_screenshot(_as_list(meta.element), mask)
            else:
                data = await self.page.screenshot(
                    full_page=context.type is CaptureType.DOCUMENT, mask=mask,
                )
        finally:
            if overlays:
                await self.page.evaluate(_REMOVE_EXCLUDE_OVERLAYS)
            if style is not None:
                await style.evaluate("el => el.remove()")

        return base64.b64encode(data).decode("ascii")

    async def _element_screenshot(self, selectors: list[str], mask: list[Any]) -> bytes:
        if len(selectors) == 1:
            return await self.page.locator(selectors[0]).first.screenshot(mask=mask)

        boxes = []
        for selector in selectors:
            box = await self.page.locator(selector).first.bounding_box()
            if box is None:
                logger.debug("Selector '%s' has no visible box, left out of the capture", selector)
                continue
            boxes.append(box)
        if not boxes:
            raise ValueError(f"None of the selectors {selectors} matched a visible element")

        # bounding boxes are viewport-relative, full-page clips are page-relative
        scroll_x, scroll_y = await self.page.evaluate(_SCROLL_OFFSET)
        clip = _union_box(boxes)
        clip["x"] += scroll_x
        clip["y"] += scroll_y
        logger.debug("Capturing %d elements in clip %s", len(boxes), clip)
        return await self.page.screenshot(full_page=True, clip=clip, mask=mask)
