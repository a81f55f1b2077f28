"""Browser driver interface consumed by the launcher."""

from __future__ import annotations

from typing import Any, Optional, Protocol, runtime_checkable

from visreg.models.context import BrowserInfo, ScreenshotContext, TestInfo


@runtime_checkable
class Driver(Protocol):
    async def take_screenshot(self, context: ScreenshotContext) -> str:
        """Capture the image described by ``context`` as a base64 string."""
        ...

    async def get_session_metadata(self) -> BrowserInfo: ...

    async def get_capabilities(self) -> dict[str, Any]: ...

    async def get_active_test_metadata(self) -> TestInfo: ...

    async def get_current_url(self) -> str: ...


async def resize_viewport(driver: Any, width: int, height: Optional[int] = None) -> bool:
    """Ask the driver to resize its viewport, if it supports resizing.

    Without ``height`` the driver keeps its current viewport height.
    """
    resize = getattr(driver, "set_viewport_width", None)
    if resize is None:
        return False
    if height is None:
        await resize(width)
    else:
        await resize(width, height=height)
    return True
