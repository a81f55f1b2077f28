"""Comparator plugin interface.

A comparator is any object exposing some subset of four hooks::

    before(session_context)                          # once, at suite start
    before_screenshot(screenshot_context)            # once per image
    after_screenshot(screenshot_context, image)      # once per image -> result
    after()                                          # once, at suite end

Each hook may be a plain function or a coroutine function. Hooks that are
missing are skipped. The camelCase names (``beforeScreenshot``,
``afterScreenshot``) are accepted as well, so a namespace of plain
functions works as a comparator.
"""

from __future__ import annotations

import inspect
from typing import Any, Callable, Optional

from visreg.models.context import ScreenshotContext, SessionContext

HOOK_ALIASES = {
    "before": ("before",),
    "before_screenshot": ("before_screenshot", "beforeScreenshot"),
    "after_screenshot": ("after_screenshot", "afterScreenshot"),
    "after": ("after",),
}


def get_hook(comparator: Any, hook: str) -> Optional[Callable[..., Any]]:
    """Return the callable for ``hook`` on ``comparator``, or None if it has none."""
    if comparator is None:
        return None
    for name in HOOK_ALIASES[hook]:
        fn = getattr(comparator, name, None)
        if fn is not None and callable(fn):
            return fn
    return None


async def call_hook(fn: Callable[..., Any], *args: Any) -> Any:
    """Call a sync or async hook and wait for its result."""
    result = fn(*args)
    if inspect.isawaitable(result):
        result = await result
    return result


class BaseComparator:
    """Convenience base class with no-op hooks."""

    async def before(self, context: SessionContext) -> None:
        return None

    async def before_screenshot(self, context: ScreenshotContext) -> None:
        return None

    async def after_screenshot(self, context: ScreenshotContext, image: Optional[str]) -> Any:
        return None

    async def after(self) -> None:
        return None
