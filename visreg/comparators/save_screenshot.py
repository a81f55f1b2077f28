"""SaveScreenshot comparator — stores every capture on disk without comparing it."""

from __future__ import annotations

import base64
import logging
import re
from pathlib import Path
from typing import Callable, Optional

from visreg.comparators.base import BaseComparator
from visreg.comparators.screenshot_registry import ScreenshotRegistry, ScreenshotRegistryManager
from visreg.models.config import VisualRegressionConfig
from visreg.models.context import ScreenshotContext, SessionContext
from visreg.models.result import ComparisonResult

logger = logging.getLogger(__name__)

_UNSAFE_CHARS = re.compile(r"[^A-Za-z0-9._-]+")


def _slug(value: str) -> str:
    return _UNSAFE_CHARS.sub("_", value).strip("_") or "unnamed"


def default_screenshot_name(context: ScreenshotContext) -> str:
    """``<test>_<type>[_<element>]_<browser>[_<width>px][_<orientation>]``, filesystem safe."""
    parts = [context.test.title, context.type.value]
    if context.meta.has("element"):
        element = context.meta.element
        parts.append(element if isinstance(element, str) else "+".join(element))
    parts.append(context.browser.name)
    if context.meta.has("width"):
        parts.append(f"{context.meta.width}px")
    if context.meta.has("orientation"):
        parts.append(context.meta.orientation)
    return "_".join(_slug(p) for p in parts)


class SaveScreenshot(BaseComparator):
    """Writes each screenshot to ``screenshots_dir`` and reports it as matching.

    Useful for collecting reference images on a first run. The registry of
    written files is persisted by the ``after`` hook. When a name repeats
    within one suite (two document captures in the same test, say), later
    captures get a ``_2``, ``_3``... suffix instead of overwriting.
    """

    def __init__(
        self,
        screenshots_dir: str | Path,
        screenshot_name: Optional[Callable[[ScreenshotContext], str]] = None,
    ):
        self.screenshots_dir = Path(screenshots_dir)
        self.screenshot_name = screenshot_name or default_screenshot_name
        self.registry_manager = ScreenshotRegistryManager(
            registry_path=self.screenshots_dir / "registry.json",
            screenshots_dir=self.screenshots_dir,
        )
        self.registry: Optional[ScreenshotRegistry] = None
        self._name_counts: dict[str, int] = {}

    @classmethod
    def from_config(cls, config: VisualRegressionConfig) -> "SaveScreenshot":
        return cls(config.screenshots_dir)

    async def before(self, context: SessionContext) -> None:
        self.screenshots_dir.mkdir(parents=True, exist_ok=True)
        self.registry = self.registry_manager.load()
        self._name_counts.clear()
        logger.info("Saving screenshots for %s %s to %s",
                    context.browser.name, context.browser.version, self.screenshots_dir)

    async def after_screenshot(
        self, context: ScreenshotContext, image: Optional[str]
    ) -> Optional[ComparisonResult]:
        if image is None:
            logger.debug("No image for %s capture in '%s', nothing saved",
                         context.type.value, context.test.title)
            return None

        if self.registry is None:
            self.registry = self.registry_manager.load()

        name = self._unique_name(self.screenshot_name(context))
        path = self.screenshots_dir / f"{name}.png"
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_bytes(base64.b64decode(image))

        self.registry_manager.record(
            self.registry,
            name=name,
            image_path=path,
            capture_type=context.type.value,
            test_title=context.test.title,
            browser_name=context.browser.name,
            url=context.meta.url,
            width=context.meta.width,
            orientation=context.meta.orientation,
        )
        return ComparisonResult.passing()

    def _unique_name(self, name: str) -> str:
        count = self._name_counts.get(name, 0) + 1
        self._name_counts[name] = count
        if count > 1:
            logger.debug("Screenshot name '%s' already used in this suite, saving as '%s_%d'",
                         name, name, count)
            return f"{name}_{count}"
        return name

    async def after(self) -> None:
        if self.registry is not None:
            self.registry_manager.save(self.registry)
