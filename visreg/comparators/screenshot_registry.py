"""Screenshot registry — JSON index of the screenshots written by SaveScreenshot."""

from __future__ import annotations

import hashlib
import json
import logging
import time
from pathlib import Path

from pydantic import BaseModel, Field

logger = logging.getLogger(__name__)


class ScreenshotEntry(BaseModel):
    name: str
    capture_type: str
    test_title: str
    browser_name: str
    url: str
    width: int | None = None
    orientation: str | None = None
    image_path: str  # relative path from screenshots_dir to the PNG
    captured_at: str  # ISO timestamp
    image_hash: str  # SHA-256 hex digest


class ScreenshotRegistry(BaseModel):
    last_updated: str = ""
    screenshots: dict[str, ScreenshotEntry] = Field(default_factory=dict)


class ScreenshotRegistryManager:
    """Loads, updates and persists the screenshot registry."""

    def __init__(self, registry_path: Path, screenshots_dir: Path):
        self.registry_path = registry_path
        self.screenshots_dir = screenshots_dir

    def load(self) -> ScreenshotRegistry:
        """Load registry from disk, or create a new one."""
        if self.registry_path.exists():
            try:
                with open(self.registry_path) as f:
                    data = json.load(f)
                return ScreenshotRegistry(**data)
            except Exception as e:
                logger.warning("Failed to load screenshot registry: %s. Creating new.", e)
        return ScreenshotRegistry()

    def save(self, registry: ScreenshotRegistry) -> None:
        """Persist registry to disk."""
        self.registry_path.parent.mkdir(parents=True, exist_ok=True)
        registry.last_updated = time.strftime("%Y-%m-%dT%H:%M:%SZ")
        with open(self.registry_path, "w") as f:
            json.dump(registry.model_dump(), f, indent=2)
        logger.debug("Saved screenshot registry to %s", self.registry_path)

    def record(
        self,
        registry: ScreenshotRegistry,
        name: str,
        image_path: Path,
        capture_type: str,
        test_title: str,
        browser_name: str,
        url: str,
        width: int | None = None,
        orientation: str | None = None,
    ) -> ScreenshotEntry:
        """Register a screenshot file already written under ``screenshots_dir``."""
        entry = ScreenshotEntry(
            name=name,
            capture_type=capture_type,
            test_title=test_title,
            browser_name=browser_name,
            url=url,
            width=width,
            orientation=orientation,
            image_path=str(image_path.relative_to(self.screenshots_dir)),
            captured_at=time.strftime("%Y-%m-%dT%H:%M:%SZ"),
            image_hash=hashlib.sha256(image_path.read_bytes()).hexdigest(),
        )
        registry.screenshots[name] = entry
        logger.info("Recorded screenshot %s", name)
        return entry
