"""Pytest configuration and shared fixtures."""

import base64
from typing import Any, Optional

import pytest
import pytest_asyncio

from visreg.launcher import VisualRegressionLauncher
from visreg.models.config import ViewportConfig, VisualRegressionConfig
from visreg.models.context import BrowserInfo, TestInfo


# ============================================================================
# Session Fixtures
# ============================================================================


CAPABILITIES = {"browserName": "chromium", "platformName": "linux"}
PNG_BYTES = (
    b'\x89PNG\r\n\x1a\n\x00\x00\x00\rIHDR\x00\x00\x00\x01'
    b'\x00\x00\x00\x01\x08\x02\x00\x00\x00\x90wS\xde\x00\x00'
    b'\x00\x0cIDATx\x9cc\x00\x01\x00\x00\x05\x00\x01\r\n-'
    b'\xb4\x00\x00\x00\x00IEND\xaeB`\x82'
)
PNG_BASE64 = base64.b64encode(PNG_BYTES).decode("ascii")


@pytest.fixture
def browser_info() -> BrowserInfo:
    """Create test browser metadata."""
    return BrowserInfo(
        name="chromium",
        version="124.0.6367.29",
        user_agent="Mozilla/5.0 (X11; Linux x86_64) HeadlessChrome/124.0.0.0",
    )


@pytest.fixture
def test_info() -> TestInfo:
    """Create test metadata for the running test."""
    return TestInfo(
        title="renders the landing page",
        parent="landing page",
        file="specs/landing.spec.py",
    )


@pytest.fixture
def capabilities() -> dict:
    return dict(CAPABILITIES)


@pytest.fixture
def config(capabilities: dict) -> VisualRegressionConfig:
    """Create a test launcher configuration without viewport pauses."""
    return VisualRegressionConfig(
        capabilities=capabilities,
        specs=["specs/landing.spec.py", "specs/checkout.spec.py"],
        viewport=ViewportConfig(width=1280, height=720, name="desktop"),
        viewport_change_pause_ms=0,
    )


# ============================================================================
# Driver and Comparator Fakes
# ============================================================================


class FakeDriver:
    """In-memory driver that records screenshots and viewport changes."""

    def __init__(self, browser: BrowserInfo, capabilities: dict, test: TestInfo):
        self.browser = browser
        self.capabilities = capabilities
        self.test = test
        self.url = "https://example.com/"
        self.widths: list[int] = []
        self.heights: list[Optional[int]] = []
        self.screenshots: list[Any] = []
        self.fail_screenshot: Optional[Exception] = None

    async def take_screenshot(self, context) -> str:
        if self.fail_screenshot is not None:
            raise self.fail_screenshot
        self.screenshots.append(context)
        return PNG_BASE64

    async def get_session_metadata(self) -> BrowserInfo:
        return self.browser

    async def get_capabilities(self) -> dict:
        return self.capabilities

    async def get_active_test_metadata(self) -> TestInfo:
        return self.test

    async def get_current_url(self) -> str:
        return self.url

    async def set_viewport_width(self, width: int, height: Optional[int] = None) -> None:
        self.widths.append(width)
        self.heights.append(height)


class RecordingComparator:
    """Comparator that records every hook call in order.

    ``calls`` holds ``(hook_name, args)`` tuples. Set ``result`` to control
    what ``after_screenshot`` returns and ``fail`` to make a hook raise.
    """

    def __init__(self, result: Any = None):
        self.calls: list[tuple[str, tuple]] = []
        self.result = result
        self.fail: dict[str, Exception] = {}

    def _record(self, hook: str, *args: Any) -> None:
        self.calls.append((hook, args))
        if hook in self.fail:
            raise self.fail[hook]

    async def before(self, context):
        self._record("before", context)

    async def before_screenshot(self, context):
        self._record("before_screenshot", context)

    async def after_screenshot(self, context, image):
        self._record("after_screenshot", context, image)
        return self.result

    async def after(self):
        self._record("after")

    def names(self) -> list[str]:
        return [name for name, _ in self.calls]

    def args_of(self, hook: str) -> list[tuple]:
        return [args for name, args in self.calls if name == hook]


@pytest.fixture
def driver(browser_info: BrowserInfo, capabilities: dict, test_info: TestInfo) -> FakeDriver:
    return FakeDriver(browser_info, capabilities, test_info)


@pytest.fixture
def comparator() -> RecordingComparator:
    return RecordingComparator()


@pytest.fixture
def launcher(comparator, driver, config) -> VisualRegressionLauncher:
    """Create a launcher that has not started its suite yet."""
    return VisualRegressionLauncher(comparator, driver, config)


@pytest_asyncio.fixture
async def running_launcher(launcher: VisualRegressionLauncher) -> VisualRegressionLauncher:
    """Create a launcher whose suite has been started."""
    await launcher.on_suite_start()
    return launcher
