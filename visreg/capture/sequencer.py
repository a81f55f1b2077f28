"""Hook sequencer — runs the per-image hook pair around the raw capture."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Awaitable, Callable, Optional

from visreg.comparators.base import call_hook, get_hook
from visreg.errors import DriverError, HookError, SequenceError, VisualRegressionError
from visreg.models.context import ScreenshotContext

logger = logging.getLogger(__name__)


class SequenceState(str, Enum):
    IDLE = "idle"
    BEFORE_SCREENSHOT_PENDING = "before_screenshot_pending"
    CAPTURING = "capturing"
    AFTER_SCREENSHOT_PENDING = "after_screenshot_pending"
    DONE = "done"


@dataclass
class SequenceOutcome:
    result: Any = None
    image: Optional[str] = None
    errors: list[VisualRegressionError] = field(default_factory=list)

    @property
    def ok(self) -> bool:
        return not self.errors


class HookSequencer:
    """Drives one image through before_screenshot -> capture -> after_screenshot.

    A sequencer is single-use: each step may run once, in order. Once
    ``before_screenshot`` has been attempted, ``after_screenshot`` always
    runs, with ``image=None`` when the hook or the capture failed.
    """

    def __init__(self, comparator: Any):
        self.comparator = comparator
        self.state = SequenceState.IDLE

    def _advance(self, expected: tuple[SequenceState, ...], new_state: SequenceState) -> None:
        if self.state not in expected:
            raise SequenceError(
                f"Cannot enter {new_state.value} from {self.state.value}"
            )
        self.state = new_state

    async def run_before_screenshot(self, context: ScreenshotContext) -> None:
        self._advance((SequenceState.IDLE,), SequenceState.BEFORE_SCREENSHOT_PENDING)
        hook = get_hook(self.comparator, "before_screenshot")
        if hook is None:
            return
        logger.debug("before_screenshot: %s capture in '%s'", context.type.value, context.test.title)
        try:
            await call_hook(hook, context)
        except Exception as e:
            raise HookError("before_screenshot", e) from e

    async def capture(self, grab: Callable[[], Awaitable[str]]) -> str:
        self._advance((SequenceState.BEFORE_SCREENSHOT_PENDING,), SequenceState.CAPTURING)
        try:
            return await grab()
        except Exception as e:
            raise DriverError(e) from e

    async def run_after_screenshot(self, context: ScreenshotContext, image: Optional[str]) -> Any:
        self._advance(
            (SequenceState.BEFORE_SCREENSHOT_PENDING, SequenceState.CAPTURING),
            SequenceState.AFTER_SCREENSHOT_PENDING,
        )
        try:
            hook = get_hook(self.comparator, "after_screenshot")
            if hook is None:
                return None
            logger.debug("after_screenshot: %s capture in '%s' (image=%s)",
                         context.type.value, context.test.title,
                         "yes" if image is not None else "none")
            try:
                return await call_hook(hook, context, image)
            except Exception as e:
                raise HookError("after_screenshot", e) from e
        finally:
            self.state = SequenceState.DONE

    async def run(
        self, context: ScreenshotContext, grab: Callable[[], Awaitable[str]]
    ) -> SequenceOutcome:
        """Run the full hook pair and capture, collecting errors instead of raising.

        Anything that is not a hook or driver failure (cancellation, for
        instance) propagates, but only after ``after_screenshot`` has run.
        """
        outcome = SequenceOutcome()

        try:
            try:
                await self.run_before_screenshot(context)
            except HookError as e:
                outcome.errors.append(e)

            if outcome.ok:
                try:
                    outcome.image = await self.capture(grab)
                except DriverError as e:
                    outcome.errors.append(e)
        finally:
            if self.state in (SequenceState.BEFORE_SCREENSHOT_PENDING, SequenceState.CAPTURING):
                try:
                    outcome.result = await self.run_after_screenshot(context, outcome.image)
                except HookError as e:
                    outcome.errors.append(e)

        return outcome
