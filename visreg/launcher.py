"""Visual regression launcher — drives comparator hooks for one browser session."""

from __future__ import annotations

import asyncio
import functools
import logging
from contextlib import asynccontextmanager
from typing import Any, AsyncIterator, Mapping, Optional, Sequence

from visreg.capture.aggregator import ComparisonAggregator
from visreg.capture.context_builder import build_screenshot_context
from visreg.capture.resolver import CaptureTypeResolver
from visreg.capture.sequencer import HookSequencer
from visreg.comparators.base import call_hook, get_hook
from visreg.drivers.base import resize_viewport
from visreg.errors import (
    CaptureError,
    DriverError,
    HookError,
    LauncherStateError,
    VisualRegressionError,
)
from visreg.models.config import VisualRegressionConfig
from visreg.models.context import (
    CaptureRequest,
    CaptureTarget,
    CaptureType,
    SessionContext,
    TestInfo,
)

logger = logging.getLogger(__name__)


class VisualRegressionLauncher:
    """Owns one session's suite lifecycle and runs capture commands through the comparator."""

    def __init__(
        self,
        comparator: Any,
        driver: Any,
        config: Optional[VisualRegressionConfig] = None,
    ):
        self.comparator = comparator
        self.driver = driver
        self.config = config or VisualRegressionConfig()
        self.resolver = CaptureTypeResolver()
        self._session: Optional[SessionContext] = None
        self._finished = False

    @property
    def session(self) -> Optional[SessionContext]:
        return self._session

    @property
    def running(self) -> bool:
        return self._session is not None and not self._finished

    async def on_suite_start(self, specs: Optional[Sequence[str]] = None) -> SessionContext:
        """Build the session context and fire the comparator's ``before`` hook.

        Capabilities are the driver's, overridden key by key by
        ``config.capabilities``. A failing hook is fatal: the error
        propagates and the suite is not considered started.
        """
        if self._session is not None:
            raise LauncherStateError("Suite has already been started")

        browser = await self.driver.get_session_metadata()
        capabilities = {**await self.driver.get_capabilities(), **self.config.capabilities}
        session = SessionContext(
            browser=browser,
            desired_capabilities=capabilities,
            specs=list(specs) if specs is not None else list(self.config.specs),
        )
        logger.info("Starting visual regression suite on %s %s (%d specs)",
                    browser.name, browser.version, len(session.specs))

        hook = get_hook(self.comparator, "before")
        if hook is not None:
            try:
                await call_hook(hook, session)
            except Exception as e:
                logger.error("Comparator 'before' hook failed, aborting suite: %s", e)
                raise HookError("before", e) from e

        self._session = session
        return session

    async def on_suite_end(self) -> Optional[HookError]:
        """Fire the comparator's ``after`` hook.

        Failures are logged and returned, never raised, so results already
        handed to callers stay valid.
        """
        if self._session is None:
            raise LauncherStateError("Suite was never started")
        if self._finished:
            raise LauncherStateError("Suite has already finished")
        self._finished = True

        hook = get_hook(self.comparator, "after")
        if hook is not None:
            try:
                await call_hook(hook)
            except Exception as e:
                logger.error("Comparator 'after' hook failed: %s", e, exc_info=True)
                return HookError("after", e)
        logger.info("Visual regression suite finished")
        return None

    @asynccontextmanager
    async def suite(self, specs: Optional[Sequence[str]] = None) -> AsyncIterator["VisualRegressionLauncher"]:
        """Run ``on_suite_start``/``on_suite_end`` around a block of captures."""
        await self.on_suite_start(specs)
        try:
            yield self
        finally:
            await self.on_suite_end()

    async def check_document(self, name: Optional[str] = None, options: Optional[Mapping[str, Any]] = None) -> list[Any]:
        return await self.capture(CaptureType.DOCUMENT, options, name=name)

    async def check_element(self, selector: str | Sequence[str], options: Optional[Mapping[str, Any]] = None) -> list[Any]:
        return await self.capture(CaptureType.ELEMENT, options, element=selector)

    async def check_viewport(self, options: Optional[Mapping[str, Any]] = None) -> list[Any]:
        return await self.capture(CaptureType.VIEWPORT, options)

    async def capture(
        self,
        capture_type: CaptureType | str,
        options: Optional[Mapping[str, Any]] = None,
        element: Any = None,
        name: Optional[str] = None,
    ) -> list[Any]:
        """Capture every target image of one command and return the comparator results.

        Results are in target order, one per image, ``None`` where the
        comparator performed no comparison. If any image failed, all images
        are still processed and a single ``CaptureError`` is raised.
        """
        if not self.running:
            raise LauncherStateError("Captures are only allowed while the suite is running")

        request = self.resolver.resolve(capture_type, options, element=element)
        try:
            test = await self.driver.get_active_test_metadata()
        except Exception as e:
            logger.error("Could not read the active test for %s capture: %s", request.type.value, e)
            raise DriverError(e) from e
        label = name or request.type.value
        logger.debug("Capture '%s' (%s) in test '%s': %d image(s)",
                     label, request.type.value, test.title, len(request.targets))

        aggregator = ComparisonAggregator()
        errors: list[VisualRegressionError] = []
        try:
            for target in request.targets:
                result, target_errors = await self._capture_target(request, target, test)
                aggregator.add(result)
                for error in target_errors:
                    logger.warning("%s capture '%s' [%s] failed in test '%s': %s",
                                   request.type.value, label, target.label, test.title, error)
                errors.extend(target_errors)
        finally:
            if any(t.width is not None for t in request.targets):
                await self._restore_viewport(errors)

        results = aggregator.results
        if errors:
            raise CaptureError(request.type.value, test.title, errors, results)
        return results

    async def _capture_target(
        self, request: CaptureRequest, target: CaptureTarget, test: TestInfo
    ) -> tuple[Any, list[VisualRegressionError]]:
        url = ""
        prepare_error: Optional[Exception] = None
        try:
            if target.width is not None:
                await self._change_viewport(target.width, request.options)
            url = await self.driver.get_current_url()
        except Exception as e:
            # the hook pair still runs; the context has an empty url and no image follows
            prepare_error = e

        context = build_screenshot_context(
            request.type,
            request.options,
            browser=self._session.browser,
            capabilities=self._session.desired_capabilities,
            test=test,
            url=url,
            element=request.element,
            target=target,
        )
        if prepare_error is None:
            grab = functools.partial(self.driver.take_screenshot, context)
        else:
            grab = functools.partial(_raise, prepare_error)

        sequencer = HookSequencer(self.comparator)
        outcome = await sequencer.run(context, grab)
        errors = outcome.errors
        if prepare_error is not None and not any(isinstance(e, DriverError) for e in errors):
            # before_screenshot failed too, so the capture step never reported it
            errors.insert(0, DriverError(prepare_error))
        return outcome.result, errors

    async def _change_viewport(self, width: int, options: Mapping[str, Any]) -> None:
        if not await resize_viewport(self.driver, width):
            logger.debug("Driver cannot resize its viewport, capturing at current size")
            return
        pause_ms = options.get("viewportChangePause", self.config.viewport_change_pause_ms)
        if pause_ms:
            await asyncio.sleep(pause_ms / 1000)

    async def _restore_viewport(self, errors: list[VisualRegressionError]) -> None:
        viewport = self.config.viewport
        logger.debug("Restoring %s viewport (%dx%d)", viewport.name, viewport.width, viewport.height)
        try:
            await resize_viewport(self.driver, viewport.width, viewport.height)
        except Exception as e:
            errors.append(DriverError(e))


async def _raise(error: Exception) -> str:
    raise error
