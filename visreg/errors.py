"""Error types raised by the visual regression launcher."""

from __future__ import annotations

from typing import Any


class VisualRegressionError(Exception):
    """Base class for every error raised by visreg."""


class ValidationError(VisualRegressionError):
    """Capture options are missing or malformed for the requested capture type."""


class LauncherStateError(VisualRegressionError):
    """The launcher was used outside of a running suite."""


class SequenceError(VisualRegressionError):
    """A hook sequencer step was invoked out of order or more than once."""


class HookError(VisualRegressionError):
    """A comparator hook raised."""

    def __init__(self, hook: str, cause: BaseException):
        super().__init__(f"Comparator hook '{hook}' failed: {cause}")
        self.hook = hook
        self.cause = cause


class DriverError(VisualRegressionError):
    """The browser driver failed while preparing or taking a screenshot."""

    def __init__(self, cause: BaseException):
        super().__init__(f"Browser driver failed: {cause}")
        self.cause = cause


class CaptureError(VisualRegressionError):
    """One capture command failed for at least one of its target images.

    Every target still received its ``before_screenshot``/``after_screenshot``
    pair; ``results`` holds whatever the comparator returned for each of them.
    """

    def __init__(
        self,
        capture_type: str,
        test_title: str,
        errors: list[VisualRegressionError],
        results: list[Any] | None = None,
    ):
        details = "; ".join(str(e) for e in errors)
        super().__init__(
            f"{capture_type} capture failed in test '{test_title}' "
            f"({len(errors)} error(s)): {details}"
        )
        self.capture_type = capture_type
        self.test_title = test_title
        self.errors = errors
        self.results = results or []
