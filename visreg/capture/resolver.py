"""Capture type resolver — validates capture options and expands sweep targets."""

from __future__ import annotations

import itertools
import logging
from collections.abc import Mapping, Sequence
from typing import Any

from visreg.errors import ValidationError
from visreg.models.context import CaptureRequest, CaptureTarget, CaptureType

logger = logging.getLogger(__name__)

ORIENTATIONS = ("portrait", "landscape")
SELECTOR_OPTIONS = ("exclude", "hide", "remove")
RECT_KEYS = frozenset({"x", "y", "width", "height"})


def _is_sequence(value: Any) -> bool:
    return isinstance(value, Sequence) and not isinstance(value, (str, bytes))


def _is_number(value: Any) -> bool:
    return isinstance(value, (int, float)) and not isinstance(value, bool)


def _is_selector(value: Any) -> bool:
    return isinstance(value, str) and bool(value.strip())


def _is_rect(value: Any) -> bool:
    return (
        isinstance(value, Mapping)
        and set(value) == RECT_KEYS
        and all(_is_number(v) for v in value.values())
    )


class CaptureTypeResolver:
    """Classifies a capture request and checks its options for that type."""

    def resolve(
        self,
        capture_type: CaptureType | str,
        options: Mapping[str, Any] | None = None,
        element: Any = None,
    ) -> CaptureRequest:
        resolved_type = self._resolve_type(capture_type)
        if options is None:
            options = {}
        if not isinstance(options, Mapping):
            raise ValidationError(
                f"Capture options must be a mapping, got {type(options).__name__}"
            )

        selector = None
        if resolved_type is CaptureType.ELEMENT:
            selector = self._validate_element(element)
        elif element is not None:
            raise ValidationError(f"{resolved_type.value} captures do not take an element selector")

        widths = self._validate_widths(options)
        orientations = self._validate_orientations(options)
        for key in SELECTOR_OPTIONS:
            self._validate_selectors(options, key)
        self._validate_tolerance(options)
        self._validate_pause(options)

        targets = [
            CaptureTarget(width=w, orientation=o)
            for w, o in itertools.product(widths or [None], orientations or [None])
        ]
        logger.debug("Resolved %s capture into %d target(s)", resolved_type.value, len(targets))
        return CaptureRequest(
            type=resolved_type,
            options=options,
            element=selector,
            targets=targets,
        )

    @staticmethod
    def _resolve_type(capture_type: CaptureType | str) -> CaptureType:
        try:
            return CaptureType(capture_type)
        except ValueError:
            raise ValidationError(
                f"Unknown capture type '{capture_type}', expected one of "
                f"{', '.join(t.value for t in CaptureType)}"
            ) from None

    @staticmethod
    def _validate_element(element: Any) -> str | list[str]:
        if element is None:
            raise ValidationError("Element capture requires an element selector")
        if isinstance(element, str):
            if not _is_selector(element):
                raise ValidationError("Element selector must not be empty")
            return element
        if _is_sequence(element):
            if not element:
                raise ValidationError("Element selector list must not be empty")
            if not all(_is_selector(s) for s in element):
                raise ValidationError("Element selector list must contain only non-empty strings")
            return list(element)
        raise ValidationError(
            f"Element selector must be a string or a list of strings, got {type(element).__name__}"
        )

    @staticmethod
    def _validate_widths(options: Mapping[str, Any]) -> list[int] | None:
        if "widths" not in options:
            return None
        widths = options["widths"]
        if not _is_sequence(widths) or not widths:
            raise ValidationError("'widths' must be a non-empty list of positive integers")
        for width in widths:
            if isinstance(width, bool) or not isinstance(width, int) or width <= 0:
                raise ValidationError(f"Invalid width {width!r}: widths must be positive integers")
        return list(widths)

    @staticmethod
    def _validate_orientations(options: Mapping[str, Any]) -> list[str] | None:
        if "orientations" not in options:
            return None
        orientations = options["orientations"]
        if not _is_sequence(orientations) or not orientations:
            raise ValidationError("'orientations' must be a non-empty list")
        for orientation in orientations:
            if orientation not in ORIENTATIONS:
                raise ValidationError(
                    f"Invalid orientation {orientation!r}, expected one of {', '.join(ORIENTATIONS)}"
                )
        return list(orientations)

    @staticmethod
    def _validate_selectors(options: Mapping[str, Any], key: str) -> None:
        if key not in options:
            return
        value = options[key]
        # exclude may also name fixed rectangles on the page
        allowed = (lambda v: _is_selector(v) or _is_rect(v)) if key == "exclude" else _is_selector
        if isinstance(value, str) or (key == "exclude" and isinstance(value, Mapping)):
            valid = allowed(value)
        else:
            valid = _is_sequence(value) and bool(value) and all(allowed(v) for v in value)
        if not valid:
            raise ValidationError(f"'{key}' must be a selector or a list of selectors")

    @staticmethod
    def _validate_tolerance(options: Mapping[str, Any]) -> None:
        if "misMatchTolerance" not in options:
            return
        tolerance = options["misMatchTolerance"]
        if not _is_number(tolerance) or not 0 <= tolerance <= 100:
            raise ValidationError("'misMatchTolerance' must be a number between 0 and 100")

    @staticmethod
    def _validate_pause(options: Mapping[str, Any]) -> None:
        if "viewportChangePause" not in options:
            return
        pause = options["viewportChangePause"]
        if not _is_number(pause) or pause < 0:
            raise ValidationError("'viewportChangePause' must be a non-negative number of milliseconds")
