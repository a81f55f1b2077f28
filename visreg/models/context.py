"""Context objects handed to comparator hooks."""

from __future__ import annotations

from enum import Enum
from typing import Any, Optional, Union

from pydantic import BaseModel, ConfigDict, Field, field_validator


class CaptureType(str, Enum):
    DOCUMENT = "document"
    ELEMENT = "element"
    VIEWPORT = "viewport"


class BrowserInfo(BaseModel):
    model_config = ConfigDict(frozen=True, populate_by_name=True)

    name: str
    version: str
    user_agent: str = Field(alias="userAgent")

    @field_validator("name", "version", "user_agent")
    @classmethod
    def require_value(cls, v: str) -> str:
        if not v:
            raise ValueError("browser metadata fields must be non-empty")
        return v


class TestInfo(BaseModel):
    """Identifies the test that issued a capture."""

    model_config = ConfigDict(frozen=True)

    title: str
    parent: str
    file: str


class ScreenshotMeta(BaseModel):
    """Capture-specific metadata.

    Optional fields are present only when they were passed to the
    constructor; ``has()`` is the presence check and ``to_dict()`` omits
    absent fields. ``exclude``, ``hide`` and ``remove`` keep the caller's
    objects as-is.
    """

    model_config = ConfigDict(frozen=True)

    url: str
    element: Optional[Union[str, list[str]]] = None
    exclude: Any = None
    hide: Any = None
    remove: Any = None
    width: Optional[int] = None
    orientation: Optional[str] = None

    def has(self, field: str) -> bool:
        return field in self.model_fields_set

    def to_dict(self) -> dict[str, Any]:
        return self.model_dump(exclude_unset=True)


class ScreenshotContext(BaseModel):
    model_config = ConfigDict(frozen=True, populate_by_name=True)

    type: CaptureType
    browser: BrowserInfo
    desired_capabilities: dict[str, Any] = Field(alias="desiredCapabilities")
    test: TestInfo
    meta: ScreenshotMeta
    options: Any  # the caller's options mapping, never copied

    def to_dict(self) -> dict[str, Any]:
        return {
            "type": self.type.value,
            "browser": self.browser.model_dump(by_alias=True),
            "desiredCapabilities": self.desired_capabilities,
            "test": self.test.model_dump(),
            "meta": self.meta.to_dict(),
            "options": self.options,
        }


class SessionContext(BaseModel):
    model_config = ConfigDict(frozen=True, populate_by_name=True)

    browser: BrowserInfo
    desired_capabilities: dict[str, Any] = Field(alias="desiredCapabilities")
    specs: list[str] = Field(default_factory=list)


class CaptureTarget(BaseModel):
    """A single image within one capture command."""

    model_config = ConfigDict(frozen=True)

    width: Optional[int] = None
    orientation: Optional[str] = None

    @property
    def label(self) -> str:
        parts = []
        if self.width is not None:
            parts.append(f"{self.width}px")
        if self.orientation is not None:
            parts.append(self.orientation)
        return "_".join(parts) or "default"


class CaptureRequest(BaseModel):
    """A validated capture command, expanded into its target images."""

    model_config = ConfigDict(frozen=True)

    type: CaptureType
    options: Any
    element: Optional[Union[str, list[str]]] = None
    targets: list[CaptureTarget] = Field(default_factory=lambda: [CaptureTarget()])
