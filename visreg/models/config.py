"""Configuration models for visreg."""

from __future__ import annotations

import json
import os
from pathlib import Path
from typing import Any

from pydantic import BaseModel, Field, field_validator


class ViewportConfig(BaseModel):
    width: int = 1280
    height: int = 720
    name: str = "desktop"


class VisualRegressionConfig(BaseModel):
    # Session
    capabilities: dict[str, Any] = Field(default_factory=dict)
    specs: list[str] = Field(default_factory=list)

    # Browser window
    viewport: ViewportConfig = Field(default_factory=ViewportConfig)
    viewport_change_pause_ms: int = Field(default=100, ge=0)

    # SaveScreenshot comparator
    screenshots_dir: str = "./screenshots"

    @field_validator("capabilities", mode="before")
    @classmethod
    def resolve_env_capabilities(cls, v: Any) -> Any:
        if not isinstance(v, dict):
            return v
        resolved = {}
        for key, value in v.items():
            if isinstance(value, str) and value.startswith("env:"):
                env_var = value[4:]
                value = os.environ.get(env_var)
                if value is None:
                    raise ValueError(f"Environment variable '{env_var}' not set")
            resolved[key] = value
        return resolved

    @classmethod
    def load(cls, path: str | Path) -> "VisualRegressionConfig":
        """Load config from a JSON file."""
        path = Path(path)
        if not path.exists():
            raise FileNotFoundError(f"Config file not found: {path}")
        with open(path) as f:
            data = json.load(f)
        return cls(**data)

    def save(self, path: str | Path) -> None:
        """Save config to a JSON file."""
        path = Path(path)
        path.parent.mkdir(parents=True, exist_ok=True)
        with open(path, "w") as f:
            json.dump(self.model_dump(), f, indent=2)
