"""Comparison result returned by comparator ``after_screenshot`` hooks."""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field


class ComparisonResult(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    mismatch_percentage: float = Field(alias="misMatchPercentage", ge=0, le=100)
    is_within_mismatch_tolerance: bool = Field(alias="isWithinMisMatchTolerance")
    is_same_dimensions: bool = Field(alias="isSameDimensions")
    is_exact_same_image: bool = Field(alias="isExactSameImage")

    @classmethod
    def passing(cls) -> "ComparisonResult":
        """A result for an image that trivially matches its reference."""
        return cls(
            mismatch_percentage=0,
            is_within_mismatch_tolerance=True,
            is_same_dimensions=True,
            is_exact_same_image=True,
        )
