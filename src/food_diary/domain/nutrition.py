"""Nutrition estimate models."""

import math

from pydantic import BaseModel, ConfigDict, Field, field_validator


class NutritionEstimate(BaseModel):
    """Estimated calories, macros (grams) and water (ounces) for one item."""

    model_config = ConfigDict(frozen=True, extra="ignore")

    cal: int = Field(default=0, ge=0)
    p: int = Field(default=0, ge=0)
    c: int = Field(default=0, ge=0)
    f: int = Field(default=0, ge=0)
    w: int = Field(default=0, ge=0)

    @field_validator("cal", "p", "c", "f", "w", mode="before")
    @classmethod
    def _round_value(cls, value: object) -> object:
        if value is None:
            return 0
        if isinstance(value, bool):
            raise ValueError("boolean is not a nutrition value")
        if isinstance(value, str):
            if not value.strip():
                return 0
            try:
                value = float(value)
            except ValueError as exc:
                raise ValueError(f"not a number: {value!r}") from exc
        if isinstance(value, int | float):
            if not math.isfinite(value):
                raise ValueError("nutrition value must be finite")
            return round_half_up(value)
        return value

    @classmethod
    def zero(cls) -> "NutritionEstimate":
        """Return an all-zero estimate."""
        return cls()


def round_half_up(value: float) -> int:
    """Round to the nearest integer with halves rounded up."""
    return math.floor(value + 0.5)
