"""Nutrition estimation from free-text descriptions using LLMs."""

import asyncio
import json
import logging
from collections.abc import Awaitable, Callable
from dataclasses import dataclass, field
from typing import Protocol

from food_diary.domain.nutrition import NutritionEstimate
from food_diary.errors import EstimationFailure
from food_diary.services.retry import with_retry

SYSTEM_INSTRUCTION = (
    "Nutrition calculator. Provide estimated cal, p, c, f (in grams) and "
    "w (water in ounces) as JSON object. "
    "Assume vegan ingredients unless specified. "
    'If the user logs water or a beverage, calculate "w" based on the volume '
    "mentioned or estimated. "
    "If it is JUST water, set cal, p, c, f to 0."
)

_logger = logging.getLogger(__name__)


class EstimatorClient(Protocol):
    """Interface for a text generation provider returning JSON text."""

    async def generate_json(
        self, *, model: str, system_instruction: str, prompt: str
    ) -> str:
        """Return the JSON text unwrapped from the provider response."""


@dataclass
class NutritionEstimatorService:
    """Service that asks the provider for estimates and validates them."""

    client: EstimatorClient
    model: str
    max_attempts: int = 5
    initial_delay_seconds: float = 1.0
    backoff_multiplier: float = 2.0
    sleep: Callable[[float], Awaitable[None]] = field(default=asyncio.sleep)

    async def estimate(self, description: str) -> NutritionEstimate:
        """Estimate nutrition for a single food or beverage description."""
        cleaned = description.strip()
        if not cleaned:
            raise ValueError("description must not be empty")

        async def attempt() -> NutritionEstimate:
            raw = await self.client.generate_json(
                model=self.model,
                system_instruction=SYSTEM_INSTRUCTION,
                prompt=cleaned,
            )
            return parse_estimate(raw)

        try:
            estimate = await with_retry(
                attempt,
                max_attempts=self.max_attempts,
                initial_delay_seconds=self.initial_delay_seconds,
                multiplier=self.backoff_multiplier,
                sleep=self.sleep,
                action=f"Nutrition estimate for {cleaned!r}",
            )
        except Exception as exc:
            raise EstimationFailure(cleaned, self.max_attempts) from exc
        _logger.info("Estimated %s: %s", cleaned, estimate.model_dump())
        return estimate


def parse_estimate(raw: str) -> NutritionEstimate:
    """Parse provider JSON text into a validated estimate."""
    payload = json.loads(raw)
    if not isinstance(payload, dict):
        raise ValueError("Estimator response is not a JSON object")
    return NutritionEstimate.model_validate(payload)
