"""Dependency container wiring for the application."""

from collections.abc import Awaitable, Callable
from dataclasses import dataclass
from datetime import datetime

from supabase import create_client

from food_diary.adapters.gemini_client import HttpxGeminiClient
from food_diary.adapters.openai_estimator_client import OpenAIEstimatorClient
from food_diary.adapters.supabase_food_log_repository import (
    SupabaseFoodLogRepository,
)
from food_diary.config import Settings, local_clock
from food_diary.services.estimator import NutritionEstimatorService
from food_diary.services.ingestion import IngestionService
from food_diary.services.log_feed import FoodLogFeed
from food_diary.services.sessions import SessionService
from food_diary.services.stats import DailySummaryService


@dataclass
class AppContainer:
    """Holds application-wide dependencies."""

    settings: Settings
    clock: Callable[[], datetime]
    estimator_service: NutritionEstimatorService
    log_feed: FoodLogFeed
    ingestion_service: IngestionService
    summary_service: DailySummaryService
    session_service: SessionService
    close_resources: Callable[[], Awaitable[None]]


def build_container(settings: Settings | None = None) -> AppContainer:
    """Create the default dependency container."""
    resolved_settings = settings or Settings()
    supabase_client = create_client(
        resolved_settings.supabase_url, resolved_settings.supabase_service_key
    )
    repository = SupabaseFoodLogRepository(
        client=supabase_client, namespace=resolved_settings.app_namespace
    )
    log_feed = FoodLogFeed(repository)
    clock = local_clock(resolved_settings.timezone)
    estimator_client, model = _build_estimator_client(resolved_settings)
    estimator_service = NutritionEstimatorService(
        client=estimator_client,
        model=model,
        max_attempts=resolved_settings.estimator_max_attempts,
        initial_delay_seconds=resolved_settings.estimator_initial_delay_seconds,
        backoff_multiplier=resolved_settings.estimator_backoff_multiplier,
    )
    ingestion_service = IngestionService(
        estimator=estimator_service,
        feed=log_feed,
        clock=clock,
    )

    async def close_resources() -> None:
        await estimator_client.close()

    return AppContainer(
        settings=resolved_settings,
        clock=clock,
        estimator_service=estimator_service,
        log_feed=log_feed,
        ingestion_service=ingestion_service,
        summary_service=DailySummaryService(),
        session_service=SessionService(clock),
        close_resources=close_resources,
    )


def _build_estimator_client(
    settings: Settings,
) -> tuple[HttpxGeminiClient | OpenAIEstimatorClient, str]:
    provider = settings.estimator_provider.lower()
    if provider == "gemini":
        if not settings.gemini_api_key:
            raise ValueError("GEMINI_API_KEY is required for the gemini provider")
        client = HttpxGeminiClient.create(
            api_key=settings.gemini_api_key,
            base_url=settings.gemini_base_url,
            timeout=settings.estimator_timeout_seconds,
        )
        return client, settings.gemini_model
    if provider == "openai":
        if not settings.openai_api_key:
            raise ValueError("OPENAI_API_KEY is required for the openai provider")
        openai_client = OpenAIEstimatorClient.create(
            api_key=settings.openai_api_key,
            timeout=settings.estimator_timeout_seconds,
        )
        return openai_client, settings.openai_model
    raise ValueError(f"Unknown estimator provider: {settings.estimator_provider}")
