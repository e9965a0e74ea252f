"""FastAPI application factory."""

import logging
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager
from datetime import date

from fastapi import Depends, FastAPI, Header, HTTPException, Request, Response, status
from fastapi.responses import JSONResponse, PlainTextResponse
from pydantic import BaseModel

from food_diary.app_logging import configure_logging
from food_diary.containers import AppContainer
from food_diary.domain.entries import FoodLogEntry
from food_diary.domain.sessions import (
    DiarySession,
    adjacent_day,
    day_key,
    display_date,
    parse_day_key,
)
from food_diary.domain.stats import DailySummary
from food_diary.errors import IngestionFailure, StoreSyncFailure
from food_diary.services.export import clipboard_text, export_csv, export_filename
from food_diary.services.stats import entries_for_day

SAVE_FAILED_MESSAGE = "Wipeout! Save failed."
SYNC_FAILED_MESSAGE = "Sync error."


class EntrySubmission(BaseModel):
    """Free-text submission with one or more items."""

    text: str


async def require_user(x_user_id: str | None = Header(default=None)) -> str:
    """Ensure requests carry the signed-in user's id."""
    if not x_user_id or not x_user_id.strip():
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED)
    return x_user_id.strip()


def parse_day(day: str) -> date:
    """Validate the day path parameter."""
    try:
        return parse_day_key(day)
    except ValueError as exc:
        raise HTTPException(
            status_code=422,
            detail=f"Invalid day key: {day}",
        ) from exc


def create_app(container: AppContainer) -> FastAPI:  # noqa: PLR0915
    """Create a FastAPI app configured with dependencies."""
    configure_logging()
    logger = logging.getLogger(__name__)

    @asynccontextmanager
    async def lifespan(app: FastAPI) -> AsyncIterator[None]:
        yield
        await app.state.container.close_resources()

    app = FastAPI(lifespan=lifespan)
    app.state.container = container

    @app.exception_handler(StoreSyncFailure)
    async def store_sync_failure_handler(
        request: Request, exc: StoreSyncFailure
    ) -> JSONResponse:
        state_container: AppContainer = request.app.state.container
        return JSONResponse(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            content={
                "detail": _format_error(state_container, exc, SYNC_FAILED_MESSAGE)
            },
        )

    @app.get("/health")
    async def health() -> dict[str, str]:
        """Simple health check endpoint."""
        return {"status": "ok"}

    @app.get("/days/{day}")
    async def day_summary(
        day: str, request: Request, user_id: str = Depends(require_user)
    ) -> dict[str, object]:
        """Return entries, totals and theme for a day."""
        state_container: AppContainer = request.app.state.container
        session = _open_session(state_container, user_id, parse_day(day))
        snapshot = state_container.log_feed.snapshot(user_id)
        summary = state_container.summary_service.summarize(
            snapshot, session.day_key
        )
        return _summary_payload(summary, session)

    @app.post("/days/{day}/entries", status_code=status.HTTP_201_CREATED)
    async def add_entries(
        day: str,
        submission: EntrySubmission,
        request: Request,
        user_id: str = Depends(require_user),
    ) -> dict[str, object]:
        """Estimate and log every item of a submission."""
        state_container: AppContainer = request.app.state.container
        session = _open_session(state_container, user_id, parse_day(day))
        try:
            result = await state_container.ingestion_service.ingest(
                session, submission.text
            )
        except IngestionFailure as exc:
            logger.warning("Submission failed", extra={"user_id": user_id})
            raise HTTPException(
                status_code=status.HTTP_502_BAD_GATEWAY,
                detail={
                    "message": _format_error(
                        state_container, exc, SAVE_FAILED_MESSAGE
                    ),
                    "failed_item": exc.item,
                    "saved": [_entry_payload(entry) for entry in exc.saved],
                },
            ) from exc
        if result.reason == "in_flight":
            raise HTTPException(
                status_code=status.HTTP_409_CONFLICT,
                detail="A submission is already being saved.",
            )
        if not result.saved:
            raise HTTPException(
                status_code=status.HTTP_400_BAD_REQUEST,
                detail="Nothing to log.",
            )
        snapshot = state_container.log_feed.snapshot(user_id)
        summary = state_container.summary_service.summarize(
            snapshot, session.day_key
        )
        return {
            "entries": [_entry_payload(entry) for entry in result.entries],
            "summary": _summary_payload(summary, session),
        }

    @app.delete("/entries/{entry_id}", status_code=status.HTTP_204_NO_CONTENT)
    async def delete_entry(
        entry_id: str, request: Request, user_id: str = Depends(require_user)
    ) -> Response:
        """Delete an entry from the user's log."""
        state_container: AppContainer = request.app.state.container
        state_container.log_feed.delete(user_id, entry_id)
        return Response(status_code=status.HTTP_204_NO_CONTENT)

    @app.get("/days/{day}/export.csv")
    async def export_day(
        day: str, request: Request, user_id: str = Depends(require_user)
    ) -> Response:
        """Download the day's entries as CSV."""
        state_container: AppContainer = request.app.state.container
        entries = _day_entries(state_container, user_id, day)
        if not entries:
            raise HTTPException(status_code=status.HTTP_404_NOT_FOUND)
        filename = export_filename(state_container.settings.app_name, day)
        return Response(
            content=export_csv(entries),
            media_type="text/csv",
            headers={"Content-Disposition": f'attachment; filename="{filename}"'},
        )

    @app.get("/days/{day}/names", response_class=PlainTextResponse)
    async def day_names(
        day: str, request: Request, user_id: str = Depends(require_user)
    ) -> PlainTextResponse:
        """Return the day's entry names as clipboard text."""
        state_container: AppContainer = request.app.state.container
        entries = _day_entries(state_container, user_id, day)
        return PlainTextResponse(clipboard_text(entries))

    return app


def _open_session(
    state_container: AppContainer, user_id: str, selected_day: date
) -> DiarySession:
    session = state_container.session_service.start(user_id)
    session.selected_day = selected_day
    return session


def _day_entries(
    state_container: AppContainer, user_id: str, day: str
) -> list[FoodLogEntry]:
    day_value = day_key(parse_day(day))
    snapshot = state_container.log_feed.snapshot(user_id)
    return entries_for_day(snapshot, day_value)


def _format_error(state_container: AppContainer, exc: Exception, fallback: str) -> str:
    """Return a user-facing error message with local debug info."""
    if state_container.settings.environment == "local":
        detail = f"{type(exc).__name__}: {exc}".strip()
        if detail:
            return f"{fallback} (debug: {detail})"
    return fallback


def _entry_payload(entry: FoodLogEntry) -> dict[str, object]:
    return {
        "id": entry.id,
        "name": entry.name,
        "date": entry.date,
        "time": entry.time,
        "timestamp": entry.timestamp,
        "stats": entry.resolved_stats.model_dump(),
    }


def _summary_payload(summary: DailySummary, session: DiarySession) -> dict[str, object]:
    totals = summary.totals
    selected = session.selected_day
    return {
        "day": summary.day,
        "display_date": display_date(selected),
        "previous_day": day_key(adjacent_day(selected, -1)),
        "next_day": day_key(adjacent_day(selected, 1)),
        "entries": [_entry_payload(entry) for entry in summary.entries],
        "totals": {
            "cal": totals.cal,
            "p": totals.p,
            "c": totals.c,
            "f": totals.f,
            "w": totals.w,
            "total_mass": totals.total_mass,
            "percentages": {
                "p": totals.percentages.p,
                "c": totals.percentages.c,
                "f": totals.percentages.f,
            },
        },
        "theme": {
            "key": summary.theme.key,
            "color": summary.theme.color,
            "pattern": summary.theme.pattern,
            "advice": summary.theme.advice,
        },
    }
