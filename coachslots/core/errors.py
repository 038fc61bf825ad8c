# coachslots/core/errors.py
"""
Domain exceptions and their HTTP translation.

Route handlers raise these; the handlers registered in ``register_exception_handlers``
turn them into ``{"error": "..."}`` JSON bodies with the matching status code.
"""
from __future__ import annotations

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse

from coachslots.core.logging import get_logger

logger = get_logger(__name__)


class SchedulingError(Exception):
    """Base class for errors surfaced to API callers."""

    status_code = 400

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class NotFoundError(SchedulingError):
    status_code = 404


class SlotUnavailableError(SchedulingError):
    """The requested time overlaps a booking, session or calendar event."""

    status_code = 409

    def __init__(self, message: str = "Slot is no longer available"):
        super().__init__(message)


class SlotNotOfferedError(SchedulingError):
    """The requested time is not one of the offered slots for that day."""

    def __init__(self, message: str = "Slot is not offered"):
        super().__init__(message)


class UnauthorizedError(SchedulingError):
    """Missing or wrong API key, or no coach identity on a coach-only route."""

    status_code = 401


class DuplicateBookingError(SchedulingError):
    status_code = 409


class CalendarUnavailableError(Exception):
    """The external calendar provider could not be queried.

    Never reaches API callers: the blocked-interval collector degrades it to
    "no external blocks".
    """


def register_exception_handlers(app: FastAPI) -> None:
    @app.exception_handler(SchedulingError)
    async def _scheduling_error(request: Request, exc: SchedulingError):
        if exc.status_code >= 409:
            logger.info(
                "request_rejected",
                path=request.url.path,
                status_code=exc.status_code,
                error=exc.message,
            )
        return JSONResponse({"error": exc.message}, status_code=exc.status_code)
