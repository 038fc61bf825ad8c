"""
Structured logging for the slot service.

Every log line emitted while a request is in flight carries the request's
correlation id, and the coach id once the request has been authenticated.
Both live in structlog's contextvars so that log lines from the resolver's
concurrent query branches are tagged the same way.
"""
import logging
import time
import uuid
from typing import Optional

import structlog
from fastapi import Request

CORRELATION_HEADER = "X-Correlation-ID"

# Keys that may carry long provider messages or stack text
_TRUNCATED_KEYS = ("event", "error", "detail")


class TruncateProcessor:
    """Clip long values so one noisy calendar error does not flood the log."""

    def __init__(self, max_length: int = 200):
        self.max_length = max_length

    def __call__(self, logger, method_name, event_dict):
        for key in _TRUNCATED_KEYS:
            value = event_dict.get(key)
            if value is not None:
                event_dict[key] = str(value)[:self.max_length]
        return event_dict


def setup_logging(debug: bool = False, max_log_length: int = 200, level: str = "INFO"):
    """Route structlog and stdlib loggers through one renderer.

    Console output in development, one JSON object per line otherwise. Modules
    using ``logging.getLogger(__name__)`` end up in the same stream.
    """
    log_level = logging.DEBUG if debug else getattr(logging, level.upper(), logging.INFO)

    shared = [
        structlog.contextvars.merge_contextvars,
        structlog.stdlib.add_logger_name,
        structlog.processors.add_log_level,
        structlog.processors.TimeStamper(fmt="iso", utc=True),
    ]
    renderer = structlog.dev.ConsoleRenderer() if debug else structlog.processors.JSONRenderer()

    structlog.configure(
        processors=[
            structlog.stdlib.filter_by_level,
            *shared,
            TruncateProcessor(max_length=max_log_length),
            structlog.processors.StackInfoRenderer(),
            structlog.processors.format_exc_info,
            renderer,
        ],
        wrapper_class=structlog.stdlib.BoundLogger,
        logger_factory=structlog.stdlib.LoggerFactory(),
        cache_logger_on_first_use=True,
    )

    logging.basicConfig(level=log_level, format="%(message)s")
    logging.getLogger().setLevel(log_level)
    # SQL echo stays off unless asked for explicitly
    logging.getLogger("sqlalchemy.engine").setLevel(logging.WARNING)
    logging.getLogger("googleapiclient.discovery_cache").setLevel(logging.ERROR)


def get_logger(name: str = __name__):
    return structlog.get_logger(name)


def bind_request(correlation_id: str, path: str, method: str) -> None:
    structlog.contextvars.clear_contextvars()
    structlog.contextvars.bind_contextvars(correlation_id=correlation_id, path=path, method=method)


def bind_coach(coach_id: Optional[str]) -> None:
    """Tag the rest of the request's log lines with the authenticated coach."""
    if coach_id:
        structlog.contextvars.bind_contextvars(coach_id=coach_id)


class LoggingMiddleware:
    """Assigns a correlation id per request and logs slow or failing requests."""

    def __init__(self, log_requests: bool = False, log_responses: bool = False,
                 slow_threshold: float = 2.0):
        self.log_requests = log_requests
        self.log_responses = log_responses
        self.slow_threshold = slow_threshold
        self.logger = get_logger("coachslots.http")

    async def __call__(self, request: Request, call_next):
        # Reuse the caller's id so a booking can be traced across services
        correlation_id = request.headers.get(CORRELATION_HEADER) or uuid.uuid4().hex[:8]
        bind_request(correlation_id, request.url.path, request.method)
        request.state.correlation_id = correlation_id

        if self.log_requests:
            self.logger.info("request_start", query=dict(request.query_params))

        started = time.perf_counter()
        try:
            response = await call_next(request)
        except Exception as e:
            self.logger.error(
                "request_error",
                error=str(e),
                error_type=type(e).__name__,
                duration=round(time.perf_counter() - started, 3),
            )
            raise

        duration = time.perf_counter() - started
        slow = duration > self.slow_threshold
        if self.log_responses or slow or response.status_code >= 500:
            self.logger.info(
                "request_complete",
                status_code=response.status_code,
                duration=round(duration, 3),
                slow=slow,
            )

        response.headers[CORRELATION_HEADER] = correlation_id
        return response
