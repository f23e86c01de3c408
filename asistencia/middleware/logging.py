"""Structured JSON logging with request ID propagation.

Service modules log through the stdlib (``logging.getLogger("asistencia.*")``)
and pass context in ``extra``; the handler installed here renders those
records through the same structlog pipeline as the request logs.
"""

from __future__ import annotations

import logging
import time
import uuid
from typing import Any

import structlog
from fastapi import Request
from starlette.middleware.base import BaseHTTPMiddleware

from asistencia.config import LogFormat, get_settings

_configured = False
_QUIET_PATHS = ("/health",)


def configure_structured_logging() -> None:
	"""Configure stdlib + structlog once for the API process."""
	global _configured
	if _configured:
		return

	settings = get_settings()
	log_level = getattr(logging, settings.log_level.upper(), logging.INFO)

	shared_processors: list[Any] = [
		structlog.contextvars.merge_contextvars,
		structlog.processors.add_log_level,
		structlog.processors.TimeStamper(fmt="iso", utc=True),
	]
	renderer: Any
	if settings.log_format == LogFormat.json:
		renderer = structlog.processors.JSONRenderer()
	else:
		renderer = structlog.dev.ConsoleRenderer()

	formatter = structlog.stdlib.ProcessorFormatter(
		foreign_pre_chain=[
			*shared_processors,
			structlog.stdlib.add_logger_name,
			structlog.stdlib.ExtraAdder(),
		],
		processors=[
			structlog.stdlib.ProcessorFormatter.remove_processors_meta,
			structlog.processors.format_exc_info,
			renderer,
		],
	)
	handler = logging.StreamHandler()
	handler.setFormatter(formatter)
	root = logging.getLogger()
	root.handlers = [handler]
	root.setLevel(log_level)

	structlog.configure(
		processors=[
			*shared_processors,
			structlog.processors.format_exc_info,
			renderer,
		],
		wrapper_class=structlog.make_filtering_bound_logger(log_level),
		logger_factory=structlog.PrintLoggerFactory(),
		cache_logger_on_first_use=True,
	)
	_configured = True


class RequestLoggingMiddleware(BaseHTTPMiddleware):
	"""Attach request IDs and emit one structured timing log per request."""

	async def dispatch(self, request: Request, call_next):  # type: ignore[override]
		request_id = request.headers.get("x-request-id") or str(uuid.uuid4())
		request.state.request_id = request_id

		structlog.contextvars.clear_contextvars()
		structlog.contextvars.bind_contextvars(request_id=request_id)

		logger = structlog.get_logger("asistencia.request")
		start = time.perf_counter()

		try:
			response = await call_next(request)
		except Exception as exc:
			logger.exception(
				"http_request_failed",
				method=request.method,
				path=request.url.path,
				duration_ms=round((time.perf_counter() - start) * 1000.0, 2),
				error=type(exc).__name__,
			)
			raise

		response.headers["x-request-id"] = request_id
		if not request.url.path.startswith(_QUIET_PATHS):
			logger.info(
				"http_request",
				method=request.method,
				path=request.url.path,
				status_code=response.status_code,
				duration_ms=round((time.perf_counter() - start) * 1000.0, 2),
			)
		return response
