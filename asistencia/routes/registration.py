"""Producer registration submission route."""

from __future__ import annotations

import logging

import httpx
from fastapi import APIRouter, Depends, status
from fastapi.responses import JSONResponse
from pydantic.alias_generators import to_camel

from asistencia.config import Settings, get_settings
from asistencia.dependencies import get_upstream_transport
from asistencia.schemas.registration import ErrorResponse, RegistrationRequest, RegistrationResponse
from asistencia.services.airtable_service import AirtableService, UpstreamError
from asistencia.validation import field_errors

router = APIRouter(tags=["registration"])
logger = logging.getLogger("asistencia.routes.registration")


def _error(status_code: int, message: str, details: object | None = None) -> JSONResponse:
	return JSONResponse(
		status_code=status_code,
		content=ErrorResponse(error=message, details=details).model_dump(exclude_none=True),
	)


def _map_error(exc: Exception) -> JSONResponse:
	if isinstance(exc, UpstreamError):
		return _error(exc.status_code, "Error al guardar el registro en Airtable", exc.body)
	return _error(status.HTTP_500_INTERNAL_SERVER_ERROR, "Error interno del servidor")


@router.post(
	"/registro-evento",
	response_model=RegistrationResponse,
	status_code=status.HTTP_201_CREATED,
	responses={400: {"model": ErrorResponse}, 500: {"model": ErrorResponse}},
)
async def create_registration(
	payload: RegistrationRequest,
	settings: Settings = Depends(get_settings),
	transport: httpx.AsyncBaseTransport | None = Depends(get_upstream_transport),
) -> RegistrationResponse | JSONResponse:
	errors = field_errors(payload.model_dump())
	if errors:
		return _error(
			status.HTTP_400_BAD_REQUEST,
			"Datos de registro incompletos o inválidos",
			{to_camel(name): message for (name, message) in errors.items()},
		)

	try:
		service = AirtableService(settings, transport=transport)
		record = await service.create_record(payload)
	except UpstreamError as exc:
		return _map_error(exc)
	except Exception as exc:
		logger.exception("registration failed", extra={"error_type": type(exc).__name__})
		return _map_error(exc)

	return RegistrationResponse(record=record)
