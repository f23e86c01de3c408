"""Voice transcript → registration fields route."""

from __future__ import annotations

import logging

import httpx
from fastapi import APIRouter, Depends, status
from fastapi.responses import JSONResponse

from asistencia.config import Settings, get_settings
from asistencia.dependencies import get_upstream_transport
from asistencia.schemas.registration import ErrorResponse
from asistencia.schemas.voice import VoiceRequest, VoiceResponse
from asistencia.services.extraction_service import ExtractionService

router = APIRouter(tags=["voice"])
logger = logging.getLogger("asistencia.routes.voice")


@router.post(
	"/process-voice-evento",
	response_model=VoiceResponse,
	responses={400: {"model": ErrorResponse}, 500: {"model": ErrorResponse}},
)
async def process_voice(
	payload: VoiceRequest,
	settings: Settings = Depends(get_settings),
	transport: httpx.AsyncBaseTransport | None = Depends(get_upstream_transport),
) -> VoiceResponse | JSONResponse:
	if not (payload.transcript or "").strip():
		return JSONResponse(
			status_code=status.HTTP_400_BAD_REQUEST,
			content={"error": "El texto de transcripción es requerido"},
		)

	service = ExtractionService(settings, transport=transport)
	try:
		data = await service.extract(payload.transcript)
	except Exception as exc:
		logger.exception(
			"voice extraction failed",
			extra={"error_type": type(exc).__name__, "transcript_length": len(payload.transcript)},
		)
		return JSONResponse(
			status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
			content={"error": "Error al procesar la transcripción de voz"},
		)

	return VoiceResponse(data=data)
