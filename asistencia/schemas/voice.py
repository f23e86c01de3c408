"""Pydantic schemas for the voice-transcript extraction endpoint."""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel


class VoiceRequest(BaseModel):
	transcript: str | None = None


class ExtractedFields(BaseModel):
	"""The nine fields the extractor always returns; unmentioned ones are empty."""

	model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

	nombre: str = ""
	apellidos: str = ""
	telefono: str = ""
	numero_documento: str = ""
	direccion: str = ""
	correo: str = ""
	nombre_asociacion: str = ""
	cultivo: str = ""
	hectareas: str = ""


class VoiceResponse(BaseModel):
	success: bool = True
	data: ExtractedFields
