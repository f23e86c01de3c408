"""Pydantic schemas for the registration submission endpoint."""

from __future__ import annotations

from typing import Any

from pydantic import BaseModel, ConfigDict, Field, field_validator
from pydantic.alias_generators import to_camel

class RegistrationRequest(BaseModel):
	"""Producer registration record as sent by the form (camelCase on the wire)."""

	model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

	nombre: str = ""
	apellidos: str = ""
	telefono: str = ""
	numero_documento: str = ""
	direccion: str = ""
	correo: str = ""
	nombre_asociacion: str = ""
	cultivo: str = ""
	hectareas: str | float | None = ""
	firma: str | None = None

	@field_validator(
		"nombre",
		"apellidos",
		"telefono",
		"numero_documento",
		"direccion",
		"correo",
		"nombre_asociacion",
		"cultivo",
		mode="before",
	)
	@classmethod
	def null_as_blank(cls, value: Any) -> Any:
		# null on the wire means the field was left out
		return "" if value is None else value


class RegistrationResponse(BaseModel):
	success: bool = True
	record: dict[str, Any] = Field(default_factory=dict)


class ErrorResponse(BaseModel):
	error: str
	details: Any | None = None
