"""Registration form state — validation, dictation merge and submission."""

from __future__ import annotations

import logging
from dataclasses import asdict, dataclass, fields, replace
from enum import StrEnum
from typing import Any

import httpx

from asistencia.schemas.registration import RegistrationRequest
from asistencia.schemas.voice import ExtractedFields
from asistencia.validation import CONSENT_MESSAGE, field_errors

logger = logging.getLogger("asistencia.client.form")

VOICE_PATH = "/api/process-voice-evento"
REGISTRATION_PATH = "/api/registro-evento"
VOICE_FAILED_MESSAGE = "No se pudo procesar la grabación de voz"
SUBMIT_FAILED_MESSAGE = "Error al enviar el formulario"
UNEXPECTED_MESSAGE = "Error inesperado"


class SubmitStatus(StrEnum):
	idle = "idle"
	loading = "loading"
	success = "success"
	error = "error"


@dataclass(frozen=True, slots=True)
class FormState:
	nombre: str = ""
	apellidos: str = ""
	telefono: str = ""
	numero_documento: str = ""
	direccion: str = ""
	correo: str = ""
	nombre_asociacion: str = ""
	cultivo: str = ""
	hectareas: str = ""
	firma: str | None = None


_FIELD_NAMES = frozenset(f.name for f in fields(FormState))
_EXTRACTED_NAMES = tuple(ExtractedFields.model_fields)


class RegistrationForm:
	"""Client-side model of the registration page.

	``client`` must point at the API (``base_url`` set); requests are issued
	one at a time and the form reports the in-flight state through
	``status`` and ``voice_processing``.
	"""

	def __init__(self, client: httpx.AsyncClient) -> None:
		self.client = client
		self.state = FormState()
		self.errors: dict[str, str] = {}
		self.status = SubmitStatus.idle
		self.error_message = ""
		self.accepts_policy = False
		self.policy_error = False
		self.voice_processing = False
		self.voice_error = ""
		self.record: dict[str, Any] | None = None

	@property
	def submitting(self) -> bool:
		return self.status == SubmitStatus.loading

	def set_field(self, name: str, value: str) -> None:
		if name not in _FIELD_NAMES:
			raise KeyError(name)
		self.state = replace(self.state, **{name: value})
		self.errors.pop(name, None)

	def set_signature(self, data_url: str | None) -> None:
		"""Signature pad callback: an encoded image, or ``None`` once cleared."""
		self.state = replace(self.state, firma=data_url)
		self.errors.pop("firma", None)

	def set_accepts_policy(self, accepted: bool) -> None:
		self.accepts_policy = accepted
		if accepted:
			self.policy_error = False

	def validate(self) -> bool:
		self.errors = field_errors(asdict(self.state))
		if not self.accepts_policy:
			self.policy_error = True
		return not self.errors and self.accepts_policy

	@property
	def policy_message(self) -> str:
		return CONSENT_MESSAGE if self.policy_error else ""

	def merge_extracted(self, data: ExtractedFields | dict[str, Any]) -> None:
		"""Overwrite fields the extractor filled in; keep the rest as typed."""
		extracted = data if isinstance(data, ExtractedFields) else ExtractedFields.model_validate(data)
		updates = {
			name: str(value)
			for name in _EXTRACTED_NAMES
			if (value := getattr(extracted, name))
		}
		self.state = replace(self.state, **updates)
		self.errors = {}

	async def process_transcript(self, text: str) -> bool:
		"""Send a dictated transcript for extraction and merge the result.

		Any failure leaves the form untouched.
		"""
		self.voice_processing = True
		self.voice_error = ""
		try:
			response = await self.client.post(VOICE_PATH, json={"transcript": text})
			if response.is_error:
				self.voice_error = VOICE_FAILED_MESSAGE
				return False
			data = response.json().get("data")
			if not data:
				self.voice_error = VOICE_FAILED_MESSAGE
				return False
			extracted = ExtractedFields.model_validate(data)
		except (httpx.HTTPError, ValueError) as exc:
			logger.warning("transcript processing failed", extra={"error_type": type(exc).__name__})
			self.voice_error = VOICE_FAILED_MESSAGE
			return False
		finally:
			self.voice_processing = False

		self.merge_extracted(extracted)
		return True

	async def submit(self) -> bool:
		if self.submitting:
			return False
		if not self.validate():
			return False

		self.status = SubmitStatus.loading
		self.error_message = ""
		payload = RegistrationRequest(**asdict(self.state)).model_dump(by_alias=True)
		try:
			response = await self.client.post(REGISTRATION_PATH, json=payload)
			body = response.json()
		except (httpx.HTTPError, ValueError) as exc:
			self.status = SubmitStatus.error
			logger.warning("registration request failed", extra={"error_type": type(exc).__name__})
			self.error_message = UNEXPECTED_MESSAGE
			return False

		if response.is_error:
			self.status = SubmitStatus.error
			self.error_message = (body.get("error") if isinstance(body, dict) else None) or SUBMIT_FAILED_MESSAGE
			return False

		self.record = body.get("record") if isinstance(body, dict) else None
		self.status = SubmitStatus.success
		self.state = FormState()
		self.accepts_policy = False
		return True

	def start_over(self) -> None:
		"""Leave the success screen and register another producer."""
		self.status = SubmitStatus.idle
		self.record = None
