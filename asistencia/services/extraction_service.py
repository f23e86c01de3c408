"""LLM integration — turn a dictated transcript into the nine registration fields."""

from __future__ import annotations

import json
import logging
import re
from typing import Any

import httpx

from asistencia.config import Settings
from asistencia.schemas.voice import ExtractedFields
from asistencia.services.spoken_numbers import digits_only, words_to_digits
from asistencia.validation import EMAIL_PATTERN

logger = logging.getLogger("asistencia.extraction")

SYSTEM_PROMPT = """Eres un asistente que extrae datos de productores agrícolas a partir de texto hablado en español colombiano.
Debes extraer los siguientes campos del texto y devolver SOLO un JSON válido (sin markdown, sin ```):

{
  "nombre": "nombre de pila",
  "apellidos": "apellidos",
  "telefono": "número de teléfono (solo dígitos)",
  "numeroDocumento": "cédula o documento (solo dígitos)",
  "direccion": "dirección completa",
  "correo": "email si se menciona",
  "nombreAsociacion": "nombre de la asociación si se menciona",
  "cultivo": "tipo de cultivo si se menciona",
  "hectareas": "número de hectáreas si se menciona (solo número)"
}

Reglas:
- Si un campo no se menciona, déjalo como cadena vacía "".
- Para teléfono y documento, extrae SOLO los dígitos, sin espacios ni guiones.
- Para hectáreas, devuelve solo el número (puede ser decimal con punto).
- El correo debe tener formato válido. Si el usuario dice "arroba" conviértelo a @, "punto" a ".", "gmail punto com" a "gmail.com".
- Si el usuario dice "cédula" o "documento" seguido de números, eso es el numeroDocumento.
- Si dicen nombres propios al inicio, el primer nombre va en "nombre" y el resto en "apellidos".
- Interpreta fonéticamente: "trescientos uno" = "301", "tres cero uno" = "301".
- NO inventes datos que no se mencionan."""

_FENCE_OPEN_JSON = re.compile(r"^```json\s*", re.IGNORECASE)
_FENCE_OPEN = re.compile(r"^```\s*")
_FENCE_CLOSE = re.compile(r"\s*```$")
_DECIMAL = re.compile(r"\d+(?:[.,]\d+)?")
_SPOKEN_EMAIL = (
	(re.compile(r"\s*\barroba\b\s*", re.IGNORECASE), "@"),
	(re.compile(r"\s*\bpunto\b\s*", re.IGNORECASE), "."),
	(re.compile(r"\s*\bguion bajo\b\s*", re.IGNORECASE), "_"),
	(re.compile(r"\s*\bguion\b\s*", re.IGNORECASE), "-"),
)


class ExtractionError(RuntimeError):
	"""Raised when a transcript cannot be turned into structured fields."""


def strip_code_fences(text: str) -> str:
	cleaned = _FENCE_OPEN_JSON.sub("", text)
	cleaned = _FENCE_OPEN.sub("", cleaned)
	cleaned = _FENCE_CLOSE.sub("", cleaned)
	return cleaned.strip()


def normalize_area(value: Any) -> str:
	if isinstance(value, bool) or value is None:
		return ""
	if isinstance(value, int):
		return str(value)
	if isinstance(value, float):
		return f"{value:f}".rstrip("0").rstrip(".")
	raw = str(value)
	match = _DECIMAL.search(raw) or _DECIMAL.search(words_to_digits(raw))
	if match is None:
		return ""
	return match.group(0).replace(",", ".")


def normalize_email(value: str) -> str:
	email = value.strip()
	if EMAIL_PATTERN.match(email):
		return email.lower()
	for (pattern, replacement) in _SPOKEN_EMAIL:
		email = pattern.sub(replacement, email)
	return "".join(email.split()).lower()


class ExtractionService:
	def __init__(self, settings: Settings, transport: httpx.AsyncBaseTransport | None = None):
		self.settings = settings
		self.transport = transport

	async def extract(self, transcript: str) -> ExtractedFields:
		content = await self.call_llm(transcript)
		payload = self.parse_content(content)
		return self.normalize(payload)

	async def call_llm(self, transcript: str) -> str:
		if not self.settings.openai_api_key:
			raise ExtractionError("LLM API key is not configured")

		headers = {
			"authorization": f"Bearer {self.settings.openai_api_key}",
			"content-type": "application/json",
		}
		body = {
			"model": self.settings.openai_model,
			"messages": [
				{"role": "system", "content": SYSTEM_PROMPT},
				{"role": "user", "content": transcript},
			],
			"temperature": 0.1,
			"max_tokens": 500,
		}
		url = f"{self.settings.openai_base_url.rstrip('/')}/chat/completions"

		try:
			async with httpx.AsyncClient(
				timeout=self.settings.openai_timeout_seconds,
				transport=self.transport,
			) as client:
				response = await client.post(url, headers=headers, json=body)
				response.raise_for_status()
				payload = response.json()
		except (httpx.HTTPError, ValueError) as exc:
			raise ExtractionError("LLM request failed") from exc

		choices = payload.get("choices") if isinstance(payload, dict) else None
		if not isinstance(choices, list) or not choices:
			return "{}"
		message = choices[0].get("message") or {}
		return str(message.get("content") or "").strip() or "{}"

	@staticmethod
	def parse_content(content: str) -> dict[str, Any]:
		cleaned = strip_code_fences(content)
		try:
			parsed = json.loads(cleaned)
		except json.JSONDecodeError as exc:
			logger.warning("llm output unparseable", extra={"content_length": len(cleaned)})
			raise ExtractionError("LLM output is not valid JSON") from exc
		if not isinstance(parsed, dict):
			raise ExtractionError("LLM output is not a JSON object")
		return parsed

	@staticmethod
	def normalize(payload: dict[str, Any]) -> ExtractedFields:
		def text(key: str) -> str:
			value = payload.get(key)
			if value is None or isinstance(value, (dict, list)):
				return ""
			return str(value).strip()

		correo = text("correo")
		return ExtractedFields(
			nombre=text("nombre"),
			apellidos=text("apellidos"),
			telefono=digits_only(text("telefono")),
			numero_documento=digits_only(text("numeroDocumento")),
			direccion=text("direccion"),
			correo=normalize_email(correo) if correo else "",
			nombre_asociacion=text("nombreAsociacion"),
			cultivo=text("cultivo"),
			hectareas=normalize_area(payload.get("hectareas")),
		)
