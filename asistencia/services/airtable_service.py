"""Record submission — map registration fields to Airtable columns and create one record."""

from __future__ import annotations

import logging
from typing import Any

import httpx

from asistencia.config import ColumnMap, Settings
from asistencia.schemas.registration import RegistrationRequest
from asistencia.services.encryption import encrypt_signature
from asistencia.validation import is_blank, parse_area

logger = logging.getLogger("asistencia.airtable")

_TEXT_FIELDS = (
	"nombre",
	"apellidos",
	"telefono",
	"numero_documento",
	"direccion",
	"correo",
	"nombre_asociacion",
	"cultivo",
)


class UpstreamError(RuntimeError):
	"""Raised when the table API answers with a non-success status."""

	def __init__(self, status_code: int, body: Any):
		super().__init__(f"upstream responded with status {status_code}")
		self.status_code = status_code
		self.body = body


class AirtableService:
	def __init__(
		self,
		settings: Settings,
		columns: ColumnMap | None = None,
		transport: httpx.AsyncBaseTransport | None = None,
	):
		self.settings = settings
		self.columns = columns or settings.column_map()
		self.transport = transport

	def build_fields(self, record: RegistrationRequest) -> dict[str, Any]:
		"""Column-keyed fields for every present value; blanks are left out."""
		fields: dict[str, Any] = {}
		for name in _TEXT_FIELDS:
			value = getattr(record, name)
			if is_blank(value):
				continue
			fields[getattr(self.columns, name)] = value.strip()

		if not is_blank(record.hectareas):
			area = parse_area(record.hectareas)
			if area is not None:
				fields[self.columns.hectareas] = area

		if record.firma:
			fields[self.columns.firma] = encrypt_signature(record.firma, self.settings.firma_secret)
		return fields

	async def create_record(self, record: RegistrationRequest) -> dict[str, Any]:
		fields = self.build_fields(record)
		headers = {
			"authorization": f"Bearer {self.settings.airtable_api_key}",
			"content-type": "application/json",
		}
		body = {"records": [{"fields": fields}], "typecast": True}

		async with httpx.AsyncClient(
			timeout=self.settings.airtable_timeout_seconds,
			transport=self.transport,
		) as client:
			response = await client.post(self.settings.productores_url, headers=headers, json=body)

		if response.is_error:
			try:
				error_body: Any = response.json()
			except ValueError:
				error_body = response.text
			logger.error(
				"airtable rejected record",
				extra={"status_code": response.status_code, "body": error_body},
			)
			raise UpstreamError(response.status_code, error_body)

		payload = response.json()
		records = payload.get("records") or []
		return records[0] if records else {}
