"""Shared pytest fixtures — settings, async test client, fake upstream APIs."""

from __future__ import annotations

import base64
import json
from collections.abc import AsyncGenerator, Callable
from contextlib import asynccontextmanager
from typing import Any

import httpx
import pytest
from httpx import ASGITransport, AsyncClient

from asistencia.config import Settings, get_settings
from asistencia.dependencies import get_upstream_transport
from asistencia.main import app

FIRMA_SECRET = "test-firma-secret"

COLUMN_IDS = {
	"prod_nombre_field_id": "fldNombre",
	"prod_apellidos_field_id": "fldApellidos",
	"prod_telefono_field_id": "fldTelefono",
	"prod_documento_field_id": "fldDocumento",
	"prod_direccion_field_id": "fldDireccion",
	"prod_email_field_id": "fldCorreo",
	"prod_asoc_nombre_field_id": "fldAsociacion",
	"prod_cultivo_field_id": "fldCultivo",
	"prod_hectareas_field_id": "fldHectareas",
	"prod_firma_field_id": "fldFirma",
}


class FakeUpstream:
	"""Stand-in for the table API and the LLM API behind one MockTransport."""

	def __init__(self) -> None:
		self.requests: list[httpx.Request] = []
		self.airtable_status = 200
		self.airtable_body: Any = {"records": [{"id": "recTEST123", "fields": {}}]}
		self.llm_status = 200
		self.llm_content = "{}"

	@property
	def transport(self) -> httpx.MockTransport:
		return httpx.MockTransport(self.handle)

	def handle(self, request: httpx.Request) -> httpx.Response:
		self.requests.append(request)
		if request.url.host == "api.airtable.com":
			return httpx.Response(self.airtable_status, json=self.airtable_body)
		if request.url.host == "api.openai.com":
			return httpx.Response(
				self.llm_status,
				json={"choices": [{"message": {"role": "assistant", "content": self.llm_content}}]},
			)
		return httpx.Response(404, json={"error": "unknown host"})

	def requests_to(self, host: str) -> list[httpx.Request]:
		return [r for r in self.requests if r.url.host == host]

	def airtable_payloads(self) -> list[dict[str, Any]]:
		return [json.loads(r.content) for r in self.requests_to("api.airtable.com")]


@pytest.fixture
def settings() -> Settings:
	return Settings(
		_env_file=None,
		airtable_api_key="patTEST",
		openai_api_key="sk-test",
		base_id="appBASE",
		productores_table_id="tblPRODUCTORES",
		firma_secret=FIRMA_SECRET,
		log_format="console",
		**COLUMN_IDS,
	)


@pytest.fixture
def upstream() -> FakeUpstream:
	return FakeUpstream()


@pytest.fixture
def signature_data_url() -> str:
	from asistencia.client.capture import PointerSample, SignaturePad

	emitted: list[str | None] = []
	pad = SignaturePad(emitted.append)
	pad.start(PointerSample(10, 10))
	pad.move(PointerSample(120, 80))
	pad.end()
	assert emitted[-1] is not None
	return emitted[-1]


@pytest.fixture
async def client(settings: Settings, upstream: FakeUpstream) -> AsyncGenerator[AsyncClient, None]:
	"""HTTPX async client with lifespan disabled and upstream calls mocked."""

	app.dependency_overrides[get_settings] = lambda: settings
	app.dependency_overrides[get_upstream_transport] = lambda: upstream.transport
	original_lifespan = app.router.lifespan_context

	@asynccontextmanager
	async def noop_lifespan(_: Any) -> AsyncGenerator[None, None]:
		yield

	app.router.lifespan_context = noop_lifespan

	transport = ASGITransport(app=app)
	async with AsyncClient(transport=transport, base_url="http://test") as test_client:
		yield test_client

	app.router.lifespan_context = original_lifespan
	app.dependency_overrides.clear()


def _open_envelope(envelope: str, secret: str) -> str:
	from cryptography.hazmat.primitives.ciphers.aead import AESGCM

	from asistencia.services.encryption import IV_BYTES, SALT_BYTES, TAG_BYTES, derive_key

	raw = base64.b64decode(envelope)
	salt = raw[:SALT_BYTES]
	iv = raw[SALT_BYTES:SALT_BYTES + IV_BYTES]
	tag = raw[SALT_BYTES + IV_BYTES:SALT_BYTES + IV_BYTES + TAG_BYTES]
	ciphertext = raw[SALT_BYTES + IV_BYTES + TAG_BYTES:]
	return AESGCM(derive_key(secret, salt)).decrypt(iv, ciphertext + tag, None).decode("utf-8")


@pytest.fixture
def open_envelope() -> Callable[[str, str], str]:
	"""Reverse a signature envelope the way an out-of-band secret holder would."""
	return _open_envelope
