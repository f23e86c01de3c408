from __future__ import annotations

import pytest

from asistencia.config import ConfigurationError, Settings


def test_column_map_built_from_settings(settings: Settings) -> None:
    columns = settings.column_map()

    assert columns.nombre == "fldNombre"
    assert columns.numero_documento == "fldDocumento"
    assert columns.nombre_asociacion == "fldAsociacion"
    assert columns.firma == "fldFirma"


def test_missing_column_identifier_fails_fast(settings: Settings) -> None:
    incomplete = settings.model_copy(update={"prod_cultivo_field_id": ""})

    with pytest.raises(ConfigurationError) as excinfo:
        incomplete.column_map()
    assert "ASISTENCIA_EVENTO_PROD_CULTIVO_FIELD_ID" in str(excinfo.value)


def test_require_complete_names_every_missing_value() -> None:
    empty = Settings(_env_file=None)

    with pytest.raises(ConfigurationError) as excinfo:
        empty.require_complete()
    message = str(excinfo.value)
    assert "API_KEY_SIRIUS_ASISTENCIA_EVENTO" in message
    assert "OPENAI_API_KEY" in message
    assert "ASISTENCIA_EVENTO_FIRMA_SECRET" in message
    assert "ASISTENCIA_EVENTO_PROD_FIRMA_FIELD_ID" in message


def test_complete_settings_pass(settings: Settings) -> None:
    settings.require_complete()
    assert settings.missing_values() == []
    assert settings.productores_url == "https://api.airtable.com/v0/appBASE/tblPRODUCTORES"


def test_original_environment_names_are_read(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("API_KEY_SIRIUS_ASISTENCIA_EVENTO", "patENV")
    monkeypatch.setenv("ASISTENCIA_EVENTO_BASE_ID", "appENV")
    monkeypatch.setenv("ASISTENCIA_EVENTO_PROD_DOCUMENTO_FIELD_ID", "fldDocEnv")
    monkeypatch.setenv("OPENAI_API_KEY", "sk-env")

    loaded = Settings(_env_file=None)

    assert loaded.airtable_api_key == "patENV"
    assert loaded.base_id == "appENV"
    assert loaded.prod_documento_field_id == "fldDocEnv"
    assert loaded.openai_api_key == "sk-env"
