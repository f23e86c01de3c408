from __future__ import annotations

import pytest

from asistencia.validation import AREA_MESSAGE, field_errors, parse_area


def _complete(**overrides: object) -> dict[str, object]:
    values: dict[str, object] = {
        "nombre": "Carlos",
        "apellidos": "Rodríguez",
        "telefono": "3001234567",
        "numero_documento": "1234567890",
        "direccion": "Vereda El Porvenir",
        "firma": "data:image/png;base64,AAAA",
    }
    values.update(overrides)
    return values


@pytest.mark.parametrize(
    ("raw", "expected"),
    [("5.50", 5.5), ("  12ha", 12.0), (".5", 0.5), (3, 3.0), (2.25, 2.25), ("mucho", None), (True, None)],
)
def test_parse_area_reads_leading_number(raw: object, expected: float | None) -> None:
    assert parse_area(raw) == expected


@pytest.mark.parametrize("raw", ["1e999", "-1e999", float("inf"), float("nan"), 10**400])
def test_parse_area_rejects_non_finite_values(raw: object) -> None:
    assert parse_area(raw) is None


def test_overflowing_area_is_a_field_error() -> None:
    assert field_errors(_complete(hectareas="1e999")) == {"hectareas": AREA_MESSAGE}


def test_complete_record_has_no_errors() -> None:
    assert field_errors(_complete(hectareas="", correo=None)) == {}
