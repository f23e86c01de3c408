"""Field rules shared by the registration form and the submission route."""

from __future__ import annotations

import math
import re
from collections.abc import Mapping
from typing import Any

EMAIL_PATTERN = re.compile(r"^[^\s@]+@[^\s@]+\.[^\s@]+$")
_LEADING_NUMBER = re.compile(r"^\s*([+-]?(?:\d+(?:\.\d*)?|\.\d+)(?:[eE][+-]?\d+)?)")

REQUIRED_MESSAGES: dict[str, str] = {
	"nombre": "El nombre es requerido",
	"apellidos": "Los apellidos son requeridos",
	"telefono": "El teléfono es requerido",
	"numero_documento": "El número de documento es requerido",
	"direccion": "La dirección es requerida",
}
EMAIL_MESSAGE = "Ingrese un correo válido"
AREA_MESSAGE = "Ingrese un número válido"
SIGNATURE_MESSAGE = "La firma digital es requerida"
CONSENT_MESSAGE = "Debe aceptar la política de tratamiento de datos"


def parse_area(value: Any) -> float | None:
	"""Read the leading decimal number of ``value`` (``parseFloat`` rules).

	Overflowing or non-finite values count as unreadable.
	"""
	if isinstance(value, bool):
		return None
	if isinstance(value, (int, float)):
		try:
			result = float(value)
		except OverflowError:
			return None
	elif isinstance(value, str):
		match = _LEADING_NUMBER.match(value)
		if match is None:
			return None
		result = float(match.group(1))
	else:
		return None
	if not math.isfinite(result):
		return None
	return result


def is_blank(value: Any) -> bool:
	return value is None or (isinstance(value, str) and not value.strip())


def field_errors(values: Mapping[str, Any]) -> dict[str, str]:
	"""Return ``{field: message}`` for every rule the record breaks."""
	errors: dict[str, str] = {}
	for (name, message) in REQUIRED_MESSAGES.items():
		if is_blank(values.get(name)):
			errors[name] = message

	correo = values.get("correo")
	if correo and not EMAIL_PATTERN.match(str(correo)):
		errors["correo"] = EMAIL_MESSAGE

	hectareas = values.get("hectareas")
	if hectareas not in (None, "") and parse_area(hectareas) is None:
		errors["hectareas"] = AREA_MESSAGE

	if not values.get("firma"):
		errors["firma"] = SIGNATURE_MESSAGE
	return errors
