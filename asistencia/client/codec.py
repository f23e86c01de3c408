"""PNG data-URL encoding for signature rasters."""

from __future__ import annotations

import base64
import binascii
import io
import re

from PIL import Image

_DATA_URL = re.compile(r"^data:(image/[a-z0-9.+-]+);base64,(.*)$", re.IGNORECASE | re.DOTALL)


def encode_data_url(image: Image.Image) -> str:
	buf = io.BytesIO()
	image.save(buf, format="PNG")
	return "data:image/png;base64," + base64.b64encode(buf.getvalue()).decode("ascii")


def decode_data_url(value: str) -> bytes:
	"""Return the image bytes carried by a base64 ``data:image/...`` URL."""
	match = _DATA_URL.match(value or "")
	if match is None:
		raise ValueError("not a base64 image data URL")
	try:
		return base64.b64decode(match.group(2), validate=True)
	except binascii.Error as exc:
		raise ValueError("invalid base64 payload in data URL") from exc


def decode_image(value: str) -> Image.Image:
	image = Image.open(io.BytesIO(decode_data_url(value)))
	image.load()
	return image
