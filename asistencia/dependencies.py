"""Shared route dependencies."""

from __future__ import annotations

import httpx


def get_upstream_transport() -> httpx.AsyncBaseTransport | None:
	"""Transport for outbound calls; ``None`` lets httpx open real connections."""
	return None
