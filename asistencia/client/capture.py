"""Freehand signature capture surface.

Pointer samples arrive in on-screen coordinates; they are scaled to the
surface's native pixel grid per axis before drawing, so a surface rendered
at a different size than its native resolution still lines up with the
pointer. Consecutive samples of one stroke are joined by line segments.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Callable

from PIL import Image, ImageDraw

from asistencia.client.codec import encode_data_url

NATIVE_WIDTH = 600
NATIVE_HEIGHT = 180
STROKE_COLOR = (0x1A, 0x1A, 0x2E, 255)
STROKE_WIDTH = 3

SignatureCallback = Callable[[str | None], None]


@dataclass(frozen=True, slots=True)
class Point:
	x: float
	y: float


@dataclass(frozen=True, slots=True)
class SurfaceRect:
	"""Rendered bounding box of the surface, in on-screen pixels."""

	left: float
	top: float
	width: float
	height: float


@dataclass(frozen=True, slots=True)
class PointerSample:
	"""A mouse or touch position in on-screen pixels."""

	client_x: float
	client_y: float


class _Stroke:
	"""State of the stroke in progress; a new one is created on every pointer-down."""

	__slots__ = ("last",)

	def __init__(self, origin: Point) -> None:
		self.last = origin


class SignaturePad:
	def __init__(
		self,
		on_change: SignatureCallback,
		*,
		width: int = NATIVE_WIDTH,
		height: int = NATIVE_HEIGHT,
		rect: SurfaceRect | None = None,
	) -> None:
		self.width = width
		self.height = height
		self.rect = rect or SurfaceRect(0, 0, width, height)
		self._on_change = on_change
		self._image = self._blank()
		self._stroke: _Stroke | None = None
		self.has_signature = False

	@property
	def drawing(self) -> bool:
		return self._stroke is not None

	@property
	def image(self) -> Image.Image:
		return self._image.copy()

	def resize(self, rect: SurfaceRect) -> None:
		self.rect = rect

	def to_native(self, sample: PointerSample) -> Point | None:
		"""Map a page-space sample onto the native grid, or ``None`` while the surface has no area."""
		if self.rect.width <= 0 or self.rect.height <= 0:
			return None
		scale_x = self.width / self.rect.width
		scale_y = self.height / self.rect.height
		return Point(
			(sample.client_x - self.rect.left) * scale_x,
			(sample.client_y - self.rect.top) * scale_y,
		)

	def start(self, sample: PointerSample) -> None:
		point = self.to_native(sample)
		if point is None:
			return
		self._stroke = _Stroke(point)

	def move(self, sample: PointerSample) -> None:
		if self._stroke is None:
			return
		point = self.to_native(sample)
		if point is None:
			return
		self._segment(self._stroke.last, point)
		self._stroke.last = point

	def end(self) -> None:
		"""Finish the stroke (pointer released or left the surface)."""
		if self._stroke is None:
			return
		self._stroke = None
		self.has_signature = True
		self._on_change(self.to_data_url())

	def clear(self) -> None:
		self._image = self._blank()
		self._stroke = None
		self.has_signature = False
		self._on_change(None)

	def to_data_url(self) -> str:
		return encode_data_url(self._image)

	def _blank(self) -> Image.Image:
		return Image.new("RGBA", (self.width, self.height), (0, 0, 0, 0))

	def _segment(self, a: Point, b: Point) -> None:
		draw = ImageDraw.Draw(self._image)
		draw.line([(a.x, a.y), (b.x, b.y)], fill=STROKE_COLOR, width=STROKE_WIDTH)
		# round caps; consecutive segments share endpoints so this also rounds the joins
		r = STROKE_WIDTH / 2
		for p in (a, b):
			draw.ellipse([p.x - r, p.y - r, p.x + r, p.y + r], fill=STROKE_COLOR)
