"""Spanish spoken-number normalization for dictated phone and ID numbers.

Each maximal compound (hundreds, then tens, then units) becomes one digit
group, so ``"trescientos uno cuatro cinco seis"`` reads as ``301`` ``4``
``5`` ``6``. Ambiguous phrasing is resolved greedily; there is no stricter
contract than that.
"""

from __future__ import annotations

import re
import unicodedata

_UNITS = {
	"cero": 0,
	"uno": 1,
	"dos": 2,
	"tres": 3,
	"cuatro": 4,
	"cinco": 5,
	"seis": 6,
	"siete": 7,
	"ocho": 8,
	"nueve": 9,
}

# complete on their own: nothing may follow inside the same group
_TEENS = {
	"diez": 10,
	"once": 11,
	"doce": 12,
	"trece": 13,
	"catorce": 14,
	"quince": 15,
	"dieciseis": 16,
	"diecisiete": 17,
	"dieciocho": 18,
	"diecinueve": 19,
	"veinte": 20,
	"veintiuno": 21,
	"veintidos": 22,
	"veintitres": 23,
	"veinticuatro": 24,
	"veinticinco": 25,
	"veintiseis": 26,
	"veintisiete": 27,
	"veintiocho": 28,
	"veintinueve": 29,
}

# may take "y <unit>"
_TENS = {
	"treinta": 30,
	"cuarenta": 40,
	"cincuenta": 50,
	"sesenta": 60,
	"setenta": 70,
	"ochenta": 80,
	"noventa": 90,
}

_HUNDREDS = {
	"cien": 100,
	"ciento": 100,
	"doscientos": 200,
	"trescientos": 300,
	"cuatrocientos": 400,
	"quinientos": 500,
	"seiscientos": 600,
	"setecientos": 700,
	"ochocientos": 800,
	"novecientos": 900,
}

_TOKEN = re.compile(r"\d+|[a-z]+")


def _fold(text: str) -> str:
	decomposed = unicodedata.normalize("NFKD", text.lower())
	return "".join(ch for ch in decomposed if not unicodedata.combining(ch))


class _Group:
	"""Running value of the compound currently being read."""

	def __init__(self) -> None:
		self.value = 0
		self.stage = 0  # 0 empty, 1 hundreds, 2 tens, 3 tens awaiting unit, 4 closed
		self.pending_y = False

	def accepts(self, word: str) -> bool:
		if word in _HUNDREDS:
			return self.stage == 0
		if word in _TEENS:
			return self.stage in (0, 1) and not self.pending_y
		if word in _TENS:
			return self.stage in (0, 1) and not self.pending_y
		if word in _UNITS:
			if word == "cero":
				return self.stage == 0
			if self.stage == 3:
				return True
			return self.stage in (0, 1) and not self.pending_y
		return False

	def add(self, word: str) -> None:
		if word in _HUNDREDS:
			self.value += _HUNDREDS[word]
			self.stage = 4 if word == "cien" else 1
		elif word in _TEENS:
			self.value += _TEENS[word]
			self.stage = 4
		elif word in _TENS:
			self.value += _TENS[word]
			self.stage = 3
		else:
			self.value += _UNITS[word]
			self.stage = 4
		self.pending_y = False

	@property
	def empty(self) -> bool:
		return self.stage == 0


def words_to_digits(text: str) -> str:
	"""Replace Spanish number words with digits; other words are kept."""
	out: list[str] = []
	group = _Group()

	def flush() -> None:
		nonlocal group
		if not group.empty:
			out.append(str(group.value))
		group = _Group()

	for token in _TOKEN.findall(_fold(text)):
		if token.isdigit():
			flush()
			out.append(token)
			continue
		if token == "y" and group.stage == 3:
			group.pending_y = True
			continue
		if token in _UNITS or token in _TEENS or token in _TENS or token in _HUNDREDS:
			if not group.accepts(token):
				flush()
			group.add(token)
			continue
		flush()
		out.append(token)
	flush()
	return " ".join(out)


def digits_only(text: str) -> str:
	"""Digits of ``text`` after spoken-number conversion, nothing else."""
	return "".join(ch for ch in words_to_digits(text) if ch.isdigit())
