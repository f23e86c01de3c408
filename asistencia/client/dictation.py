"""Dictation session — one logical listening operation over restartable recognizers.

Speech recognizers end their session on their own after a while. The
session restarts the recognizer while it is still listening and keeps
accumulating the final transcript across restarts, until the user stops it
or a fatal recognizer error occurs.
"""

from __future__ import annotations

import logging
from collections.abc import Sequence
from dataclasses import dataclass
from enum import StrEnum
from typing import Any, Callable, Protocol

logger = logging.getLogger("asistencia.client.dictation")

LANGUAGE = "es-CO"
NON_FATAL_ERRORS = frozenset({"no-speech"})


class DictationState(StrEnum):
	idle = "idle"
	listening = "listening"
	stopping = "stopping"


class RecognitionBackend(Protocol):
	def start(self, *, language: str, continuous: bool, interim_results: bool) -> None: ...

	def stop(self) -> None: ...


@dataclass(frozen=True, slots=True)
class RecognitionResult:
	transcript: str
	is_final: bool


@dataclass(frozen=True, slots=True)
class RestartPolicy:
	"""How many automatic restarts one session may use; ``None`` is unlimited."""

	max_restarts: int | None = None

	def allows(self, restarts_so_far: int) -> bool:
		return self.max_restarts is None or restarts_so_far < self.max_restarts


class DictationError(RuntimeError):
	"""Raised on a lifecycle call that is invalid in the current state."""


class DictationSession:
	def __init__(
		self,
		backend: RecognitionBackend,
		*,
		on_complete: Callable[[str], Any],
		on_transcript_change: Callable[[str], None] | None = None,
		restart_policy: RestartPolicy | None = None,
	) -> None:
		self.backend = backend
		self.restart_policy = restart_policy or RestartPolicy()
		self._on_complete = on_complete
		self._on_transcript_change = on_transcript_change
		self.state = DictationState.idle
		self.final_transcript = ""
		self.live_transcript = ""
		self.restarts = 0
		self.last_error: str | None = None

	@property
	def listening(self) -> bool:
		return self.state == DictationState.listening

	def start(self) -> None:
		if self.state != DictationState.idle:
			raise DictationError(f"cannot start while {self.state}")
		self.final_transcript = ""
		self.restarts = 0
		self.last_error = None
		self._publish("")
		self._start_backend()
		self.state = DictationState.listening

	def stop(self) -> None:
		if self.state != DictationState.listening:
			return
		self.state = DictationState.stopping
		self.backend.stop()

	def handle_result(self, results: Sequence[RecognitionResult], result_index: int = 0) -> None:
		interim = ""
		for result in results[result_index:]:
			if result.is_final:
				self.final_transcript += result.transcript + " "
			else:
				interim += result.transcript
		self._publish(self.final_transcript + interim)

	def handle_error(self, code: str) -> None:
		if code in NON_FATAL_ERRORS:
			return
		self.last_error = code
		logger.warning("dictation error", extra={"code": code})
		if self.state == DictationState.listening:
			self.state = DictationState.stopping

	def handle_end(self) -> Any:
		"""Recognizer ended: restart while listening, otherwise finish the session.

		Returns whatever ``on_complete`` returned (a coroutine for async
		callbacks), or ``None`` when the session keeps listening or heard nothing.
		"""
		if self.state == DictationState.idle:
			return None
		if self.state == DictationState.listening and self.restart_policy.allows(self.restarts):
			try:
				self._start_backend()
			except Exception as exc:
				logger.warning("dictation restart failed", extra={"error_type": type(exc).__name__})
			else:
				self.restarts += 1
				return None
		return self._finish()

	def _finish(self) -> Any:
		self.state = DictationState.idle
		text = self.final_transcript.strip()
		if not text:
			return None
		return self._on_complete(text)

	def _start_backend(self) -> None:
		self.backend.start(language=LANGUAGE, continuous=True, interim_results=True)

	def _publish(self, text: str) -> None:
		self.live_transcript = text
		if self._on_transcript_change is not None:
			self._on_transcript_change(text)
