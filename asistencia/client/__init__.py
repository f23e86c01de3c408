"""Client-side pieces of the registration page.

    from asistencia.client import RegistrationForm, SignaturePad, DictationSession
"""

from asistencia.client.capture import PointerSample, SignaturePad, SurfaceRect
from asistencia.client.codec import decode_data_url, encode_data_url
from asistencia.client.dictation import (
    DictationSession,
    DictationState,
    RecognitionResult,
    RestartPolicy,
)
from asistencia.client.form import FormState, RegistrationForm, SubmitStatus

__all__ = [
    "DictationSession",
    "DictationState",
    "FormState",
    "PointerSample",
    "RecognitionResult",
    "RegistrationForm",
    "RestartPolicy",
    "SignaturePad",
    "SubmitStatus",
    "SurfaceRect",
    "decode_data_url",
    "encode_data_url",
]
