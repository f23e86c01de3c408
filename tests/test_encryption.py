from __future__ import annotations

import base64
from collections.abc import Callable

import pytest
from cryptography.exceptions import InvalidTag

from asistencia.services.encryption import (
    IV_BYTES,
    SALT_BYTES,
    TAG_BYTES,
    EncryptionError,
    encrypt_signature,
)

PLAINTEXT = "data:image/png;base64,iVBORw0KGgoAAAANSUhEUgAAAAEAAAABCAYAAAAfFcSJAAAADUlEQVR42mNkYPhfDwAChwGA60e6kgAAAABJRU5ErkJggg=="


def test_envelope_layout_has_fixed_prefix_and_variable_ciphertext() -> None:
    envelope = encrypt_signature(PLAINTEXT, "secret")
    raw = base64.b64decode(envelope)

    header = SALT_BYTES + IV_BYTES + TAG_BYTES
    assert len(raw) == header + len(PLAINTEXT.encode("utf-8"))


def test_same_input_twice_gives_different_envelopes_that_both_open(
    open_envelope: Callable[[str, str], str],
) -> None:
    first = encrypt_signature(PLAINTEXT, "secret")
    second = encrypt_signature(PLAINTEXT, "secret")

    assert first != second
    first_raw, second_raw = base64.b64decode(first), base64.b64decode(second)
    assert first_raw[:SALT_BYTES] != second_raw[:SALT_BYTES]
    assert first_raw[SALT_BYTES:SALT_BYTES + IV_BYTES] != second_raw[SALT_BYTES:SALT_BYTES + IV_BYTES]

    assert open_envelope(first, "secret") == PLAINTEXT
    assert open_envelope(second, "secret") == PLAINTEXT


def test_wrong_secret_cannot_open_envelope(open_envelope: Callable[[str, str], str]) -> None:
    envelope = encrypt_signature(PLAINTEXT, "secret")
    with pytest.raises(InvalidTag):
        open_envelope(envelope, "other-secret")


def test_tampered_ciphertext_is_rejected(open_envelope: Callable[[str, str], str]) -> None:
    raw = bytearray(base64.b64decode(encrypt_signature(PLAINTEXT, "secret")))
    raw[-1] ^= 0x01
    with pytest.raises(InvalidTag):
        open_envelope(base64.b64encode(bytes(raw)).decode("ascii"), "secret")


def test_missing_secret_is_fatal() -> None:
    with pytest.raises(EncryptionError):
        encrypt_signature(PLAINTEXT, "")
