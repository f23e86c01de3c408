"""Signature encryption — AES-256-GCM with a PBKDF2-derived key.

Envelope layout, base64-encoded::

    salt (16 bytes) || iv (12 bytes) || auth tag (16 bytes) || ciphertext

The service only ever encrypts. Holders of the secret reverse the envelope
out of band by deriving the key from the stored salt and opening the GCM
box with the stored IV and tag.
"""

from __future__ import annotations

import base64
import os

from cryptography.hazmat.primitives import hashes
from cryptography.hazmat.primitives.ciphers.aead import AESGCM
from cryptography.hazmat.primitives.kdf.pbkdf2 import PBKDF2HMAC

SALT_BYTES = 16
IV_BYTES = 12
TAG_BYTES = 16
KEY_BYTES = 32
PBKDF2_ITERATIONS = 100_000


class EncryptionError(RuntimeError):
	"""Raised when the signature cannot be encrypted."""


def derive_key(secret: str, salt: bytes) -> bytes:
	kdf = PBKDF2HMAC(
		algorithm=hashes.SHA256(),
		length=KEY_BYTES,
		salt=salt,
		iterations=PBKDF2_ITERATIONS,
	)
	return kdf.derive(secret.encode("utf-8"))


def encrypt_signature(plaintext: str, secret: str) -> str:
	"""Encrypt ``plaintext`` into a self-contained base64 envelope."""
	if not secret:
		raise EncryptionError("signature secret is not configured")

	salt = os.urandom(SALT_BYTES)
	iv = os.urandom(IV_BYTES)
	try:
		key = derive_key(secret, salt)
		# AESGCM appends the tag to the ciphertext
		sealed = AESGCM(key).encrypt(iv, plaintext.encode("utf-8"), None)
	except Exception as exc:
		raise EncryptionError("signature encryption failed") from exc

	ciphertext, tag = sealed[:-TAG_BYTES], sealed[-TAG_BYTES:]
	return base64.b64encode(salt + iv + tag + ciphertext).decode("ascii")
