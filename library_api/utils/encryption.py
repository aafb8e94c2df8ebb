"""Reversible cipher for user notes.

Notes are stored as Fernet tokens. The Fernet key is derived from the
``ENCRYPTION_KEY`` config value so operators can use any passphrase.
"""
from __future__ import annotations

import base64
import hashlib
from typing import Any, Optional

from cryptography.fernet import Fernet, InvalidToken
from flask import current_app

from library_api.errors import Internal, NotesDecryptionError


def _derive_fernet_key(secret_value: Any) -> bytes:
    if not secret_value:
        raise Internal("Encryption key is not configured")
    if isinstance(secret_value, bytes):
        secret_bytes = secret_value
    else:
        secret_bytes = str(secret_value).encode("utf-8")
    return base64.urlsafe_b64encode(hashlib.sha256(secret_bytes).digest())


def _fernet(secret: Optional[str] = None) -> Fernet:
    if secret is None:
        secret = current_app.config.get("ENCRYPTION_KEY")
    return Fernet(_derive_fernet_key(secret))


def encrypt_text(text: str, secret: Optional[str] = None) -> str:
    return _fernet(secret).encrypt(text.encode("utf-8")).decode("ascii")


def decrypt_text(token: str, secret: Optional[str] = None) -> str:
    try:
        return _fernet(secret).decrypt(token.encode("ascii")).decode("utf-8")
    except (InvalidToken, UnicodeError) as exc:
        raise NotesDecryptionError() from exc
