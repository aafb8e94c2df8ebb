from __future__ import annotations

import pytest

from library_api.errors import NotesDecryptionError
from library_api.utils.encryption import decrypt_text, encrypt_text


@pytest.mark.parametrize("text", [
    "x",
    "remember the milk",
    "çok önemli notlar 📚",
    "  leading and trailing spaces  ",
    "line one\nline two\ttabbed",
    "a" * 5000,
])
def test_round_trip(text):
    token = encrypt_text(text, secret="k1")
    assert token != text
    assert decrypt_text(token, secret="k1") == text


def test_tokens_differ_per_call():
    assert encrypt_text("same", secret="k1") != encrypt_text("same", secret="k1")


def test_wrong_key_is_rejected():
    token = encrypt_text("secret notes", secret="k1")
    with pytest.raises(NotesDecryptionError):
        decrypt_text(token, secret="k2")


def test_uses_app_config_key(app):
    token = encrypt_text("configured")
    assert decrypt_text(token, secret=app.config["ENCRYPTION_KEY"]) == "configured"
