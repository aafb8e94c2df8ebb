"""Request payload validation.

Everything here runs before a service is called, so malformed input never
reaches the database. Each validator collects all problems and raises a
single ``InvalidInput`` listing them.
"""
from __future__ import annotations

import re
from datetime import date
from typing import Any, Dict, List, Optional

from library_api.errors import InvalidInput

MIN_PUBLISHED_YEAR = 1000
# SQLite ve çoğu DB için 64-bit işaretli tam sayı sınırı
MAX_ID = 2 ** 63 - 1

_INT_RE = re.compile(r"-?[0-9]+")


def _is_int(value: Any) -> bool:
    # bool da int'in alt sınıfı, onu kabul etmiyoruz
    if isinstance(value, bool):
        return False
    if isinstance(value, int):
        return True
    if isinstance(value, str):
        return _INT_RE.fullmatch(value.strip()) is not None
    return False


def is_valid_id(value: int) -> bool:
    return 1 <= value <= MAX_ID


def json_object(payload: Any) -> Dict[str, Any]:
    """Request body as a dict; a missing body counts as empty."""
    if payload is None:
        return {}
    if not isinstance(payload, dict):
        raise InvalidInput(["Request body must be a JSON object"])
    return payload


def _text(data: Dict[str, Any], key: str) -> str:
    value = data.get(key)
    if value is None:
        return ""
    return str(value).strip()


def validate_register(data: Dict[str, Any]) -> Dict[str, str]:
    errors: List[str] = []
    username = _text(data, "username")
    password = data.get("password")
    password = password if isinstance(password, str) else ""

    if not 3 <= len(username) <= 30:
        errors.append("Username must be between 3 and 30 characters")
    if username and not username.isalnum():
        errors.append("Username can only contain letters and numbers")
    if len(password) < 6:
        errors.append("Password must be at least 6 characters long")

    if errors:
        raise InvalidInput(errors)
    return {"username": username, "password": password}


def validate_login(data: Dict[str, Any]) -> Dict[str, str]:
    errors: List[str] = []
    username = _text(data, "username")
    password = data.get("password")
    password = password if isinstance(password, str) else ""

    if not username:
        errors.append("Username is required")
    if not password:
        errors.append("Password is required")

    if errors:
        raise InvalidInput(errors)
    return {"username": username, "password": password}


def validate_book(data: Dict[str, Any]) -> Dict[str, Any]:
    errors: List[str] = []
    title = _text(data, "title")
    author = _text(data, "author")
    genre = _text(data, "genre")
    year = data.get("publishedYear")
    current_year = date.today().year

    if not title:
        errors.append("Title is required")
    elif len(title) > 255:
        errors.append("Title must be less than 255 characters")
    if not author:
        errors.append("Author is required")
    elif len(author) > 255:
        errors.append("Author must be less than 255 characters")
    if not genre:
        errors.append("Genre is required")
    elif len(genre) > 100:
        errors.append("Genre must be less than 100 characters")
    if not _is_int(year) or not MIN_PUBLISHED_YEAR <= int(year) <= current_year:
        errors.append(f"Published year must be between {MIN_PUBLISHED_YEAR} and {current_year}")

    if errors:
        raise InvalidInput(errors)
    return {"title": title, "author": author, "genre": genre, "published_year": int(year)}


def validate_id_list(data: Dict[str, Any], key: str, label: str) -> List[int]:
    """Non-empty list of distinct integer ids, order preserved."""
    raw = data.get(key)
    if not isinstance(raw, list) or not raw:
        raise InvalidInput([f"At least one {label} ID is required"])

    if not all(_is_int(v) for v in raw):
        raise InvalidInput([f"{label.capitalize()} IDs must be integers"])

    ids = [int(v) for v in raw]
    if not all(is_valid_id(i) for i in ids):
        raise InvalidInput([f"{label.capitalize()} IDs must be between 1 and {MAX_ID}"])
    if len(set(ids)) != len(ids):
        raise InvalidInput([f"{label.capitalize()} IDs must be unique"])
    return ids


def validate_notes(data: Dict[str, Any]) -> str:
    notes = data.get("notes")
    if not isinstance(notes, str) or not notes.strip():
        raise InvalidInput(["Notes content is required"])
    return notes


def validate_user_id(data: Dict[str, Any]) -> int:
    user_id = data.get("userId")
    if not _is_int(user_id):
        raise InvalidInput(["User ID must be an integer"])
    if not is_valid_id(int(user_id)):
        raise InvalidInput([f"User ID must be between 1 and {MAX_ID}"])
    return int(user_id)


def validate_search_query(args) -> str:
    q = (args.get("q") or "").strip()
    if not q:
        raise InvalidInput(["Search query is required"])
    return q


def parse_positive_int(raw: Optional[str], default: int, maximum: Optional[int] = None) -> int:
    # geçersiz sayfa/limit değerleri hata değil, varsayılana düşer
    try:
        value = int(raw)
    except (TypeError, ValueError):
        return default
    if value < 1:
        return default
    if maximum is not None:
        value = min(value, maximum)
    return value


def parse_returned_filter(raw: Optional[str]) -> Optional[bool]:
    if raw == "true":
        return True
    if raw == "false":
        return False
    return None
