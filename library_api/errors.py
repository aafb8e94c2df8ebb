"""Application error taxonomy.

Every failure that reaches the HTTP boundary is an ``AppError`` subclass.
The error handlers in ``create_app`` turn them into the JSON envelope
``{"success": false, "error": <kind>, "message": ..., **details}``.
Multi-item operations put the offending ids in ``details`` so callers can
see exactly which books or borrowings caused the failure.
"""
from __future__ import annotations

from typing import Any, Dict, Iterable, List, Optional


class AppError(Exception):
    status_code = 500
    error = "internal"
    message = "Internal server error"

    def __init__(self, message: Optional[str] = None, **details: Any):
        super().__init__(message or self.message)
        self.message = message or self.message
        self.details = details

    def to_dict(self) -> Dict[str, Any]:
        payload = {"success": False, "error": self.error, "message": self.message}
        payload.update(self.details)
        return payload


class InvalidInput(AppError):
    status_code = 400
    error = "invalid_input"
    message = "Invalid input"

    def __init__(self, errors: Iterable[str], message: Optional[str] = None):
        errors = list(errors)
        super().__init__(message or "; ".join(errors), errors=errors)


class NotFound(AppError):
    status_code = 404
    error = "not_found"
    message = "Not found"


class Conflict(AppError):
    # "currently borrowed" gibi iş kuralı ihlalleri 400 ile döner
    status_code = 400
    error = "conflict"
    message = "Conflict"


class Unauthorized(AppError):
    status_code = 401
    error = "unauthorized"
    message = "Authentication required"


class Forbidden(AppError):
    status_code = 403
    error = "forbidden"
    message = "Admin access required"


class Internal(AppError):
    pass


def _ids(ids: Iterable[int]) -> List[int]:
    return [int(i) for i in ids]


class BookNotFound(NotFound):
    message = "Book not found"


class BooksNotFound(NotFound):
    message = "One or more books not found"

    def __init__(self, book_ids: Iterable[int]):
        super().__init__(bookIds=_ids(book_ids))


class BooksAlreadyBorrowed(Conflict):
    message = "Some books are already borrowed"

    def __init__(self, book_ids: Iterable[int]):
        super().__init__(bookIds=_ids(book_ids))


class BookInUse(Conflict):
    message = "Cannot delete book that is currently borrowed"

    def __init__(self, book_id: int):
        super().__init__(bookIds=[int(book_id)])


class BorrowingsNotFound(NotFound):
    message = "One or more borrowing records not found or don't belong to you"

    def __init__(self, borrowing_ids: Iterable[int]):
        super().__init__(borrowingIds=_ids(borrowing_ids))


class BorrowingsAlreadyReturned(Conflict):
    message = "Some books are already returned"

    def __init__(self, borrowing_ids: Iterable[int]):
        super().__init__(borrowingIds=_ids(borrowing_ids))


class UserNotFound(NotFound):
    message = "User not found"


class UsernameTaken(Conflict):
    message = "Username already taken"


class InvalidCredentials(Unauthorized):
    message = "Invalid credentials"


class NotesDecryptionError(Internal):
    message = "Stored notes could not be decrypted"
