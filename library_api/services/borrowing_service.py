from flask import current_app
from sqlalchemy.exc import IntegrityError

from library_api.errors import (
    BooksAlreadyBorrowed,
    BooksNotFound,
    BorrowingsAlreadyReturned,
    BorrowingsNotFound,
    InvalidInput,
)
from library_api.models.borrowing import Borrowing
from library_api.repositories.book_repo import BookRepo
from library_api.repositories.borrowing_repo import BorrowingRepo
from library_api.repositories.user_repo import UserRepo
from library_api.utils.clock import utcnow
from library_api.utils.transaction import atomic

STATS_TOP_N = 5


def _distinct_ids(ids, label):
    ids = [int(i) for i in ids]
    if not ids:
        raise InvalidInput([f"At least one {label} ID is required"])
    if len(set(ids)) != len(ids):
        raise InvalidInput([f"{label.capitalize()} IDs must be unique"])
    return ids


class BorrowingService:
    """Borrow/return bookkeeping.

    The check-then-write sequences run inside a single transaction with the
    involved rows locked, and the partial unique index on
    ``borrowings(book_id) WHERE return_date IS NULL`` backs up the
    one-active-borrowing-per-book rule when the database cannot lock rows.
    """

    def __init__(self, session):
        self.session = session
        self.books = BookRepo(session)
        self.borrowings = BorrowingRepo(session)
        self.users = UserRepo(session)

    def borrow(self, user_id: int, book_ids):
        ids = _distinct_ids(book_ids, "book")

        try:
            with atomic(self.session):
                found = {b.id for b in self.books.lock_many(ids)}
                missing = [i for i in ids if i not in found]
                if missing:
                    raise BooksNotFound(missing)

                active = self.borrowings.active_book_ids(ids)
                if active:
                    raise BooksAlreadyBorrowed([i for i in ids if i in active])

                now = utcnow()
                records = [Borrowing(user_id=user_id, book_id=book_id, borrow_date=now) for book_id in ids]
                self.borrowings.add_all(records)
                self.session.flush()
        except (BooksNotFound, BooksAlreadyBorrowed) as e:
            current_app.logger.warning(f"[borrowing] user={user_id} borrow rejected: {e.message} {e.details}")
            raise
        except IntegrityError as e:
            # aynı anda başka bir istek aktif ödünç açtı (partial unique index)
            contested = [i for i in ids if i in self.borrowings.active_book_ids(ids)] or ids
            current_app.logger.warning(f"[borrowing] user={user_id} lost borrow race for books={contested}")
            raise BooksAlreadyBorrowed(contested) from e

        current_app.logger.info(f"[borrowing] user={user_id} borrowed books={ids}")
        return records

    def return_books(self, user_id: int, borrowing_ids):
        ids = _distinct_ids(borrowing_ids, "borrowing")

        try:
            with atomic(self.session):
                owned = {b.id: b for b in self.borrowings.lock_for_user(ids, user_id)}
                missing = [i for i in ids if i not in owned]
                if missing:
                    raise BorrowingsNotFound(missing)

                returned = [i for i in ids if owned[i].is_returned]
                if returned:
                    raise BorrowingsAlreadyReturned(returned)

                updated = self.borrowings.mark_returned(ids, user_id, utcnow())
                if updated != len(ids):
                    # kilit desteklemeyen DB'de başka bir iade araya girdi
                    raced = self.borrowings.returned_ids(ids)
                    raise BorrowingsAlreadyReturned([i for i in ids if i in raced] or ids)
        except (BorrowingsNotFound, BorrowingsAlreadyReturned) as e:
            current_app.logger.warning(f"[borrowing] user={user_id} return rejected: {e.message} {e.details}")
            raise

        current_app.logger.info(f"[borrowing] user={user_id} returned borrowings={ids}")
        records = {b.id: b for b in self.borrowings.get_many(ids)}
        return [records[i] for i in ids]

    def get_user_borrowings(self, user_id: int, returned=None):
        return self.borrowings.list_by_user(user_id, returned)

    def has_active_borrowing(self, book_id: int) -> bool:
        return self.borrowings.count_active_for_book(book_id) > 0

    def most_borrowed_books(self, limit: int):
        rows = self.borrowings.top_books(limit)
        books = {b.id: b for b in self.books.get_many([r.book_id for r in rows])}
        return [
            {
                "book": books[r.book_id].to_dict() if r.book_id in books else None,
                "borrowCount": int(r.borrow_count),
            }
            for r in rows
        ]

    def most_active_users(self, limit: int):
        rows = self.borrowings.top_users(limit)
        users = {u.id: u for u in self.users.get_many([r.user_id for r in rows])}
        return [
            {
                "user": {"id": users[r.user_id].id, "username": users[r.user_id].username}
                if r.user_id in users else None,
                "borrowCount": int(r.borrow_count),
            }
            for r in rows
        ]

    def get_borrowing_stats(self):
        total = self.borrowings.count_all()
        active = self.borrowings.count_active()
        return {
            "totalBorrowings": total,
            "activeBorrowings": active,
            "returnedBorrowings": total - active,
            "mostActiveUsers": self.most_active_users(STATS_TOP_N),
            "mostBorrowedBooks": self.most_borrowed_books(STATS_TOP_N),
        }
