"""Concurrent borrow/return against a shared file-backed database.

Each worker thread gets its own app context, so its own session and
connection, and all of them start the operation at the same time.
"""
from __future__ import annotations

import threading

import pytest
from werkzeug.security import generate_password_hash

from library_api import create_app
from library_api.config import TestConfig
from library_api.errors import BooksAlreadyBorrowed, BorrowingsAlreadyReturned
from library_api.extensions import db
from library_api.models.book import Book
from library_api.models.borrowing import Borrowing
from library_api.models.user import User
from library_api.services.borrowing_service import BorrowingService

WORKERS = 4


@pytest.fixture
def file_app(tmp_path):
    class FileConfig(TestConfig):
        SQLALCHEMY_DATABASE_URI = f"sqlite:///{tmp_path / 'race.db'}"
        SQLALCHEMY_ENGINE_OPTIONS = {"connect_args": {"timeout": 30}}

    app = create_app(FileConfig)
    with app.app_context():
        db.create_all()
    yield app
    with app.app_context():
        db.drop_all()
        db.engine.dispose()


def _seed(app, n_users, n_books):
    with app.app_context():
        users = [User(username=f"racer{i}", password=generate_password_hash("secret1")) for i in range(n_users)]
        books = [Book(title=f"Race {i}", author="A", genre="G", published_year=2000) for i in range(n_books)]
        db.session.add_all(users + books)
        db.session.commit()
        return [u.id for u in users], [b.id for b in books]


def _run_concurrently(app, fn, args_list):
    barrier = threading.Barrier(len(args_list))
    results = [None] * len(args_list)

    def worker(idx, args):
        with app.app_context():
            try:
                barrier.wait()
                results[idx] = ("ok", fn(BorrowingService(db.session), *args))
            except (BooksAlreadyBorrowed, BorrowingsAlreadyReturned) as e:
                results[idx] = ("conflict", e.details)
            finally:
                db.session.remove()

    threads = [threading.Thread(target=worker, args=(i, a)) for i, a in enumerate(args_list)]
    for t in threads:
        t.start()
    for t in threads:
        t.join(timeout=60)
    return results


def test_only_one_concurrent_borrow_wins(file_app):
    user_ids, (book_id,) = _seed(file_app, WORKERS, 1)

    results = _run_concurrently(
        file_app,
        lambda svc, uid: [b.id for b in svc.borrow(uid, [book_id])],
        [(uid,) for uid in user_ids],
    )

    outcomes = [r[0] for r in results]
    assert outcomes.count("ok") == 1
    assert outcomes.count("conflict") == WORKERS - 1
    assert all(r[1] == {"bookIds": [book_id]} for r in results if r[0] == "conflict")
    with file_app.app_context():
        assert db.session.query(Borrowing).filter_by(book_id=book_id).count() == 1


def test_overlapping_sets_never_double_borrow(file_app):
    user_ids, book_ids = _seed(file_app, 2, 3)

    results = _run_concurrently(
        file_app,
        lambda svc, uid, ids: [b.id for b in svc.borrow(uid, ids)],
        [(user_ids[0], book_ids[:2]), (user_ids[1], book_ids[1:])],
    )

    assert [r[0] for r in results].count("ok") == 1
    with file_app.app_context():
        active = db.session.query(Borrowing).filter(~Borrowing.is_returned).all()
        assert len(active) == 2
        assert len({b.book_id for b in active}) == 2


def test_only_one_concurrent_return_wins(file_app):
    (user_id,), (book_id,) = _seed(file_app, 1, 1)
    with file_app.app_context():
        borrowing_id = BorrowingService(db.session).borrow(user_id, [book_id])[0].id

    results = _run_concurrently(
        file_app,
        lambda svc: [b.id for b in svc.return_books(user_id, [borrowing_id])],
        [() for _ in range(WORKERS)],
    )

    outcomes = [r[0] for r in results]
    assert outcomes.count("ok") == 1
    assert all(r[1] == {"borrowingIds": [borrowing_id]} for r in results if r[0] == "conflict")
