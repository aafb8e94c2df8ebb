from __future__ import annotations

import logging

import pytest

from library_api.errors import BookInUse, BookNotFound
from library_api.models.book import Book
from library_api.models.borrowing import Borrowing
from library_api.services.book_service import BookService
from library_api.services.borrowing_service import BorrowingService


@pytest.fixture
def books(session):
    return BookService(session)


@pytest.fixture
def borrowing(session):
    return BorrowingService(session)


def test_create_get_update(books):
    book = books.create_book("Dune", "Frank Herbert", "Science Fiction", 1965)
    assert books.get_book(book.id).title == "Dune"

    updated = books.update_book(book.id, "Dune Messiah", "Frank Herbert", "Science Fiction", 1969)

    assert updated.title == "Dune Messiah"
    assert books.get_book(book.id).published_year == 1969


def test_missing_book(books):
    with pytest.raises(BookNotFound):
        books.get_book(123)
    with pytest.raises(BookNotFound):
        books.update_book(123, "a", "b", "c", 2000)
    with pytest.raises(BookNotFound):
        books.delete_book(123)


def test_list_is_paginated_and_sorted_by_title(books, make_book):
    for title in ["Charlie", "Alpha", "Bravo", "Echo", "Delta"]:
        make_book(title=title)

    page1, total = books.list_books(1, 2)
    page3, _ = books.list_books(3, 2)

    assert total == 5
    assert [b.title for b in page1] == ["Alpha", "Bravo"]
    assert [b.title for b in page3] == ["Echo"]


def test_search_matches_title_or_author_case_insensitively(books, make_book):
    make_book(title="The Shining", author="Stephen King")
    make_book(title="Kingdom Come", author="Mark Waid")
    make_book(title="Emma", author="Jane Austen")

    found, total = books.search_books("KING", 1, 10)

    assert total == 2
    assert sorted(b.title for b in found) == ["Kingdom Come", "The Shining"]

    found, total = books.search_books("austen", 1, 10)
    assert [b.title for b in found] == ["Emma"]
    assert books.search_books("nothing here", 1, 10) == ([], 0)


def test_delete_blocked_while_borrowed_then_allowed(books, borrowing, session, user, make_book):
    book = make_book()
    book_id = book.id
    record = borrowing.borrow(user.id, [book_id])[0]

    with pytest.raises(BookInUse) as exc:
        books.delete_book(book_id)
    assert exc.value.details["bookIds"] == [book_id]
    assert session.get(Book, book_id) is not None

    borrowing.return_books(user.id, [record.id])
    assert books.delete_book(book_id) == 1

    session.expire_all()
    assert session.get(Book, book_id) is None
    assert session.query(Borrowing).filter_by(book_id=book_id).count() == 0


def test_most_borrowed(books, borrowing, make_user, make_book):
    a, b = make_user("alice"), make_user("bob")
    hot, cold = make_book(title="Hot"), make_book(title="Cold")
    first = borrowing.borrow(a.id, [hot.id, cold.id])
    borrowing.return_books(a.id, [first[0].id])
    borrowing.borrow(b.id, [hot.id])

    result = books.most_borrowed(1)

    assert result == [{"book": hot.to_dict(), "borrowCount": 2}]


def test_delete_of_never_borrowed_book_removes_no_history(books, make_book):
    assert books.delete_book(make_book().id) == 0


def test_out_of_range_id_is_not_found(books):
    with pytest.raises(BookNotFound):
        books.get_book(10 ** 30)
    with pytest.raises(BookNotFound):
        books.delete_book(10 ** 30)


def test_delete_racing_a_borrow_is_rejected_by_foreign_key(books, borrowing, session, user, make_book, monkeypatch):
    book_id = make_book().id
    borrowing.borrow(user.id, [book_id])
    # aktif ödünç kontrolünü atlayan bir okuma: FK son savunma hattı
    monkeypatch.setattr(books.borrowing_service, "has_active_borrowing", lambda _id: False)

    with pytest.raises(BookInUse) as exc:
        books.delete_book(book_id)

    assert exc.value.details["bookIds"] == [book_id]
    session.expire_all()
    assert session.get(Book, book_id) is not None
    assert session.query(Borrowing).filter_by(book_id=book_id).count() == 1


def test_update_is_logged(books, caplog):
    book = books.create_book("Dune", "Frank Herbert", "Science Fiction", 1965)

    with caplog.at_level(logging.INFO):
        books.update_book(book.id, "Dune Messiah", "Frank Herbert", "Science Fiction", 1969)

    assert f"[books] updated book id={book.id} title='Dune Messiah'" in caplog.text
