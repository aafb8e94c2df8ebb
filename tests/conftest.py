"""Shared fixtures: a fresh in-memory database per test."""
from __future__ import annotations

import pytest
from werkzeug.security import generate_password_hash

from library_api import create_app
from library_api.config import TestConfig
from library_api.extensions import db
from library_api.models.book import Book
from library_api.models.user import User
from library_api.services.user_service import UserService


@pytest.fixture
def app():
    app = create_app(TestConfig)
    with app.app_context():
        db.create_all()
        yield app
        db.session.remove()
        db.drop_all()


@pytest.fixture
def client(app):
    return app.test_client()


@pytest.fixture
def session(app):
    return db.session


@pytest.fixture
def make_user(session):
    def _make(username="reader", password="secret1", is_admin=False):
        user = User(username=username, password=generate_password_hash(password), is_admin=is_admin)
        session.add(user)
        session.commit()
        return user
    return _make


@pytest.fixture
def make_book(session):
    counter = {"n": 0}

    def _make(title=None, author="Some Author", genre="Fiction", published_year=2001):
        counter["n"] += 1
        book = Book(
            title=title or f"Book {counter['n']}",
            author=author,
            genre=genre,
            published_year=published_year,
        )
        session.add(book)
        session.commit()
        return book
    return _make


@pytest.fixture
def auth_header():
    def _header(user):
        return {"Authorization": f"Bearer {UserService.issue_token(user)}"}
    return _header


@pytest.fixture
def user(make_user):
    return make_user("reader")


@pytest.fixture
def admin(make_user):
    return make_user("librarian", is_admin=True)
