"""CLI commands for preparing a development database.

``flask --app library_api init-db`` creates the tables; ``seed-db`` also
wipes them and loads demo users, books and borrowings.
"""
import random
from datetime import timedelta

import click
from flask import current_app
from werkzeug.security import generate_password_hash

from library_api.extensions import db
from library_api.models.book import Book
from library_api.models.borrowing import Borrowing
from library_api.models.user import User
from library_api.utils.clock import utcnow

GENRES = [
    "Science Fiction", "Fantasy", "Mystery", "Thriller", "Romance",
    "Historical Fiction", "Non-fiction", "Biography", "Self-help", "Horror",
]

TITLES = [
    "The Lost City", "Midnight Dreams", "The Silent Echo", "Beyond the Horizon",
    "Whispers in the Dark", "The Last Guardian", "Eternal Flames", "Shadows of the Past",
    "The Forgotten Path", "Echoes of Tomorrow", "The Hidden Truth", "Secrets of the Universe",
    "The Broken Promise", "Destiny's Call", "The Enchanted Forest", "Voices in the Wind",
    "The Mysterious Island", "Chronicles of Time", "The Final Frontier", "Whispers of the Heart",
    "The Ancient Relic", "Legends of the Fallen", "The Golden Key", "Tears of the Moon",
    "The Immortal Quest", "Realms of Magic", "The Distant Shore", "Shadows of Doubt",
    "The Endless Journey", "Fragments of Memory", "The Crystal Cave", "Guardians of the Galaxy",
    "The Silent Witness", "Dreams of Paradise", "The Emerald City", "Visions of the Future",
    "The Crimson Sky", "Tales of Courage", "The Sapphire Sea", "Chronicles of Heroes",
]

AUTHORS = [
    "J.K. Rowling", "Stephen King", "George R.R. Martin", "Jane Austen", "Ernest Hemingway",
    "Agatha Christie", "Mark Twain", "Harper Lee", "F. Scott Fitzgerald", "Charles Dickens",
]


def _days_ago(days: int):
    return utcnow() - timedelta(days=days)


def seed_database(rng=None):
    rng = rng or random.Random()

    db.session.query(Borrowing).delete()
    db.session.query(Book).delete()
    db.session.query(User).delete()

    admin = User(username="admin", password=generate_password_hash("admin123"), is_admin=True)
    users = [
        User(username=name, password=generate_password_hash("user123"), is_admin=False)
        for name in ("johndoe", "janesmith", "bobjohnson")
    ]
    db.session.add_all([admin] + users)

    current_year = utcnow().year
    books = [
        Book(
            title=title,
            author=rng.choice(AUTHORS),
            genre=rng.choice(GENRES),
            published_year=rng.randint(1900, current_year),
        )
        for title in TITLES
    ]
    db.session.add_all(books)
    db.session.flush()

    borrowings = []
    # 1. kullanıcı: 3 aktif ödünç
    for book in books[0:3]:
        borrowings.append(Borrowing(user_id=users[0].id, book_id=book.id, borrow_date=_days_ago(rng.randint(0, 29))))

    # 2. kullanıcı: 5 ödünç, ilk 2'si iade edilmiş
    for i, book in enumerate(books[3:8]):
        borrow_date = _days_ago(rng.randint(0, 59))
        return_date = borrow_date + timedelta(days=rng.randint(0, 19)) if i < 2 else None
        borrowings.append(Borrowing(user_id=users[1].id, book_id=book.id, borrow_date=borrow_date, return_date=return_date))

    # 3. kullanıcı: 4 ödünç, hepsi iade edilmiş
    for book in books[8:12]:
        borrow_date = _days_ago(rng.randint(0, 89))
        borrowings.append(Borrowing(
            user_id=users[2].id, book_id=book.id,
            borrow_date=borrow_date, return_date=borrow_date + timedelta(days=rng.randint(0, 14)),
        ))

    db.session.add_all(borrowings)
    db.session.commit()
    return {"users": len(users) + 1, "books": len(books), "borrowings": len(borrowings)}


def register_commands(app):
    @app.cli.command("init-db")
    def init_db():
        """Create all tables."""
        db.create_all()
        click.echo("Tables created.")

    @app.cli.command("seed-db")
    @click.option("--seed", type=int, default=None, help="Random seed for reproducible data.")
    def seed_db(seed):
        """Wipe the tables and load demo data."""
        db.create_all()
        counts = seed_database(random.Random(seed))
        current_app.logger.info(f"[seed] {counts}")
        click.echo(f"Seeded {counts['users']} users, {counts['books']} books, {counts['borrowings']} borrowings.")
