from sqlalchemy import func, or_

from library_api.models.book import Book


class BookRepo:
    def __init__(self, session):
        self.session = session

    def list_page(self, offset: int, limit: int):
        return (
            self.session.query(Book)
            .order_by(Book.title.asc(), Book.id.asc())
            .offset(offset)
            .limit(limit)
            .all()
        )

    def count(self) -> int:
        return self.session.query(func.count(Book.id)).scalar() or 0

    def _search_filter(self, term: str):
        pattern = f"%{term.lower()}%"
        return or_(func.lower(Book.title).like(pattern), func.lower(Book.author).like(pattern))

    def search_page(self, term: str, offset: int, limit: int):
        return (
            self.session.query(Book)
            .filter(self._search_filter(term))
            .order_by(Book.title.asc(), Book.id.asc())
            .offset(offset)
            .limit(limit)
            .all()
        )

    def search_count(self, term: str) -> int:
        return self.session.query(func.count(Book.id)).filter(self._search_filter(term)).scalar() or 0

    def get(self, book_id: int):
        return self.session.get(Book, book_id)

    def get_for_update(self, book_id: int):
        return self.session.query(Book).filter(Book.id == book_id).with_for_update().first()

    def lock_many(self, book_ids):
        # SELECT ... FOR UPDATE; SQLite'ta yok, orada BEGIN IMMEDIATE sıralıyor
        return (
            self.session.query(Book)
            .filter(Book.id.in_(list(book_ids)))
            .order_by(Book.id)
            .with_for_update()
            .all()
        )

    def get_many(self, book_ids):
        if not book_ids:
            return []
        return self.session.query(Book).filter(Book.id.in_(list(book_ids))).all()

    def add(self, book: Book):
        self.session.add(book)
        return book

    def delete(self, book: Book):
        self.session.delete(book)
