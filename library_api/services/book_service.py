from flask import current_app
from sqlalchemy.exc import IntegrityError

from library_api.errors import BookInUse, BookNotFound
from library_api.models.book import Book
from library_api.repositories.book_repo import BookRepo
from library_api.repositories.borrowing_repo import BorrowingRepo
from library_api.services.borrowing_service import BorrowingService
from library_api.utils.transaction import atomic
from library_api.utils.validators import is_valid_id


class BookService:
    def __init__(self, session, borrowing_service=None):
        self.session = session
        self.books = BookRepo(session)
        self.borrowings = BorrowingRepo(session)
        self.borrowing_service = borrowing_service or BorrowingService(session)

    def list_books(self, page: int, limit: int):
        offset = (page - 1) * limit
        return self.books.list_page(offset, limit), self.books.count()

    def get_book(self, book_id: int):
        # DB tam sayı aralığı dışındaki id hiçbir kitaba karşılık gelmez
        if not is_valid_id(book_id):
            raise BookNotFound()
        book = self.books.get(book_id)
        if not book:
            raise BookNotFound()
        return book

    def create_book(self, title: str, author: str, genre: str, published_year: int):
        book = Book(title=title, author=author, genre=genre, published_year=published_year)
        with atomic(self.session):
            self.books.add(book)
        current_app.logger.info(f"[books] created book id={book.id} title={book.title!r}")
        return book

    def update_book(self, book_id: int, title: str, author: str, genre: str, published_year: int):
        with atomic(self.session):
            book = self.get_book(book_id)
            book.title = title
            book.author = author
            book.genre = genre
            book.published_year = published_year
        current_app.logger.info(f"[books] updated book id={book.id} title={book.title!r}")
        return book

    def delete_book(self, book_id: int) -> int:
        """Delete a book that is not currently borrowed.

        Its returned borrowing history goes with it; the number of removed
        history rows is returned so callers can report it.
        """
        if not is_valid_id(book_id):
            raise BookNotFound()
        try:
            with atomic(self.session):
                book = self.books.get_for_update(book_id)
                if not book:
                    raise BookNotFound()

                if self.borrowing_service.has_active_borrowing(book_id):
                    raise BookInUse(book_id)

                # iade edilmiş geçmiş kayıtlar kitapla birlikte silinir
                removed = self.borrowings.delete_returned_for_book(book_id)
                self.books.delete(book)
                self.session.flush()
        except BookInUse:
            current_app.logger.warning(f"[books] delete refused, book id={book_id} is borrowed")
            raise
        except IntegrityError as e:
            # silme sırasında araya bir ödünç girdi; FK silmeyi engelledi
            current_app.logger.warning(f"[books] delete of book id={book_id} raced with a borrow")
            raise BookInUse(book_id) from e

        current_app.logger.info(f"[books] deleted book id={book_id} with {removed} returned borrowing(s)")
        return removed

    def search_books(self, query: str, page: int, limit: int):
        offset = (page - 1) * limit
        return self.books.search_page(query, offset, limit), self.books.search_count(query)

    def most_borrowed(self, limit: int):
        return self.borrowing_service.most_borrowed_books(limit)
