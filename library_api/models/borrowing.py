from sqlalchemy import text
from sqlalchemy.ext.hybrid import hybrid_property

from library_api.extensions import db
from library_api.utils.clock import utcnow


class Borrowing(db.Model):
    __tablename__ = "borrowings"
    __table_args__ = (
        # kitap başına en fazla bir aktif (iade edilmemiş) ödünç
        db.Index(
            "uq_borrowings_active_book",
            "book_id",
            unique=True,
            sqlite_where=text("return_date IS NULL"),
            postgresql_where=text("return_date IS NULL"),
            mssql_where=text("return_date IS NULL"),
        ),
    )

    id = db.Column(db.Integer, primary_key=True)

    user_id = db.Column(db.Integer, db.ForeignKey("users.id"), nullable=False, index=True)
    book_id = db.Column(db.Integer, db.ForeignKey("books.id"), nullable=False, index=True)

    borrow_date = db.Column(db.DateTime, nullable=False, default=utcnow, index=True)
    return_date = db.Column(db.DateTime, nullable=True)

    user = db.relationship("User")
    book = db.relationship("Book")

    @hybrid_property
    def is_returned(self):
        return self.return_date is not None

    @is_returned.expression
    def is_returned(cls):
        return cls.return_date.isnot(None)

    def to_dict(self, include_book=False):
        data = {
            "id": self.id,
            "userId": self.user_id,
            "bookId": self.book_id,
            "borrowDate": self.borrow_date.isoformat() if self.borrow_date else None,
            "returnDate": self.return_date.isoformat() if self.return_date else None,
            "isReturned": self.is_returned,
        }
        if include_book:
            data["book"] = self.book.to_dict() if self.book else None
        return data
