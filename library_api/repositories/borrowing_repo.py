from sqlalchemy import func, update
from sqlalchemy.orm import joinedload

from library_api.models.borrowing import Borrowing


class BorrowingRepo:
    def __init__(self, session):
        self.session = session

    def add_all(self, borrowings):
        self.session.add_all(borrowings)
        return borrowings

    def active_book_ids(self, book_ids):
        rows = (
            self.session.query(Borrowing.book_id)
            .filter(Borrowing.book_id.in_(list(book_ids)), ~Borrowing.is_returned)
            .all()
        )
        return {r.book_id for r in rows}

    def count_active_for_book(self, book_id: int) -> int:
        return (
            self.session.query(func.count(Borrowing.id))
            .filter(Borrowing.book_id == book_id, Borrowing.return_date.is_(None))
            .scalar()
        ) or 0

    def lock_for_user(self, borrowing_ids, user_id: int):
        return (
            self.session.query(Borrowing)
            .filter(Borrowing.id.in_(list(borrowing_ids)), Borrowing.user_id == user_id)
            .order_by(Borrowing.id)
            .with_for_update()
            .all()
        )

    def returned_ids(self, borrowing_ids):
        rows = (
            self.session.query(Borrowing.id)
            .filter(Borrowing.id.in_(list(borrowing_ids)), Borrowing.return_date.isnot(None))
            .all()
        )
        return {r.id for r in rows}

    def mark_returned(self, borrowing_ids, user_id: int, when) -> int:
        # sadece hâlâ aktif olanları günceller; dönen satır sayısı yarış kontrolü için
        result = self.session.execute(
            update(Borrowing)
            .where(
                Borrowing.id.in_(list(borrowing_ids)),
                Borrowing.user_id == user_id,
                Borrowing.return_date.is_(None),
            )
            .values(return_date=when)
            .execution_options(synchronize_session=False)
        )
        return result.rowcount

    def get_many(self, borrowing_ids):
        return self.session.query(Borrowing).filter(Borrowing.id.in_(list(borrowing_ids))).all()

    def list_by_user(self, user_id: int, returned=None):
        q = (
            self.session.query(Borrowing)
            .options(joinedload(Borrowing.book))
            .filter(Borrowing.user_id == user_id)
        )
        if returned is not None:
            q = q.filter(Borrowing.is_returned if returned else ~Borrowing.is_returned)
        return q.order_by(Borrowing.borrow_date.desc(), Borrowing.id.desc()).all()

    def delete_returned_for_book(self, book_id: int) -> int:
        return (
            self.session.query(Borrowing)
            .filter(Borrowing.book_id == book_id, Borrowing.return_date.isnot(None))
            .delete(synchronize_session=False)
        )

    def count_all(self) -> int:
        return self.session.query(func.count(Borrowing.id)).scalar() or 0

    def count_active(self) -> int:
        return (
            self.session.query(func.count(Borrowing.id))
            .filter(Borrowing.return_date.is_(None))
            .scalar()
        ) or 0

    def top_users(self, limit: int):
        cnt = func.count(Borrowing.id).label("borrow_count")
        return (
            self.session.query(Borrowing.user_id, cnt)
            .group_by(Borrowing.user_id)
            .order_by(cnt.desc(), Borrowing.user_id.asc())
            .limit(limit)
            .all()
        )

    def top_books(self, limit: int):
        cnt = func.count(Borrowing.id).label("borrow_count")
        return (
            self.session.query(Borrowing.book_id, cnt)
            .group_by(Borrowing.book_id)
            .order_by(cnt.desc(), Borrowing.book_id.asc())
            .limit(limit)
            .all()
        )
