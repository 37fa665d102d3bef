from datetime import datetime

from sqlalchemy import delete, update
from sqlalchemy.orm import joinedload

from books_service.extensions import db
from books_service.models.borrowing import Borrowing, STATUS_BORROWED, STATUS_OVERDUE, STATUS_RETURNED


class BorrowingRepo:
    @staticmethod
    def get(borrowing_id: int):
        return db.session.get(Borrowing, borrowing_id)

    @staticmethod
    def list_all():
        return (
            Borrowing.query
            .options(joinedload(Borrowing.book))
            .order_by(Borrowing.created_at.desc(), Borrowing.id.desc())
            .all()
        )

    @staticmethod
    def list_by_student(student_id: int):
        return (
            Borrowing.query
            .options(joinedload(Borrowing.book))
            .filter(Borrowing.student_id == student_id)
            .order_by(Borrowing.created_at.desc(), Borrowing.id.desc())
            .all()
        )

    @staticmethod
    def add(borrowing: Borrowing):
        db.session.add(borrowing)
        db.session.flush()
        return borrowing

    @staticmethod
    def mark_returned(borrowing_id: int, returned_at: datetime) -> bool:
        # return_date IS NULL makes the transition happen at most once
        result = db.session.execute(
            update(Borrowing)
            .where(Borrowing.id == borrowing_id, Borrowing.return_date.is_(None))
            .values(return_date=returned_at, status=STATUS_RETURNED, updated_at=returned_at)
            .execution_options(synchronize_session=False)
        )
        return result.rowcount == 1

    @staticmethod
    def mark_overdue(now: datetime) -> int:
        result = db.session.execute(
            update(Borrowing)
            .where(
                Borrowing.return_date.is_(None),
                Borrowing.status == STATUS_BORROWED,
                Borrowing.due_date < now,
            )
            .values(status=STATUS_OVERDUE, updated_at=now)
            .execution_options(synchronize_session=False)
        )
        return result.rowcount

    @staticmethod
    def delete_outstanding(borrowing_id: int) -> bool:
        result = db.session.execute(
            delete(Borrowing)
            .where(Borrowing.id == borrowing_id, Borrowing.return_date.is_(None))
            .execution_options(synchronize_session=False)
        )
        return result.rowcount == 1

    @staticmethod
    def delete_any(borrowing_id: int) -> bool:
        result = db.session.execute(
            delete(Borrowing)
            .where(Borrowing.id == borrowing_id)
            .execution_options(synchronize_session=False)
        )
        return result.rowcount == 1

    @staticmethod
    def delete_returned_for_book(book_id: int) -> int:
        result = db.session.execute(
            delete(Borrowing)
            .where(Borrowing.book_id == book_id, Borrowing.return_date.is_not(None))
            .execution_options(synchronize_session=False)
        )
        return result.rowcount
