from datetime import datetime

from flask import current_app

from books_service.errors import ConflictError, NotFoundError, ValidationError
from books_service.extensions import db
from books_service.models.borrowing import Borrowing, STATUS_BORROWED
from books_service.repositories.book_repo import BookRepo
from books_service.repositories.borrowing_repo import BorrowingRepo
from books_service.services.inventory_service import InventoryService
from books_service.utils.payload import optional_text, require_text, to_datetime, to_int

REQUIRED_FIELDS = ("book_id", "student_id", "student_name", "student_email", "due_date")


class BorrowingService:
    @staticmethod
    def list_borrowings():
        return BorrowingRepo.list_all()

    @staticmethod
    def list_for_student(student_id: int):
        return BorrowingRepo.list_by_student(student_id)

    @staticmethod
    def get_borrowing(borrowing_id: int):
        borrowing = BorrowingRepo.get(borrowing_id)
        if not borrowing:
            raise NotFoundError("Borrowing not found")
        return borrowing

    @staticmethod
    def create_borrowing(data: dict):
        missing = [k for k in REQUIRED_FIELDS if data.get(k) in (None, "")]
        if missing:
            raise ValidationError(f"Missing required fields: {', '.join(missing)}")

        book_id = to_int(data["book_id"], "book_id")
        student_id = to_int(data["student_id"], "student_id")
        student_name = require_text(data, "student_name")
        student_email = require_text(data, "student_email")
        due_date = to_datetime(data["due_date"], "due_date")

        if not BookRepo.get(book_id):
            raise NotFoundError("Book not found")

        now = datetime.utcnow()
        try:
            # stock decrement and loan insert commit together or not at all
            InventoryService.checkout(book_id)
            borrowing = BorrowingRepo.add(Borrowing(
                book_id=book_id,
                student_id=student_id,
                student_name=student_name,
                student_email=student_email,
                borrow_date=now,
                due_date=due_date,
                status=STATUS_BORROWED,
                notes=optional_text(data.get("notes")),
            ))
            db.session.commit()
        except ValidationError:
            db.session.rollback()
            current_app.logger.warning(f"[borrowings] Book id={book_id} not available for student={student_id}")
            raise
        except Exception:
            db.session.rollback()
            raise

        current_app.logger.info(
            f"[borrowings] Created borrowing id={borrowing.id} book={book_id} student={student_id}"
        )
        return borrowing

    @staticmethod
    def return_borrowing(borrowing_id: int):
        borrowing = BorrowingService.get_borrowing(borrowing_id)
        book_id = borrowing.book_id

        try:
            if not BorrowingRepo.mark_returned(borrowing_id, datetime.utcnow()):
                raise ConflictError("This book has already been returned")
            InventoryService.checkin(book_id)
            db.session.commit()
        except Exception:
            db.session.rollback()
            raise

        current_app.logger.info(f"[borrowings] Returned borrowing id={borrowing_id} book={book_id}")
        return borrowing

    @staticmethod
    def delete_borrowing(borrowing_id: int):
        borrowing = BorrowingService.get_borrowing(borrowing_id)
        book_id = borrowing.book_id

        try:
            if BorrowingRepo.delete_outstanding(borrowing_id):
                InventoryService.checkin(book_id)
                compensated = True
            elif BorrowingRepo.delete_any(borrowing_id):
                compensated = False
            else:
                raise NotFoundError("Borrowing not found")
            db.session.commit()
        except Exception:
            db.session.rollback()
            raise
        db.session.expunge(borrowing)

        current_app.logger.info(
            f"[borrowings] Deleted borrowing id={borrowing_id} book={book_id} restocked={compensated}"
        )
        return compensated

    @staticmethod
    def mark_overdue(now: datetime = None) -> int:
        now = now or datetime.utcnow()
        try:
            count = BorrowingRepo.mark_overdue(now)
            db.session.commit()
        except Exception:
            db.session.rollback()
            raise
        current_app.logger.info(f"[borrowings] Marked {count} borrowing(s) overdue")
        return count
