from datetime import datetime
from books_service.extensions import db

STATUS_BORROWED = "borrowed"
STATUS_RETURNED = "returned"
STATUS_OVERDUE = "overdue"

STATUSES = (STATUS_BORROWED, STATUS_RETURNED, STATUS_OVERDUE)


class Borrowing(db.Model):
    __tablename__ = "borrowings"

    id = db.Column(db.Integer, primary_key=True)

    book_id = db.Column(db.Integer, db.ForeignKey("books.id"), nullable=False, index=True)

    # borrower snapshot taken at loan time
    student_id = db.Column(db.Integer, nullable=False, index=True)
    student_name = db.Column(db.String(255), nullable=False)
    student_email = db.Column(db.String(255), nullable=False)

    borrow_date = db.Column(db.DateTime, nullable=False, default=datetime.utcnow)
    due_date = db.Column(db.DateTime, nullable=False)
    return_date = db.Column(db.DateTime, nullable=True)

    status = db.Column(
        db.Enum(*STATUSES, name="borrowing_status"),
        nullable=False,
        default=STATUS_BORROWED,
    )
    notes = db.Column(db.Text, nullable=True)

    created_at = db.Column(db.DateTime, nullable=False, default=datetime.utcnow)
    updated_at = db.Column(db.DateTime, nullable=False, default=datetime.utcnow, onupdate=datetime.utcnow)

    book = db.relationship("Book", back_populates="borrowings")
