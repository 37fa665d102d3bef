from datetime import datetime
from books_service.extensions import db


class Book(db.Model):
    __tablename__ = "books"

    id = db.Column(db.Integer, primary_key=True)
    title = db.Column(db.String(255), nullable=False, index=True)
    author = db.Column(db.String(255), nullable=False, index=True)
    isbn = db.Column(db.String(32), nullable=True, index=True)
    publication_year = db.Column(db.Integer, nullable=True)
    publisher = db.Column(db.String(255), nullable=True)
    description = db.Column(db.Text, nullable=True)
    cover_image = db.Column(db.String(500), nullable=True)

    # available_quantity is owned by services.inventory_service
    quantity = db.Column(db.Integer, nullable=False, default=1)
    available_quantity = db.Column(db.Integer, nullable=False, default=1)

    category_id = db.Column(db.Integer, db.ForeignKey("categories.id"), nullable=False, index=True)

    created_at = db.Column(db.DateTime, nullable=False, default=datetime.utcnow)
    updated_at = db.Column(db.DateTime, nullable=False, default=datetime.utcnow, onupdate=datetime.utcnow)

    category = db.relationship("Category", back_populates="books")
    borrowings = db.relationship("Borrowing", back_populates="book", lazy="dynamic")

    @property
    def available(self) -> bool:
        return (self.available_quantity or 0) > 0
