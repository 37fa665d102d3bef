from sqlalchemy import delete, exists, update

from books_service.extensions import db
from books_service.models.book import Book
from books_service.models.borrowing import Borrowing


class BookRepo:
    @staticmethod
    def search(title: str = None, author: str = None, category_id: int = None):
        q = Book.query
        # autoescape: "%" and "_" in user text match literally
        if title:
            q = q.filter(Book.title.icontains(title, autoescape=True))
        if author:
            q = q.filter(Book.author.icontains(author, autoescape=True))
        if category_id is not None:
            q = q.filter(Book.category_id == category_id)
        return q.order_by(Book.created_at.desc(), Book.id.desc()).all()

    @staticmethod
    def get(book_id: int, for_update: bool = False):
        if for_update:
            return db.session.get(Book, book_id, with_for_update=True, populate_existing=True)
        return db.session.get(Book, book_id)

    @staticmethod
    def add(book: Book):
        db.session.add(book)
        db.session.flush()
        return book

    @staticmethod
    def delete_if_no_active_loans(book_id: int) -> bool:
        outstanding = exists().where(Borrowing.book_id == book_id, Borrowing.return_date.is_(None))
        result = db.session.execute(
            delete(Book)
            .where(Book.id == book_id, Book.quantity == Book.available_quantity, ~outstanding)
            .execution_options(synchronize_session=False)
        )
        return result.rowcount == 1

    @staticmethod
    def update_available(book_id: int, *criteria, value) -> int:
        """Single UPDATE of available_quantity guarded by ``criteria``; returns matched rows."""
        result = db.session.execute(
            update(Book)
            .where(Book.id == book_id, *criteria)
            .values(available_quantity=value)
            .execution_options(synchronize_session=False)
        )
        return result.rowcount

    @staticmethod
    def commit():
        db.session.commit()

    @staticmethod
    def rollback():
        db.session.rollback()
