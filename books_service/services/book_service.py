from flask import current_app

from books_service.errors import ConflictError, NotFoundError, UnknownReferenceError, ValidationError
from books_service.extensions import db
from books_service.models.book import Book
from books_service.repositories.book_repo import BookRepo
from books_service.repositories.borrowing_repo import BorrowingRepo
from books_service.repositories.category_repo import CategoryRepo
from books_service.services.inventory_service import InventoryService
from books_service.utils.payload import (
    MISSING,
    field,
    optional_int,
    optional_text,
    require_text,
    to_int,
)

OPTIONAL_TEXT_FIELDS = ("isbn", "publisher", "description", "cover_image")


def _existing_category_id(value) -> int:
    category_id = to_int(value, "category_id", minimum=1)
    if not CategoryRepo.get(category_id):
        raise UnknownReferenceError("Category not found")
    return category_id


class BookService:
    @staticmethod
    def list_books(title: str = None, author: str = None, category_id=None):
        if category_id not in (None, ""):
            category_id = to_int(category_id, "category_id")
        else:
            category_id = None
        return BookRepo.search(title=title, author=author, category_id=category_id)

    @staticmethod
    def get_book(book_id: int, for_update: bool = False):
        book = BookRepo.get(book_id, for_update=for_update)
        if not book:
            raise NotFoundError("Book not found")
        return book

    @staticmethod
    def create_book(data: dict):
        title = require_text(data, "title")
        author = require_text(data, "author")
        if data.get("category_id") in (None, ""):
            raise ValidationError("category_id is required")
        category_id = _existing_category_id(data["category_id"])

        quantity = data.get("quantity")
        quantity = 1 if quantity is None else to_int(quantity, "quantity", minimum=1)

        book = Book(
            title=title,
            author=author,
            isbn=optional_text(data.get("isbn")),
            publication_year=optional_int(data.get("publication_year"), "publication_year"),
            publisher=optional_text(data.get("publisher")),
            description=optional_text(data.get("description")),
            cover_image=optional_text(data.get("cover_image")),
            quantity=quantity,
            available_quantity=quantity,
            category_id=category_id,
        )
        BookRepo.add(book)
        BookRepo.commit()
        current_app.logger.info(f"[books] Created book id={book.id} quantity={quantity}")
        return book

    @staticmethod
    def update_book(book_id: int, data: dict):
        try:
            book = BookService.get_book(book_id, for_update=True)

            for key in ("title", "author"):
                if field(data, key) is not MISSING:
                    setattr(book, key, require_text(data, key))

            for key in OPTIONAL_TEXT_FIELDS:
                value = field(data, key)
                if value is not MISSING:
                    setattr(book, key, optional_text(value))

            year = field(data, "publication_year")
            if year is not MISSING:
                book.publication_year = optional_int(year, "publication_year")

            category_id = field(data, "category_id")
            if category_id is not MISSING:
                if category_id in (None, ""):
                    raise ValidationError("category_id is required")
                book.category_id = _existing_category_id(category_id)

            quantity = field(data, "quantity")
            if quantity is not MISSING:
                if quantity is None:
                    raise ValidationError("quantity is required")
                InventoryService.apply_resize(book, to_int(quantity, "quantity", minimum=1))

            BookRepo.commit()
        except Exception:
            BookRepo.rollback()
            raise
        return book

    @staticmethod
    def delete_book(book_id: int):
        book = BookService.get_book(book_id)
        # loan history of returned copies goes with the book; outstanding loans block the delete
        BorrowingRepo.delete_returned_for_book(book_id)
        if not BookRepo.delete_if_no_active_loans(book_id):
            BookRepo.rollback()
            current_app.logger.warning(f"[books] Refused delete of book id={book_id}: active borrowings")
            raise ConflictError("This book cannot be deleted because it has active borrowings")
        BookRepo.commit()
        db.session.expunge(book)
        current_app.logger.info(f"[books] Deleted book id={book_id}")
