"""
Availability bookkeeping for books.

``Book.available_quantity`` must always equal ``quantity`` minus the number
of outstanding borrowings.  Every write to that column goes through this
module, and each write is a single guarded UPDATE so that a check and the
matching change can never be split by a concurrent request.  None of these
functions commit; the calling service owns the transaction.
"""
from sqlalchemy import case

from books_service.errors import ValidationError
from books_service.models.book import Book
from books_service.repositories.book_repo import BookRepo


class InventoryService:
    @staticmethod
    def available_after_resize(quantity: int, available_quantity: int, new_quantity: int) -> int:
        """Availability once ``quantity`` becomes ``new_quantity``.

        Copies already out stay out.  Shrinking below that count is allowed
        and leaves the book unborrowable (0) until enough copies come back.
        """
        borrowed = quantity - available_quantity
        return max(0, new_quantity - borrowed)

    @staticmethod
    def apply_resize(book: Book, new_quantity: int) -> None:
        book.available_quantity = InventoryService.available_after_resize(
            book.quantity, book.available_quantity, new_quantity
        )
        book.quantity = new_quantity

    @staticmethod
    def checkout(book_id: int) -> None:
        taken = BookRepo.update_available(
            book_id,
            Book.available_quantity > 0,
            value=Book.available_quantity - 1,
        )
        if not taken:
            raise ValidationError("Book is not available for borrowing")

    @staticmethod
    def checkin(book_id: int) -> None:
        # clamp to quantity so a stray extra return cannot push availability past the stock
        BookRepo.update_available(
            book_id,
            value=case(
                (Book.available_quantity < Book.quantity, Book.available_quantity + 1),
                else_=Book.quantity,
            ),
        )
