from books_service.models.category import Category
from books_service.models.book import Book
from books_service.models.borrowing import Borrowing

__all__ = ["Category", "Book", "Borrowing"]
