from sqlalchemy import delete, exists

from books_service.extensions import db
from books_service.models.book import Book
from books_service.models.category import Category


class CategoryRepo:
    @staticmethod
    def list_all():
        return Category.query.order_by(Category.name.asc()).all()

    @staticmethod
    def get(category_id: int):
        return db.session.get(Category, category_id)

    @staticmethod
    def get_by_name(name: str, exclude_id: int = None):
        q = Category.query.filter(Category.name == name)
        if exclude_id is not None:
            q = q.filter(Category.id != exclude_id)
        return q.first()

    @staticmethod
    def add(category: Category):
        db.session.add(category)
        db.session.flush()
        return category

    @staticmethod
    def delete_if_unreferenced(category_id: int) -> bool:
        result = db.session.execute(
            delete(Category)
            .where(
                Category.id == category_id,
                ~exists().where(Book.category_id == category_id),
            )
            .execution_options(synchronize_session=False)
        )
        return result.rowcount == 1
