from flask import current_app
from sqlalchemy.exc import IntegrityError

from books_service.errors import ConflictError, NotFoundError, ValidationError
from books_service.extensions import db
from books_service.models.category import Category
from books_service.repositories.category_repo import CategoryRepo

DEFAULT_CATEGORIES = (
    "Roman",
    "Science-Fiction",
    "Informatique",
    "Histoire",
    "Mathématiques",
    "Physique",
    "Biologie",
    "Économie",
)


def _clean_name(data: dict) -> str:
    name = data.get("name")
    if not isinstance(name, str) or not name.strip():
        raise ValidationError("Category name is required")
    return name.strip()


class CategoryService:
    @staticmethod
    def list_categories():
        return CategoryRepo.list_all()

    @staticmethod
    def get_category(category_id: int):
        category = CategoryRepo.get(category_id)
        if not category:
            raise NotFoundError("Category not found")
        return category

    @staticmethod
    def create_category(data: dict):
        name = _clean_name(data)
        if CategoryRepo.get_by_name(name):
            raise ConflictError("A category with this name already exists")

        try:
            category = CategoryRepo.add(Category(name=name))
            db.session.commit()
        except IntegrityError:
            db.session.rollback()
            raise ConflictError("A category with this name already exists")

        current_app.logger.info(f"[categories] Created category id={category.id} name={name!r}")
        return category

    @staticmethod
    def update_category(category_id: int, data: dict):
        name = _clean_name(data)
        category = CategoryService.get_category(category_id)
        if CategoryRepo.get_by_name(name, exclude_id=category.id):
            raise ConflictError("A category with this name already exists")

        category.name = name
        try:
            db.session.commit()
        except IntegrityError:
            db.session.rollback()
            raise ConflictError("A category with this name already exists")
        return category

    @staticmethod
    def delete_category(category_id: int):
        category = CategoryService.get_category(category_id)
        if not CategoryRepo.delete_if_unreferenced(category_id):
            db.session.rollback()
            current_app.logger.warning(f"[categories] Refused delete of category id={category_id}: books attached")
            raise ConflictError("This category cannot be deleted because it contains books")
        db.session.commit()
        db.session.expunge(category)
        current_app.logger.info(f"[categories] Deleted category id={category_id}")

    @staticmethod
    def seed_defaults(names=DEFAULT_CATEGORIES) -> int:
        """Create any missing default category; returns how many were added."""
        created = 0
        for name in names:
            if CategoryRepo.get_by_name(name):
                continue
            CategoryRepo.add(Category(name=name))
            created += 1
        db.session.commit()
        return created
