import click
from flask import current_app

from books_service.services.category_service import CategoryService


def register_cli(app):
    @app.cli.command("seed-categories")
    def seed_categories():
        """Create the default book categories that are missing."""
        created = CategoryService.seed_defaults()
        current_app.logger.info(f"[cli] Seeded {created} default categories")
        click.echo(f"Created {created} categories")
