from flask import Flask, jsonify

from books_service.config import Config
from books_service.errors import register_error_handlers, register_jwt_handlers
from books_service.extensions import db, jwt, migrate


def create_app(config_class=Config):
    app = Flask(__name__)
    app.config.from_object(config_class)
    app.logger.setLevel(app.config.get("LOG_LEVEL", "INFO"))

    # store handle is bound here and nowhere else
    db.init_app(app)
    migrate.init_app(app, db)
    jwt.init_app(app)
    register_jwt_handlers(jwt)
    register_error_handlers(app)

    from books_service import models  # noqa: F401  register tables on the metadata
    from books_service.db_objects import ensure_db_objects

    if app.config.get("AUTO_CREATE_SCHEMA"):
        with app.app_context():
            db.create_all()
            ensure_db_objects(app)

    from books_service.controllers.book_controller import book_bp
    from books_service.controllers.borrowing_controller import borrowing_bp
    from books_service.controllers.category_controller import category_bp
    app.register_blueprint(category_bp, url_prefix="/api/categories")
    app.register_blueprint(book_bp, url_prefix="/api/books")
    app.register_blueprint(borrowing_bp, url_prefix="/api/borrowings")

    from books_service.cli import register_cli
    register_cli(app)

    @app.get("/api/health")
    def health():
        return jsonify({"status": "OK", "message": "Books service is running"})

    return app


def dispose_store(app):
    """Release pooled connections of every engine bound to ``app``."""
    with app.app_context():
        db.session.remove()
        for engine in db.engines.values():
            engine.dispose()
