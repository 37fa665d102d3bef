# books_service/errors.py
from flask import jsonify
from werkzeug.exceptions import HTTPException


class LibraryError(Exception):
    status_code = 400

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class ValidationError(LibraryError):
    status_code = 400


class NotFoundError(LibraryError):
    status_code = 404


class UnknownReferenceError(NotFoundError):
    """A payload points at a related record that does not exist (client error, not a missing resource)."""
    status_code = 400


class ConflictError(LibraryError):
    status_code = 400


class AuthenticationError(LibraryError):
    status_code = 401


class AuthorizationError(LibraryError):
    status_code = 403


def json_error(message, code=400):
    return jsonify({"success": False, "message": message}), code


def register_error_handlers(app):
    @app.errorhandler(LibraryError)
    def _library_error(e: LibraryError):
        return json_error(e.message, e.status_code)

    @app.errorhandler(HTTPException)
    def _http_error(e: HTTPException):
        if e.code == 404:
            return json_error("Route not found", 404)
        return json_error(e.description or e.name, e.code)

    @app.errorhandler(Exception)
    def _unexpected_error(e: Exception):
        app.logger.exception(f"[errors] Unhandled error: {e}")
        return json_error("Something went wrong!", 500)


def register_jwt_handlers(jwt):
    @jwt.unauthorized_loader
    def _missing_token(reason):
        return json_error(f"Unauthorized: {reason}", 401)

    @jwt.invalid_token_loader
    def _invalid_token(reason):
        return json_error(f"Invalid token: {reason}", 401)

    @jwt.expired_token_loader
    def _expired_token(_header, _payload):
        return json_error("Token has expired", 401)
