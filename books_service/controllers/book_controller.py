# books_service/controllers/book_controller.py

from flask import Blueprint, jsonify, request

from books_service.services.book_service import BookService
from books_service.utils.decorators import permission_required
from books_service.utils.payload import json_body
from books_service.utils.serializers import book_to_dict

book_bp = Blueprint("books", __name__)


@book_bp.get("")
@permission_required("catalog:read")
def list_books():
    books = BookService.list_books(
        title=request.args.get("title"),
        author=request.args.get("author"),
        category_id=request.args.get("category_id"),
    )
    return jsonify({"success": True, "data": [book_to_dict(b) for b in books]})


@book_bp.get("/<int:book_id>")
@permission_required("catalog:read")
def get_book(book_id: int):
    b = BookService.get_book(book_id)
    return jsonify({"success": True, "data": book_to_dict(b)})


@book_bp.post("")
@permission_required("catalog:write")
def create_book():
    b = BookService.create_book(json_body(request))
    return jsonify({"success": True, "data": book_to_dict(b)}), 201


@book_bp.put("/<int:book_id>")
@permission_required("catalog:write")
def update_book(book_id: int):
    b = BookService.update_book(book_id, json_body(request))
    return jsonify({"success": True, "data": book_to_dict(b)})


@book_bp.delete("/<int:book_id>")
@permission_required("catalog:write")
def delete_book(book_id: int):
    BookService.delete_book(book_id)
    return jsonify({"success": True, "message": "Book deleted"})
