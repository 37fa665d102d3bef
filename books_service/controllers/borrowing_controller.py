# books_service/controllers/borrowing_controller.py

from flask import Blueprint, jsonify, request

from books_service.services.borrowing_service import BorrowingService
from books_service.utils.decorators import current_identity, permission_required
from books_service.utils.payload import json_body
from books_service.utils.serializers import borrowing_to_dict

borrowing_bp = Blueprint("borrowings", __name__)


@borrowing_bp.get("")
@permission_required("borrowings:manage")
def all_borrowings():
    borrowings = BorrowingService.list_borrowings()
    return jsonify({"success": True, "data": [
        borrowing_to_dict(x, with_student=True) for x in borrowings
    ]})


@borrowing_bp.get("/student")
@permission_required("borrowings:own")
def my_borrowings():
    borrowings = BorrowingService.list_for_student(current_identity().id)
    return jsonify({"success": True, "data": [borrowing_to_dict(x) for x in borrowings]})


@borrowing_bp.post("")
@permission_required("borrowings:manage")
def create_borrowing():
    b = BorrowingService.create_borrowing(json_body(request))
    return jsonify({"success": True, "data": borrowing_to_dict(b, with_student=True)}), 201


@borrowing_bp.put("/<int:borrowing_id>/return")
@permission_required("borrowings:manage")
def return_borrowing(borrowing_id: int):
    b = BorrowingService.return_borrowing(borrowing_id)
    return jsonify({"success": True, "data": {
        "id": b.id,
        "return_date": b.return_date.isoformat(),
        "status": b.status,
    }})


@borrowing_bp.post("/mark-overdue")
@permission_required("borrowings:manage")
def mark_overdue():
    count = BorrowingService.mark_overdue()
    return jsonify({"success": True, "data": {"marked": count}})


@borrowing_bp.delete("/<int:borrowing_id>")
@permission_required("borrowings:manage")
def delete_borrowing(borrowing_id: int):
    restocked = BorrowingService.delete_borrowing(borrowing_id)
    return jsonify({"success": True, "message": "Borrowing deleted", "data": {"restocked": restocked}})
