# books_service/controllers/category_controller.py

from flask import Blueprint, jsonify, request

from books_service.services.category_service import CategoryService
from books_service.utils.decorators import permission_required
from books_service.utils.payload import json_body
from books_service.utils.serializers import category_to_dict

category_bp = Blueprint("categories", __name__)


@category_bp.get("")
@permission_required("catalog:read")
def list_categories():
    categories = CategoryService.list_categories()
    return jsonify({"success": True, "data": [category_to_dict(c) for c in categories]})


@category_bp.get("/<int:category_id>")
@permission_required("catalog:read")
def get_category(category_id: int):
    c = CategoryService.get_category(category_id)
    return jsonify({"success": True, "data": category_to_dict(c)})


@category_bp.post("")
@permission_required("catalog:write")
def create_category():
    c = CategoryService.create_category(json_body(request))
    return jsonify({"success": True, "data": category_to_dict(c)}), 201


@category_bp.put("/<int:category_id>")
@permission_required("catalog:write")
def update_category(category_id: int):
    c = CategoryService.update_category(category_id, json_body(request))
    return jsonify({"success": True, "data": category_to_dict(c)})


@category_bp.delete("/<int:category_id>")
@permission_required("catalog:write")
def delete_category(category_id: int):
    CategoryService.delete_category(category_id)
    return jsonify({"success": True, "message": "Category deleted"})
