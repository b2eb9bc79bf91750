# book_rental/controllers/book_controller.py

from flask import Blueprint, request, jsonify
from flask_jwt_extended import jwt_required

from book_rental.errors import ServiceError
from book_rental.services.book_service import BookService
from book_rental.utils.decorators import role_required

book_bp = Blueprint("books", __name__)


@book_bp.get("/")
def list_books():
    books = BookService.list_books()
    return jsonify({"success": True, "data": [BookService.to_view(b) for b in books]})


@book_bp.get("/<int:external_id>")
def get_book(external_id: int):
    try:
        b = BookService.get_book_by_external_id(external_id)
        return jsonify({"success": True, "data": BookService.to_view(b)})
    except ServiceError as e:
        return jsonify({"success": False, "message": str(e)}), e.status_code


@book_bp.post("/")
@jwt_required()
@role_required("admin")
def create_book():
    data = request.get_json(silent=True) or {}
    try:
        b = BookService.create_book(data)
        return jsonify({"success": True, "data": BookService.to_view(b)}), 201
    except KeyError:
        return jsonify({"success": False, "message": "external_id and title are required"}), 400
    except ServiceError as e:
        return jsonify({"success": False, "message": str(e)}), e.status_code
    except (TypeError, ValueError):
        return jsonify({"success": False, "message": "invalid number in request"}), 400


@book_bp.put("/<int:external_id>")
@jwt_required()
@role_required("admin")
def update_book(external_id: int):
    data = request.get_json(silent=True) or {}
    try:
        b = BookService.update_book(external_id, data)
        return jsonify({"success": True, "data": BookService.to_view(b)})
    except ServiceError as e:
        return jsonify({"success": False, "message": str(e)}), e.status_code
    except (TypeError, ValueError):
        return jsonify({"success": False, "message": "invalid number in request"}), 400
