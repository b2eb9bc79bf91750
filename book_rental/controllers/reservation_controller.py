from datetime import date

from flask import Blueprint, request, jsonify
from flask_jwt_extended import jwt_required

from book_rental.errors import ServiceError
from book_rental.services.reservation_service import ReservationService
from book_rental.utils.decorators import current_identity, role_required

reservation_bp = Blueprint("reservations", __name__)


def _json_error(message, code=400):
    return jsonify({"success": False, "message": message}), code


def _parse_date(value, field: str):
    if value in (None, ""):
        return None
    try:
        return date.fromisoformat(value)
    except (TypeError, ValueError):
        raise ServiceError(f"{field} must be an ISO date (YYYY-MM-DD)")


def _parse_int(value):
    # JSON true/false and floats like 2.7 are not integers
    if isinstance(value, bool) or not isinstance(value, (int, str)):
        raise ValueError(f"not an integer: {value!r}")
    return int(value)


@reservation_bp.post("/")
@jwt_required()
def create_reservation():
    caller_id, role = current_identity()
    data = request.get_json(silent=True) or {}
    try:
        book_external_id = _parse_int(data["book_external_id"])
        rental_days = _parse_int(data["rental_days"])
        user_id = _parse_int(data.get("user_id") or caller_id)
    except KeyError:
        return _json_error("book_external_id and rental_days are required")
    except (TypeError, ValueError):
        return _json_error("book_external_id, rental_days and user_id must be integers")

    if rental_days <= 0:
        return _json_error("rental_days must be positive")

    # only admins reserve on behalf of someone else
    if role != "admin" and user_id != caller_id:
        return _json_error("Forbidden", 403)

    try:
        start_date = _parse_date(data.get("start_date"), "start_date") or date.today()
        r = ReservationService.create_reservation(user_id, book_external_id, rental_days, start_date)
        return jsonify({"success": True, "data": ReservationService.to_view(r)}), 201
    except ServiceError as e:
        return _json_error(str(e), e.status_code)


@reservation_bp.post("/<int:reservation_id>/return")
@jwt_required()
def return_book(reservation_id: int):
    caller_id, role = current_identity()
    data = request.get_json(silent=True) or {}
    try:
        if role != "admin":
            existing = ReservationService.get_reservation_by_id(reservation_id)
            if existing["user_id"] != caller_id:
                return _json_error("Forbidden", 403)

        return_date = _parse_date(data.get("return_date"), "return_date")
        r = ReservationService.return_book(reservation_id, return_date)
        return jsonify({"success": True, "data": ReservationService.to_view(r)})
    except ServiceError as e:
        return _json_error(str(e), e.status_code)


@reservation_bp.get("/<int:reservation_id>")
@jwt_required()
def get_reservation(reservation_id: int):
    caller_id, role = current_identity()
    try:
        view = ReservationService.get_reservation_by_id(reservation_id)
    except ServiceError as e:
        return _json_error(str(e), e.status_code)

    if role != "admin" and view["user_id"] != caller_id:
        return _json_error("Forbidden", 403)
    return jsonify({"success": True, "data": view})


@reservation_bp.get("/my")
@jwt_required()
def my_reservations():
    caller_id, _role = current_identity()
    return jsonify({"success": True, "data": ReservationService.get_reservations_by_user_id(caller_id)})


@reservation_bp.get("/")
@jwt_required()
@role_required("admin")
def all_reservations():
    return jsonify({"success": True, "data": ReservationService.get_all_reservations()})


@reservation_bp.get("/user/<int:user_id>")
@jwt_required()
@role_required("admin")
def reservations_by_user(user_id: int):
    return jsonify({"success": True, "data": ReservationService.get_reservations_by_user_id(user_id)})


@reservation_bp.get("/active")
@jwt_required()
@role_required("admin")
def active_reservations():
    return jsonify({"success": True, "data": ReservationService.get_active_reservations()})


@reservation_bp.get("/overdue")
@jwt_required()
@role_required("admin")
def overdue_reservations():
    return jsonify({"success": True, "data": ReservationService.get_overdue_reservations()})
