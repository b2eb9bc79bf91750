from flask import Blueprint, request, jsonify
from flask_jwt_extended import jwt_required

from book_rental.errors import ServiceError
from book_rental.services.auth_service import AuthService
from book_rental.services.user_service import UserService
from book_rental.utils.decorators import current_identity

auth_bp = Blueprint("auth", __name__)

@auth_bp.post("/register")
def register():
    data = request.get_json(silent=True) or {}

    name = (data.get("name") or "").strip()
    username = (data.get("username") or "").strip()
    email = (data.get("email") or "").strip()
    password = (data.get("password") or "").strip()

    if not name or not username or not email or not password:
        return jsonify({"success": False, "message": "name/username/email/password are required"}), 400

    try:
        user = AuthService.register(
            name=name,
            username=username,
            email=email,
            password=password,
            role="user"  # admins come from the create-admin command
        )
        return jsonify({"success": True, "data": UserService.to_view(user)}), 201
    except ServiceError as e:
        return jsonify({"success": False, "message": str(e)}), e.status_code


@auth_bp.post("/login")
def login():
    data = request.get_json(silent=True) or {}
    try:
        token, user = AuthService.login(
            (data.get("username") or "").strip(),
            (data.get("password") or "").strip()
        )
        return jsonify({
            "success": True,
            "access_token": token,
            "user": UserService.to_view(user)
        })
    except ServiceError as e:
        return jsonify({"success": False, "message": str(e)}), 401


@auth_bp.get("/me")
@jwt_required()
def me():
    user_id, _role = current_identity()
    try:
        user = UserService.get_user_by_id(user_id)
    except ServiceError as e:
        return jsonify({"success": False, "message": str(e)}), e.status_code
    return jsonify({"success": True, "user": UserService.to_view(user)})
