from flask import Blueprint, current_app, jsonify
from flask_jwt_extended import jwt_required

from book_rental.tasks.overdue_check import run_overdue_check_job
from book_rental.utils.decorators import role_required

notif_bp = Blueprint("notifications", __name__)

@notif_bp.post("/run-overdue-check")
@jwt_required()
@role_required("admin")
def run_overdue_check():
    stats = run_overdue_check_job(current_app._get_current_object())
    return jsonify({"success": True, "message": "Overdue check finished", "data": stats})
