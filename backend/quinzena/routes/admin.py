# Overview: Flask API routes for admin operations; parses input and returns JSON responses.

"""
Admin Routes

SECURITY: every route requires an authenticated admin.
- The default administrator cannot be deleted, demoted or deactivated.
- Exports never include password hashes.
"""

from flask import Blueprint, request, jsonify, current_app

from ..decorators import require_auth, require_admin
from ..models import ROLE_USER
from ..repositories import RepositoryError
from ..services import auth_service
from ..services import export_service
from ..services import session_service
from ..services.auth_service import (
    AuthError,
    PasswordValidationError,
    ProtectedUserError,
    UserNotFoundError,
    UsernameTakenError,
)


admin_bp = Blueprint("admin", __name__, url_prefix="/api/admin")


@admin_bp.get("/users")
@require_auth
@require_admin
def list_users_route():
    return jsonify({"users": [u.to_dict() for u in auth_service.list_users()]})


@admin_bp.post("/users")
@require_auth
@require_admin
def create_user_route():
    """
    Create a user account.

    Body: {"username": str, "name": str, "password": str, "role": "admin"|"user"}
    The new user must change the password on first login.
    """
    data = request.get_json(silent=True) or {}

    try:
        user = auth_service.create_user(
            username=data.get("username"),
            password=data.get("password"),
            name=data.get("name"),
            role=data.get("role") or ROLE_USER,
        )
        return jsonify({"user": user.to_dict()}), 201
    except UsernameTakenError as e:
        return jsonify({"error": str(e)}), 409
    except PasswordValidationError as e:
        return jsonify({"error": str(e)}), 400
    except AuthError as e:
        return jsonify({"error": str(e)}), 400


@admin_bp.patch("/users/<int:user_id>")
@require_auth
@require_admin
def update_user_route(user_id: int):
    """
    Update name, role or is_active; {"reset_password": true} resets the
    password to the default and forces a change on next login.
    """
    data = request.get_json(silent=True) or {}

    try:
        if data.pop("reset_password", False):
            auth_service.reset_password(user_id)
            session_service.revoke_all_user_sessions(user_id)
        user = auth_service.update_user(user_id, data)
        if not user.is_active:
            session_service.revoke_all_user_sessions(user_id)
        return jsonify({"user": user.to_dict()})
    except ProtectedUserError as e:
        return jsonify({"error": str(e)}), 403
    except UserNotFoundError as e:
        return jsonify({"error": str(e)}), 404
    except AuthError as e:
        return jsonify({"error": str(e)}), 400


@admin_bp.delete("/users/<int:user_id>")
@require_auth
@require_admin
def delete_user_route(user_id: int):
    try:
        auth_service.delete_user(user_id)
        return jsonify({"message": "User deleted"})
    except ProtectedUserError as e:
        return jsonify({"error": str(e)}), 403
    except UserNotFoundError as e:
        return jsonify({"error": str(e)}), 404


@admin_bp.get("/export")
@require_auth
@require_admin
def export_route():
    """Database CSV bundle: {"files": {"db_users.csv": "...", ...}}."""
    try:
        return jsonify({"files": export_service.export_database()})
    except RepositoryError:
        current_app.logger.exception("Failed to export database")
        return jsonify({"error": "Internal server error"}), 500
