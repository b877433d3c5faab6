# Overview: Flask API routes for auth operations; parses input and returns JSON responses.

"""
Authentication API routes

Accounts are created by administrators only (see routes/admin.py or
"flask users create"). A user flagged is_first_login must change the
password before using the app; the flag is returned on login and /me.
"""

from flask import Blueprint, request, jsonify, current_app, g

from ..services import auth_service
from ..services import session_service
from ..services import settings_service
from ..services.auth_service import AuthError, PasswordValidationError
from ..decorators import require_auth


auth_bp = Blueprint("auth", __name__, url_prefix="/api/auth")


@auth_bp.post("/login")
def login_route():
    """
    Authenticate user and create session token.

    Token must be included in Authorization header for protected routes.
    """
    try:
        data = request.get_json(silent=True) or {}
        username = data.get("username")
        password = data.get("password")

        if not all([username, password]):
            return jsonify({"error": "username and password required"}), 400

        user = auth_service.authenticate(username, password)
        if not user:
            return jsonify({"error": "Invalid credentials"}), 401

        session, token = session_service.create_session(user.id)
        settings_service.sync_user_name(user)

        return jsonify({
            "user": user.to_dict(),
            "token": token,
            "session": session.to_dict(),
            "must_change_password": user.is_first_login,
            "message": "Login successful"
        }), 200

    except Exception:
        current_app.logger.exception("Failed to login user")
        return jsonify({"error": "Internal server error"}), 500


@auth_bp.post("/logout")
@require_auth
def logout_route():
    """Revoke the session token of this request."""
    session_service.revoke_session(g.token)
    return jsonify({"message": "Logout successful"}), 200


@auth_bp.get("/me")
@require_auth
def me_route():
    user = g.current_user
    return jsonify({
        "user": user.to_dict(),
        "must_change_password": user.is_first_login,
    })


@auth_bp.post("/change-password")
@require_auth
def change_password_route():
    """
    Change the caller's password.

    Body: {"new_password": str, "confirm_password": str}
    Other sessions of the user are revoked; the current one stays valid.
    """
    data = request.get_json(silent=True) or {}
    new_password = data.get("new_password")
    confirm_password = data.get("confirm_password")

    if not new_password:
        return jsonify({"error": "new_password is required"}), 400
    if confirm_password is not None and confirm_password != new_password:
        return jsonify({"error": "Passwords do not match"}), 400

    try:
        user = auth_service.change_password(g.current_user.id, new_password)
        session_service.revoke_all_user_sessions(user.id, keep_token=g.token)
        return jsonify({"user": user.to_dict(), "message": "Password changed"})
    except PasswordValidationError as e:
        return jsonify({"error": str(e)}), 400
    except AuthError as e:
        return jsonify({"error": str(e)}), 400
