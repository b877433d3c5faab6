# Overview: Flask API routes for pay settings; parses input and returns JSON responses.

from flask import Blueprint, request, jsonify, current_app, g

from ..decorators import require_auth
from ..repositories import RepositoryError
from ..services import settings_service
from ..validation import ValidationError


settings_bp = Blueprint("settings", __name__, url_prefix="/api/settings")


@settings_bp.get("")
@require_auth
def get_settings_route():
    settings = settings_service.get_settings(user_id=g.current_user.id)
    return jsonify({"settings": settings.to_dict()})


@settings_bp.patch("")
@require_auth
def update_settings_route():
    """
    Partial update of hourly_rate, overtime_rate, daily_limit, currency,
    user_name, expense_fund.

    A rate change re-prices every stored entry of the caller.
    """
    data = request.get_json(silent=True)

    try:
        settings = settings_service.update_settings(user_id=g.current_user.id, changes=data)
        return jsonify({"settings": settings.to_dict()})
    except ValidationError as e:
        return jsonify({"error": str(e)}), 400
    except RepositoryError:
        current_app.logger.exception("Failed to update settings")
        return jsonify({"error": "Internal server error"}), 500
