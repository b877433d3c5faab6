# Overview: Flask API routes for expenses and salary advances; parses input and returns JSON responses.

"""
Expense & Advance Routes

Expenses draw on the per-period expense fund; advances are deducted from
gross earnings. Both are append/delete only.

Expense listing filters (query):
- period_id: defaults to the current period
- category: exact match
- ag_number: case-insensitive substring
"""

from flask import Blueprint, request, jsonify, current_app, g

from ..decorators import require_auth
from ..domain import EXPENSE_CATEGORIES
from ..repositories import RepositoryError
from ..services import entry_service
from ..services.entry_service import EntryError, EntryNotFoundError
from ..services.period_service import PeriodNotFoundError, catalog_for_app, resolve_period
from ..time_utils import today
from ..validation import ValidationError


expenses_bp = Blueprint("expenses", __name__, url_prefix="/api")


def _request_period():
    return resolve_period(catalog_for_app(current_app), request.args.get("period_id"), today())


# =============================================================================
# EXPENSES
# =============================================================================


@expenses_bp.get("/expenses")
@require_auth
def list_expenses_route():
    try:
        period = _request_period()
    except PeriodNotFoundError as e:
        return jsonify({"error": str(e)}), 404

    expenses = entry_service.list_expenses(
        user_id=g.current_user.id,
        period=period,
        category=request.args.get("category") or None,
        ag_number=request.args.get("ag_number") or None,
    )
    return jsonify({
        "period": period.to_dict(),
        "expenses": [e.to_dict() for e in expenses],
        "categories": list(EXPENSE_CATEGORIES),
    })


@expenses_bp.post("/expenses")
@require_auth
def create_expense_route():
    data = request.get_json(silent=True)

    try:
        expense = entry_service.create_expense(user_id=g.current_user.id, payload=data)
        return jsonify({"expense": expense.to_dict()}), 201
    except (ValidationError, EntryError) as e:
        return jsonify({"error": str(e)}), 400
    except RepositoryError:
        current_app.logger.exception("Failed to save expense")
        return jsonify({"error": "Internal server error"}), 500


@expenses_bp.delete("/expenses/<expense_id>")
@require_auth
def delete_expense_route(expense_id: str):
    try:
        entry_service.delete_expense(user_id=g.current_user.id, expense_id=expense_id)
        return jsonify({"message": "Expense deleted"})
    except EntryNotFoundError as e:
        return jsonify({"error": str(e)}), 404
    except RepositoryError:
        current_app.logger.exception("Failed to delete expense")
        return jsonify({"error": "Internal server error"}), 500


# =============================================================================
# ADVANCES
# =============================================================================


@expenses_bp.get("/advances")
@require_auth
def list_advances_route():
    try:
        period = _request_period()
    except PeriodNotFoundError as e:
        return jsonify({"error": str(e)}), 404

    advances = entry_service.list_advances(user_id=g.current_user.id, period=period)
    return jsonify({
        "period": period.to_dict(),
        "advances": [a.to_dict() for a in advances],
    })


@expenses_bp.post("/advances")
@require_auth
def create_advance_route():
    data = request.get_json(silent=True)

    try:
        advance = entry_service.create_advance(user_id=g.current_user.id, payload=data)
        return jsonify({"advance": advance.to_dict()}), 201
    except (ValidationError, EntryError) as e:
        return jsonify({"error": str(e)}), 400
    except RepositoryError:
        current_app.logger.exception("Failed to save advance")
        return jsonify({"error": "Internal server error"}), 500


@expenses_bp.delete("/advances/<advance_id>")
@require_auth
def delete_advance_route(advance_id: str):
    try:
        entry_service.delete_advance(user_id=g.current_user.id, advance_id=advance_id)
        return jsonify({"message": "Advance deleted"})
    except EntryNotFoundError as e:
        return jsonify({"error": str(e)}), 404
    except RepositoryError:
        current_app.logger.exception("Failed to delete advance")
        return jsonify({"error": "Internal server error"}), 500
