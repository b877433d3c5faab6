# Overview: Flask API routes for the fortnight catalog; parses input and returns JSON responses.

from flask import Blueprint, request, jsonify, current_app

from ..decorators import require_auth
from ..services.period_service import catalog_for_app, current_period_index
from ..time_utils import today


periods_bp = Blueprint("periods", __name__, url_prefix="/api/periods")


@periods_bp.get("")
@require_auth
def list_periods_route():
    """
    Catalog of half-month periods plus the one containing today.

    Query: year (optional) restricts the list; current_* always refers to
    the full catalog.
    """
    periods = catalog_for_app(current_app)
    index = current_period_index(periods, today())

    year = request.args.get("year", type=int)
    listed = [p for p in periods if p.start_date.startswith(f"{year}-")] if year else periods

    return jsonify({
        "periods": [p.to_dict() for p in listed],
        "current_index": index,
        "current_period_id": periods[index].id,
    })
