# Overview: Flask API routes for time entries; parses input and returns JSON responses.

"""
Timesheet Routes

Every route works on the caller's own entries (g.current_user).
Listing and export default to the current period when period_id is omitted.
"""

from flask import Blueprint, Response, request, jsonify, current_app, g

from ..decorators import require_auth
from ..repositories import RepositoryError
from ..services import entry_service
from ..services import export_service
from ..services.entry_service import EntryError, EntryNotFoundError
from ..services.period_service import PeriodNotFoundError, catalog_for_app, resolve_period
from ..time_utils import today
from ..validation import ConflictError, ValidationError


timesheet_bp = Blueprint("timesheet", __name__, url_prefix="/api/time-entries")


def _request_period():
    return resolve_period(catalog_for_app(current_app), request.args.get("period_id"), today())


@timesheet_bp.get("")
@require_auth
def list_entries_route():
    try:
        period = _request_period()
    except PeriodNotFoundError as e:
        return jsonify({"error": str(e)}), 404

    entries = entry_service.list_time_entries(user_id=g.current_user.id, period=period)
    return jsonify({
        "period": period.to_dict(),
        "entries": [e.to_dict() for e in entries],
    })


@timesheet_bp.post("")
@require_auth
def create_entry_route():
    """
    Record one shift.

    Body: date, start_time, lunch_start_time, lunch_end_time, end_time,
    optional dinner_start_time/dinner_end_time, description, is_holiday.
    is_holiday defaults to true on Saturdays and Sundays.
    """
    data = request.get_json(silent=True)

    try:
        entry = entry_service.create_time_entry(user_id=g.current_user.id, payload=data)
        return jsonify({"entry": entry.to_dict()}), 201
    except ConflictError as e:
        return jsonify({"error": str(e)}), 409
    except (ValidationError, EntryError) as e:
        return jsonify({"error": str(e)}), 400
    except RepositoryError:
        current_app.logger.exception("Failed to save time entry")
        return jsonify({"error": "Internal server error"}), 500


@timesheet_bp.delete("/<entry_id>")
@require_auth
def delete_entry_route(entry_id: str):
    try:
        entry_service.delete_time_entry(user_id=g.current_user.id, entry_id=entry_id)
        return jsonify({"message": "Time entry deleted"})
    except EntryNotFoundError as e:
        return jsonify({"error": str(e)}), 404
    except RepositoryError:
        current_app.logger.exception("Failed to delete time entry")
        return jsonify({"error": "Internal server error"}), 500


@timesheet_bp.get("/export.csv")
@require_auth
def export_entries_route():
    try:
        period = _request_period()
    except PeriodNotFoundError as e:
        return jsonify({"error": str(e)}), 404

    entries = entry_service.list_time_entries(user_id=g.current_user.id, period=period)
    if not entries:
        return jsonify({"error": "No data to export"}), 404

    return Response(
        export_service.time_entries_csv(entries),
        mimetype="text/csv",
        headers={"Content-Disposition": f"attachment; filename=horas_{period.id}.csv"},
    )
