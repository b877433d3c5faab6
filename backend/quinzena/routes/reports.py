# Overview: Flask API routes for period reports; parses input and returns JSON responses.

"""
Report Routes

- GET  /summary      totals, chart series and the period's records
- GET  /summary.csv  the summary as CSV
- POST /narrative    Gemini Markdown analysis of the period

All reports are scoped to the caller and one period (period_id, or the
current period when omitted).
"""

from flask import Blueprint, Response, request, jsonify, current_app, g

from ..decorators import require_auth
from ..services import export_service
from ..services import narrative_service
from ..services.period_service import PeriodNotFoundError, catalog_for_app, resolve_period
from ..services.report_service import load_period_report
from ..time_utils import today


reports_bp = Blueprint("reports", __name__, url_prefix="/api/reports")


def _load_report(period_id: str | None):
    period = resolve_period(catalog_for_app(current_app), period_id, today())
    return load_period_report(user_id=g.current_user.id, period=period)


@reports_bp.get("/summary")
@require_auth
def summary_route():
    try:
        report = _load_report(request.args.get("period_id"))
    except PeriodNotFoundError as e:
        return jsonify({"error": str(e)}), 404
    return jsonify(report.to_dict())


@reports_bp.get("/summary.csv")
@require_auth
def summary_csv_route():
    try:
        report = _load_report(request.args.get("period_id"))
    except PeriodNotFoundError as e:
        return jsonify({"error": str(e)}), 404

    return Response(
        export_service.period_report_csv(report, report.settings),
        mimetype="text/csv",
        headers={"Content-Disposition": f"attachment; filename=resumo_{report.period.id}.csv"},
    )


@reports_bp.post("/narrative")
@require_auth
def narrative_route():
    """
    Body: {"period_id": str} (optional).

    Always 200 once the period resolves: provider failures come back as a
    fallback message in "report".
    """
    data = request.get_json(silent=True) or {}
    period_id = data.get("period_id") or request.args.get("period_id")

    try:
        report = _load_report(period_id)
    except PeriodNotFoundError as e:
        return jsonify({"error": str(e)}), 404

    text = narrative_service.generate_report(report, report.settings)
    return jsonify({"period": report.period.to_dict(), "report": text})
