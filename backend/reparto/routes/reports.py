from flask import Blueprint, jsonify, request

from ..decorators import json_errors
from ..services import reporting_service
from .sales import window_from_args


reports_bp = Blueprint("reports", __name__)


@reports_bp.get("/report")
@json_errors
def financial_report_route():
    """
    Query params:
    - range: today | week | month
    - startDate / endDate: YYYY-MM-DD, used when range is absent
    """
    range_keyword = (request.args.get("range") or "").strip()
    start_date = request.args.get("startDate")
    end_date = request.args.get("endDate")
    start, end = reporting_service.resolve_window(
        range_keyword=range_keyword,
        start_date=start_date,
        end_date=end_date,
    )
    report = reporting_service.financial_report(start, end)
    if range_keyword:
        report["range"] = range_keyword
    elif (start_date or "").strip() or (end_date or "").strip():
        report["range"] = "custom"
    else:
        report["range"] = "today"
    return jsonify(report), 200


@reports_bp.get("/consolidated-report")
@json_errors
def consolidated_report_route():
    start, end, user_id = window_from_args()
    return jsonify(reporting_service.consolidated_report(start, end, user_id)), 200
