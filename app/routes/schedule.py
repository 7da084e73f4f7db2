from __future__ import annotations

import logging
from dataclasses import replace
from datetime import datetime

from flask import Blueprint, current_app, jsonify, request

from services.exceptions import ConfigurationError, LayoutError, SheetFetchError
from services.schedule.api import ScheduleService
from services.schedule.settings import ScheduleSettings

logger = logging.getLogger(__name__)

schedule_bp = Blueprint("schedule", __name__, url_prefix="/api/schedule")


def _service() -> ScheduleService:
    """One service per app; built on first use so the app starts without spreadsheet settings."""
    svc = current_app.extensions.get("schedule_service")
    if svc is None:
        settings = ScheduleSettings.from_config()
        use_mock = current_app.config.get("USE_MOCK_DATA_ON_FAILURE")
        if use_mock is not None:
            settings = replace(settings, use_mock_data_on_failure=bool(use_mock))
        svc = ScheduleService(settings)
        current_app.extensions["schedule_service"] = svc
    return svc


@schedule_bp.route("/reps", methods=["GET"])
def reps():
    raw = (request.args.get("date") or "").strip()
    target = None
    if raw:
        try:
            target = datetime.strptime(raw, "%Y-%m-%d").date()
        except ValueError:
            return jsonify({"error": f"Invalid date {raw!r}, expected YYYY-MM-DD"}), 400

    try:
        data = _service().fetch_sheet_data(target)
    except ConfigurationError as e:
        logger.error(f"Schedule service is not configured: {e}")
        return jsonify({"error": e.message}), 503
    except (SheetFetchError, LayoutError) as e:
        logger.error(f"Schedule fetch failed: {e}")
        return jsonify({"error": e.message}), 502
    return jsonify(data.to_dict())


@schedule_bp.route("/cell", methods=["GET"])
def cell():
    ref = (request.args.get("cell") or "").strip()
    sheet = (request.args.get("sheet") or "").strip()
    if not ref or not sheet:
        return jsonify({"error": "Both 'cell' and 'sheet' are required"}), 400

    try:
        value = _service().fetch_sheet_cell(ref, sheet)
    except ConfigurationError as e:
        return jsonify({"error": e.message}), 503
    except SheetFetchError as e:
        return jsonify({"error": e.message}), 502
    return jsonify({"cell": ref, "sheet": sheet, "value": value})


@schedule_bp.route("/time-slots", methods=["GET"])
def time_slots():
    return jsonify([{"id": s.id, "label": s.label} for s in _service().settings.time_slots])
