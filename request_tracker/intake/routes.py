from flask import Blueprint, request, jsonify, abort, url_for, current_app

from ..auth.guards import caller_email
from ..utility import request_store
from ..utility.notifications import notify_approvers
from ..utility.settings import get_settings
from ..utility.status_transition import StatusTransitionHelper
from ..utility.validation import normalize_request_type, sanitize_string, validate_and_normalize

bp = Blueprint("intake", __name__, url_prefix="/requests")


def _request_type_or_404(raw: str) -> str:
    kind = normalize_request_type(raw)
    if kind is None:
        abort(404)
    return kind


def _payload() -> dict:
    if request.is_json:
        data = request.get_json(silent=True)
        return data if isinstance(data, dict) else {}
    return request.form.to_dict()


def _decision_url(kind: str, request_id: str, decision: str) -> str:
    return url_for(
        "approvals.decide",
        request_type=kind,
        request_id=request_id,
        decision=decision,
        _external=True,
    )


@bp.get("/api/<request_type>")
def list_requests(request_type: str):
    kind = _request_type_or_404(request_type)
    status_param = request.args.get("status") or ""
    statuses = StatusTransitionHelper.filter_valid_statuses(
        s.strip().lower() for s in status_param.split(",") if s.strip()
    )
    return jsonify({"requests": request_store.list_client_requests(kind, statuses or None)})


@bp.post("/api/<request_type>")
def submit_request(request_type: str):
    kind = _request_type_or_404(request_type)
    payload = _payload()
    settings = get_settings()

    result = validate_and_normalize(kind, payload, settings)
    if not result.valid:
        return jsonify(result.to_dict()), 400

    requester = caller_email() or sanitize_string(payload.get("requester")).lower()
    if not requester:
        return jsonify({"valid": False, "fields": {"requester": "Please sign in or enter your email."}, "warnings": result.warnings}), 400

    client_request_id = sanitize_string(payload.get("clientRequestId")) or sanitize_string(payload.get("id"))
    try:
        row = request_store.create_request(kind, result.value, requester, request_id=client_request_id or None)
    except ValueError as exc:
        # Same client id submitted twice (double click / resubmit); report instead of storing again.
        return jsonify({"valid": False, "fields": {"id": str(exc)}, "warnings": result.warnings}), 409

    record = request_store.build_client_request(kind, row, settings)
    notified = notify_approvers(
        record,
        approve_url=_decision_url(kind, row.request_id, "approve"),
        decline_url=_decision_url(kind, row.request_id, "decline"),
        settings=settings,
    )
    current_app.logger.info("Submitted %s request %s (%d approver mails)", kind, row.request_id, notified)
    return jsonify({"valid": True, "request": record, "warnings": result.warnings, "notified": notified}), 201
