from flask import Blueprint, request, jsonify, abort, current_app
from flask_login import login_required

from ..auth.guards import approver_required, caller_email
from ..utility import request_store
from ..utility.notifications import notify_requester
from ..utility.status_transition import StatusTransitionError, StatusTransitionHelper
from ..utility.validation import normalize_request_type, sanitize_string

bp = Blueprint("approvals", __name__, url_prefix="/approvals")


def _apply(kind: str, request_id: str, status: str, params):
    existing = request_store.get_request(kind, request_id)
    if existing is None:
        abort(404)
    previous = existing.status
    eta = params.get("eta")
    try:
        row = request_store.update_status(
            kind,
            request_id,
            status,
            caller_email(),
            eta=eta if isinstance(eta, str) else None,
            note=sanitize_string(params.get("note")) or None,
        )
    except LookupError:
        abort(404)
    except StatusTransitionError as exc:
        return jsonify(
            {
                "ok": False,
                "id": request_id,
                "status": previous,
                "error": str(exc),
            }
        ), 409

    record = request_store.build_client_request(kind, row)
    # A re-clicked link leaves the status as it was; the requester already knows.
    if row.status != previous and row.status in ("approved", "declined"):
        notify_requester(record)
    return jsonify({"ok": True, "request": record})


# Email links are plain GETs; the approver must be signed in and allowlisted.
@bp.route("/<request_type>/<request_id>/<decision>", methods=["GET", "POST"])
@login_required
@approver_required
def decide(request_type: str, request_id: str, decision: str):
    kind = normalize_request_type(request_type)
    status = StatusTransitionHelper.status_for_decision(decision)
    if kind is None or status is None:
        abort(404)
    current_app.logger.info("%s clicked %s on %s %s", caller_email(), decision, kind, request_id)
    return _apply(kind, request_id, status, request.args)


@bp.post("/<request_type>/<request_id>/status")
@login_required
@approver_required
def set_status(request_type: str, request_id: str):
    kind = normalize_request_type(request_type)
    if kind is None:
        abort(404)
    payload = request.get_json(silent=True)
    if not isinstance(payload, dict):
        payload = {}
    status = StatusTransitionHelper.canonical_status(payload.get("status"))
    if status is None:
        return jsonify({"ok": False, "id": request_id, "error": "Invalid status value"}), 400
    return _apply(kind, request_id, status, payload)


@bp.get("/<request_type>/<request_id>/history")
@login_required
def history(request_type: str, request_id: str):
    kind = normalize_request_type(request_type)
    if kind is None:
        abort(404)
    entries = request_store.status_history(kind, request_id)
    return jsonify({"id": request_id, "history": [e.to_dict() for e in entries]})
