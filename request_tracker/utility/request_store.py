"""Read/write access to the request tables.

This is the only module that touches the ORM for requests. The dashboard
reads snapshots through ``fetch_records``; approval clicks write through
``update_status`` (last write wins on the single row).
"""

from __future__ import annotations

import secrets
from typing import Any, Mapping

from flask import current_app
from sqlalchemy import select

from .. import db
from ..models import now_ny_naive
from ..models.log import RequestStatusLog
from ..models.submissions import REQUEST_MODELS, RequestRowMixin
from .aggregation import RawRequestRecord
from .locations import normalize_location
from .settings import TrackerSettings, get_settings
from .status_transition import StatusTransitionHelper
from .validation import (
    REQUEST_TYPES,
    ITFields,
    MaintenanceFields,
    RequestFields,
    SupplyFields,
    normalize_request_type,
)

_DETAIL_LABELS: Mapping[str, tuple[tuple[str, str], ...]] = {
    "supplies": (
        ("description", "Item"),
        ("qty", "Quantity"),
        ("catalogSku", "Catalog SKU"),
        ("location", "Location"),
        ("notes", "Notes"),
        ("eta", "ETA"),
    ),
    "it": (
        ("issue", "Issue"),
        ("device", "Device"),
        ("location", "Location"),
        ("urgency", "Urgency"),
    ),
    "maintenance": (
        ("issue", "Issue"),
        ("location", "Location"),
        ("urgency", "Urgency"),
        ("accessNotes", "Access notes"),
    ),
}


def model_for(request_type: object) -> type[RequestRowMixin]:
    kind = normalize_request_type(request_type)
    if kind is None:
        raise KeyError(f"Unknown request type: {request_type!r}")
    return REQUEST_MODELS[kind]


def _rows(request_type: str) -> list[RequestRowMixin]:
    model = model_for(request_type)
    stmt = select(model).order_by(model.ts, model.request_id)
    return list(db.session.execute(stmt).scalars().all())


def fetch_records(request_type: str) -> list[RawRequestRecord]:
    """All records of one type, oldest first, as raw records for the aggregators."""
    return [RawRequestRecord(fields=row.to_fields(), id=row.request_id) for row in _rows(request_type)]


def fetch_records_by_type() -> dict[str, list[RawRequestRecord]]:
    return {kind: fetch_records(kind) for kind in REQUEST_TYPES}


def _details(request_type: str, fields: Mapping[str, Any]) -> str:
    lines = []
    for key, label in _DETAIL_LABELS.get(request_type, ()):
        value = fields.get(key)
        if value in (None, ""):
            continue
        lines.append(f"{label}: {value}")
    return "\n".join(lines)


def build_client_request(
    request_type: str,
    row: Mapping[str, Any] | RequestRowMixin,
    settings: TrackerSettings | None = None,
) -> dict[str, Any]:
    """Shape a stored row for the browser: normalized fields plus a readable summary."""
    settings = settings or get_settings()
    kind = normalize_request_type(request_type) or str(request_type)
    if isinstance(row, RequestRowMixin):
        row = row.to_row()

    fields = {
        key: row.get(key)
        for key, _ in _DETAIL_LABELS.get(kind, ())
        if key in row
    }
    fields["location"] = normalize_location(row.get("location"), settings)

    return {
        "id": row.get("id"),
        "type": kind,
        "ts": row.get("ts"),
        "requester": row.get("requester") or "",
        "status": row.get("status") or "pending",
        "approver": row.get("approver") or "",
        "fields": fields,
        "details": _details(kind, fields),
    }


def list_client_requests(request_type: str, statuses: list[str] | None = None) -> list[dict[str, Any]]:
    settings = get_settings()
    out = []
    for row in reversed(_rows(request_type)):
        if statuses and (row.status or "pending") not in statuses:
            continue
        out.append(build_client_request(request_type, row, settings))
    return out


def generate_request_id(request_type: str) -> str:
    model = model_for(request_type)
    stamp = now_ny_naive().strftime("%Y%m%d%H%M%S")
    return f"{model.id_prefix}-{stamp}-{secrets.token_hex(3).upper()}"


def _apply_fields(row: RequestRowMixin, value: RequestFields) -> None:
    row.location = value.location or None
    if isinstance(value, SupplyFields):
        row.description = value.description
        row.qty = value.qty
        row.notes = value.notes or None
        row.catalog_sku = value.catalog_sku or None
    elif isinstance(value, ITFields):
        row.issue = value.issue
        row.device = value.device or None
        row.urgency = value.urgency
    elif isinstance(value, MaintenanceFields):
        row.issue = value.issue
        row.urgency = value.urgency
        row.access_notes = value.access_notes or None


def get_request(request_type: str, request_id: str) -> RequestRowMixin | None:
    model = model_for(request_type)
    row = db.session.get(model, request_id)
    if row is not None:
        return row
    # Ids typed by hand from an email may differ in case from the stored id.
    stmt = select(model).where(db.func.lower(model.request_id) == str(request_id).strip().lower())
    return db.session.execute(stmt).scalars().first()


def create_request(
    request_type: str,
    value: RequestFields,
    requester: str,
    request_id: str | None = None,
) -> RequestRowMixin:
    model = model_for(request_type)
    if value.request_type != model.request_type:
        raise ValueError(f"{type(value).__name__} cannot be stored as a {model.request_type} request")

    row_id = (request_id or "").strip() or generate_request_id(request_type)
    if get_request(request_type, row_id) is not None:
        raise ValueError(f"Request {row_id} already exists")

    row = model(request_id=row_id, requester=(requester or "").strip().lower(), status="pending")
    _apply_fields(row, value)
    db.session.add(row)
    db.session.add(
        RequestStatusLog(
            request_type=model.request_type,
            request_id=row_id,
            from_status=None,
            to_status="pending",
            changed_by=row.requester,
            note="submitted",
        )
    )
    try:
        db.session.commit()
    except Exception:
        db.session.rollback()
        current_app.logger.exception("Saving %s request %s failed", request_type, row_id)
        raise
    current_app.logger.info("Stored %s request %s for %s", request_type, row_id, row.requester)
    return row


def update_status(
    request_type: str,
    request_id: str,
    status: str,
    approver: str | None,
    *,
    eta: str | None = None,
    note: str | None = None,
) -> RequestRowMixin:
    """Apply a status change; raises LookupError or StatusTransitionError."""
    row = get_request(request_type, request_id)
    if row is None:
        raise LookupError(f"No {request_type} request with id {request_id}")

    previous = row.status
    decision = StatusTransitionHelper.require_transition(previous, status)
    row.status = decision.final_status
    row.approver = (approver or "").strip().lower() or row.approver
    if decision.final_status != previous and decision.final_status in ("approved", "declined"):
        row.decided_at = now_ny_naive()
    if eta is not None and hasattr(row, "eta"):
        row.eta = eta.strip() or None

    db.session.add(
        RequestStatusLog(
            request_type=row.request_type,
            request_id=row.request_id,
            from_status=previous,
            to_status=decision.final_status,
            changed_by=row.approver,
            note=(note or "")[:500] or None,
        )
    )
    try:
        db.session.commit()
    except Exception:
        db.session.rollback()
        current_app.logger.exception("Status update for %s %s failed", request_type, request_id)
        raise
    current_app.logger.info(
        "Request %s moved %s -> %s by %s", row.request_id, previous, row.status, row.approver or "unknown"
    )
    return row


def status_history(request_type: str, request_id: str) -> list[RequestStatusLog]:
    kind = model_for(request_type).request_type
    row = get_request(request_type, request_id)
    if row is not None:
        request_id = row.request_id
    stmt = (
        select(RequestStatusLog)
        .where(RequestStatusLog.request_type == kind)
        .where(RequestStatusLog.request_id == request_id)
        .order_by(RequestStatusLog.id)
    )
    return list(db.session.execute(stmt).scalars().all())
