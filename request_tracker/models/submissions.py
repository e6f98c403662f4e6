from __future__ import annotations

from typing import Any

from sqlalchemy import Index, text

from .. import db
from . import now_ny_naive


class RequestRowMixin:
    """Columns shared by every request table (one row per submission)."""

    request_type = ""
    id_prefix = ""

    request_id = db.Column(db.String(40), primary_key=True)
    ts = db.Column(db.DateTime(timezone=False), nullable=False, default=now_ny_naive)
    requester = db.Column(db.String(255), nullable=False, server_default=text("''"))
    status = db.Column(db.String(20), nullable=False, default="pending", server_default=text("'pending'"))
    approver = db.Column(db.String(255), nullable=True)
    decided_at = db.Column(db.DateTime(timezone=False), nullable=True)
    location = db.Column(db.String(80), nullable=True)

    def to_row(self) -> dict[str, Any]:
        """Flat row shape (what a spreadsheet export of the table would hold)."""
        row = {
            "id": self.request_id,
            "ts": self.ts.isoformat() if self.ts else None,
            "requester": self.requester or "",
            "status": self.status or "",
            "approver": self.approver or "",
        }
        row.update(self.to_fields())
        return row

    def to_fields(self) -> dict[str, Any]:  # pragma: no cover - overridden
        raise NotImplementedError


class SupplyRequest(RequestRowMixin, db.Model):
    __tablename__ = "supply_request"
    __table_args__ = (
        Index("IX_SupplyRequest_Status", "status", "ts"),
    )

    request_type = "supplies"
    id_prefix = "SUP"

    description = db.Column(db.String(500), nullable=False)
    qty = db.Column(db.Integer, nullable=False, default=1)
    notes = db.Column(db.Unicode(2000), nullable=True)
    catalog_sku = db.Column(db.String(50), nullable=True)
    eta = db.Column(db.String(40), nullable=True)  # free text from the approver, e.g. "Fri delivery"

    def to_fields(self) -> dict[str, Any]:
        return {
            "description": self.description or "",
            "qty": self.qty,
            "location": self.location or "",
            "notes": self.notes or "",
            "catalogSku": self.catalog_sku or "",
            "eta": self.eta or "",
        }

    def __repr__(self):  # pragma: no cover - debug aid
        return f"<SupplyRequest {self.request_id} {self.description!r} x{self.qty} status={self.status}>"


class ITRequest(RequestRowMixin, db.Model):
    __tablename__ = "it_request"
    __table_args__ = (
        Index("IX_ITRequest_Status", "status", "ts"),
    )

    request_type = "it"
    id_prefix = "IT"

    issue = db.Column(db.Unicode(2000), nullable=False)
    device = db.Column(db.String(120), nullable=True)
    urgency = db.Column(db.String(20), nullable=False, default="normal")

    def to_fields(self) -> dict[str, Any]:
        return {
            "issue": self.issue or "",
            "device": self.device or "",
            "location": self.location or "",
            "urgency": self.urgency or "",
        }

    def __repr__(self):  # pragma: no cover - debug aid
        return f"<ITRequest {self.request_id} location={self.location!r} status={self.status}>"


class MaintenanceRequest(RequestRowMixin, db.Model):
    __tablename__ = "maintenance_request"
    __table_args__ = (
        Index("IX_MaintenanceRequest_Status", "status", "ts"),
    )

    request_type = "maintenance"
    id_prefix = "MAIN"

    issue = db.Column(db.Unicode(2000), nullable=False)
    urgency = db.Column(db.String(20), nullable=False, default="normal")
    access_notes = db.Column(db.Unicode(1000), nullable=True)

    def to_fields(self) -> dict[str, Any]:
        return {
            "issue": self.issue or "",
            "location": self.location or "",
            "urgency": self.urgency or "",
            "accessNotes": self.access_notes or "",
        }

    def __repr__(self):  # pragma: no cover - debug aid
        return f"<MaintenanceRequest {self.request_id} location={self.location!r} status={self.status}>"


REQUEST_MODELS: dict[str, type[RequestRowMixin]] = {
    SupplyRequest.request_type: SupplyRequest,
    ITRequest.request_type: ITRequest,
    MaintenanceRequest.request_type: MaintenanceRequest,
}
