from __future__ import annotations
from .. import db
from . import now_ny_naive
from sqlalchemy import Index


class RequestStatusLog(db.Model):
	"""Audit trail of status changes (approval clicks, manual updates).

	The request tables only hold the latest status (last write wins); this
	table keeps every transition that was applied.
	"""

	__tablename__ = "request_status_log"
	__table_args__ = (
		Index("IX_RequestStatusLog_Request", "request_type", "request_id"),
	)

	id = db.Column(db.BigInteger().with_variant(db.Integer, "sqlite"), primary_key=True, autoincrement=True)
	request_type = db.Column(db.String(20), nullable=False)
	request_id = db.Column(db.String(40), nullable=False)
	from_status = db.Column(db.String(20), nullable=True)
	to_status = db.Column(db.String(20), nullable=False)
	changed_by = db.Column(db.String(255), nullable=True)
	changed_at = db.Column(db.DateTime(timezone=False), nullable=False, default=now_ny_naive)
	note = db.Column(db.String(500), nullable=True)

	def to_dict(self) -> dict:
		return {
			"request_type": self.request_type,
			"request_id": self.request_id,
			"from_status": self.from_status,
			"to_status": self.to_status,
			"changed_by": self.changed_by,
			"changed_at": self.changed_at.isoformat() if self.changed_at else None,
			"note": self.note,
		}

	def __repr__(self):  # pragma: no cover - debug aid
		return (
			f"<RequestStatusLog {self.request_type}/{self.request_id}"
			f" {self.from_status}->{self.to_status} by={self.changed_by}>"
		)
