from __future__ import annotations
from werkzeug.security import generate_password_hash, check_password_hash
from flask_login import UserMixin
from .. import db
from . import now_ny_naive
from ..utility.settings import get_settings


class User(db.Model, UserMixin):
    """A signed-in employee. Approval rights come from the approver allowlist, not a role column."""

    __tablename__ = "users"

    user_id = db.Column(db.Integer, primary_key=True)
    email = db.Column(db.String(255), unique=True, nullable=False, index=True)
    name = db.Column(db.String(120))
    pw_hash = db.Column(db.String(255), nullable=False)
    is_active = db.Column(db.Boolean, nullable=False, default=True)
    created_at = db.Column(db.DateTime(timezone=False), default=now_ny_naive, nullable=False)
    last_login_at = db.Column(db.DateTime)

    @property
    def id(self):  # type: ignore[override]
        return self.user_id

    @property
    def is_approver(self) -> bool:
        return get_settings().is_approver(self.email)

    def set_password(self, password: str):
        self.pw_hash = generate_password_hash(password)

    def check_password(self, password: str) -> bool:
        return check_password_hash(self.pw_hash, password)

    def to_session_dict(self) -> dict:
        return {
            "authenticated": True,
            "email": self.email,
            "approver": self.is_approver,
        }
