"""Access control helpers: caller identity and the approver allowlist guard."""
from __future__ import annotations
from functools import wraps
from flask import abort, current_app
from flask_login import current_user

from ..utility.settings import get_settings


def caller_email() -> str:
    """Email of the logged-in caller, or '' when nobody is logged in."""
    if getattr(current_app, "login_manager", None) is None:
        return ""
    if not current_user.is_authenticated:  # type: ignore[attr-defined]
        return ""
    return (getattr(current_user, "email", "") or "").strip().lower()


def approver_required(fn):
    @wraps(fn)
    def wrapper(*args, **kwargs):
        email = caller_email()
        if not email:
            abort(401)
        if not get_settings().is_approver(email):
            current_app.logger.warning("Approval attempt by non-approver %s", email)
            abort(403)
        return fn(*args, **kwargs)
    return wrapper
