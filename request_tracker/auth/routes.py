from flask import Blueprint, request, jsonify
from flask_login import login_user, logout_user, login_required, current_user
from .. import db
from ..models.auth import User
from ..models import now_ny_naive

bp = Blueprint("auth", __name__, url_prefix="/auth")


def _credentials() -> tuple[str, str]:
    data = request.get_json(silent=True) if request.is_json else request.form
    if not data or not hasattr(data, "get"):
        return "", ""
    email = str(data.get("email", "") or "").strip().lower()
    password = str(data.get("password", "") or "")
    return email, password


@bp.route("/login", methods=["GET", "POST"])
def login():
    if request.method == "GET":
        if current_user.is_authenticated:
            return jsonify(current_user.to_session_dict())
        return jsonify({"authenticated": False}), 401

    email, password = _credentials()
    if not email or not password:
        return jsonify({"error": "Email and password required"}), 400
    user = db.session.execute(db.select(User).filter_by(email=email)).scalar_one_or_none()
    if not user or not user.check_password(password):
        return jsonify({"error": "Invalid credentials"}), 401
    if not user.is_active:
        return jsonify({"error": "Your account is inactive."}), 403
    login_user(user)
    user.last_login_at = now_ny_naive()
    db.session.commit()
    return jsonify(user.to_session_dict())


@bp.route("/logout", methods=["POST"])
@login_required
def logout():
    logout_user()
    return jsonify({"authenticated": False})
