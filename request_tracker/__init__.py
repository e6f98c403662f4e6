from flask import Flask
from flask_sqlalchemy import SQLAlchemy
from flask_login import LoginManager
import os

from .config import config_map

# Global DB + Login manager instances
db = SQLAlchemy()
login_manager = LoginManager()
login_manager.login_view = "auth.login"


class PathPrefixMiddleware:
    """Adjust SCRIPT_NAME/PATH_INFO when the app is mounted under a URL prefix."""

    def __init__(self, app, prefix: str):
        self.app = app
        self.prefix = prefix

    def __call__(self, environ, start_response):
        if self.prefix:
            path_info = environ.get("PATH_INFO", "")
            if path_info.startswith(self.prefix):
                environ["SCRIPT_NAME"] = self.prefix
                stripped = path_info[len(self.prefix):]
                environ["PATH_INFO"] = stripped if stripped else "/"
        return self.app(environ, start_response)


def _normalized_prefix(raw: str | None) -> str:
    if not raw:
        return ""
    prefix = raw.strip()
    if not prefix:
        return ""
    if not prefix.startswith("/"):
        prefix = f"/{prefix}"
    prefix = prefix.rstrip("/")
    return prefix if prefix else ""


def create_app(env: str | None = None, url_prefix: str | None = None):
    env = env or os.getenv("FLASK_ENV", "development")
    url_prefix = _normalized_prefix(url_prefix or os.getenv("URL_PREFIX"))

    app = Flask(__name__)

    cfg_cls = config_map.get(env, config_map["default"])
    app.config.from_object(cfg_cls)
    if url_prefix:
        app.config["APPLICATION_ROOT"] = url_prefix

    # Init extensions
    db.init_app(app)
    login_manager.init_app(app)

    # Settings are frozen per app; helpers receive them explicitly.
    from .utility.settings import EXTENSION_KEY, TrackerSettings
    app.extensions[EXTENSION_KEY] = TrackerSettings.from_config(app.config)

    # Import models so that db.create_all sees them
    from .models.auth import User  # noqa: F401
    from .models.submissions import SupplyRequest, ITRequest, MaintenanceRequest  # noqa: F401
    from .models.log import RequestStatusLog  # noqa: F401

    # Register blueprints
    from .auth.routes import bp as auth_bp
    from .intake.routes import bp as intake_bp
    from .approvals.routes import bp as approvals_bp
    from .dashboard.routes import bp as dashboard_bp
    from .main.routes import bp as main_bp

    app.register_blueprint(auth_bp)
    app.register_blueprint(intake_bp)
    app.register_blueprint(approvals_bp)
    app.register_blueprint(dashboard_bp)
    app.register_blueprint(main_bp)

    if url_prefix:
        # WSGI middleware so a reverse proxy mount sees the correct SCRIPT_NAME
        app.wsgi_app = PathPrefixMiddleware(app.wsgi_app, url_prefix)  # type: ignore[attr-defined]

    # Bootstrap tables (no migrations yet)
    with app.app_context():
        db.create_all()

    app.logger.info("Request tracker started (env=%s, prefix=%r)", env, url_prefix)
    return app


@login_manager.user_loader
def load_user(user_id: str):
    from .models.auth import User
    return db.session.get(User, int(user_id))
