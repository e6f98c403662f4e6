"""WSGI entry point for hosting behind a process manager (waitress-serve, IIS wfastcgi)."""

import os

from request_tracker import create_app

ENV = os.getenv("FLASK_ENV", "production")

app = create_app(ENV)
application = app

__all__ = ["app", "application"]
