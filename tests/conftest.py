from __future__ import annotations

from typing import Iterator

import pytest
from flask import Flask

from request_tracker import create_app, db
from request_tracker.models.auth import User


@pytest.fixture
def app() -> Iterator[Flask]:
    app = create_app("testing")
    yield app
    with app.app_context():
        db.session.remove()
        db.drop_all()


@pytest.fixture
def client(app: Flask):
    return app.test_client()


@pytest.fixture
def sent_mail(monkeypatch) -> list[dict]:
    """Capture outgoing mail instead of calling Microsoft Graph."""
    outbox: list[dict] = []

    def fake_send_mail(to_email, subject, body):
        outbox.append({"to": to_email, "subject": subject, "body": body})
        return True

    monkeypatch.setattr("request_tracker.utility.notifications.send_mail", fake_send_mail)
    return outbox


@pytest.fixture
def make_user(app: Flask):
    def _make(email: str, password: str = "pw", *, is_active: bool = True) -> None:
        with app.app_context():
            user = User(email=email, name=email.split("@")[0], is_active=is_active)
            user.set_password(password)
            db.session.add(user)
            db.session.commit()

    return _make


@pytest.fixture
def manager_client(make_user, client):
    make_user("manager@example.com")
    resp = client.post("/auth/login", json={"email": "manager@example.com", "password": "pw"})
    assert resp.status_code == 200
    return client
