import requests

from request_tracker.utility import msgraph, notifications
from request_tracker.utility.settings import TrackerSettings

_REQUEST = {
    "id": "IT-9",
    "type": "it",
    "requester": "worker@example.com",
    "status": "approved",
    "approver": "manager@example.com",
    "details": "Issue: VPN\nLocation: Plant",
}


def test_approval_email_includes_decision_links():
    subject, body = notifications.approval_email(_REQUEST, "https://x/approve", "https://x/decline")

    assert subject == "IT request IT-9 needs approval"
    assert "worker@example.com submitted a it request." in body
    assert "Approve: https://x/approve" in body
    assert "Decline: https://x/decline" in body


def test_decision_email_names_reviewer():
    subject, body = notifications.decision_email(_REQUEST)

    assert subject == "Your it request IT-9 was approved"
    assert "Reviewed by: manager@example.com" in body


def test_notify_approvers_counts_successful_sends(app, monkeypatch):
    calls = []

    def flaky_send_mail(to_email, subject, body):
        calls.append(to_email)
        if to_email == "b@example.com":
            raise requests.HTTPError("429")
        return True

    monkeypatch.setattr(notifications, "send_mail", flaky_send_mail)
    settings = TrackerSettings(
        legacy_locations={},
        canonical_locations=("Plant",),
        approver_emails=frozenset({"b@example.com", "a@example.com"}),
    )

    with app.app_context():
        sent = notifications.notify_approvers(_REQUEST, "u1", "u2", settings)

    assert calls == ["a@example.com", "b@example.com"]
    assert sent == 1


def test_notify_requester_skips_blank_requester(app, sent_mail):
    with app.app_context():
        assert notifications.notify_requester(dict(_REQUEST, requester="  ")) is False
        assert notifications.notify_requester(_REQUEST) is True

    assert [m["to"] for m in sent_mail] == ["worker@example.com"]


def test_send_mail_is_skipped_when_disabled(app, monkeypatch):
    def unexpected_post(*args, **kwargs):
        raise AssertionError("Graph must not be called")

    monkeypatch.setattr(msgraph.requests, "post", unexpected_post)

    with app.app_context():
        assert msgraph.send_mail("a@example.com", "s", "b") is False


def test_missing_graph_credentials_are_reported(app):
    app.config.update(MAIL_ENABLED=True, TENANT_ID=None, CLIENT_ID=None, CLIENT_SECRET=None)

    with app.app_context():
        assert notifications.notify_requester(_REQUEST) is False
