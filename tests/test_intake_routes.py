from request_tracker import db
from request_tracker.models import SupplyRequest


def test_submit_supplies_request_stores_and_notifies(app, client, sent_mail):
    resp = client.post(
        "/requests/api/supplies",
        json={
            "description": "  Gloves ",
            "qty": "4",
            "location": "Short North",
            "catalogSku": "GL-100",
            "requester": "Worker@Example.com",
            "clientRequestId": "SUP-CLIENT-1",
        },
    )

    assert resp.status_code == 201
    body = resp.get_json()
    assert body["valid"] is True
    assert body["request"]["id"] == "SUP-CLIENT-1"
    assert body["request"]["fields"]["location"] == "Short N."
    assert body["request"]["requester"] == "worker@example.com"

    with app.app_context():
        row = db.session.get(SupplyRequest, "SUP-CLIENT-1")
        assert row.qty == 4
        assert row.description == "Gloves"

    recipients = {m["to"] for m in sent_mail}
    assert recipients == {"manager@example.com", "rbrown@dublincleaners.com"}
    assert body["notified"] == 2
    assert "/approvals/supplies/SUP-CLIENT-1/approve" in sent_mail[0]["body"]
    assert "/approvals/supplies/SUP-CLIENT-1/decline" in sent_mail[0]["body"]


def test_submit_invalid_payload_returns_field_errors(client, sent_mail):
    resp = client.post("/requests/api/supplies", json={"description": "", "qty": "0"})

    assert resp.status_code == 400
    body = resp.get_json()
    assert body["valid"] is False
    assert set(body["fields"]) == {"description", "qty"}
    assert "location" in body["warnings"]
    assert sent_mail == []


def test_submit_requires_requester_when_anonymous(client, sent_mail):
    resp = client.post("/requests/api/maintenance", json={"issue": "Broken door"})

    assert resp.status_code == 400
    assert "requester" in resp.get_json()["fields"]


def test_submit_form_encoded_request(client, sent_mail):
    resp = client.post(
        "/requests/api/it",
        data={"issue": "Printer offline", "location": "Plant", "requester": "tech@example.com"},
    )

    assert resp.status_code == 201
    assert resp.get_json()["request"]["fields"]["urgency"] == "normal"


def test_resubmitting_same_client_id_is_rejected(client, sent_mail):
    payload = {"description": "Soap", "qty": 1, "requester": "a@example.com", "clientRequestId": "SUP-7"}
    assert client.post("/requests/api/supplies", json=payload).status_code == 201

    resp = client.post("/requests/api/supplies", json=dict(payload, clientRequestId="sup-7"))

    assert resp.status_code == 409
    assert "id" in resp.get_json()["fields"]


def test_unknown_request_type_is_404(client):
    assert client.get("/requests/api/payroll").status_code == 404
    assert client.post("/requests/api/payroll", json={}).status_code == 404


def test_list_requests_filters_by_status(client, sent_mail):
    client.post("/requests/api/it", json={"issue": "VPN", "requester": "a@example.com", "clientRequestId": "IT-1"})

    all_resp = client.get("/requests/api/it")
    approved_resp = client.get("/requests/api/it?status=approved")

    assert [r["id"] for r in all_resp.get_json()["requests"]] == ["IT-1"]
    assert approved_resp.get_json()["requests"] == []


def test_notification_failure_does_not_lose_request(app, client, monkeypatch):
    import requests

    def failing_send_mail(to_email, subject, body):
        raise requests.ConnectionError("graph unreachable")

    monkeypatch.setattr("request_tracker.utility.notifications.send_mail", failing_send_mail)

    resp = client.post(
        "/requests/api/supplies",
        json={"description": "Tape", "qty": 2, "requester": "a@example.com", "clientRequestId": "SUP-X"},
    )

    assert resp.status_code == 201
    assert resp.get_json()["notified"] == 0
    with app.app_context():
        assert db.session.get(SupplyRequest, "SUP-X") is not None
