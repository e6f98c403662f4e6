from flask import Flask

from request_tracker.dashboard import routes
from request_tracker.utility.aggregation import RawRequestRecord


def _records():
    return {
        "supplies": [
            RawRequestRecord(id="SUP-1", fields={"description": "Gloves", "qty": 2, "location": "Short North"}),
            RawRequestRecord(id="sup-1", fields={"description": "Gloves", "qty": 9, "location": "Short North"}),
            RawRequestRecord(id="SUP-2", fields={"description": "Soap", "qty": 1, "location": "Plant"}),
        ],
        "it": [RawRequestRecord(id="IT-1", fields={"issue": "VPN", "location": "Plant"})],
        "maintenance": [RawRequestRecord(id="MAIN-1", fields={"issue": "Door", "location": "Frantz Road"})],
    }


def _bare_app(monkeypatch):
    app = Flask(__name__)
    app.register_blueprint(routes.bp)
    monkeypatch.setattr(routes.request_store, "fetch_records_by_type", _records)
    return app


def test_parse_top_n_bounds():
    assert routes._parse_top_n(None) is None
    assert routes._parse_top_n("  ") is None
    assert routes._parse_top_n("abc") is None
    assert routes._parse_top_n("0") == 1
    assert routes._parse_top_n("3") == 3
    assert routes._parse_top_n("500") == 50


def test_insights_endpoint_without_login_manager(monkeypatch):
    app = _bare_app(monkeypatch)

    resp = app.test_client().get("/dashboard/api/insights?top=1")

    assert resp.status_code == 200
    body = resp.get_json()
    assert body["suppliesTopByLocation"] == [
        {"location": "Short N.", "item": "Gloves", "catalogSku": None, "quantity": 2, "requestCount": 1}
    ]
    assert len(body["suppliesAllByLocation"]) == 2
    assert [e["location"] for e in body["itMaintenanceAllByLocation"]] == ["Plant", "Frantz Rd."]
    assert "generatedAt" in body


def test_current_insights_uses_app_settings(monkeypatch):
    app = _bare_app(monkeypatch)
    app.config["DASHBOARD_TOP_N"] = 1

    with app.test_request_context("/dashboard/api/insights"):
        insights = routes._current_insights()

    assert len(insights.supplies_top_by_location) == 1
    assert len(insights.it_maintenance_top_by_location) == 1


def test_locations_endpoint_lists_canonical_labels(monkeypatch):
    app = _bare_app(monkeypatch)

    body = app.test_client().get("/dashboard/api/locations").get_json()

    assert body["locations"] == ["Plant", "Short N.", "Frantz Rd.", "Morse Rd."]
    assert body["legacy"]["South Dublin"] == "Frantz Rd."


def test_export_endpoint_returns_workbook(monkeypatch):
    app = _bare_app(monkeypatch)

    resp = app.test_client().get("/dashboard/api/export")

    assert resp.status_code == 200
    assert resp.mimetype == "application/vnd.openxmlformats-officedocument.spreadsheetml.sheet"
    assert "request_summary_" in resp.headers["Content-Disposition"]
    assert resp.data[:2] == b"PK"


def test_dashboard_requires_login_in_full_app(client):
    resp = client.get("/dashboard/api/insights")

    assert resp.status_code == 302
    assert "/auth/login" in resp.headers["Location"]


def test_dashboard_reads_stored_requests(manager_client, sent_mail):
    manager_client.post(
        "/requests/api/supplies",
        json={"description": "Tape", "qty": 5, "location": "Morse Road", "clientRequestId": "SUP-T"},
    )

    body = manager_client.get("/dashboard/api/insights").get_json()

    assert body["suppliesAllByLocation"][0]["location"] == "Morse Rd."
    assert body["suppliesAllByLocation"][0]["quantity"] == 5
