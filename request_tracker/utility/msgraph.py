import requests
from flask import current_app

_REQUIRED_KEYS = ("TENANT_ID", "CLIENT_ID", "CLIENT_SECRET")


def _graph_config():
    cfg = current_app.config
    missing = [k for k in _REQUIRED_KEYS if not cfg.get(k)]
    if missing:
        raise ValueError(f"Missing required environment variables for Microsoft Graph: {', '.join(missing)}")
    return cfg


def get_access_token():
    cfg = _graph_config()
    url = f"{cfg['AAD_ENDPOINT']}/{cfg['TENANT_ID']}/oauth2/v2.0/token"
    data = {
        "client_id": cfg["CLIENT_ID"],
        "scope": "https://graph.microsoft.com/.default",
        "client_secret": cfg["CLIENT_SECRET"],
        "grant_type": "client_credentials",
    }
    resp = requests.post(url, data=data, timeout=cfg.get("GRAPH_TIMEOUT_SECONDS", 20))
    resp.raise_for_status()
    return resp.json()["access_token"]


def send_mail(to_email, subject, body):
    cfg = current_app.config
    if not cfg.get("MAIL_ENABLED", True):
        current_app.logger.info("Mail disabled; skipped %r to %s", subject, to_email)
        return False

    token = get_access_token()
    url = f"{cfg['GRAPH_ENDPOINT']}/v1.0/users/{cfg['FROM_EMAIL']}/sendMail"
    headers = {
        "Authorization": f"Bearer {token}",
        "Content-Type": "application/json"
    }
    message = {
        "message": {
            "subject": subject,
            "body": {
                "contentType": "Text",
                "content": body
            },
            "toRecipients": [
                {"emailAddress": {"address": to_email}}
            ]
        }
    }
    resp = requests.post(url, headers=headers, json=message, timeout=cfg.get("GRAPH_TIMEOUT_SECONDS", 20))
    resp.raise_for_status()
    return resp.status_code == 202
