"""Approval and decision emails.

A failed send is logged and reported to the caller; it never rolls back the
request that was already stored.
"""

from __future__ import annotations

from typing import Any, Mapping

import requests
from flask import current_app

from .msgraph import send_mail
from .settings import TrackerSettings, get_settings

_TYPE_LABELS = {
    "supplies": "Supplies",
    "it": "IT",
    "maintenance": "Maintenance",
}


def _label(client_request: Mapping[str, Any]) -> str:
    return _TYPE_LABELS.get(client_request.get("type"), "Request")


def approval_email(client_request: Mapping[str, Any], approve_url: str, decline_url: str) -> tuple[str, str]:
    label = _label(client_request)
    subject = f"{label} request {client_request.get('id')} needs approval"
    body = (
        f"{client_request.get('requester') or 'Someone'} submitted a {label.lower()} request.\n\n"
        f"{client_request.get('details') or ''}\n\n"
        f"Approve: {approve_url}\n"
        f"Decline: {decline_url}\n"
    )
    return subject, body


def decision_email(client_request: Mapping[str, Any]) -> tuple[str, str]:
    label = _label(client_request)
    status = client_request.get("status") or "updated"
    subject = f"Your {label.lower()} request {client_request.get('id')} was {status}"
    lines = [
        f"Your {label.lower()} request is now {status}.",
        "",
        client_request.get("details") or "",
    ]
    if client_request.get("approver"):
        lines.extend(["", f"Reviewed by: {client_request['approver']}"])
    return subject, "\n".join(lines)


def _send(to_email: str, subject: str, body: str) -> bool:
    try:
        return bool(send_mail(to_email=to_email, subject=subject, body=body))
    except (requests.RequestException, ValueError, KeyError) as exc:
        current_app.logger.warning("Notification to %s failed: %s", to_email, exc)
        return False


def notify_approvers(
    client_request: Mapping[str, Any],
    approve_url: str,
    decline_url: str,
    settings: TrackerSettings | None = None,
) -> int:
    """Email every allowlisted approver; returns how many sends succeeded."""
    settings = settings or get_settings()
    subject, body = approval_email(client_request, approve_url, decline_url)
    sent = 0
    for approver in sorted(settings.approver_emails):
        if _send(approver, subject, body):
            sent += 1
    current_app.logger.info(
        "Approval mail for %s sent to %d of %d approvers",
        client_request.get("id"),
        sent,
        len(settings.approver_emails),
    )
    return sent


def notify_requester(client_request: Mapping[str, Any]) -> bool:
    requester = (client_request.get("requester") or "").strip()
    if not requester:
        return False
    subject, body = decision_email(client_request)
    return _send(requester, subject, body)
