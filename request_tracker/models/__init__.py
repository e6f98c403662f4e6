from __future__ import annotations
from datetime import datetime, timezone, timedelta

try:
    from zoneinfo import ZoneInfo, ZoneInfoNotFoundError
except ImportError:  # pragma: no cover - py<3.9
    ZoneInfo = None
    ZoneInfoNotFoundError = Exception

NY_TZ = None
if ZoneInfo is not None:
    try:
        NY_TZ = ZoneInfo("America/New_York")
    except ZoneInfoNotFoundError:
        NY_TZ = None

if NY_TZ is None:
    # Hosts without tzdata: fixed EST offset is close enough for request timestamps.
    NY_TZ = timezone(timedelta(hours=-5))


def now_ny() -> datetime:
    """Return current time in America/New_York as timezone-aware datetime."""
    return datetime.now(NY_TZ)

def now_ny_naive() -> datetime:
    """Return current time in America/New_York as naive datetime (no tzinfo) for DB storage."""
    return now_ny().replace(tzinfo=None)

__all__ = ["now_ny", "now_ny_naive", "NY_TZ"]

# Export model classes so callers can do `from request_tracker.models import SupplyRequest`.
from .auth import User  # noqa: E402
from .submissions import (  # noqa: E402
    SupplyRequest,
    ITRequest,
    MaintenanceRequest,
    REQUEST_MODELS,
)
from .log import RequestStatusLog  # noqa: E402

__all__.extend([
    "User",
    "SupplyRequest",
    "ITRequest",
    "MaintenanceRequest",
    "REQUEST_MODELS",
    "RequestStatusLog",
])
