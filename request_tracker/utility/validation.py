"""Field validation and identity helpers for submitted requests.

Each request type has its own frozen field set; ``validate_and_normalize``
dispatches on the type tag and always returns a ``ValidationResult`` rather
than raising, so callers can render inline errors.
"""

from __future__ import annotations

import math
import re
from dataclasses import asdict, dataclass, field
from typing import Any, Mapping, Union

from .locations import normalize_location
from .settings import DEFAULT_SETTINGS, TrackerSettings

REQUEST_TYPES: tuple[str, ...] = ("supplies", "it", "maintenance")
URGENCY_LEVELS: tuple[str, ...] = ("low", "normal", "high", "urgent")
DEFAULT_URGENCY = "normal"

_LEADING_INT = re.compile(r"^\s*([+-]?\d+)")


def sanitize_string(value: object) -> str:
    if not isinstance(value, str):
        return ""
    return value.strip()


def parse_positive_integer(value: object) -> int:
    """Coerce ``value`` to a positive integer, returning 0 when that is not possible."""
    if isinstance(value, bool):
        return 0
    if isinstance(value, int):
        return value if value > 0 else 0
    if isinstance(value, float):
        if not math.isfinite(value):
            return 0
        floored = math.floor(value)
        return floored if floored > 0 else 0
    if isinstance(value, str):
        match = _LEADING_INT.match(value)
        if not match:
            return 0
        try:
            parsed = int(match.group(1))
        except ValueError:
            # Beyond the interpreter's digit limit for int().
            return 0
        return parsed if parsed > 0 else 0
    return 0


@dataclass(frozen=True)
class SupplyFields:
    description: str
    qty: int
    location: str = ""
    notes: str = ""
    catalog_sku: str = ""

    request_type = "supplies"

    def to_fields(self) -> dict[str, Any]:
        return {
            "description": self.description,
            "qty": self.qty,
            "location": self.location,
            "notes": self.notes,
            "catalogSku": self.catalog_sku,
        }


@dataclass(frozen=True)
class ITFields:
    issue: str
    location: str = ""
    device: str = ""
    urgency: str = DEFAULT_URGENCY

    request_type = "it"

    def to_fields(self) -> dict[str, Any]:
        return asdict(self)


@dataclass(frozen=True)
class MaintenanceFields:
    issue: str
    location: str = ""
    urgency: str = DEFAULT_URGENCY
    access_notes: str = ""

    request_type = "maintenance"

    def to_fields(self) -> dict[str, Any]:
        return {
            "issue": self.issue,
            "location": self.location,
            "urgency": self.urgency,
            "accessNotes": self.access_notes,
        }


RequestFields = Union[SupplyFields, ITFields, MaintenanceFields]


@dataclass(frozen=True)
class ValidationResult:
    valid: bool
    value: RequestFields | None = None
    fields: dict[str, str] = field(default_factory=dict)
    warnings: dict[str, str] = field(default_factory=dict)

    def to_dict(self) -> dict[str, Any]:
        return {
            "valid": self.valid,
            "value": self.value.to_fields() if self.value is not None else None,
            "fields": dict(self.fields),
            "warnings": dict(self.warnings),
        }


def _location_and_warnings(raw: Mapping[str, Any], settings: TrackerSettings) -> tuple[str, dict[str, str]]:
    location = normalize_location(raw.get("location"), settings)
    warnings: dict[str, str] = {}
    if not location:
        warnings["location"] = "No location selected; the request will be filed as unspecified."
    return location, warnings


def _urgency(raw: Mapping[str, Any], errors: dict[str, str]) -> str:
    urgency = sanitize_string(raw.get("urgency")).lower()
    if not urgency:
        return DEFAULT_URGENCY
    if urgency not in URGENCY_LEVELS:
        errors["urgency"] = f"Urgency must be one of: {', '.join(URGENCY_LEVELS)}."
    return urgency


def _validate_supplies(raw: Mapping[str, Any], settings: TrackerSettings) -> ValidationResult:
    errors: dict[str, str] = {}
    description = sanitize_string(raw.get("description"))
    if not description:
        errors["description"] = "Please describe the item you need."
    qty = parse_positive_integer(raw.get("qty"))
    if qty <= 0:
        errors["qty"] = "Quantity must be a whole number of at least 1."
    location, warnings = _location_and_warnings(raw, settings)
    if errors:
        return ValidationResult(valid=False, fields=errors, warnings=warnings)
    return ValidationResult(
        valid=True,
        value=SupplyFields(
            description=description,
            qty=qty,
            location=location,
            notes=sanitize_string(raw.get("notes")),
            catalog_sku=sanitize_string(raw.get("catalogSku")),
        ),
        warnings=warnings,
    )


def _validate_it(raw: Mapping[str, Any], settings: TrackerSettings) -> ValidationResult:
    errors: dict[str, str] = {}
    issue = sanitize_string(raw.get("issue")) or sanitize_string(raw.get("description"))
    if not issue:
        errors["issue"] = "Please describe the problem."
    urgency = _urgency(raw, errors)
    location, warnings = _location_and_warnings(raw, settings)
    if errors:
        return ValidationResult(valid=False, fields=errors, warnings=warnings)
    return ValidationResult(
        valid=True,
        value=ITFields(
            issue=issue,
            location=location,
            device=sanitize_string(raw.get("device")),
            urgency=urgency,
        ),
        warnings=warnings,
    )


def _validate_maintenance(raw: Mapping[str, Any], settings: TrackerSettings) -> ValidationResult:
    errors: dict[str, str] = {}
    issue = sanitize_string(raw.get("issue")) or sanitize_string(raw.get("description"))
    if not issue:
        errors["issue"] = "Please describe the problem."
    urgency = _urgency(raw, errors)
    location, warnings = _location_and_warnings(raw, settings)
    if errors:
        return ValidationResult(valid=False, fields=errors, warnings=warnings)
    return ValidationResult(
        valid=True,
        value=MaintenanceFields(
            issue=issue,
            location=location,
            urgency=urgency,
            access_notes=sanitize_string(raw.get("accessNotes")),
        ),
        warnings=warnings,
    )


_VALIDATORS = {
    "supplies": _validate_supplies,
    "it": _validate_it,
    "maintenance": _validate_maintenance,
}


def normalize_request_type(value: object) -> str | None:
    text = sanitize_string(value).lower()
    return text if text in _VALIDATORS else None


def validate_and_normalize(
    request_type: object,
    raw_fields: object,
    settings: TrackerSettings = DEFAULT_SETTINGS,
) -> ValidationResult:
    kind = normalize_request_type(request_type)
    if kind is None:
        return ValidationResult(
            valid=False,
            fields={"requestType": f"Unknown request type; expected one of: {', '.join(REQUEST_TYPES)}."},
        )
    raw = raw_fields if isinstance(raw_fields, Mapping) else {}
    return _VALIDATORS[kind](raw, settings)


def identity_key(record: object) -> str | None:
    """Case-insensitive dedup key for a raw record, or None when it carries no id."""
    raw_id: object = None
    if isinstance(record, Mapping):
        raw_id = record.get("id")
    else:
        raw_id = getattr(record, "id", None)
    if raw_id is None:
        return None
    key = str(raw_id).strip().lower()
    return key or None


__all__ = [
    "DEFAULT_URGENCY",
    "ITFields",
    "MaintenanceFields",
    "REQUEST_TYPES",
    "RequestFields",
    "SupplyFields",
    "URGENCY_LEVELS",
    "ValidationResult",
    "identity_key",
    "normalize_request_type",
    "parse_positive_integer",
    "sanitize_string",
    "validate_and_normalize",
]
