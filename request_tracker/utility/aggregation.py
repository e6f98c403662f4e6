"""Location/item summaries feeding the dashboard.

Both aggregators take a fresh snapshot of raw records, build per-call
accumulators and return entries sorted by their headline number. Python's
sort is stable, so equal totals keep the order in which their group was first
seen.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Any, Iterable, Mapping

from .locations import normalize_location
from .settings import DEFAULT_SETTINGS, TrackerSettings
from .validation import identity_key, parse_positive_integer, sanitize_string

_EMPTY_FIELDS: Mapping[str, Any] = MappingProxyType({})


@dataclass(frozen=True)
class RawRequestRecord:
    """One row handed over by the request store."""

    fields: Mapping[str, Any] = field(default_factory=lambda: _EMPTY_FIELDS)
    id: str | None = None

    @classmethod
    def coerce(cls, obj: object) -> "RawRequestRecord":
        """Accept records or ``{"id": ..., "fields": {...}}`` dicts; anything else is an empty record."""
        if isinstance(obj, RawRequestRecord):
            return obj
        if not isinstance(obj, Mapping):
            return cls()
        fields = obj.get("fields")
        if not isinstance(fields, Mapping):
            fields = _EMPTY_FIELDS
        raw_id = obj.get("id")
        return cls(fields=fields, id=None if raw_id is None else str(raw_id))


@dataclass(frozen=True)
class SupplyGroupKey:
    location: str
    group_key: str


@dataclass
class SupplySummaryEntry:
    location: str
    item: str
    catalog_sku: str | None = None
    quantity: int = 0
    request_count: int = 0

    def to_dict(self) -> dict[str, Any]:
        return {
            "location": self.location,
            "item": self.item,
            "catalogSku": self.catalog_sku,
            "quantity": self.quantity,
            "requestCount": self.request_count,
        }


@dataclass
class TechnicalSummaryEntry:
    location: str
    it_count: int = 0
    maintenance_count: int = 0

    @property
    def count(self) -> int:
        return self.it_count + self.maintenance_count

    def to_dict(self) -> dict[str, Any]:
        return {
            "location": self.location,
            "itCount": self.it_count,
            "maintenanceCount": self.maintenance_count,
            "count": self.count,
        }


def is_record_collection(value: object) -> bool:
    """True for lists, tuples, generators and the like; strings and mappings do not count."""
    return isinstance(value, Iterable) and not isinstance(value, (str, bytes, Mapping))


def _records(records: Iterable[object] | None) -> list[RawRequestRecord]:
    if not is_record_collection(records):
        return []
    return [RawRequestRecord.coerce(r) for r in records]


def _label(value: object) -> str:
    # Spreadsheet-backed stores hand numeric cells back as numbers.
    if isinstance(value, int) and not isinstance(value, bool):
        return str(value)
    return sanitize_string(value)


def supply_group_key(fields: Mapping[str, Any], settings: TrackerSettings = DEFAULT_SETTINGS) -> SupplyGroupKey:
    location = normalize_location(fields.get("location"), settings)
    sku = _label(fields.get("catalogSku"))
    if sku:
        return SupplyGroupKey(location=location, group_key=sku)
    return SupplyGroupKey(location=location, group_key=_label(fields.get("description")).lower())


def aggregate_supplies(
    records: Iterable[object] | None,
    settings: TrackerSettings = DEFAULT_SETTINGS,
) -> list[SupplySummaryEntry]:
    groups: dict[SupplyGroupKey, SupplySummaryEntry] = {}
    seen: set[str] = set()

    for record in _records(records):
        key = identity_key(record)
        if key is not None:
            if key in seen:
                continue
            seen.add(key)

        fields = record.fields
        group = supply_group_key(fields, settings)
        entry = groups.get(group)
        if entry is None:
            sku = _label(fields.get("catalogSku"))
            entry = SupplySummaryEntry(
                location=group.location,
                item=_label(fields.get("description")),
                catalog_sku=sku or None,
            )
            groups[group] = entry
        entry.quantity += parse_positive_integer(fields.get("qty"))
        entry.request_count += 1

    return sorted(groups.values(), key=lambda e: e.quantity, reverse=True)


def aggregate_technical(
    it_records: Iterable[object] | None,
    maintenance_records: Iterable[object] | None,
    settings: TrackerSettings = DEFAULT_SETTINGS,
) -> list[TechnicalSummaryEntry]:
    # No identity dedup here; technical submissions are counted as delivered.
    by_location: dict[str, TechnicalSummaryEntry] = {}

    def _entry(record: RawRequestRecord) -> TechnicalSummaryEntry:
        location = normalize_location(record.fields.get("location"), settings)
        entry = by_location.get(location)
        if entry is None:
            entry = TechnicalSummaryEntry(location=location)
            by_location[location] = entry
        return entry

    for record in _records(it_records):
        _entry(record).it_count += 1
    for record in _records(maintenance_records):
        _entry(record).maintenance_count += 1

    return sorted(by_location.values(), key=lambda e: e.count, reverse=True)


__all__ = [
    "RawRequestRecord",
    "SupplyGroupKey",
    "SupplySummaryEntry",
    "TechnicalSummaryEntry",
    "aggregate_supplies",
    "aggregate_technical",
    "is_record_collection",
    "supply_group_key",
]
