from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Any, Mapping

from .aggregation import (
    SupplySummaryEntry,
    TechnicalSummaryEntry,
    aggregate_supplies,
    aggregate_technical,
    is_record_collection,
)
from .settings import DEFAULT_SETTINGS, TrackerSettings
from .validation import REQUEST_TYPES

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class DashboardInsights:
    """Ranked summaries behind the dashboard cards; rebuilt on every load."""

    supplies_top_by_location: list[SupplySummaryEntry] = field(default_factory=list)
    supplies_all_by_location: list[SupplySummaryEntry] = field(default_factory=list)
    it_maintenance_top_by_location: list[TechnicalSummaryEntry] = field(default_factory=list)
    it_maintenance_all_by_location: list[TechnicalSummaryEntry] = field(default_factory=list)

    def to_dict(self) -> dict[str, Any]:
        return {
            "suppliesTopByLocation": [e.to_dict() for e in self.supplies_top_by_location],
            "suppliesAllByLocation": [e.to_dict() for e in self.supplies_all_by_location],
            "itMaintenanceTopByLocation": [e.to_dict() for e in self.it_maintenance_top_by_location],
            "itMaintenanceAllByLocation": [e.to_dict() for e in self.it_maintenance_all_by_location],
        }


def _records_for(records_by_type: Mapping[str, Any], request_type: str) -> list:
    records = records_by_type.get(request_type)
    if records is None:
        logger.warning("No %s records supplied to the dashboard; treating as empty.", request_type)
        return []
    if not is_record_collection(records):
        logger.warning(
            "Dashboard received %r for %s records; treating as empty.", type(records).__name__, request_type
        )
        return []
    return list(records)


def compose_insights(
    records_by_type: Mapping[str, Any] | None,
    top_n: int | None = None,
    settings: TrackerSettings = DEFAULT_SETTINGS,
) -> DashboardInsights:
    if not isinstance(records_by_type, Mapping):
        logger.warning("Dashboard received %r instead of a record mapping.", type(records_by_type).__name__)
        records_by_type = {}
    limit = settings.top_n if top_n is None else max(int(top_n), 0)

    by_type = {kind: _records_for(records_by_type, kind) for kind in REQUEST_TYPES}
    supplies = aggregate_supplies(by_type["supplies"], settings)
    technical = aggregate_technical(by_type["it"], by_type["maintenance"], settings)

    return DashboardInsights(
        supplies_top_by_location=supplies[:limit],
        supplies_all_by_location=supplies,
        it_maintenance_top_by_location=technical[:limit],
        it_maintenance_all_by_location=technical,
    )


__all__ = ["DashboardInsights", "compose_insights"]
