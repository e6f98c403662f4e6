"""Excel export of the dashboard summaries."""

from __future__ import annotations

from openpyxl import Workbook

from ..utility.insights import DashboardInsights
from .workbook import render_workbook

SUPPLY_EXPORT_COLUMNS: tuple[tuple[str, str], ...] = (
    ("Location", "location"),
    ("Item", "item"),
    ("Catalog SKU", "catalogSku"),
    ("Quantity", "quantity"),
    ("Requests", "requestCount"),
)

TECHNICAL_EXPORT_COLUMNS: tuple[tuple[str, str], ...] = (
    ("Location", "location"),
    ("IT", "itCount"),
    ("Maintenance", "maintenanceCount"),
    ("Total", "count"),
)


def _unspecified_location(row: dict) -> bool:
    return not row.get("location")


def render_insights_workbook(insights: DashboardInsights) -> Workbook:
    payload = insights.to_dict()
    return render_workbook(
        [
            ("Supplies by Location", payload["suppliesAllByLocation"], SUPPLY_EXPORT_COLUMNS),
            ("IT & Maintenance", payload["itMaintenanceAllByLocation"], TECHNICAL_EXPORT_COLUMNS),
        ],
        highlight_row_predicate=_unspecified_location,
    )


__all__ = [
    "SUPPLY_EXPORT_COLUMNS",
    "TECHNICAL_EXPORT_COLUMNS",
    "render_insights_workbook",
    "render_workbook",
]
