from openpyxl import load_workbook

from request_tracker.export import render_insights_workbook
from request_tracker.export.workbook import render_workbook
from request_tracker.utility.aggregation import SupplySummaryEntry, TechnicalSummaryEntry
from request_tracker.utility.insights import DashboardInsights


def _cell_fill_rgb(ws, row, column):
    return ws.cell(row=row, column=column).fill.start_color.rgb


def test_render_workbook_builds_one_sheet_per_entry():
    workbook = render_workbook(
        [
            ("First", [{"a": 1}], [("A", "a")]),
            ("Second", [], [("B", "b")]),
        ]
    )

    assert workbook.sheetnames == ["First", "Second"]
    first = workbook["First"]
    assert first["A1"].value == "A"
    assert first["A1"].font.bold is True
    assert first["A2"].value == 1
    assert first.freeze_panes == "A2"


def test_render_workbook_respects_highlight_predicate():
    columns = [("Item", "item"), ("Notes", "notes")]
    rows = [{"item": "A789", "notes": None}, {"item": "B1", "notes": "x"}]

    workbook = render_workbook(
        [("Items", rows, columns)],
        highlight_row_predicate=lambda row: row["item"] == "A789",
    )

    sheet = workbook["Items"]

    assert sheet["B2"].value == ""
    assert _cell_fill_rgb(sheet, 2, 1) == "00FFF3CD"
    assert _cell_fill_rgb(sheet, 2, 2) == "00FFF3CD"
    assert _cell_fill_rgb(sheet, 3, 1) == "00000000"


def test_render_workbook_without_sheets_still_has_one():
    workbook = render_workbook([])

    assert workbook.sheetnames == ["Empty"]


def test_insights_workbook_highlights_unspecified_locations(tmp_path):
    insights = DashboardInsights(
        supplies_all_by_location=[
            SupplySummaryEntry(location="Plant", item="Gloves", catalog_sku="GL-1", quantity=6, request_count=2),
            SupplySummaryEntry(location="", item="Soap", quantity=1, request_count=1),
        ],
        it_maintenance_all_by_location=[
            TechnicalSummaryEntry(location="Short N.", it_count=2, maintenance_count=1),
        ],
    )

    path = tmp_path / "summary.xlsx"
    render_insights_workbook(insights).save(path)
    workbook = load_workbook(path)

    assert workbook.sheetnames == ["Supplies by Location", "IT & Maintenance"]
    supplies = workbook["Supplies by Location"]
    assert [c.value for c in supplies[1]] == ["Location", "Item", "Catalog SKU", "Quantity", "Requests"]
    assert [c.value for c in supplies[2]] == ["Plant", "Gloves", "GL-1", 6, 2]
    assert _cell_fill_rgb(supplies, 2, 1) == "00000000"
    assert _cell_fill_rgb(supplies, 3, 1) == "00FFF3CD"

    technical = workbook["IT & Maintenance"]
    assert [c.value for c in technical[2]] == ["Short N.", 2, 1, 3]
