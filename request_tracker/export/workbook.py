from __future__ import annotations

from typing import Callable, Iterable, Sequence

from openpyxl import Workbook
from openpyxl.styles import Font, PatternFill
from openpyxl.utils import get_column_letter
from openpyxl.worksheet.worksheet import Worksheet

Row = dict[str, object]
ColumnDef = Sequence[tuple[str, str]]

HIGHLIGHT_FILL = PatternFill(start_color="FFF3CD", end_color="FFF3CD", fill_type="solid")


def _coerce_excel_value(value):
    if value is None:
        return ""
    return value


def fill_sheet(
    worksheet: Worksheet,
    rows: Iterable[Row],
    columns: ColumnDef,
    *,
    highlight_row_predicate: Callable[[Row], bool] | None = None,
) -> Worksheet:
    worksheet.append([header for header, _ in columns])
    for cell in worksheet[1]:
        cell.font = Font(bold=True)

    for row_number, data_row in enumerate(rows, start=2):
        worksheet.append([_coerce_excel_value(data_row.get(field)) for _, field in columns])
        if highlight_row_predicate is not None and highlight_row_predicate(data_row):
            for col_idx in range(1, len(columns) + 1):
                worksheet.cell(row=row_number, column=col_idx).fill = HIGHLIGHT_FILL

    worksheet.freeze_panes = "A2"
    if worksheet.max_row and worksheet.max_column:
        worksheet.auto_filter.ref = worksheet.dimensions

    max_row_for_width = min(worksheet.max_row, 200)
    for idx, column_cells in enumerate(worksheet.iter_cols(1, len(columns), 1, max_row_for_width), start=1):
        max_length = max((len(str(c.value)) for c in column_cells if c.value is not None), default=0)
        worksheet.column_dimensions[get_column_letter(idx)].width = min(max_length + 2, 60)

    return worksheet


def render_workbook(
    sheets: Sequence[tuple[str, Iterable[Row], ColumnDef]],
    *,
    highlight_row_predicate: Callable[[Row], bool] | None = None,
) -> Workbook:
    """Build one workbook with a sheet per ``(name, rows, columns)`` triple."""
    workbook = Workbook()
    workbook.remove(workbook.active)
    for sheet_name, rows, columns in sheets:
        worksheet = workbook.create_sheet(title=sheet_name[:31])
        fill_sheet(worksheet, rows, columns, highlight_row_predicate=highlight_row_predicate)
    if not workbook.worksheets:
        workbook.create_sheet(title="Empty")
    return workbook


__all__ = ["fill_sheet", "render_workbook"]
