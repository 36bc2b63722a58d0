"""Template builders shared by the test modules."""

from __future__ import annotations

from typing import Dict, Iterable, List, Mapping

from openpyxl import Workbook
from openpyxl.worksheet.worksheet import Worksheet


def build_workbook(sheets: Mapping[str, Mapping[str, object]], content: str = "Sheet1") -> Workbook:
    """Create a workbook whose first sheet is ``content``; ``sheets`` maps title to {coordinate: value}."""

    wb = Workbook()
    wb.active.title = content
    for title, cells in sheets.items():
        ws = wb[title] if title in wb.sheetnames else wb.create_sheet(title=title)
        for coordinate, value in cells.items():
            ws[coordinate] = value
    return wb


def column_values(ws: Worksheet, column: str = "A") -> List[object]:
    return [ws[f"{column}{row}"].value for row in range(1, ws.max_row + 1)]


def merged_coords(ws: Worksheet) -> List[str]:
    return sorted(rng.coord for rng in ws.merged_cells.ranges)


def row_values(ws: Worksheet, row: int, columns: Iterable[str] = "ABC") -> Dict[str, object]:
    return {column: ws[f"{column}{row}"].value for column in columns}
