"""Key catalogue and blank template generation."""

from __future__ import annotations

from dataclasses import dataclass
from typing import List

from openpyxl import Workbook
from openpyxl.utils import get_column_letter
from openpyxl.worksheet.worksheet import Worksheet

from .config import ReportSettings
from .keys import DataType
from .schema import KeySchema

CATALOGUE_HEADERS = (
    "Key name",
    "Key type",
    "Data type",
    "Temporary",
    "Date format",
    "Time format",
    "Description",
)

COUNTER_DESCRIPTION = (
    "This is a universal key that can be used in complex sheets to count the element number."
)


@dataclass(frozen=True, slots=True)
class CatalogueRow:
    """One line of the metadata sheet."""

    name: str
    key_type: str = ""
    data_type: str = ""
    temporary: str = ""
    date_format: str = ""
    time_format: str = ""
    description: str = ""

    def as_list(self) -> List[str | None]:
        values = [
            self.name,
            self.key_type,
            self.data_type,
            self.temporary,
            self.date_format,
            self.time_format,
            self.description,
        ]
        return [value or None for value in values]


def catalogue_rows(schema: KeySchema, settings: ReportSettings | None = None) -> List[CatalogueRow]:
    """Describe every key of ``schema``, followed by the counter placeholder."""

    settings = settings or ReportSettings()
    rows: List[CatalogueRow] = []
    for name, binding in schema.items():
        rows.append(
            CatalogueRow(
                name=name,
                key_type=binding.key_type.value,
                data_type=binding.data_type.value,
                temporary=str(binding.optional).lower(),
                date_format=binding.date_format if binding.data_type is DataType.DATE else "",
                time_format=binding.time_format if binding.data_type is DataType.TIME else "",
                description=binding.description,
            )
        )
    rows.append(CatalogueRow(name=settings.counter_key, description=COUNTER_DESCRIPTION))
    return rows


def _autosize_columns(ws: Worksheet) -> None:
    for column_cells in ws.iter_cols(min_row=1, max_row=ws.max_row):
        longest = max(len(str(cell.value)) for cell in column_cells if cell.value is not None)
        ws.column_dimensions[get_column_letter(column_cells[0].column)].width = longest + 2


def write_catalogue(ws: Worksheet, schema: KeySchema, settings: ReportSettings | None = None) -> None:
    ws.append(list(CATALOGUE_HEADERS))
    for row in catalogue_rows(schema, settings):
        ws.append(row.as_list())
    _autosize_columns(ws)


def build_template(schema: KeySchema, settings: ReportSettings | None = None) -> Workbook:
    """Return a blank template: content sheet, one sheet per complex key, metadata sheet."""

    settings = settings or ReportSettings()
    wb = Workbook()
    wb.active.title = settings.content_sheet
    for name in schema:
        if schema.is_complex(name):
            wb.create_sheet(title=name)
    write_catalogue(wb.create_sheet(title=settings.metadata_sheet), schema, settings)
    return wb


__all__ = ["CatalogueRow", "catalogue_rows", "write_catalogue", "build_template", "CATALOGUE_HEADERS"]
