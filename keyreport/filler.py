"""Recursive template filling.

RESPONSIBILITIES
- Resolve every placeholder of the content sheets against the root object.
- Expand complex keys into one copy of their row-template sheet per list
  element, filling each copy against that element with a 1-based counter.
- Drop rows of temporary keys without data when that is safe, blank otherwise.
PROCESS OVERVIEW
1. fill() collects placeholder cells of all content sheets, then resolves them
   in document order at counter 0.
2. A complex key opens rows above its placeholder, copies the row-template into
   them and resolves the copied placeholders in a child scope; the placeholder
   row is removed afterwards.
3. Single keys are converted by data type and written in place.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, List, Set, Tuple

from openpyxl import Workbook
from openpyxl.cell.cell import Cell

from .coerce import format_pattern, to_datetime, to_number, to_text
from .config import ReportSettings
from .errors import TemplateStructureError, ValueFormatError
from .grid import SheetGrid
from .images import insert_image
from .keys import DataType
from .schema import KeyBinding, KeySchema
from .utils.log import get_logger

logger = get_logger("filler")

SINGLE_ACCESS = "Incorrect use of the single key. There is no access to the data object in this sheet."
COMPLEX_ACCESS = "Incorrect use of the complex key. There is no access to the data object."


@dataclass(frozen=True, slots=True)
class Scope:
    """A data object, the sheet being filled for it and its list position.

    ``bound`` is shared by all scopes of one fill call and holds every cell that
    started out as a placeholder, filled or not.
    """

    data: Any
    grid: SheetGrid
    counter: int = 0
    bound: Set[Cell] = field(default_factory=set)


class TemplateFiller:
    """Fill a validated template workbook in place.

    The filler keeps no per-call state, so one instance may serve several
    workbooks at once as long as each workbook is owned by a single call.
    """

    def __init__(self, schema: KeySchema, settings: ReportSettings | None = None) -> None:
        self.schema = schema
        self.settings = settings or ReportSettings()
        self._names = frozenset(schema) | {self.settings.counter_key}

    def is_content_sheet(self, title: str) -> bool:
        return title != self.settings.metadata_sheet and not self.schema.is_complex(title)

    def fill(self, workbook: Workbook, data: Any) -> Workbook:
        """Resolve all placeholders of the content sheets against ``data``."""

        targets: List[Tuple[SheetGrid, Cell]] = []
        for ws in workbook.worksheets:
            if not self.is_content_sheet(ws.title):
                continue
            grid = SheetGrid(ws)
            targets.extend((grid, cell) for cell in grid.placeholder_cells(self._names))

        logger.info("Filling %s placeholders across content sheets", len(targets))
        bound = {cell for _, cell in targets}
        for grid, cell in targets:
            self._resolve(workbook, Scope(data, grid, 0, bound), cell)
        return workbook

    def _resolve(self, workbook: Workbook, scope: Scope, cell: Cell) -> None:
        if not scope.grid.is_live(cell):
            logger.debug("Skipping placeholder on a removed row: %s", cell.value)
            return

        key = cell.value
        if key == self.settings.counter_key:
            cell.value = scope.counter
            return

        binding = self.schema[key]
        if binding.is_complex:
            self._expand(workbook, scope, cell, binding)
            return

        if not binding.accepts(scope.data):
            raise TemplateStructureError(SINGLE_ACCESS)
        value = binding.read(scope.data)
        if value is None and binding.optional:
            self._delete_or_blank(scope, cell)
        else:
            self._write(scope.grid, cell, binding, value)

    def _expand(self, workbook: Workbook, scope: Scope, cell: Cell, binding: KeyBinding) -> None:
        if not binding.accepts(scope.data):
            raise TemplateStructureError(COMPLEX_ACCESS)
        if binding.name not in workbook.sheetnames:
            logger.warning("No row-template sheet for complex key %s; blanking %s", binding.name, cell.coordinate)
            cell.value = None
            return

        items = binding.read(scope.data)
        if items is not None and not isinstance(items, (list, tuple)):
            raise ValueFormatError(f"Complex key {binding.name} expects a list, got {type(items).__name__}")
        if not items:
            if binding.optional:
                self._delete_or_blank(scope, cell)
            else:
                cell.value = None
            return

        grid = scope.grid
        source = SheetGrid(workbook[binding.name])
        height = source.row_count
        for index, item in enumerate(items, start=1):
            grid.insert_rows(cell.row, height)
            top = cell.row - height
            grid.copy_rows_from(source, top)
            child = Scope(item, grid, index, scope.bound)
            block = grid.placeholder_cells(self._names, top, cell.row - 1)
            scope.bound.update(block)
            for placeholder in block:
                self._resolve(workbook, child, placeholder)
        logger.debug("Expanded %s into %s blocks of %s rows", binding.name, len(items), height)
        grid.delete_row(cell.row)

    def _row_deletable(self, scope: Scope, cell: Cell) -> bool:
        grid = scope.grid
        for region in grid.merged_ranges():
            if cell.coordinate not in region and region.min_row <= cell.row <= region.max_row:
                return False
        for other in grid.row_cells(cell.row):
            if other is cell:
                continue
            if other in scope.bound or (isinstance(other.value, str) and other.value in self._names):
                return False
        return True

    def _delete_or_blank(self, scope: Scope, cell: Cell) -> None:
        grid = scope.grid
        if self._row_deletable(scope, cell):
            logger.debug("Removing row %s of %s for temporary key %s", cell.row, grid.title, cell.value)
            grid.delete_row(cell.row)
        else:
            cell.value = None

    def _write(self, grid: SheetGrid, cell: Cell, binding: KeyBinding, value: Any) -> None:
        if value is None:
            cell.value = None
            return

        data_type = binding.data_type
        if data_type is DataType.TEXT:
            cell.value = to_text(value)
            # keep "=..." and "#N/A"-like text literal
            cell.data_type = "s"
        elif data_type is DataType.NUMERIC:
            cell.value = to_number(value)
        elif data_type in (DataType.DATE, DataType.TIME):
            moment = to_datetime(value, self.settings.tzinfo)
            if grid.has_generic_format(cell):
                cell.value = format_pattern(moment, binding.temporal_pattern or "")
                cell.data_type = "s"
            else:
                cell.value = moment
        elif data_type is DataType.IMAGE:
            cell.value = None
            insert_image(grid, cell, str(value))


def fill_template(
    schema: KeySchema,
    workbook: Workbook,
    data: Any,
    settings: ReportSettings | None = None,
) -> Workbook:
    """Convenience wrapper around :class:`TemplateFiller`."""

    return TemplateFiller(schema, settings).fill(workbook, data)


__all__ = ["Scope", "TemplateFiller", "fill_template", "SINGLE_ACCESS", "COMPLEX_ACCESS"]
