"""Worksheet primitives driven by the template filler.

RESPONSIBILITIES
- Wrap an openpyxl worksheet with the structural edits the filler needs.
- Keep merged ranges, row heights and image anchors aligned with the cells
  when rows are inserted or deleted (openpyxl only moves cells).
- Copy row blocks between sheets of the same workbook with styles and merges.
"""

from __future__ import annotations

from copy import copy, deepcopy
from io import BytesIO
from typing import Container, Iterable, List, Optional

from openpyxl.cell.cell import Cell, MergedCell
from openpyxl.drawing.image import Image
from openpyxl.drawing.spreadsheet_drawing import OneCellAnchor, TwoCellAnchor
from openpyxl.utils import get_column_letter
from openpyxl.utils.cell import coordinate_to_tuple
from openpyxl.worksheet.cell_range import CellRange
from openpyxl.worksheet.worksheet import Worksheet

DEFAULT_COLUMN_WIDTH = 8.43  # characters
DEFAULT_ROW_HEIGHT = 15.0  # points
CHARACTER_WIDTH_PX = 7.0017
POINTS_PER_PIXEL = 0.75

GENERIC_FORMATS = frozenset({"General", "@"})

Bounds = tuple[int, int, int, int]  # min_row, min_col, max_row, max_col


def _bounds(rng: CellRange) -> Bounds:
    return rng.min_row, rng.min_col, rng.max_row, rng.max_col


class SheetGrid:
    """Structural view over one worksheet."""

    def __init__(self, worksheet: Worksheet) -> None:
        self.ws = worksheet

    @property
    def title(self) -> str:
        return self.ws.title

    @property
    def row_count(self) -> int:
        """Number of rows from row 1 to the last used row; 0 for an empty sheet."""

        if not self.ws._cells:
            return 0
        return self.ws.max_row

    # ------------------------------------------------------------------ cells

    def placeholder_cells(
        self,
        names: Container[str],
        min_row: int = 1,
        max_row: Optional[int] = None,
    ) -> List[Cell]:
        """Return string cells whose value is one of ``names``, row-major."""

        last = self.row_count if max_row is None else max_row
        return [
            cell
            for cell in self._sorted_cells()
            if min_row <= cell.row <= last
            and not isinstance(cell, MergedCell)
            and isinstance(cell.value, str)
            and cell.value in names
        ]

    def _sorted_cells(self) -> List[Cell]:
        return [cell for _, cell in sorted(self.ws._cells.items())]

    def row_cells(self, row: int) -> List[Cell]:
        return [cell for (r, _), cell in self.ws._cells.items() if r == row]

    def is_live(self, cell: Cell) -> bool:
        """False once the cell's row has been deleted from the sheet."""

        return self.ws._cells.get((cell.row, cell.column)) is cell

    @staticmethod
    def has_generic_format(cell: Cell) -> bool:
        return (cell.number_format or "General") in GENERIC_FORMATS

    # ---------------------------------------------------------- merged ranges

    def merged_ranges(self) -> List[CellRange]:
        return list(self.ws.merged_cells.ranges)

    def merged_range_of(self, cell: Cell) -> Optional[CellRange]:
        for rng in self.ws.merged_cells.ranges:
            if cell.coordinate in rng:
                return rng
        return None

    def _merge(self, bounds: Bounds) -> None:
        min_row, min_col, max_row, max_col = bounds
        self.ws.merge_cells(start_row=min_row, start_column=min_col, end_row=max_row, end_column=max_col)

    def _unmerge(self, rng: CellRange) -> None:
        self.ws.unmerge_cells(rng.coord)

    # ------------------------------------------------------------- structure

    def insert_rows(self, at: int, amount: int) -> None:
        """Open ``amount`` blank rows above row ``at``, shifting the rest down."""

        if amount <= 0:
            return
        shifted: List[Bounds] = []
        grown: List[Bounds] = []
        for rng in self.merged_ranges():
            min_row, min_col, max_row, max_col = _bounds(rng)
            if min_row >= at:
                shifted.append((min_row + amount, min_col, max_row + amount, max_col))
            elif max_row >= at:
                grown.append((min_row, min_col, max_row + amount, max_col))
            else:
                continue
            self._unmerge(rng)

        heights = self._take_heights(at)
        self.ws.insert_rows(at, amount)
        self._put_heights(heights, amount)
        self._shift_images(at, amount)

        for bounds in shifted + grown:
            self._merge(bounds)

    def delete_row(self, row: int) -> None:
        """Remove ``row``; merged ranges touching it are dropped, later rows move up."""

        shifted: List[Bounds] = []
        for rng in self.merged_ranges():
            min_row, min_col, max_row, max_col = _bounds(rng)
            if min_row <= row <= max_row:
                self._unmerge(rng)
            elif min_row > row:
                shifted.append((min_row - 1, min_col, max_row - 1, max_col))
                self._unmerge(rng)

        heights = self._take_heights(row)
        heights.pop(row, None)
        self.ws.delete_rows(row, 1)
        self._put_heights(heights, -1)
        self._shift_images(row + 1, -1)

        for bounds in shifted:
            self._merge(bounds)

    def copy_rows_from(self, source: "SheetGrid", dest_top: int) -> int:
        """Copy every row of ``source`` into this sheet starting at ``dest_top``.

        Values, cell styles, row heights, merged ranges and images fully inside
        the source rows are copied. Returns the number of rows copied.
        """

        count = source.row_count
        if count == 0:
            return 0
        offset = dest_top - 1
        for src in source._sorted_cells():
            dest = self.ws.cell(row=src.row + offset, column=src.column)
            if isinstance(dest, MergedCell):
                continue
            if not isinstance(src, MergedCell):
                dest.value = src.value
            if src.has_style:
                dest._style = copy(src._style)
        for src_index in range(1, count + 1):
            dim = source.ws.row_dimensions.get(src_index)
            if dim is not None and dim.height is not None:
                self.ws.row_dimensions[src_index + offset].height = dim.height
        for rng in source.merged_ranges():
            min_row, min_col, max_row, max_col = _bounds(rng)
            if max_row <= count:
                self._merge((min_row + offset, min_col, max_row + offset, max_col))
        self._copy_images(source, count, offset)
        return count

    def _copy_images(self, source: "SheetGrid", count: int, offset: int) -> None:
        for image in getattr(source.ws, "_images", []):
            anchor = image.anchor
            if isinstance(anchor, str):
                row, col = coordinate_to_tuple(anchor)
                if row > count:
                    continue
                new_anchor = f"{get_column_letter(col)}{row + offset}"
            elif isinstance(anchor, (OneCellAnchor, TwoCellAnchor)):
                last = anchor.to.row if isinstance(anchor, TwoCellAnchor) else anchor._from.row
                if last + 1 > count:
                    continue
                new_anchor = deepcopy(anchor)
                new_anchor._from.row += offset
                if isinstance(new_anchor, TwoCellAnchor):
                    new_anchor.to.row += offset
            else:
                continue
            clone = Image(BytesIO(image._data()))
            clone.width, clone.height = image.width, image.height
            clone.anchor = new_anchor
            self.ws.add_image(clone)

    def _take_heights(self, from_row: int) -> dict[int, float]:
        dims = self.ws.row_dimensions
        taken: dict[int, float] = {}
        for index in [i for i in list(dims.keys()) if i >= from_row]:
            height = dims[index].height
            if height is not None:
                taken[index] = height
            del dims[index]
        return taken

    def _put_heights(self, heights: dict[int, float], delta: int) -> None:
        for index, height in heights.items():
            self.ws.row_dimensions[index + delta].height = height

    def _shift_images(self, from_row: int, delta: int) -> None:
        """Move image anchors at or below ``from_row`` (1-based) by ``delta`` rows."""

        for image in getattr(self.ws, "_images", []):
            anchor = image.anchor
            if isinstance(anchor, str):
                row, col = coordinate_to_tuple(anchor)
                if row >= from_row:
                    image.anchor = f"{get_column_letter(col)}{row + delta}"
            elif isinstance(anchor, (OneCellAnchor, TwoCellAnchor)):
                if anchor._from.row + 1 >= from_row:
                    anchor._from.row += delta
                    if isinstance(anchor, TwoCellAnchor):
                        anchor.to.row += delta

    # -------------------------------------------------------------- geometry

    def column_width_px(self, column: int) -> float:
        dim = self.ws.column_dimensions.get(get_column_letter(column))
        width = dim.width if dim is not None and dim.width else None
        if not width:
            width = self.ws.sheet_format.defaultColWidth or DEFAULT_COLUMN_WIDTH
        return float(width) * CHARACTER_WIDTH_PX

    def row_height_px(self, row: int) -> float:
        dim = self.ws.row_dimensions.get(row)
        height = dim.height if dim is not None and dim.height else None
        if not height:
            height = self.ws.sheet_format.defaultRowHeight or DEFAULT_ROW_HEIGHT
        return float(height) / POINTS_PER_PIXEL

    def set_row_height_px(self, row: int, pixels: float) -> None:
        self.ws.row_dimensions[row].height = pixels * POINTS_PER_PIXEL

    def span_width_px(self, columns: Iterable[int]) -> float:
        return sum(self.column_width_px(col) for col in columns)

    def span_height_px(self, rows: Iterable[int]) -> float:
        return sum(self.row_height_px(row) for row in rows)

    def add_image(self, image: Image, row: int, column: int) -> None:
        self.ws.add_image(image, f"{get_column_letter(column)}{row}")


__all__ = ["SheetGrid", "GENERIC_FORMATS"]
