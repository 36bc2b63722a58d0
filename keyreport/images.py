"""Image placement for IMAGE keys.

The picture is anchored at the placeholder's top-left corner and scaled to the
cell, or to the merged range the cell belongs to. Pictures are only shrunk,
except that a single-row merged range grows its row to the picture's height.
"""

from __future__ import annotations

from io import BytesIO
from pathlib import Path
from typing import Tuple

from openpyxl.cell.cell import Cell
from openpyxl.drawing.image import Image

from .grid import SheetGrid
from .utils.log import get_logger

logger = get_logger("images")

Size = Tuple[float, float]


def fit_within(width: float, height: float, box_width: float, box_height: float) -> Size:
    """Scale ``width`` x ``height`` down to fit the box, keeping aspect ratio."""

    ratio = min(box_width / width, box_height / height)
    if ratio < 1:
        return width * ratio, height * ratio
    return width, height


def fit_to_width(width: float, height: float, box_width: float) -> Size:
    """Scale down to ``box_width`` when wider; height follows the ratio."""

    if width <= box_width:
        return width, height
    ratio = box_width / width
    return box_width, height * ratio


def load_image(path: str | Path) -> Image:
    source = Path(path)
    if not source.is_file():
        raise FileNotFoundError(f"Image not found: {source}")
    return Image(BytesIO(source.read_bytes()))


def insert_image(grid: SheetGrid, cell: Cell, path: str | Path) -> Image:
    """Anchor the image at ``cell`` and auto-size it. Returns the placed image."""

    image = load_image(path)
    grid.add_image(image, cell.row, cell.column)
    width, height = float(image.width), float(image.height)

    region = grid.merged_range_of(cell)
    if region is None:
        width, height = fit_within(
            width, height, grid.column_width_px(cell.column), grid.row_height_px(cell.row)
        )
    else:
        box_width = grid.span_width_px(range(region.min_col, region.max_col + 1))
        if region.min_row == region.max_row:
            width, height = fit_to_width(width, height, box_width)
            grid.set_row_height_px(cell.row, height)
        else:
            box_height = grid.span_height_px(range(region.min_row, region.max_row + 1))
            width, height = fit_within(width, height, box_width, box_height)

    image.width, image.height = width, height
    logger.debug("Placed image %s at %s!%s (%.0fx%.0f px)", path, grid.title, cell.coordinate, width, height)
    return image


__all__ = ["insert_image", "load_image", "fit_within", "fit_to_width"]
