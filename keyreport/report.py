"""
RESPONSIBILITIES
- Bind a root data class to spreadsheet templates: build the key schema once,
  then validate, fill and persist templates per call.
- Generate blank templates with the key catalogue for template authors.
PROCESS OVERVIEW
1. Report(root_type) builds the KeySchema (construction errors surface here).
2. create_report() opens the template, validates it read-only, fills it,
   strips metadata and row-template sheets, then saves atomically.
3. The opened workbook is closed on every exit path; nothing is written on failure.
"""

from __future__ import annotations

import os
from contextlib import contextmanager
from pathlib import Path
from typing import Any, BinaryIO, Iterator, List, Union

from openpyxl import Workbook, load_workbook

from .catalogue import CatalogueRow, build_template, catalogue_rows
from .config import ReportSettings
from .filler import TemplateFiller
from .schema import KeySchema, build_schema
from .utils.log import get_logger
from .validator import TemplateValidator

logger = get_logger("report")

TemplateSource = Union[str, Path, BinaryIO]


def _tmp_path(path: Path) -> Path:
    return path.with_name(path.name + ".tmp")


def _atomic_save(workbook: Workbook, path: Path) -> None:
    path.parent.mkdir(parents=True, exist_ok=True)
    tmp_path = _tmp_path(path)
    try:
        workbook.save(tmp_path)
        os.replace(tmp_path, path)
    finally:
        if tmp_path.exists():
            tmp_path.unlink()


class Report:
    """Report generator for one root data class."""

    def __init__(self, root_type: type, settings: ReportSettings | None = None) -> None:
        self.settings = settings or ReportSettings()
        self.schema: KeySchema = build_schema(
            root_type,
            reserved_names=(self.settings.counter_key, self.settings.metadata_sheet),
        )
        self._validator = TemplateValidator(self.schema, self.settings)
        self._filler = TemplateFiller(self.schema, self.settings)

    @property
    def root_type(self) -> type:
        return self.schema.root_type

    def catalogue(self) -> List[CatalogueRow]:
        return catalogue_rows(self.schema, self.settings)

    def create_template(self, path: str | Path) -> Path:
        """Write a blank template for this report's keys."""

        target = Path(path)
        wb = build_template(self.schema, self.settings)
        try:
            _atomic_save(wb, target)
        finally:
            wb.close()
        logger.info("Template written to %s (%s keys)", target, len(self.schema))
        return target

    def render(self, data: Any, template: TemplateSource) -> Workbook:
        """Fill ``template`` with ``data`` and return the workbook without saving it."""

        wb = self._load(template)
        try:
            self._process(data, wb)
        except BaseException:
            wb.close()
            raise
        return wb

    def create_report(self, data: Any, template: TemplateSource, output: str | Path) -> Path:
        """Fill ``template`` with ``data`` and save the result to ``output``.

        Raises:
            FileNotFoundError: When the template path (or an image) does not exist.
            TemplateStructureError: When the template uses keys illegally.
            ValueFormatError: When a value does not match its key's data type.
        """

        target = Path(output)
        with self._open(template) as wb:
            self._process(data, wb)
            _atomic_save(wb, target)
        logger.info("Report written to %s", target)
        return target

    def _process(self, data: Any, wb: Workbook) -> None:
        if not isinstance(data, self.schema.root_type):
            raise TypeError(
                f"Report data must be {self.schema.root_type.__name__}, got {type(data).__name__}"
            )
        self._validator.validate(wb)
        self._filler.fill(wb, data)
        self._strip_key_sheets(wb)

    def _strip_key_sheets(self, wb: Workbook) -> None:
        for ws in list(wb.worksheets):
            if not self._filler.is_content_sheet(ws.title):
                wb.remove(ws)
        if wb.worksheets:
            wb.active = 0

    @staticmethod
    def _load(template: TemplateSource) -> Workbook:
        if isinstance(template, (str, Path)):
            path = Path(template)
            if not path.exists():
                raise FileNotFoundError(f"Template workbook not found: {path}")
            return load_workbook(path)
        return load_workbook(template)

    @contextmanager
    def _open(self, template: TemplateSource) -> Iterator[Workbook]:
        wb = self._load(template)
        try:
            yield wb
        finally:
            wb.close()


__all__ = ["Report", "TemplateSource"]
