"""Structural checks run on a template before it is filled.

RESPONSIBILITIES
- Reject row-template sheets that reference their own complex key.
- Reject the counter placeholder outside row-template sheets.
- Reject cyclic chains of complex keys across row-template sheets.
PROCESS OVERVIEW
1. Every sheet is scanned once for placeholders (read-only).
2. Per-sheet checks run in workbook order.
3. A depth-first walk from every row-template sheet tracks the open path.
"""

from __future__ import annotations

from typing import Dict, FrozenSet, Set

from openpyxl import Workbook

from .config import ReportSettings
from .errors import TemplateStructureError
from .grid import SheetGrid
from .schema import KeySchema
from .utils.log import get_logger

logger = get_logger("validator")

SELF_REFERENCE = "The sheet contains a complex key that references the same sheet."
MISPLACED_COUNTER = "The counter key is located outside the complex sheets."
LOOPED_KEYS = "Complex keys have looped references."


class TemplateValidator:
    """Validate a workbook against a key schema without modifying it."""

    def __init__(self, schema: KeySchema, settings: ReportSettings | None = None) -> None:
        self.schema = schema
        self.settings = settings or ReportSettings()
        self._names = set(schema) | {self.settings.counter_key}

    def validate(self, workbook: Workbook) -> None:
        """Raise ``TemplateStructureError`` on the first violation found."""

        references: Dict[str, Set[str]] = {}
        for ws in workbook.worksheets:
            name = ws.title
            if name == self.settings.metadata_sheet:
                continue
            used = {cell.value for cell in SheetGrid(ws).placeholder_cells(self._names)}
            if self.schema.is_complex(name):
                if name in used:
                    raise TemplateStructureError(SELF_REFERENCE)
                references[name] = {key for key in used if self.schema.is_complex(key)}
            elif self.settings.counter_key in used:
                raise TemplateStructureError(MISPLACED_COUNTER)

        self._check_cycles(references)
        logger.info(
            "Template validated: %s sheets, %s row-template sheets",
            len(workbook.worksheets),
            len(references),
        )

    def _check_cycles(self, references: Dict[str, Set[str]]) -> None:
        finished: Set[str] = set()
        for key in sorted(self.schema.complex_keys):
            if key in references:
                self._walk(key, references, frozenset(), finished)

    def _walk(
        self,
        sheet: str,
        references: Dict[str, Set[str]],
        path: FrozenSet[str],
        finished: Set[str],
    ) -> None:
        # Only the open path counts as a cycle; a sheet shared by two branches is fine.
        if sheet in path:
            raise TemplateStructureError(LOOPED_KEYS)
        if sheet in finished:
            return
        path = path | {sheet}
        for child in sorted(references[sheet]):
            if child in references:
                self._walk(child, references, path, finished)
        finished.add(sheet)


def validate_template(schema: KeySchema, workbook: Workbook, settings: ReportSettings | None = None) -> None:
    """Convenience wrapper around :class:`TemplateValidator`."""

    TemplateValidator(schema, settings).validate(workbook)


__all__ = ["TemplateValidator", "validate_template", "SELF_REFERENCE", "MISPLACED_COUNTER", "LOOPED_KEYS"]
