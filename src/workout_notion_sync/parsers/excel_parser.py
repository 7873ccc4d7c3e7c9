"""
Excel cell source

Reads cell ranges from an exported .xlsx workbook so the week workflow can
run without Google credentials:
- "B2:E5" reads from the active sheet
- "Week 3!B2:E5" reads from a named sheet
- Formula cells yield their cached values
"""

import io
import logging
from pathlib import Path
from typing import Any, List, Optional, Tuple, Union

from openpyxl import load_workbook
from openpyxl.worksheet.worksheet import Worksheet

from workout_notion_sync.errors import NotFoundError, RemoteCallError

logger = logging.getLogger(__name__)


class WorkbookCellSource:
    """get_range over a local workbook, mirroring GoogleSheetsService.get_range"""

    EXTENSIONS = ['.xlsx', '.xlsm']

    @classmethod
    def can_read(cls, path: str) -> bool:
        return Path(path).suffix.lower() in cls.EXTENSIONS

    def get_range(self, workbook: Union[str, bytes], range_spec: str) -> List[List[Any]]:
        """
        Cell values for an A1 range.

        Args:
            workbook: Path to the workbook, or its raw bytes
            range_spec: "B2:E5", "B2" or "Sheet name!B2:E5"

        Returns:
            Rows of cell values, None for empty cells
        """
        source = io.BytesIO(workbook) if isinstance(workbook, bytes) else workbook
        identifier = f"{'<bytes>' if isinstance(workbook, bytes) else workbook}!{range_spec}"
        try:
            wb = load_workbook(source, data_only=True, read_only=False)
        except Exception as e:
            raise RemoteCallError("get_range", identifier, e) from e

        sheet_name, cells = self._split_range(range_spec)
        if sheet_name is not None:
            if sheet_name not in wb.sheetnames:
                raise NotFoundError(f"Worksheet '{sheet_name}' not found (have {wb.sheetnames})")
            ws: Worksheet = wb[sheet_name]
        else:
            ws = wb.active

        try:
            selected = ws[cells]
        except Exception as e:
            raise RemoteCallError("get_range", identifier, e) from e
        grid = self._to_grid(selected)
        logger.info(f"Read {len(grid)} rows from {ws.title}!{cells}")
        return grid

    @staticmethod
    def _split_range(range_spec: str) -> Tuple[Optional[str], str]:
        if "!" in range_spec:
            sheet_name, cells = range_spec.rsplit("!", 1)
            return sheet_name.strip("'"), cells
        return None, range_spec

    @staticmethod
    def _to_grid(selected) -> List[List[Any]]:
        # ws["B2"] is a Cell, ws["B2:E5"] a tuple of row tuples
        if not isinstance(selected, tuple):
            return [[selected.value]]
        if selected and not isinstance(selected[0], tuple):
            return [[cell.value for cell in selected]]
        return [[cell.value for cell in row] for row in selected]
