"""Tests for reading cell ranges from a local workbook."""
import io

import pytest
from openpyxl import Workbook

from workout_notion_sync.errors import NotFoundError, RemoteCallError
from workout_notion_sync.parsers.excel_parser import WorkbookCellSource
from workout_notion_sync.parsers.section_parser import SectionParser


@pytest.fixture
def workbook_path(tmp_path):
    wb = Workbook()
    ws = wb.active
    ws.title = "Plan"
    ws["B2"] = "A. Squat\n5x5\nhttps://youtu.be/abc12345678"
    ws["C2"] = "Rest"
    ws["B3"] = 42
    ws["C3"] = "Upper body:\nPush-ups"

    other = wb.create_sheet("Week 3")
    other["A1"] = "B1. Deadlift"

    path = tmp_path / "plan.xlsx"
    wb.save(path)
    return str(path)


class TestWorkbookCellSource:

    def test_range_from_active_sheet(self, workbook_path):
        grid = WorkbookCellSource().get_range(workbook_path, "B2:C3")

        assert grid == [
            ["A. Squat\n5x5\nhttps://youtu.be/abc12345678", "Rest"],
            [42, "Upper body:\nPush-ups"],
        ]

    def test_single_cell(self, workbook_path):
        assert WorkbookCellSource().get_range(workbook_path, "C2") == [["Rest"]]

    def test_empty_cells_are_none(self, workbook_path):
        grid = WorkbookCellSource().get_range(workbook_path, "A1:B2")
        assert grid[0] == [None, None]
        assert grid[1][0] is None

    def test_named_sheet(self, workbook_path):
        assert WorkbookCellSource().get_range(workbook_path, "'Week 3'!A1") == [["B1. Deadlift"]]
        assert WorkbookCellSource().get_range(workbook_path, "Week 3!A1:A1") == [["B1. Deadlift"]]

    def test_missing_sheet(self, workbook_path):
        with pytest.raises(NotFoundError, match="Week 9"):
            WorkbookCellSource().get_range(workbook_path, "Week 9!A1")

    def test_missing_file(self, tmp_path):
        missing = str(tmp_path / "missing.xlsx")
        with pytest.raises(RemoteCallError) as exc_info:
            WorkbookCellSource().get_range(missing, "B2")
        assert exc_info.value.operation == "get_range"
        assert exc_info.value.identifier == f"{missing}!B2"
        assert isinstance(exc_info.value.__cause__, FileNotFoundError)

    def test_unreadable_bytes(self):
        with pytest.raises(RemoteCallError, match="<bytes>!B2"):
            WorkbookCellSource().get_range(b"not a workbook", "B2")

    def test_bad_range(self, workbook_path):
        with pytest.raises(RemoteCallError, match="get_range failed"):
            WorkbookCellSource().get_range(workbook_path, "$$$")

    def test_reads_bytes(self, workbook_path):
        with open(workbook_path, "rb") as f:
            data = f.read()
        assert WorkbookCellSource().get_range(data, "C2") == [["Rest"]]

    def test_grid_parses_into_sessions(self, workbook_path):
        grid = WorkbookCellSource().get_range(workbook_path, "B2:C3")
        sessions = SectionParser.parse_sessions(grid)

        # B3 holds a number and is skipped; numbering stays positional
        assert [s.session_number for s in sessions] == [1, 2, 4]

    @pytest.mark.parametrize("path,expected", [
        ("plan.xlsx", True),
        ("PLAN.XLSM", True),
        ("plan.csv", False),
        ("plan.xls", False),
    ])
    def test_can_read(self, path, expected):
        assert WorkbookCellSource.can_read(path) is expected


def test_split_range():
    assert WorkbookCellSource._split_range("B2:E5") == (None, "B2:E5")
    assert WorkbookCellSource._split_range("'My Sheet'!B2") == ("My Sheet", "B2")


def test_workbook_bytes_roundtrip_through_buffer():
    wb = Workbook()
    wb.active["A1"] = "Rest"
    buffer = io.BytesIO()
    wb.save(buffer)

    assert WorkbookCellSource().get_range(buffer.getvalue(), "A1") == [["Rest"]]
