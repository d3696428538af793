from typing import Dict, List, Tuple

import pytest

from training_programs.programs.service import ProgramService
from training_programs.sheets.models import CellStyle, CellValue, TableHandle


class FakeTableStore:
    """In-memory table store that records every call"""

    def __init__(self):
        self.tables: Dict[str, TableHandle] = {}
        self.cells: Dict[str, Dict[Tuple[int, int], CellValue]] = {}
        self.writes: List[Tuple[str, int, int, int, int]] = []
        self.styles: List[Tuple[str, int, int, int, int, CellStyle]] = []
        self.fail_writes_after = None

    def get_or_create_table(self, name: str) -> TableHandle:
        if name not in self.tables:
            self.tables[name] = TableHandle(name=name, sheet_id=len(self.tables) + 1)
            self.cells[name] = {}
        return self.tables[name]

    def write_range(self, table, row, column, row_span, column_span, values):
        assert len(values) == row_span
        assert all(len(line) == column_span for line in values)
        if self.fail_writes_after is not None and len(self.writes) >= self.fail_writes_after:
            raise RuntimeError("storage unavailable")

        self.writes.append((table.name, row, column, row_span, column_span))
        for row_offset, line in enumerate(values):
            for column_offset, value in enumerate(line):
                self.cells[table.name][(row + row_offset, column + column_offset)] = value

    def style_range(self, table, row, column, row_span, column_span, style):
        self.styles.append((table.name, row, column, row_span, column_span, style))

    def last_populated_row(self, table) -> int:
        rows = [row for (row, _), value in self.cells[table.name].items() if value != ""]
        return max(rows, default=0)

    def cell(self, name: str, row: int, column: int) -> CellValue:
        return self.cells[name].get((row, column), "")

    def row(self, name: str, row: int) -> List[CellValue]:
        return [self.cell(name, row, column) for column in range(1, 11)]


@pytest.fixture
def store():
    return FakeTableStore()


@pytest.fixture
def service(store):
    return ProgramService(store)


CONFIG_VARS = (
    "SPREADSHEET_ID",
    "GOOGLE_CREDENTIALS",
    "TELEGRAM_BOT_API_KEY",
    "TELEGRAM_TEST_BOT_API_KEY",
    "ALLOWED_TELEGRAM_IDS",
    "LOG_DIR",
)


@pytest.fixture
def clean_env(monkeypatch, tmp_path):
    """Run with none of the app's variables set and an empty working directory"""
    for name in CONFIG_VARS:
        # setenv first so the original value is restored afterwards
        monkeypatch.setenv(name, "")
        monkeypatch.delenv(name)
    monkeypatch.chdir(tmp_path)
    return monkeypatch
