import logging
from typing import List, Optional

from ..layout.engine import (
    BOOTSTRAP_WEEKS,
    COLUMN_COUNT,
    DAYS_PER_WEEK,
    FIRST_DAY_COLUMN,
    TYPE_COLUMN,
    WEEK_COLUMN,
    actual_row,
    estimate_formula,
    estimated_row,
    last_row_for_week_count,
    total_formula,
)
from ..sheets.models import (
    CellStyle,
    CellValue,
    HorizontalAlignment,
    TableStore,
    VerticalAlignment,
)
from .models import HEADER_LABELS, ProgramConfig, RowType

logger = logging.getLogger(__name__)

BLOCK_BORDER = CellStyle(outer_border=True)
TABLE_ALIGNMENT = CellStyle(
    horizontal_alignment=HorizontalAlignment.CENTER,
    vertical_alignment=VerticalAlignment.MIDDLE,
)


class ProgramTableBuilder:
    """Lays out and extends the weekly table of one program"""

    def __init__(self, store: TableStore, config: ProgramConfig):
        self.store = store
        self.config = config
        self.table = store.get_or_create_table(config.table_name)
        self.week_count: Optional[int] = None

    def initialize(self, week_count: int) -> None:
        """Write header, bootstrap weeks and the first week blocks of an empty table.

        Calling this on a table that already has content overwrites it, so
        callers check the table is empty first.
        """
        if week_count < 0:
            raise ValueError(f"Week count cannot be negative: {week_count}")

        logger.info(f"Initializing {self.config.table_name} with {week_count} weeks")
        self.week_count = week_count

        self._write_header()
        self._write_bootstrap_block()
        for week_index in range(week_count):
            self._write_week_block(week_index)
        self._align_table(week_count)

        logger.info(f"{self.config.table_name} initialized")

    def add_weeks(self, existing_week_count: int, add_count: int) -> None:
        """Append week blocks after the last existing week"""
        if add_count < 1:
            raise ValueError(f"Must add at least one week, got {add_count}")
        if existing_week_count < 0:
            raise ValueError(f"Existing week count cannot be negative: {existing_week_count}")

        logger.info(
            f"Adding {add_count} weeks to {self.config.table_name} "
            f"after week {existing_week_count - 1}"
        )
        total_weeks = existing_week_count + add_count
        for week_index in range(existing_week_count, total_weeks):
            self._write_week_block(week_index)
        self._align_table(total_weeks)

    def _write_header(self) -> None:
        self.store.write_range(
            self.table, 1, WEEK_COLUMN, 1, len(HEADER_LABELS), [list(HEADER_LABELS)]
        )

    def _write_bootstrap_block(self) -> None:
        """Seed weeks -3..-1 so week 0 has three weeks of history to average"""
        first_row = actual_row(BOOTSTRAP_WEEKS[0])
        rows = [
            self._row_values("", week_index, self._blank_days(), actual_row(week_index))
            for week_index in BOOTSTRAP_WEEKS
        ]
        self._write_block(first_row, rows)

    def _write_week_block(self, week_index: int) -> None:
        first_row = estimated_row(week_index)
        estimates = [
            estimate_formula(column, week_index)
            for column in range(FIRST_DAY_COLUMN, FIRST_DAY_COLUMN + DAYS_PER_WEEK)
        ]
        rows = [
            self._row_values(RowType.ESTIMATED.value, week_index, estimates, first_row),
            self._row_values(
                RowType.ACTUAL.value, week_index, self._blank_days(), actual_row(week_index)
            ),
        ]
        logger.debug(f"Writing week {week_index} at rows {first_row}-{first_row + 1}")
        self._write_block(first_row, rows)

    def _write_block(self, first_row: int, rows: List[List[CellValue]]) -> None:
        """Write full-width rows and draw a border around them"""
        self.store.write_range(self.table, first_row, TYPE_COLUMN, len(rows), COLUMN_COUNT, rows)
        self.store.style_range(
            self.table, first_row, TYPE_COLUMN, len(rows), COLUMN_COUNT, BLOCK_BORDER
        )

    def _align_table(self, week_count: int) -> None:
        last_row = last_row_for_week_count(week_count)
        self.store.style_range(self.table, 1, TYPE_COLUMN, last_row, COLUMN_COUNT, TABLE_ALIGNMENT)

    @staticmethod
    def _blank_days() -> List[CellValue]:
        return [""] * DAYS_PER_WEEK

    @staticmethod
    def _row_values(
        row_type: str, week_index: int, days: List[CellValue], row: int
    ) -> List[CellValue]:
        return [row_type, week_index, *days, total_formula(row)]
