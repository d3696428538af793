# training_programs/sheets/models.py
from dataclasses import dataclass
from enum import Enum
from typing import List, Optional, Protocol, Union

CellValue = Union[str, int, float]


@dataclass(frozen=True)
class TableHandle:
    """A sheet (tab) inside the spreadsheet"""

    name: str
    sheet_id: int


class HorizontalAlignment(Enum):
    LEFT = "LEFT"
    CENTER = "CENTER"
    RIGHT = "RIGHT"


class VerticalAlignment(Enum):
    TOP = "TOP"
    MIDDLE = "MIDDLE"
    BOTTOM = "BOTTOM"


@dataclass(frozen=True)
class CellStyle:
    """Formatting applied to a rectangular range of cells"""

    horizontal_alignment: Optional[HorizontalAlignment] = None
    vertical_alignment: Optional[VerticalAlignment] = None
    outer_border: bool = False


class TableStore(Protocol):
    """Storage operations the program builder needs from the spreadsheet host.

    Rows and columns are 1-based.
    """

    def get_or_create_table(self, name: str) -> TableHandle: ...

    def write_range(
        self,
        table: TableHandle,
        row: int,
        column: int,
        row_span: int,
        column_span: int,
        values: List[List[CellValue]],
    ) -> None: ...

    def style_range(
        self,
        table: TableHandle,
        row: int,
        column: int,
        row_span: int,
        column_span: int,
        style: CellStyle,
    ) -> None: ...

    def last_populated_row(self, table: TableHandle) -> int: ...
