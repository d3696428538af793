from .engine import (
    actual_row,
    column_letter,
    estimated_row,
    last_three_actual_rows,
    week_count_from_last_row,
)


__all__ = [
    "actual_row",
    "column_letter",
    "estimated_row",
    "last_three_actual_rows",
    "week_count_from_last_row",
]
