"""Row and column addressing for program tables.

Rows 2-4 hold the bootstrap weeks -3..-1, and every week k >= 0 occupies two
rows starting at 5 + 2k: the Estimated row followed by the Actual row.
"""

from typing import Tuple

FIRST_WEEK_ROW = 5
BOOTSTRAP_WEEKS = (-3, -2, -1)
OVERLOAD_FACTOR = 1.2

TYPE_COLUMN = 1
WEEK_COLUMN = 2
FIRST_DAY_COLUMN = 3
DAYS_PER_WEEK = 7
LAST_DAY_COLUMN = FIRST_DAY_COLUMN + DAYS_PER_WEEK - 1
TOTAL_COLUMN = LAST_DAY_COLUMN + 1
COLUMN_COUNT = TOTAL_COLUMN


def actual_row(week_index: int) -> int:
    """Return the row holding the actual values for a week"""
    if week_index < 0:
        return week_index + FIRST_WEEK_ROW
    return FIRST_WEEK_ROW + 1 + 2 * week_index


def estimated_row(week_index: int) -> int:
    """Return the row holding the estimated values for a week"""
    return FIRST_WEEK_ROW + 2 * week_index


def last_three_actual_rows(week_index: int) -> Tuple[int, int, int]:
    """Return the actual rows of the three preceding weeks, most recent first"""
    return (
        actual_row(week_index - 1),
        actual_row(week_index - 2),
        actual_row(week_index - 3),
    )


def column_letter(column_index: int) -> str:
    """Convert a 1-based column index to its spreadsheet name (1 -> A, 27 -> AA)"""
    if column_index < 1:
        raise ValueError(f"Column index must be positive, got {column_index}")

    letters = ""
    while column_index > 0:
        column_index, remainder = divmod(column_index - 1, 26)
        letters = chr(65 + remainder) + letters
    return letters


def week_count_from_last_row(last_row: int) -> int:
    """Derive how many weeks an initialized table holds from its last row"""
    return (last_row - FIRST_WEEK_ROW + 1) // 2


def last_row_for_week_count(week_count: int) -> int:
    return FIRST_WEEK_ROW - 1 + 2 * week_count


def a1_range(first_row: int, first_column: int, row_span: int, column_span: int) -> str:
    """Build an A1 range such as C2:I4 for a rectangle"""
    start = f"{column_letter(first_column)}{first_row}"
    end = f"{column_letter(first_column + column_span - 1)}{first_row + row_span - 1}"
    return f"{start}:{end}"


def estimate_formula(column_index: int, week_index: int) -> str:
    """Formula projecting a day's target from the three preceding actual rows"""
    column = column_letter(column_index)
    cells = ",".join(f"{column}{row}" for row in last_three_actual_rows(week_index))
    return f'=IFERROR(AVERAGE({cells})*{OVERLOAD_FACTOR},"")'


def total_formula(row: int) -> str:
    """Formula summing the seven day columns of a row"""
    days = a1_range(row, FIRST_DAY_COLUMN, 1, DAYS_PER_WEEK)
    return f'=IFERROR(SUM({days}),"")'
