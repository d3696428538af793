import logging
from dataclasses import dataclass
from typing import Dict, Optional

from ..layout.engine import FIRST_WEEK_ROW, week_count_from_last_row
from ..sheets.models import TableStore
from .builder import ProgramTableBuilder
from .models import PROGRAMS, ProgramConfig, ProgramKind

logger = logging.getLogger(__name__)


class ProgramError(Exception):
    """Base class for errors raised before a program table is touched"""

    pass


class InvalidWeekCountError(ProgramError):
    pass


class ProgramAlreadyInitializedError(ProgramError):
    pass


class ProgramNotInitializedError(ProgramError):
    pass


@dataclass(frozen=True)
class ProgramSnapshot:
    """Row count of a program table and what it implies"""

    kind: ProgramKind
    table_name: str
    row_count: int

    @property
    def empty(self) -> bool:
        return self.row_count == 0

    @property
    def initialized(self) -> bool:
        # header plus the three bootstrap rows
        return self.row_count >= FIRST_WEEK_ROW - 1

    @property
    def week_count(self) -> Optional[int]:
        if not self.initialized:
            return None
        return week_count_from_last_row(self.row_count)


def parse_positive_integer(text: str) -> int:
    """Parse a week count typed by a user"""
    try:
        value = int(text.strip())
    except (AttributeError, ValueError):
        raise InvalidWeekCountError(f"'{text}' is not a whole number") from None

    if value < 1:
        raise InvalidWeekCountError(f"Week count must be positive, got {value}")
    return value


class ProgramService:
    """Builds and extends the program tables stored in one spreadsheet"""

    def __init__(
        self,
        store: TableStore,
        programs: Optional[Dict[ProgramKind, ProgramConfig]] = None,
    ):
        self.store = store
        self.programs = programs or PROGRAMS

    def _builder(self, kind: ProgramKind) -> ProgramTableBuilder:
        return ProgramTableBuilder(self.store, self.programs[kind])

    @staticmethod
    def _validate_week_count(week_count: int) -> None:
        if isinstance(week_count, bool) or not isinstance(week_count, int):
            raise InvalidWeekCountError(f"Week count must be an integer, got {week_count!r}")
        if week_count < 1:
            raise InvalidWeekCountError(f"Week count must be positive, got {week_count}")

    def status(self, kind: ProgramKind) -> ProgramSnapshot:
        """Read how far a program table has been built.

        The store only offers get-or-create, so reading the status of a program
        that was never built adds its (empty) sheet to the spreadsheet.
        """
        builder = self._builder(kind)
        return ProgramSnapshot(
            kind=kind,
            table_name=builder.config.table_name,
            row_count=self.store.last_populated_row(builder.table),
        )

    def week_count(self, kind: ProgramKind) -> Optional[int]:
        """Return the number of weeks in a program table, None until it is fully initialized"""
        return self.status(kind).week_count

    def is_initialized(self, kind: ProgramKind) -> bool:
        return self.status(kind).initialized

    def build_program(self, kind: ProgramKind, initial_week_count: int) -> int:
        """Create a program table with its first weeks and return its week count"""
        self._validate_week_count(initial_week_count)
        builder = self._builder(kind)

        last_row = self.store.last_populated_row(builder.table)
        if last_row > 0:
            raise ProgramAlreadyInitializedError(
                f"{builder.config.table_name} already has {last_row} rows"
            )

        builder.initialize(initial_week_count)
        return initial_week_count

    def extend_program(self, kind: ProgramKind, additional_week_count: int) -> int:
        """Append weeks to an initialized program table and return its week count"""
        self._validate_week_count(additional_week_count)
        builder = self._builder(kind)

        last_row = self.store.last_populated_row(builder.table)
        if last_row < FIRST_WEEK_ROW - 1:
            raise ProgramNotInitializedError(
                f"{builder.config.table_name} has not been built yet"
            )

        existing_week_count = week_count_from_last_row(last_row)
        builder.add_weeks(existing_week_count, additional_week_count)
        return existing_week_count + additional_week_count
