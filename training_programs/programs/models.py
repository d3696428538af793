# training_programs/programs/models.py
from dataclasses import dataclass
from enum import Enum
from typing import Dict

HEADER_LABELS = ["Week", "Sun", "Mon", "Tue", "Wed", "Thu", "Fri", "Sat", "Total"]


class RowType(Enum):
    """Values of the Type column"""

    ESTIMATED = "Estimated"
    ACTUAL = "Actual"


class ProgramKind(Enum):
    """Activity programs that get their own table"""

    WALKING = "walking"
    RUNNING = "running"

    @classmethod
    def from_name(cls, name: str) -> "ProgramKind":
        try:
            return cls(name.strip().lower())
        except ValueError:
            raise ValueError(f"Unknown program: {name}") from None


@dataclass(frozen=True)
class ProgramConfig:
    """Configuration of one program table"""

    kind: ProgramKind
    table_name: str


WALKING_PROGRAM = ProgramConfig(kind=ProgramKind.WALKING, table_name="Walking Program")
RUNNING_PROGRAM = ProgramConfig(kind=ProgramKind.RUNNING, table_name="Running Program")

PROGRAMS: Dict[ProgramKind, ProgramConfig] = {
    ProgramKind.WALKING: WALKING_PROGRAM,
    ProgramKind.RUNNING: RUNNING_PROGRAM,
}
