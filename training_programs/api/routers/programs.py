import logging
from functools import lru_cache

from fastapi import APIRouter, Depends, HTTPException
from pydantic import BaseModel, Field

from training_programs.config import API_REQUIRED_VARS, load_config
from training_programs.programs.models import PROGRAMS, ProgramKind
from training_programs.programs.service import (
    InvalidWeekCountError,
    ProgramAlreadyInitializedError,
    ProgramNotInitializedError,
    ProgramService,
)
from training_programs.sheets.client import GoogleSheetsClient, SheetError


logger = logging.getLogger(__name__)

router = APIRouter(prefix="/programs", tags=["programs"])


@lru_cache
def get_program_service() -> ProgramService:
    config = load_config(required=API_REQUIRED_VARS)
    sheets_client = GoogleSheetsClient(
        spreadsheet_id=config["SPREADSHEET_ID"],
        credentials_path=config["GOOGLE_CREDENTIALS"],
    )
    return ProgramService(sheets_client)


class WeeksRequest(BaseModel):
    weeks: int = Field(ge=1)


class ProgramStatus(BaseModel):
    kind: ProgramKind
    table_name: str
    week_count: int | None
    initialized: bool


def _status(service: ProgramService, kind: ProgramKind) -> ProgramStatus:
    snapshot = service.status(kind)
    return ProgramStatus(
        kind=kind,
        table_name=snapshot.table_name,
        week_count=snapshot.week_count,
        initialized=snapshot.initialized,
    )


@router.get("")
async def list_programs(service: ProgramService = Depends(get_program_service)) -> list[ProgramStatus]:
    """Return the state of every program table."""
    try:
        return [_status(service, kind) for kind in PROGRAMS]
    except SheetError as e:
        raise HTTPException(status_code=502, detail=str(e)) from e


@router.get("/{kind}")
async def get_program(
    kind: ProgramKind, service: ProgramService = Depends(get_program_service)
) -> ProgramStatus:
    """Return the state of one program table."""
    try:
        return _status(service, kind)
    except SheetError as e:
        raise HTTPException(status_code=502, detail=str(e)) from e


@router.post("/{kind}/build")
async def build_program(
    kind: ProgramKind, request: WeeksRequest, service: ProgramService = Depends(get_program_service)
) -> ProgramStatus:
    """Create a program table with its first weeks."""
    try:
        service.build_program(kind, request.weeks)
        return _status(service, kind)
    except InvalidWeekCountError as e:
        raise HTTPException(status_code=422, detail=str(e)) from e
    except ProgramAlreadyInitializedError as e:
        raise HTTPException(status_code=409, detail=str(e)) from e
    except SheetError as e:
        logger.error(f"Failed to build {kind.value} program: {e}")
        raise HTTPException(status_code=502, detail=str(e)) from e


@router.post("/{kind}/extend")
async def extend_program(
    kind: ProgramKind, request: WeeksRequest, service: ProgramService = Depends(get_program_service)
) -> ProgramStatus:
    """Append weeks to an existing program table."""
    try:
        service.extend_program(kind, request.weeks)
        return _status(service, kind)
    except InvalidWeekCountError as e:
        raise HTTPException(status_code=422, detail=str(e)) from e
    except ProgramNotInitializedError as e:
        raise HTTPException(status_code=409, detail=str(e)) from e
    except SheetError as e:
        logger.error(f"Failed to extend {kind.value} program: {e}")
        raise HTTPException(status_code=502, detail=str(e)) from e
