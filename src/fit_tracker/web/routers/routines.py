"""Routine checklist routes."""

import logging
from pathlib import Path

from fastapi import APIRouter, Depends

from ...db.repositories import RoutineCheckRepository, RoutineRepository
from ...errors import BadRequestError, NotFoundError
from ...models.routine import Routine, RoutineCheck, RoutineType
from ..deps import current_user_id, get_db_path, parse_date
from ..schemas import RoutineCheckRequest, RoutineRequest

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/routines", tags=["routines"])


@router.get("")
async def list_routines(
    user_id: int = Depends(current_user_id),
    db_path: Path = Depends(get_db_path),
):
    """All routines of the caller."""
    routines = await RoutineRepository(db_path).list_by_user(user_id)
    return [routine.to_dict() for routine in routines]


@router.post("")
async def save_routine(
    body: RoutineRequest,
    user_id: int = Depends(current_user_id),
    db_path: Path = Depends(get_db_path),
):
    """Create or replace the caller's routine of a type."""
    routine = Routine(
        user_id=user_id,
        routine_type=body.routine_type,
        routine_items=body.routine_items,
    )
    saved = await RoutineRepository(db_path).upsert(routine)
    logger.info("Saved %s routine for user %s (%d items)", saved.routine_type.value, user_id, len(saved.routine_items))
    return saved.to_dict()


@router.get("/checks/{check_date}")
async def get_checks(
    check_date: str,
    user_id: int = Depends(current_user_id),
    db_path: Path = Depends(get_db_path),
):
    """The caller's routine checks on one day."""
    day = parse_date(check_date)
    checks = await RoutineCheckRepository(db_path).list_by_date(user_id, day)
    return [check.to_dict() for check in checks]


@router.post("/checks")
async def save_check(
    body: RoutineCheckRequest,
    user_id: int = Depends(current_user_id),
    db_path: Path = Depends(get_db_path),
):
    """Create or replace the caller's checked items for a day and type."""
    check = RoutineCheck(
        user_id=user_id,
        check_date=body.check_date,
        routine_type=body.routine_type,
        checked_items=body.checked_items,
    )
    saved = await RoutineCheckRepository(db_path).upsert(check)
    logger.info("Saved %s routine check for user %s on %s", saved.routine_type.value, user_id, saved.check_date)
    return saved.to_dict()


@router.get("/{routine_type}")
async def get_routine(
    routine_type: str,
    user_id: int = Depends(current_user_id),
    db_path: Path = Depends(get_db_path),
):
    """The caller's routine of one type (case-insensitive)."""
    try:
        parsed = RoutineType.parse(routine_type)
    except ValueError:
        raise BadRequestError(f"Unknown routine type: {routine_type}")

    routine = await RoutineRepository(db_path).get_by_type(user_id, parsed)
    if routine is None:
        raise NotFoundError(f"No {parsed.value} routine")
    return routine.to_dict()
