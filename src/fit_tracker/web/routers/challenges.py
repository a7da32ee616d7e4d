"""Challenge routes (owner view)."""

import logging
from datetime import date
from pathlib import Path

from fastapi import APIRouter, Depends

from ...db.repositories import ChallengeRepository, ExerciseRecordRepository
from ...errors import NotFoundError
from ...models.challenge import Challenge
from ...services.assembler import challenge_detail_response, challenge_response
from ...services.progress import build_owner_progress, index_by_date
from ..deps import EntityId, current_user_id, get_db_path
from ..schemas import ChallengeRequest, ChallengeTargets

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/challenges", tags=["challenges"])


async def get_owned_challenge(db_path: Path, challenge_id: int, user_id: int) -> Challenge:
    """Load a challenge owned by the caller.

    Another user's challenge answers exactly like a missing one.
    """
    challenge = await ChallengeRepository(db_path).get(challenge_id)
    if challenge is None or challenge.user_id != user_id:
        raise NotFoundError(f"Challenge {challenge_id} not found")
    return challenge


@router.post("", status_code=201)
async def create_challenge(
    body: ChallengeRequest,
    user_id: int = Depends(current_user_id),
    db_path: Path = Depends(get_db_path),
):
    """Create a challenge for the caller."""
    challenge = Challenge(
        user_id=user_id,
        name=body.name,
        start_date=body.start_date,
        end_date=body.end_date,
        target_weight=body.target_weight,
        target_body_fat_percentage=body.target_body_fat_percentage,
        target_muscle_mass=body.target_muscle_mass,
        target_exercise_duration=body.target_exercise_duration,
    )
    await ChallengeRepository(db_path).create(challenge)
    logger.info("Created challenge %s '%s' for user %s", challenge.id, challenge.name, user_id)
    return challenge_response(challenge, date.today())


@router.get("")
async def list_challenges(
    user_id: int = Depends(current_user_id),
    db_path: Path = Depends(get_db_path),
):
    """The caller's challenges, latest start first."""
    today = date.today()
    challenges = await ChallengeRepository(db_path).list_by_user(user_id)
    return [challenge_response(c, today) for c in challenges]


@router.put("/{challenge_id}/targets")
async def update_targets(
    challenge_id: EntityId,
    body: ChallengeTargets,
    user_id: int = Depends(current_user_id),
    db_path: Path = Depends(get_db_path),
):
    """Replace the four targets; omitted or null values clear a target."""
    challenge = await get_owned_challenge(db_path, challenge_id, user_id)
    challenge.set_targets(
        body.target_weight,
        body.target_body_fat_percentage,
        body.target_muscle_mass,
        body.target_exercise_duration,
    )
    await ChallengeRepository(db_path).update_targets(challenge)
    logger.info("Updated targets of challenge %s", challenge.id)
    return challenge_response(challenge, date.today())


@router.get("/{challenge_id}")
async def get_challenge_detail(
    challenge_id: EntityId,
    user_id: int = Depends(current_user_id),
    db_path: Path = Depends(get_db_path),
):
    """Owner progress: recorded days up to today and the overall summary."""
    today = date.today()
    challenge = await get_owned_challenge(db_path, challenge_id, user_id)

    records = await ExerciseRecordRepository(db_path).list_between(
        user_id, challenge.start_date, challenge.end_date
    )
    progress = build_owner_progress(challenge, index_by_date(records), today)
    return challenge_detail_response(challenge, progress, today)
