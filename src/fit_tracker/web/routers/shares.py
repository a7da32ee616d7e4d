"""Challenge sharing routes."""

import logging
from datetime import date
from pathlib import Path

from fastapi import APIRouter, Depends

from ...db.repositories import (
    ChallengeRepository,
    ChallengeShareRepository,
    ExerciseRecordRepository,
    RoutineCheckRepository,
    RoutineRepository,
    UserRepository,
)
from ...errors import NotFoundError
from ...models.challenge import ChallengeShare, ShareStatus
from ...services import sharing
from ...services.assembler import share_response, shared_challenge_detail_response
from ...services.progress import build_shared_progress, index_by_date
from ..deps import EntityId, current_user_id, get_db_path
from ..schemas import ChallengeShareRequest

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/challenge-shares", tags=["challenge-shares"])


async def _to_responses(db_path: Path, shares: list[ChallengeShare]) -> list[dict]:
    """Attach sender display names and challenge names."""
    users = UserRepository(db_path)
    challenges = ChallengeRepository(db_path)
    return [
        share_response(
            share,
            await users.get(share.from_user_id),
            await challenges.get(share.challenge_id),
        )
        for share in shares
    ]


async def _get_share(db_path: Path, share_id: int) -> ChallengeShare:
    share = await ChallengeShareRepository(db_path).get(share_id)
    if share is None:
        raise NotFoundError(f"Share {share_id} not found")
    return share


@router.get("/users/search")
async def search_users(
    query: str | None = None,
    user_id: int = Depends(current_user_id),
    db_path: Path = Depends(get_db_path),
):
    """Find users to share with, by ID or username fragment."""
    users = await UserRepository(db_path).search(query, exclude_id=user_id)
    return [{"id": u.id, "username": u.username, "name": u.name} for u in users]


@router.post("")
async def create_share(
    body: ChallengeShareRequest,
    user_id: int = Depends(current_user_id),
    db_path: Path = Depends(get_db_path),
):
    """Offer one of the caller's challenges to another user."""
    challenge = await ChallengeRepository(db_path).get(body.challenge_id)
    if challenge is None:
        raise NotFoundError(f"Challenge {body.challenge_id} not found")

    sharing.ensure_can_share(challenge, user_id, body.to_user_id)

    if await UserRepository(db_path).get(body.to_user_id) is None:
        raise NotFoundError(f"User {body.to_user_id} not found")

    share = ChallengeShare(
        from_user_id=user_id,
        to_user_id=body.to_user_id,
        challenge_id=challenge.id,
    )
    await ChallengeShareRepository(db_path).create(share)
    logger.info(
        "User %s shared challenge %s with user %s (share %s)",
        user_id, challenge.id, body.to_user_id, share.id,
    )
    return (await _to_responses(db_path, [share]))[0]


@router.get("/received")
async def received_shares(
    user_id: int = Depends(current_user_id),
    db_path: Path = Depends(get_db_path),
):
    """Pending requests addressed to the caller."""
    shares = await ChallengeShareRepository(db_path).list_received(user_id, ShareStatus.PENDING)
    return await _to_responses(db_path, shares)


@router.get("/sent")
async def sent_shares(
    user_id: int = Depends(current_user_id),
    db_path: Path = Depends(get_db_path),
):
    """Requests sent by the caller, any status."""
    shares = await ChallengeShareRepository(db_path).list_sent(user_id)
    return await _to_responses(db_path, shares)


@router.get("/accepted")
async def accepted_shares(
    user_id: int = Depends(current_user_id),
    db_path: Path = Depends(get_db_path),
):
    """Challenges the caller may view."""
    shares = await ChallengeShareRepository(db_path).list_received(user_id, ShareStatus.ACCEPTED)
    return await _to_responses(db_path, shares)


@router.put("/{share_id}/status")
async def update_share_status(
    share_id: EntityId,
    status: str,
    user_id: int = Depends(current_user_id),
    db_path: Path = Depends(get_db_path),
):
    """Accept or reject a pending request addressed to the caller."""
    new_status = sharing.parse_status(status)
    share = await _get_share(db_path, share_id)

    sharing.set_status(share, new_status, user_id)
    await ChallengeShareRepository(db_path).update_status(share)

    logger.info("Share %s is now %s", share.id, share.status.value)
    return (await _to_responses(db_path, [share]))[0]


@router.get("/accepted/{share_id}/detail")
async def shared_challenge_detail(
    share_id: EntityId,
    user_id: int = Depends(current_user_id),
    db_path: Path = Depends(get_db_path),
):
    """Progress of a shared challenge as differences from target."""
    share = await _get_share(db_path, share_id)
    sharing.ensure_can_view(share, user_id)

    challenge = await ChallengeRepository(db_path).get(share.challenge_id)
    if challenge is None:
        raise NotFoundError(f"Challenge {share.challenge_id} not found")

    owner_id = share.from_user_id
    records = await ExerciseRecordRepository(db_path).list_between(
        owner_id, challenge.start_date, challenge.end_date
    )
    routines = await RoutineRepository(db_path).get_items_by_type(owner_id)
    checks = await RoutineCheckRepository(db_path).get_checked_by_date(
        owner_id, challenge.start_date, challenge.end_date
    )

    progress = build_shared_progress(challenge, index_by_date(records), routines, checks)
    return shared_challenge_detail_response(challenge, progress, date.today())
