"""Authorization rules for challenge shares."""

from ..errors import BadRequestError, ForbiddenError, InvalidStateError
from ..models.challenge import Challenge, ChallengeShare, ShareStatus


def parse_status(value: str) -> ShareStatus:
    """Parse a requested share status (case-insensitive)."""
    try:
        return ShareStatus(value.strip().upper())
    except ValueError:
        raise BadRequestError(f"Unknown share status: {value}")


def ensure_can_share(challenge: Challenge, requester_id: int, to_user_id: int) -> None:
    """Only the owner may share a challenge, and not with themselves."""
    if challenge.user_id != requester_id:
        raise ForbiddenError("Only the challenge owner can share it")
    if to_user_id == requester_id:
        raise BadRequestError("Cannot share a challenge with yourself")


def ensure_can_transition(
    share: ChallengeShare, new_status: ShareStatus, requester_id: int
) -> None:
    """Validate a PENDING -> ACCEPTED/REJECTED transition by the recipient."""
    if share.to_user_id != requester_id:
        raise ForbiddenError("Only the recipient can answer a share request")
    if share.status != ShareStatus.PENDING:
        raise InvalidStateError(f"Share {share.id} is already {share.status.value}")
    if new_status == ShareStatus.PENDING:
        raise InvalidStateError("A share can only be ACCEPTED or REJECTED")


def set_status(share: ChallengeShare, new_status: ShareStatus, requester_id: int) -> ChallengeShare:
    """Apply a validated transition to the in-memory share."""
    ensure_can_transition(share, new_status, requester_id)
    share.status = new_status
    return share


def ensure_can_view(share: ChallengeShare, requester_id: int) -> None:
    """The recipient may view progress once the share is accepted."""
    if share.to_user_id != requester_id or share.status != ShareStatus.ACCEPTED:
        raise ForbiddenError("Share is not accepted for this user")
