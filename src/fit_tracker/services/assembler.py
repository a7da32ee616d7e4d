"""Response shapes for challenges and shares."""

from datetime import date

from ..models.challenge import Challenge, ChallengeShare
from ..models.progress import ChallengeProgress
from ..models.user import User


def _timestamp(value) -> str | None:
    return value.isoformat() if value else None


def challenge_response(challenge: Challenge, today: date) -> dict:
    """Challenge fields plus the derived isActive flag."""
    return {
        "id": challenge.id,
        "userId": challenge.user_id,
        "name": challenge.name,
        "startDate": challenge.start_date.isoformat(),
        "endDate": challenge.end_date.isoformat(),
        "targetWeight": challenge.target_weight,
        "targetBodyFatPercentage": challenge.target_body_fat_percentage,
        "targetMuscleMass": challenge.target_muscle_mass,
        "targetExerciseDuration": challenge.target_exercise_duration,
        "createdAt": _timestamp(challenge.created_at),
        "updatedAt": _timestamp(challenge.updated_at),
        "isActive": challenge.is_active(today),
    }


def _detail_envelope(challenge: Challenge, progress: ChallengeProgress, today: date) -> dict:
    return {
        "challenge": challenge_response(challenge, today),
        "dailyProgress": [entry.to_dict() for entry in progress.daily],
        "overallProgress": progress.overall.to_dict(),
    }


def challenge_detail_response(
    challenge: Challenge, progress: ChallengeProgress, today: date
) -> dict:
    """Owner view: absolute daily values and the overall summary."""
    return _detail_envelope(challenge, progress, today)


def shared_challenge_detail_response(
    challenge: Challenge, progress: ChallengeProgress, today: date
) -> dict:
    """Shared view: same envelope, daily entries carry diffs from target.

    Routine completion appears in the daily entries and the summary when the
    progress was built with routine data.
    """
    return _detail_envelope(challenge, progress, today)


def share_response(
    share: ChallengeShare,
    from_user: User | None = None,
    challenge: Challenge | None = None,
) -> dict:
    """Share fields with the sender's display name and the challenge name."""
    return {
        "id": share.id,
        "fromUserId": share.from_user_id,
        "fromUserName": from_user.display_name if from_user else None,
        "toUserId": share.to_user_id,
        "challengeId": share.challenge_id,
        "challengeName": challenge.name if challenge else None,
        "status": share.status.value,
        "createdAt": _timestamp(share.created_at),
        "updatedAt": _timestamp(share.updated_at),
    }
