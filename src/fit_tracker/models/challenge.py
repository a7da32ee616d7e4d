"""Challenge and challenge share models."""

from dataclasses import dataclass
from datetime import date, datetime
from enum import Enum


class ShareStatus(str, Enum):
    """Lifecycle of a challenge share. ACCEPTED and REJECTED are terminal."""

    PENDING = "PENDING"
    ACCEPTED = "ACCEPTED"
    REJECTED = "REJECTED"


@dataclass
class Challenge:
    """A goal period with optional target body metrics.

    Both ``start_date`` and ``end_date`` are inclusive.
    """

    user_id: int
    name: str
    start_date: date
    end_date: date
    target_weight: float | None = None  # kg, lower is better
    target_body_fat_percentage: float | None = None  # lower is better
    target_muscle_mass: float | None = None  # kg, higher is better
    target_exercise_duration: int | None = None  # minutes, higher is better
    id: int | None = None
    created_at: datetime | None = None
    updated_at: datetime | None = None

    def is_active(self, today: date) -> bool:
        """True while today falls within the challenge, both ends included."""
        return self.start_date <= today <= self.end_date

    def set_targets(
        self,
        target_weight: float | None,
        target_body_fat_percentage: float | None,
        target_muscle_mass: float | None,
        target_exercise_duration: int | None,
    ) -> None:
        """Replace all four targets; None clears a target."""
        self.target_weight = target_weight
        self.target_body_fat_percentage = target_body_fat_percentage
        self.target_muscle_mass = target_muscle_mass
        self.target_exercise_duration = target_exercise_duration


@dataclass
class ChallengeShare:
    """A read-only grant from the challenge owner to another user."""

    from_user_id: int
    to_user_id: int
    challenge_id: int
    status: ShareStatus = ShareStatus.PENDING
    id: int | None = None
    created_at: datetime | None = None
    updated_at: datetime | None = None
