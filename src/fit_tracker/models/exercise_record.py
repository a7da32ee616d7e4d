"""Daily exercise and body-metric record."""

from dataclasses import dataclass
from datetime import date, datetime


@dataclass
class ExerciseRecord:
    """One user's measurements for one calendar day.

    At most one record exists per (user_id, record_date).
    """

    user_id: int
    record_date: date
    weight: float | None = None  # kg
    body_fat_percentage: float | None = None
    muscle_mass: float | None = None  # kg
    muscle_percentage: float | None = None
    exercise_type: str | None = None
    exercise_duration: int | None = None  # minutes
    image_url: str | None = None
    id: int | None = None
    created_at: datetime | None = None
    updated_at: datetime | None = None

    def has_tracked_values(self) -> bool:
        """Whether any of the challenge-tracked fields is set."""
        return any(
            value is not None
            for value in (
                self.weight,
                self.body_fat_percentage,
                self.muscle_mass,
                self.exercise_duration,
            )
        )

    def to_dict(self) -> dict:
        """Convert to API dictionary."""
        return {
            "id": self.id,
            "userId": self.user_id,
            "recordDate": self.record_date.isoformat(),
            "weight": self.weight,
            "bodyFatPercentage": self.body_fat_percentage,
            "muscleMass": self.muscle_mass,
            "musclePercentage": self.muscle_percentage,
            "exerciseType": self.exercise_type,
            "exerciseDuration": self.exercise_duration,
            "imageUrl": self.image_url,
            "createdAt": self.created_at.isoformat() if self.created_at else None,
            "updatedAt": self.updated_at.isoformat() if self.updated_at else None,
        }
