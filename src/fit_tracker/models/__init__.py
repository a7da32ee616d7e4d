"""Data models for fit-tracker."""

from .challenge import Challenge, ChallengeShare, ShareStatus
from .exercise_record import ExerciseRecord
from .progress import ChallengeProgress, DailyProgress, OverallProgress, SharedDailyProgress
from .routine import Routine, RoutineCheck, RoutineType
from .user import User

__all__ = [
    "Challenge",
    "ChallengeProgress",
    "ChallengeShare",
    "DailyProgress",
    "ExerciseRecord",
    "OverallProgress",
    "Routine",
    "RoutineCheck",
    "RoutineType",
    "SharedDailyProgress",
    "ShareStatus",
    "User",
]
