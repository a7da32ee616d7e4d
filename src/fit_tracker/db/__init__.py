"""Database layer for fit-tracker."""

from .engine import get_db_path, init_db, seed_users
from .repositories import (
    ChallengeRepository,
    ChallengeShareRepository,
    ExerciseRecordRepository,
    RoutineCheckRepository,
    RoutineRepository,
    UserRepository,
)

__all__ = [
    "ChallengeRepository",
    "ChallengeShareRepository",
    "ExerciseRecordRepository",
    "get_db_path",
    "init_db",
    "RoutineCheckRepository",
    "RoutineRepository",
    "seed_users",
    "UserRepository",
]
