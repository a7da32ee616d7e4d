"""Morning/evening routine checklists."""

from dataclasses import dataclass, field
from datetime import date, datetime
from enum import Enum


class RoutineType(str, Enum):
    """Routine slot. A user has at most one routine per type."""

    MORNING = "MORNING"
    EVENING = "EVENING"

    @classmethod
    def parse(cls, value: str) -> "RoutineType":
        """Case-insensitive lookup (``"morning"`` -> MORNING)."""
        return cls(value.strip().upper())


@dataclass
class Routine:
    """Ordered checklist for one routine type."""

    user_id: int
    routine_type: RoutineType
    routine_items: list[str] = field(default_factory=list)
    id: int | None = None
    created_at: datetime | None = None
    updated_at: datetime | None = None

    def to_dict(self) -> dict:
        """Convert to API dictionary."""
        return {
            "id": self.id,
            "userId": self.user_id,
            "routineType": self.routine_type.value,
            "routineItems": list(self.routine_items),
            "createdAt": self.created_at.isoformat() if self.created_at else None,
            "updatedAt": self.updated_at.isoformat() if self.updated_at else None,
        }


@dataclass
class RoutineCheck:
    """Items of a routine marked complete on one day."""

    user_id: int
    check_date: date
    routine_type: RoutineType
    checked_items: list[str] = field(default_factory=list)
    id: int | None = None
    created_at: datetime | None = None
    updated_at: datetime | None = None

    def to_dict(self) -> dict:
        """Convert to API dictionary."""
        return {
            "id": self.id,
            "userId": self.user_id,
            "checkDate": self.check_date.isoformat(),
            "routineType": self.routine_type.value,
            "checkedItems": list(self.checked_items),
            "createdAt": self.created_at.isoformat() if self.created_at else None,
            "updatedAt": self.updated_at.isoformat() if self.updated_at else None,
        }
