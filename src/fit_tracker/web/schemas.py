"""Request bodies accepted by the JSON API (camelCase on the wire)."""

from datetime import date
from typing import Annotated

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator
from pydantic.alias_generators import to_camel

from ..db.engine import SQLITE_MAX_INTEGER
from ..models.routine import RoutineType

# Integers must fit an SQLite INTEGER column
StoredInt = Annotated[int, Field(ge=-SQLITE_MAX_INTEGER - 1, le=SQLITE_MAX_INTEGER)]
EntityRef = Annotated[int, Field(ge=1, le=SQLITE_MAX_INTEGER)]


class CamelModel(BaseModel):
    # inf and nan cannot be stored and then serialized as JSON
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, allow_inf_nan=False)


class LoginRequest(CamelModel):
    username: str
    password: str


class SignupRequest(CamelModel):
    username: str
    password: str
    name: str | None = None
    email: str | None = None
    birth_date: str | None = None  # YYYY-MM-DD
    gender: str | None = None  # MALE, FEMALE, OTHER

    @field_validator("username", "password")
    @classmethod
    def not_blank(cls, value: str) -> str:
        if not value.strip():
            raise ValueError("must not be blank")
        return value


class ExerciseRecordRequest(CamelModel):
    record_date: date
    weight: float | None = None
    body_fat_percentage: float | None = None
    muscle_mass: float | None = None
    muscle_percentage: float | None = None
    exercise_type: str | None = None
    exercise_duration: StoredInt | None = None
    image_url: str | None = None


class ChallengeTargets(CamelModel):
    target_weight: float | None = None
    target_body_fat_percentage: float | None = None
    target_muscle_mass: float | None = None
    target_exercise_duration: StoredInt | None = None


class ChallengeRequest(ChallengeTargets):
    name: str
    start_date: date
    end_date: date

    @model_validator(mode="after")
    def check_range(self) -> "ChallengeRequest":
        if self.end_date < self.start_date:
            raise ValueError("endDate must not be before startDate")
        return self


class ChallengeShareRequest(CamelModel):
    to_user_id: EntityRef
    challenge_id: EntityRef


class _RoutineTypeField(CamelModel):
    routine_type: RoutineType

    @field_validator("routine_type", mode="before")
    @classmethod
    def upper_case(cls, value):
        if isinstance(value, str):
            return value.strip().upper()
        return value


class RoutineRequest(_RoutineTypeField):
    routine_items: list[str] = []


class RoutineCheckRequest(_RoutineTypeField):
    check_date: date
    checked_items: list[str] = []
