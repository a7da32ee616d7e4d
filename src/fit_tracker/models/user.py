"""User account model."""

from dataclasses import dataclass
from datetime import datetime

from werkzeug.security import check_password_hash, generate_password_hash


@dataclass
class User:
    """A registered account.

    Only a salted hash of the password is kept; ``set_password`` and
    ``check_password`` are the only ways to touch it.
    """

    username: str
    password_hash: str = ""
    email: str | None = None
    name: str | None = None  # Display name
    birth_date: str | None = None  # YYYY-MM-DD as entered at signup
    gender: str | None = None  # MALE, FEMALE, OTHER
    id: int | None = None
    created_at: datetime | None = None
    updated_at: datetime | None = None

    def set_password(self, password: str) -> None:
        self.password_hash = generate_password_hash(password)

    def check_password(self, password: str) -> bool:
        if not self.password_hash:
            return False
        return check_password_hash(self.password_hash, password)

    @property
    def display_name(self) -> str:
        """Display name, falling back to the username."""
        return self.name if self.name else self.username

    def to_dict(self) -> dict:
        """Public user info (never includes the password hash)."""
        return {
            "id": self.id,
            "username": self.username,
            "email": self.email,
            "name": self.name,
        }
