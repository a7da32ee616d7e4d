"""Request dependencies shared by the routers."""

import logging
from datetime import date
from pathlib import Path
from typing import Annotated

from fastapi import Header, Path as PathParam, Request

from ..config import Settings
from ..db.engine import SQLITE_MAX_INTEGER
from ..db.repositories import UserRepository
from ..errors import BadRequestError, UnauthorizedError

logger = logging.getLogger(__name__)

# Path ids outside the stored integer range fail validation (400)
EntityId = Annotated[int, PathParam(ge=1, le=SQLITE_MAX_INTEGER)]


def get_settings(request: Request) -> Settings:
    """Get settings from app state."""
    return request.app.state.settings


def get_db_path(request: Request) -> Path:
    """Get the database path from app state."""
    return request.app.state.settings.db_path


async def current_user_id(
    request: Request,
    x_user_id: str | None = Header(default=None),
) -> int:
    """Resolve the caller from the X-User-Id header.

    The header must name an existing user. Only when the development
    fallback is configured may it be omitted.
    """
    settings = get_settings(request)

    if x_user_id is None or not x_user_id.strip():
        if settings.dev_default_user is None:
            raise UnauthorizedError("Missing X-User-Id header")
        user_id = settings.dev_default_user
    else:
        try:
            user_id = int(x_user_id)
        except ValueError:
            raise UnauthorizedError("X-User-Id must be a numeric user id")

    if not 1 <= user_id <= SQLITE_MAX_INTEGER:
        raise UnauthorizedError(f"Unknown user {user_id}")

    user = await UserRepository(settings.db_path).get(user_id)
    if user is None:
        logger.warning("Rejected request for unknown user id %s", user_id)
        raise UnauthorizedError(f"Unknown user {user_id}")
    return user_id


def parse_date(value: str, field: str = "date") -> date:
    """Parse a YYYY-MM-DD path or query value."""
    try:
        return date.fromisoformat(value)
    except ValueError:
        raise BadRequestError(f"Invalid {field}: {value!r} (expected YYYY-MM-DD)")
