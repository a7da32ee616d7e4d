"""Login, signup and token presence check."""

import logging
from pathlib import Path
from uuid import uuid4

from fastapi import APIRouter, Depends, Header
from fastapi.responses import JSONResponse

from ...db.repositories import UserRepository
from ...errors import ConflictError
from ...models.user import User
from ..deps import get_db_path
from ..schemas import LoginRequest, SignupRequest

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/auth", tags=["auth"])

INVALID_CREDENTIALS = "Invalid username or password"


@router.post("/login")
async def login(body: LoginRequest, db_path: Path = Depends(get_db_path)):
    """Check credentials and hand out an opaque token."""
    user = await UserRepository(db_path).get_by_username(body.username)

    if user is None or not user.check_password(body.password):
        logger.warning("Failed login for %s", body.username)
        return JSONResponse(
            status_code=401,
            content={"success": False, "message": INVALID_CREDENTIALS, "token": None, "user": None},
        )

    logger.info("User %s logged in", user.username)
    return {
        "success": True,
        "message": "Login successful",
        "token": str(uuid4()),
        "user": user.to_dict(),
    }


@router.post("/signup", status_code=201)
async def signup(body: SignupRequest, db_path: Path = Depends(get_db_path)):
    """Register a new account."""
    user = User(
        username=body.username.strip(),
        email=body.email,
        name=body.name,
        birth_date=body.birth_date,
        gender=body.gender,
    )
    user.set_password(body.password)

    try:
        user_id = await UserRepository(db_path).create(user)
    except ConflictError as e:
        logger.warning("Signup rejected: %s", e.message)
        return JSONResponse(
            status_code=409,
            content={"success": False, "message": e.message, "userId": None},
        )

    logger.info("Registered user %s (id=%s)", user.username, user_id)
    return {"success": True, "message": "Signup complete", "userId": user_id}


@router.get("/validate")
async def validate_token(authorization: str | None = Header(default=None)) -> bool:
    """Presence-only check of a bearer token."""
    return authorization is not None and authorization.startswith("Bearer ")
