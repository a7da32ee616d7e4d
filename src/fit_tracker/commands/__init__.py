"""CLI commands for fit-tracker."""

from .challenges import challenges
from .init import init
from .serve import serve
from .users import users

__all__ = [
    "challenges",
    "init",
    "serve",
    "users",
]
