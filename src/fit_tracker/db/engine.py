"""Database engine setup and initialization."""

import logging
from datetime import datetime
from pathlib import Path

import aiosqlite
from werkzeug.security import generate_password_hash

from ..config import DATA_DIR

logger = logging.getLogger(__name__)

# Largest value an INTEGER column (and a row id) can hold
SQLITE_MAX_INTEGER = 2**63 - 1

# Demo accounts created by `fit-tracker init`
DEMO_USERS = [
    {"username": "admin", "password": "admin123", "email": "admin@example.com", "name": "Administrator"},
    {"username": "user", "password": "user123", "email": "user@example.com", "name": "Demo User"},
]


def get_db_path(data_dir: Path | None = None) -> Path:
    """Get the database file path."""
    if data_dir is None:
        data_dir = DATA_DIR
    data_dir.mkdir(parents=True, exist_ok=True)
    return data_dir / "fit_tracker.db"


async def init_db(db_path: Path | None = None) -> None:
    """Initialize the database schema.

    Natural keys are backed by unique constraints so that upserts can use
    ``INSERT ... ON CONFLICT`` instead of read-then-write.
    """
    if db_path is None:
        db_path = get_db_path()
    db_path.parent.mkdir(parents=True, exist_ok=True)

    async with aiosqlite.connect(db_path) as db:
        await db.execute("""
            CREATE TABLE IF NOT EXISTS users (
                id INTEGER PRIMARY KEY AUTOINCREMENT,
                username TEXT UNIQUE NOT NULL,
                password_hash TEXT NOT NULL,
                email TEXT,
                name TEXT,
                birth_date TEXT,
                gender TEXT,
                created_at TIMESTAMP,
                updated_at TIMESTAMP
            )
        """)

        await db.execute("""
            CREATE TABLE IF NOT EXISTS exercise_records (
                id INTEGER PRIMARY KEY AUTOINCREMENT,
                user_id INTEGER NOT NULL,
                record_date TEXT NOT NULL,
                weight REAL,
                body_fat_percentage REAL,
                muscle_mass REAL,
                muscle_percentage REAL,
                exercise_type TEXT,
                exercise_duration INTEGER,
                image_url TEXT,
                created_at TIMESTAMP,
                updated_at TIMESTAMP,
                UNIQUE (user_id, record_date),
                FOREIGN KEY (user_id) REFERENCES users(id)
            )
        """)

        await db.execute("""
            CREATE TABLE IF NOT EXISTS challenges (
                id INTEGER PRIMARY KEY AUTOINCREMENT,
                user_id INTEGER NOT NULL,
                name TEXT NOT NULL,
                start_date TEXT NOT NULL,
                end_date TEXT NOT NULL,
                target_weight REAL,
                target_body_fat_percentage REAL,
                target_muscle_mass REAL,
                target_exercise_duration INTEGER,
                created_at TIMESTAMP,
                updated_at TIMESTAMP,
                FOREIGN KEY (user_id) REFERENCES users(id)
            )
        """)

        await db.execute("""
            CREATE TABLE IF NOT EXISTS challenge_shares (
                id INTEGER PRIMARY KEY AUTOINCREMENT,
                from_user_id INTEGER NOT NULL,
                to_user_id INTEGER NOT NULL,
                challenge_id INTEGER NOT NULL,
                status TEXT NOT NULL DEFAULT 'PENDING',
                created_at TIMESTAMP,
                updated_at TIMESTAMP,
                FOREIGN KEY (challenge_id) REFERENCES challenges(id)
            )
        """)

        await db.execute("""
            CREATE TABLE IF NOT EXISTS routines (
                id INTEGER PRIMARY KEY AUTOINCREMENT,
                user_id INTEGER NOT NULL,
                routine_type TEXT NOT NULL,
                routine_items TEXT NOT NULL DEFAULT '[]',
                created_at TIMESTAMP,
                updated_at TIMESTAMP,
                UNIQUE (user_id, routine_type)
            )
        """)

        await db.execute("""
            CREATE TABLE IF NOT EXISTS routine_checks (
                id INTEGER PRIMARY KEY AUTOINCREMENT,
                user_id INTEGER NOT NULL,
                check_date TEXT NOT NULL,
                routine_type TEXT NOT NULL,
                checked_items TEXT NOT NULL DEFAULT '[]',
                created_at TIMESTAMP,
                updated_at TIMESTAMP,
                UNIQUE (user_id, check_date, routine_type)
            )
        """)

        # At most one pending share per (challenge, recipient)
        await db.execute("""
            CREATE UNIQUE INDEX IF NOT EXISTS idx_challenge_shares_pending
            ON challenge_shares(challenge_id, to_user_id)
            WHERE status = 'PENDING'
        """)
        await db.execute("""
            CREATE INDEX IF NOT EXISTS idx_challenge_shares_to_user
            ON challenge_shares(to_user_id, status)
        """)
        await db.execute("""
            CREATE INDEX IF NOT EXISTS idx_challenge_shares_from_user
            ON challenge_shares(from_user_id)
        """)
        await db.execute("""
            CREATE INDEX IF NOT EXISTS idx_challenges_user
            ON challenges(user_id)
        """)

        await db.commit()

    logger.info("Database ready at %s", db_path)


async def seed_users(db_path: Path | None = None) -> int:
    """Create the demo accounts that do not exist yet.

    Returns:
        Number of accounts created
    """
    if db_path is None:
        db_path = get_db_path()

    created = 0
    now = datetime.now().isoformat(timespec="seconds")
    async with aiosqlite.connect(db_path) as db:
        for user in DEMO_USERS:
            cursor = await db.execute(
                """
                INSERT OR IGNORE INTO users
                (username, password_hash, email, name, created_at, updated_at)
                VALUES (?, ?, ?, ?, ?, ?)
                """,
                (
                    user["username"],
                    generate_password_hash(user["password"]),
                    user["email"],
                    user["name"],
                    now,
                    now,
                ),
            )
            if cursor.rowcount:
                created += 1
                logger.info("Created demo user %s", user["username"])

        await db.commit()
    return created
