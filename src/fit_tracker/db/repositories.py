"""Data access layer for fit-tracker."""

import json
import logging
from datetime import date, datetime
from pathlib import Path

import aiosqlite

from ..errors import ConflictError, InvalidStateError
from ..models.challenge import Challenge, ChallengeShare, ShareStatus
from ..models.exercise_record import ExerciseRecord
from ..models.routine import Routine, RoutineCheck, RoutineType
from ..models.user import User
from .engine import SQLITE_MAX_INTEGER, get_db_path

logger = logging.getLogger(__name__)


def _now() -> str:
    return datetime.now().isoformat(timespec="seconds")


def _to_datetime(value: str | None) -> datetime | None:
    return datetime.fromisoformat(value) if value else None


def _dump_items(items: list[str]) -> str:
    return json.dumps(list(items), ensure_ascii=False)


def _load_items(raw: str | None, context: str) -> list[str]:
    """Decode a stored item list; malformed data reads as an empty list."""
    if not raw:
        return []
    try:
        items = json.loads(raw)
    except json.JSONDecodeError:
        logger.warning("Malformed item list in %s, treating as empty", context)
        return []
    if not isinstance(items, list):
        logger.warning("Item list in %s is not a list, treating as empty", context)
        return []
    return [str(item) for item in items]


class UserRepository:
    """Repository for user accounts."""

    def __init__(self, db_path: Path | None = None):
        self.db_path = db_path or get_db_path()

    async def create(self, user: User) -> int:
        """Create a new user.

        Raises:
            ConflictError: If the username is already taken
        """
        now = _now()
        async with aiosqlite.connect(self.db_path) as db:
            try:
                cursor = await db.execute(
                    """
                    INSERT INTO users
                    (username, password_hash, email, name, birth_date, gender,
                     created_at, updated_at)
                    VALUES (?, ?, ?, ?, ?, ?, ?, ?)
                    """,
                    (
                        user.username,
                        user.password_hash,
                        user.email,
                        user.name,
                        user.birth_date,
                        user.gender,
                        now,
                        now,
                    ),
                )
            except aiosqlite.IntegrityError:
                raise ConflictError(f"Username '{user.username}' is already taken")
            await db.commit()
            user.id = cursor.lastrowid
            user.created_at = user.updated_at = datetime.fromisoformat(now)
            return user.id

    async def get(self, user_id: int) -> User | None:
        """Get a user by ID."""
        async with aiosqlite.connect(self.db_path) as db:
            db.row_factory = aiosqlite.Row
            cursor = await db.execute("SELECT * FROM users WHERE id = ?", (user_id,))
            row = await cursor.fetchone()
            if row is None:
                return None
            return self._row_to_user(row)

    async def get_by_username(self, username: str) -> User | None:
        """Get a user by username."""
        async with aiosqlite.connect(self.db_path) as db:
            db.row_factory = aiosqlite.Row
            cursor = await db.execute(
                "SELECT * FROM users WHERE username = ?", (username,)
            )
            row = await cursor.fetchone()
            if row is None:
                return None
            return self._row_to_user(row)

    async def list_all(self) -> list[User]:
        """List all users."""
        async with aiosqlite.connect(self.db_path) as db:
            db.row_factory = aiosqlite.Row
            cursor = await db.execute("SELECT * FROM users ORDER BY id")
            rows = await cursor.fetchall()
            return [self._row_to_user(row) for row in rows]

    async def search(self, query: str | None, exclude_id: int) -> list[User]:
        """Find other users by exact ID or case-insensitive username substring.

        An empty query returns every user except ``exclude_id``.
        """
        query = (query or "").strip()
        async with aiosqlite.connect(self.db_path) as db:
            db.row_factory = aiosqlite.Row
            if not query:
                cursor = await db.execute(
                    "SELECT * FROM users WHERE id != ? ORDER BY id", (exclude_id,)
                )
            elif query.isdecimal():
                user_id = int(query)
                if user_id > SQLITE_MAX_INTEGER:
                    return []
                cursor = await db.execute(
                    "SELECT * FROM users WHERE id = ? AND id != ?",
                    (user_id, exclude_id),
                )
            else:
                cursor = await db.execute(
                    """
                    SELECT * FROM users
                    WHERE LOWER(username) LIKE ? AND id != ?
                    ORDER BY username
                    """,
                    (f"%{query.lower()}%", exclude_id),
                )
            rows = await cursor.fetchall()
            return [self._row_to_user(row) for row in rows]

    def _row_to_user(self, row: aiosqlite.Row) -> User:
        return User(
            id=row["id"],
            username=row["username"],
            password_hash=row["password_hash"],
            email=row["email"],
            name=row["name"],
            birth_date=row["birth_date"],
            gender=row["gender"],
            created_at=_to_datetime(row["created_at"]),
            updated_at=_to_datetime(row["updated_at"]),
        )


class ExerciseRecordRepository:
    """Repository for daily exercise records."""

    def __init__(self, db_path: Path | None = None):
        self.db_path = db_path or get_db_path()

    async def upsert(self, record: ExerciseRecord) -> ExerciseRecord:
        """Create or replace the record for (user_id, record_date)."""
        now = _now()
        async with aiosqlite.connect(self.db_path) as db:
            await db.execute(
                """
                INSERT INTO exercise_records
                (user_id, record_date, weight, body_fat_percentage, muscle_mass,
                 muscle_percentage, exercise_type, exercise_duration, image_url,
                 created_at, updated_at)
                VALUES (?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?)
                ON CONFLICT(user_id, record_date) DO UPDATE SET
                    weight = excluded.weight,
                    body_fat_percentage = excluded.body_fat_percentage,
                    muscle_mass = excluded.muscle_mass,
                    muscle_percentage = excluded.muscle_percentage,
                    exercise_type = excluded.exercise_type,
                    exercise_duration = excluded.exercise_duration,
                    image_url = excluded.image_url,
                    updated_at = excluded.updated_at
                """,
                (
                    record.user_id,
                    record.record_date.isoformat(),
                    record.weight,
                    record.body_fat_percentage,
                    record.muscle_mass,
                    record.muscle_percentage,
                    record.exercise_type,
                    record.exercise_duration,
                    record.image_url,
                    now,
                    now,
                ),
            )
            await db.commit()

        saved = await self.get_by_date(record.user_id, record.record_date)
        return saved

    async def get_by_date(self, user_id: int, record_date: date) -> ExerciseRecord | None:
        """Get a user's record for one day."""
        async with aiosqlite.connect(self.db_path) as db:
            db.row_factory = aiosqlite.Row
            cursor = await db.execute(
                "SELECT * FROM exercise_records WHERE user_id = ? AND record_date = ?",
                (user_id, record_date.isoformat()),
            )
            row = await cursor.fetchone()
            if row is None:
                return None
            return self._row_to_record(row)

    async def list_by_user(self, user_id: int) -> list[ExerciseRecord]:
        """All records of a user, newest first."""
        async with aiosqlite.connect(self.db_path) as db:
            db.row_factory = aiosqlite.Row
            cursor = await db.execute(
                """
                SELECT * FROM exercise_records
                WHERE user_id = ?
                ORDER BY record_date DESC
                """,
                (user_id,),
            )
            rows = await cursor.fetchall()
            return [self._row_to_record(row) for row in rows]

    async def list_between(self, user_id: int, start: date, end: date) -> list[ExerciseRecord]:
        """Records of a user with start <= record_date <= end, oldest first."""
        async with aiosqlite.connect(self.db_path) as db:
            db.row_factory = aiosqlite.Row
            cursor = await db.execute(
                """
                SELECT * FROM exercise_records
                WHERE user_id = ? AND record_date BETWEEN ? AND ?
                ORDER BY record_date
                """,
                (user_id, start.isoformat(), end.isoformat()),
            )
            rows = await cursor.fetchall()
            return [self._row_to_record(row) for row in rows]

    def _row_to_record(self, row: aiosqlite.Row) -> ExerciseRecord:
        return ExerciseRecord(
            id=row["id"],
            user_id=row["user_id"],
            record_date=date.fromisoformat(row["record_date"]),
            weight=row["weight"],
            body_fat_percentage=row["body_fat_percentage"],
            muscle_mass=row["muscle_mass"],
            muscle_percentage=row["muscle_percentage"],
            exercise_type=row["exercise_type"],
            exercise_duration=row["exercise_duration"],
            image_url=row["image_url"],
            created_at=_to_datetime(row["created_at"]),
            updated_at=_to_datetime(row["updated_at"]),
        )


class ChallengeRepository:
    """Repository for challenges."""

    def __init__(self, db_path: Path | None = None):
        self.db_path = db_path or get_db_path()

    async def create(self, challenge: Challenge) -> int:
        """Create a new challenge."""
        now = _now()
        async with aiosqlite.connect(self.db_path) as db:
            cursor = await db.execute(
                """
                INSERT INTO challenges
                (user_id, name, start_date, end_date, target_weight,
                 target_body_fat_percentage, target_muscle_mass,
                 target_exercise_duration, created_at, updated_at)
                VALUES (?, ?, ?, ?, ?, ?, ?, ?, ?, ?)
                """,
                (
                    challenge.user_id,
                    challenge.name,
                    challenge.start_date.isoformat(),
                    challenge.end_date.isoformat(),
                    challenge.target_weight,
                    challenge.target_body_fat_percentage,
                    challenge.target_muscle_mass,
                    challenge.target_exercise_duration,
                    now,
                    now,
                ),
            )
            await db.commit()
            challenge.id = cursor.lastrowid
            challenge.created_at = challenge.updated_at = datetime.fromisoformat(now)
            return challenge.id

    async def get(self, challenge_id: int) -> Challenge | None:
        """Get a challenge by ID."""
        async with aiosqlite.connect(self.db_path) as db:
            db.row_factory = aiosqlite.Row
            cursor = await db.execute(
                "SELECT * FROM challenges WHERE id = ?", (challenge_id,)
            )
            row = await cursor.fetchone()
            if row is None:
                return None
            return self._row_to_challenge(row)

    async def list_by_user(self, user_id: int) -> list[Challenge]:
        """Challenges owned by a user, latest start date first."""
        async with aiosqlite.connect(self.db_path) as db:
            db.row_factory = aiosqlite.Row
            cursor = await db.execute(
                """
                SELECT * FROM challenges
                WHERE user_id = ?
                ORDER BY start_date DESC, id DESC
                """,
                (user_id,),
            )
            rows = await cursor.fetchall()
            return [self._row_to_challenge(row) for row in rows]

    async def update_targets(self, challenge: Challenge) -> None:
        """Persist the four target fields of an existing challenge."""
        if challenge.id is None:
            raise ValueError("Challenge must have an ID to update")

        now = _now()
        async with aiosqlite.connect(self.db_path) as db:
            await db.execute(
                """
                UPDATE challenges SET
                    target_weight = ?, target_body_fat_percentage = ?,
                    target_muscle_mass = ?, target_exercise_duration = ?,
                    updated_at = ?
                WHERE id = ?
                """,
                (
                    challenge.target_weight,
                    challenge.target_body_fat_percentage,
                    challenge.target_muscle_mass,
                    challenge.target_exercise_duration,
                    now,
                    challenge.id,
                ),
            )
            await db.commit()
        challenge.updated_at = datetime.fromisoformat(now)

    def _row_to_challenge(self, row: aiosqlite.Row) -> Challenge:
        return Challenge(
            id=row["id"],
            user_id=row["user_id"],
            name=row["name"],
            start_date=date.fromisoformat(row["start_date"]),
            end_date=date.fromisoformat(row["end_date"]),
            target_weight=row["target_weight"],
            target_body_fat_percentage=row["target_body_fat_percentage"],
            target_muscle_mass=row["target_muscle_mass"],
            target_exercise_duration=row["target_exercise_duration"],
            created_at=_to_datetime(row["created_at"]),
            updated_at=_to_datetime(row["updated_at"]),
        )


class ChallengeShareRepository:
    """Repository for challenge shares."""

    def __init__(self, db_path: Path | None = None):
        self.db_path = db_path or get_db_path()

    async def create(self, share: ChallengeShare) -> int:
        """Create a share request.

        Raises:
            ConflictError: If a PENDING share already exists for the same
                challenge and recipient
        """
        now = _now()
        async with aiosqlite.connect(self.db_path) as db:
            try:
                cursor = await db.execute(
                    """
                    INSERT INTO challenge_shares
                    (from_user_id, to_user_id, challenge_id, status, created_at, updated_at)
                    VALUES (?, ?, ?, ?, ?, ?)
                    """,
                    (
                        share.from_user_id,
                        share.to_user_id,
                        share.challenge_id,
                        share.status.value,
                        now,
                        now,
                    ),
                )
            except aiosqlite.IntegrityError:
                raise ConflictError(
                    f"A pending share of challenge {share.challenge_id} "
                    f"to user {share.to_user_id} already exists"
                )
            await db.commit()
            share.id = cursor.lastrowid
            share.created_at = share.updated_at = datetime.fromisoformat(now)
            return share.id

    async def get(self, share_id: int) -> ChallengeShare | None:
        """Get a share by ID."""
        async with aiosqlite.connect(self.db_path) as db:
            db.row_factory = aiosqlite.Row
            cursor = await db.execute(
                "SELECT * FROM challenge_shares WHERE id = ?", (share_id,)
            )
            row = await cursor.fetchone()
            if row is None:
                return None
            return self._row_to_share(row)

    async def list_received(
        self, to_user_id: int, status: ShareStatus = ShareStatus.PENDING
    ) -> list[ChallengeShare]:
        """Shares addressed to a user in the given status, newest first."""
        async with aiosqlite.connect(self.db_path) as db:
            db.row_factory = aiosqlite.Row
            cursor = await db.execute(
                """
                SELECT * FROM challenge_shares
                WHERE to_user_id = ? AND status = ?
                ORDER BY created_at DESC, id DESC
                """,
                (to_user_id, status.value),
            )
            rows = await cursor.fetchall()
            return [self._row_to_share(row) for row in rows]

    async def list_sent(self, from_user_id: int) -> list[ChallengeShare]:
        """Shares sent by a user in any status, newest first."""
        async with aiosqlite.connect(self.db_path) as db:
            db.row_factory = aiosqlite.Row
            cursor = await db.execute(
                """
                SELECT * FROM challenge_shares
                WHERE from_user_id = ?
                ORDER BY created_at DESC, id DESC
                """,
                (from_user_id,),
            )
            rows = await cursor.fetchall()
            return [self._row_to_share(row) for row in rows]

    async def update_status(self, share: ChallengeShare) -> None:
        """Persist a status transition, only if the stored share is still PENDING.

        Raises:
            InvalidStateError: If another request already answered the share
        """
        if share.id is None:
            raise ValueError("Share must have an ID to update")

        now = _now()
        async with aiosqlite.connect(self.db_path) as db:
            cursor = await db.execute(
                """
                UPDATE challenge_shares SET status = ?, updated_at = ?
                WHERE id = ? AND status = ?
                """,
                (share.status.value, now, share.id, ShareStatus.PENDING.value),
            )
            await db.commit()
            if cursor.rowcount == 0:
                raise InvalidStateError(f"Share {share.id} is no longer pending")
        share.updated_at = datetime.fromisoformat(now)

    def _row_to_share(self, row: aiosqlite.Row) -> ChallengeShare:
        return ChallengeShare(
            id=row["id"],
            from_user_id=row["from_user_id"],
            to_user_id=row["to_user_id"],
            challenge_id=row["challenge_id"],
            status=ShareStatus(row["status"]),
            created_at=_to_datetime(row["created_at"]),
            updated_at=_to_datetime(row["updated_at"]),
        )


class RoutineRepository:
    """Repository for routine checklists."""

    def __init__(self, db_path: Path | None = None):
        self.db_path = db_path or get_db_path()

    async def upsert(self, routine: Routine) -> Routine:
        """Create or replace the routine for (user_id, routine_type)."""
        now = _now()
        async with aiosqlite.connect(self.db_path) as db:
            await db.execute(
                """
                INSERT INTO routines
                (user_id, routine_type, routine_items, created_at, updated_at)
                VALUES (?, ?, ?, ?, ?)
                ON CONFLICT(user_id, routine_type) DO UPDATE SET
                    routine_items = excluded.routine_items,
                    updated_at = excluded.updated_at
                """,
                (
                    routine.user_id,
                    routine.routine_type.value,
                    _dump_items(routine.routine_items),
                    now,
                    now,
                ),
            )
            await db.commit()

        return await self.get_by_type(routine.user_id, routine.routine_type)

    async def get_by_type(self, user_id: int, routine_type: RoutineType) -> Routine | None:
        """Get a user's routine of one type."""
        async with aiosqlite.connect(self.db_path) as db:
            db.row_factory = aiosqlite.Row
            cursor = await db.execute(
                "SELECT * FROM routines WHERE user_id = ? AND routine_type = ?",
                (user_id, routine_type.value),
            )
            row = await cursor.fetchone()
            if row is None:
                return None
            return self._row_to_routine(row)

    async def list_by_user(self, user_id: int) -> list[Routine]:
        """All routines of a user."""
        async with aiosqlite.connect(self.db_path) as db:
            db.row_factory = aiosqlite.Row
            cursor = await db.execute(
                "SELECT * FROM routines WHERE user_id = ? ORDER BY routine_type DESC",
                (user_id,),
            )
            rows = await cursor.fetchall()
            return [self._row_to_routine(row) for row in rows]

    async def get_items_by_type(self, user_id: int) -> dict[RoutineType, list[str]]:
        """Routine items per type, empty lists for types never configured."""
        items = {routine_type: [] for routine_type in RoutineType}
        for routine in await self.list_by_user(user_id):
            items[routine.routine_type] = routine.routine_items
        return items

    def _row_to_routine(self, row: aiosqlite.Row) -> Routine:
        return Routine(
            id=row["id"],
            user_id=row["user_id"],
            routine_type=RoutineType(row["routine_type"]),
            routine_items=_load_items(row["routine_items"], f"routine {row['id']}"),
            created_at=_to_datetime(row["created_at"]),
            updated_at=_to_datetime(row["updated_at"]),
        )


class RoutineCheckRepository:
    """Repository for daily routine checks."""

    def __init__(self, db_path: Path | None = None):
        self.db_path = db_path or get_db_path()

    async def upsert(self, check: RoutineCheck) -> RoutineCheck:
        """Create or replace the check for (user_id, check_date, routine_type)."""
        now = _now()
        async with aiosqlite.connect(self.db_path) as db:
            await db.execute(
                """
                INSERT INTO routine_checks
                (user_id, check_date, routine_type, checked_items, created_at, updated_at)
                VALUES (?, ?, ?, ?, ?, ?)
                ON CONFLICT(user_id, check_date, routine_type) DO UPDATE SET
                    checked_items = excluded.checked_items,
                    updated_at = excluded.updated_at
                """,
                (
                    check.user_id,
                    check.check_date.isoformat(),
                    check.routine_type.value,
                    _dump_items(check.checked_items),
                    now,
                    now,
                ),
            )
            await db.commit()

        checks = await self.list_by_date(check.user_id, check.check_date)
        return next(c for c in checks if c.routine_type == check.routine_type)

    async def list_by_date(self, user_id: int, check_date: date) -> list[RoutineCheck]:
        """All checks of a user on one day."""
        async with aiosqlite.connect(self.db_path) as db:
            db.row_factory = aiosqlite.Row
            cursor = await db.execute(
                """
                SELECT * FROM routine_checks
                WHERE user_id = ? AND check_date = ?
                ORDER BY routine_type DESC
                """,
                (user_id, check_date.isoformat()),
            )
            rows = await cursor.fetchall()
            return [self._row_to_check(row) for row in rows]

    async def list_between(self, user_id: int, start: date, end: date) -> list[RoutineCheck]:
        """Checks of a user with start <= check_date <= end."""
        async with aiosqlite.connect(self.db_path) as db:
            db.row_factory = aiosqlite.Row
            cursor = await db.execute(
                """
                SELECT * FROM routine_checks
                WHERE user_id = ? AND check_date BETWEEN ? AND ?
                ORDER BY check_date
                """,
                (user_id, start.isoformat(), end.isoformat()),
            )
            rows = await cursor.fetchall()
            return [self._row_to_check(row) for row in rows]

    async def get_checked_by_date(
        self, user_id: int, start: date, end: date
    ) -> dict[date, dict[RoutineType, list[str]]]:
        """Checked items grouped by date then routine type."""
        grouped: dict[date, dict[RoutineType, list[str]]] = {}
        for check in await self.list_between(user_id, start, end):
            grouped.setdefault(check.check_date, {})[check.routine_type] = check.checked_items
        return grouped

    def _row_to_check(self, row: aiosqlite.Row) -> RoutineCheck:
        return RoutineCheck(
            id=row["id"],
            user_id=row["user_id"],
            check_date=date.fromisoformat(row["check_date"]),
            routine_type=RoutineType(row["routine_type"]),
            checked_items=_load_items(row["checked_items"], f"routine check {row['id']}"),
            created_at=_to_datetime(row["created_at"]),
            updated_at=_to_datetime(row["updated_at"]),
        )
