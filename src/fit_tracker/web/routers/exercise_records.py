"""Daily exercise record routes, including photo uploads."""

import logging
from pathlib import Path
from uuid import uuid4

from fastapi import APIRouter, Depends, File, Query, UploadFile
from fastapi.responses import FileResponse, PlainTextResponse

from ...config import Settings
from ...db.repositories import ExerciseRecordRepository
from ...errors import BadRequestError, NotFoundError
from ...models.exercise_record import ExerciseRecord
from ..deps import current_user_id, get_db_path, get_settings, parse_date
from ..schemas import ExerciseRecordRequest

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/exercise-records", tags=["exercise-records"])

IMAGE_URL_PREFIX = "/api/exercise-records/images/"


async def _store_upload(upload: UploadFile, image_dir: Path) -> str | None:
    """Save an uploaded file under a random name and return its public URL.

    Returns None for an empty upload.
    """
    content = await upload.read()
    if not content:
        return None
    extension = Path(upload.filename or "").suffix
    filename = f"{uuid4()}{extension}"
    image_dir.mkdir(parents=True, exist_ok=True)
    (image_dir / filename).write_bytes(content)
    return IMAGE_URL_PREFIX + filename


@router.get("")
async def list_records(
    user_id: int = Depends(current_user_id),
    db_path: Path = Depends(get_db_path),
):
    """All records of the caller, newest first."""
    records = await ExerciseRecordRepository(db_path).list_by_user(user_id)
    return [record.to_dict() for record in records]


@router.post("")
async def save_record(
    body: ExerciseRecordRequest,
    user_id: int = Depends(current_user_id),
    db_path: Path = Depends(get_db_path),
):
    """Create or replace the caller's record for a day."""
    record = ExerciseRecord(
        user_id=user_id,
        record_date=body.record_date,
        weight=body.weight,
        body_fat_percentage=body.body_fat_percentage,
        muscle_mass=body.muscle_mass,
        muscle_percentage=body.muscle_percentage,
        exercise_type=body.exercise_type,
        exercise_duration=body.exercise_duration,
        image_url=body.image_url,
    )
    saved = await ExerciseRecordRepository(db_path).upsert(record)
    logger.info("Saved exercise record %s for user %s on %s", saved.id, user_id, saved.record_date)
    return saved.to_dict()


@router.get("/date/{record_date}")
async def get_record_by_date(
    record_date: str,
    user_id: int = Depends(current_user_id),
    db_path: Path = Depends(get_db_path),
):
    """The caller's record for one day."""
    day = parse_date(record_date)
    record = await ExerciseRecordRepository(db_path).get_by_date(user_id, day)
    if record is None:
        raise NotFoundError(f"No record on {day.isoformat()}")
    return record.to_dict()


@router.get("/range")
async def get_records_in_range(
    start_date: str = Query(alias="startDate"),
    end_date: str = Query(alias="endDate"),
    user_id: int = Depends(current_user_id),
    db_path: Path = Depends(get_db_path),
):
    """The caller's records between two dates, both inclusive."""
    start = parse_date(start_date, "startDate")
    end = parse_date(end_date, "endDate")
    records = await ExerciseRecordRepository(db_path).list_between(user_id, start, end)
    return [record.to_dict() for record in records]


@router.post("/upload", response_class=PlainTextResponse)
async def upload_image(
    file: UploadFile = File(...),
    user_id: int = Depends(current_user_id),
    settings: Settings = Depends(get_settings),
):
    """Store a single photo and return its URL."""
    url = await _store_upload(file, settings.image_dir)
    if url is None:
        raise BadRequestError("File is empty")
    logger.info("User %s uploaded %s", user_id, url)
    return url


@router.post("/upload-multiple")
async def upload_images(
    files: list[UploadFile] = File(...),
    user_id: int = Depends(current_user_id),
    settings: Settings = Depends(get_settings),
):
    """Store several photos, skipping empty parts, and return their URLs."""
    urls = []
    for upload in files:
        url = await _store_upload(upload, settings.image_dir)
        if url is not None:
            urls.append(url)

    if not urls:
        raise BadRequestError("No files uploaded")

    logger.info("User %s uploaded %d images", user_id, len(urls))
    return urls


@router.get("/images/{filename}")
async def get_image(filename: str, settings: Settings = Depends(get_settings)):
    """Serve a previously uploaded photo."""
    image_dir = settings.image_dir.resolve()
    path = (image_dir / filename).resolve()
    if path.parent != image_dir or not path.is_file():
        raise NotFoundError(f"Image {filename} not found")
    return FileResponse(path)
