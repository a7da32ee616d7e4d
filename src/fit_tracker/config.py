"""Runtime configuration and logging setup."""

import logging
import os
from dataclasses import dataclass, field
from pathlib import Path

# Default data directory (repository root /data)
DATA_DIR = Path(__file__).parent.parent.parent / "data"

ENV_PREFIX = "FIT_TRACKER_"

LOG_FORMAT = "%(asctime)s %(levelname)s [%(name)s] %(message)s"


def _env(name: str, default: str | None = None) -> str | None:
    value = os.getenv(ENV_PREFIX + name)
    if value is None or value.strip() == "":
        return default
    return value.strip()


@dataclass
class Settings:
    """Application settings.

    Every field can be overridden with a ``FIT_TRACKER_*`` environment
    variable; see ``from_env``.
    """

    data_dir: Path = DATA_DIR
    upload_dir: Path | None = None
    dev_default_user: int | None = None  # identity used when X-User-Id is absent
    cors_origins: list[str] = field(default_factory=lambda: ["http://localhost:3000"])
    log_level: str = "INFO"

    @property
    def db_path(self) -> Path:
        return self.data_dir / "fit_tracker.db"

    @property
    def image_dir(self) -> Path:
        if self.upload_dir is not None:
            return self.upload_dir
        return self.data_dir / "uploads" / "images"

    @classmethod
    def from_env(cls) -> "Settings":
        """Build settings from the process environment."""
        settings = cls()

        data_dir = _env("DATA_DIR")
        if data_dir:
            settings.data_dir = Path(data_dir)

        upload_dir = _env("UPLOAD_DIR")
        if upload_dir:
            settings.upload_dir = Path(upload_dir)

        default_user = _env("DEV_DEFAULT_USER")
        if default_user:
            try:
                settings.dev_default_user = int(default_user)
            except ValueError:
                raise ValueError(
                    f"{ENV_PREFIX}DEV_DEFAULT_USER must be an integer user id, got {default_user!r}"
                )

        origins = _env("CORS_ORIGINS")
        if origins:
            settings.cors_origins = [o.strip() for o in origins.split(",") if o.strip()]

        settings.log_level = (_env("LOG_LEVEL", settings.log_level) or "INFO").upper()
        return settings


def configure_logging(level: str = "INFO") -> None:
    """Install a single stream handler on the package logger.

    Calling it again replaces the handler, so it always writes to the
    current ``sys.stderr``.
    """
    logger = logging.getLogger("fit_tracker")
    logger.setLevel(level.upper())
    for old in [h for h in logger.handlers if getattr(h, "_fit_tracker", False)]:
        logger.removeHandler(old)
    handler = logging.StreamHandler()
    handler.setFormatter(logging.Formatter(LOG_FORMAT))
    handler._fit_tracker = True
    logger.addHandler(handler)
