"""Application configuration objects and helpers."""

from __future__ import annotations

import os
from pathlib import Path
from typing import Any

from dotenv import load_dotenv

from .domain.budget import PeriodType

load_dotenv()


def _env_bool(name: str, default: bool = False) -> bool:
    """Interpret environment variable values as booleans."""

    value = os.getenv(name)
    if value is None:
        return default
    return value.strip().lower() in {"1", "true", "yes", "on"}


def _env_int(name: str, default: int) -> int:
    """Interpret environment variable values as positive integers."""

    value = os.getenv(name)
    if value is None:
        return default
    try:
        parsed = int(value.strip())
    except ValueError:
        return default
    return parsed if parsed > 0 else default


class BaseConfig:
    """Base configuration shared across environments."""

    DB_FILENAME = "hearthbudget.db"
    DEFAULT_LOOKBACK_MONTHS = 24

    def __init__(self) -> None:
        self.DATA_DIR = self._resolve_data_dir()
        self.DEV_MODE = _env_bool("HEARTHBUDGET_DEV_MODE", default=True)
        self.DATABASE_URL = os.getenv("HEARTHBUDGET_DATABASE_URL", self._build_sqlite_url())
        self.DEFAULT_PERIOD = PeriodType.coerce(os.getenv("HEARTHBUDGET_DEFAULT_PERIOD"))
        self.VARIANCE_LOOKBACK_MONTHS = _env_int(
            "HEARTHBUDGET_VARIANCE_LOOKBACK_MONTHS", self.DEFAULT_LOOKBACK_MONTHS
        )

    def _resolve_data_dir(self) -> Path:
        """Return the directory where the SQLite file and logs live."""

        data_root = os.getenv("HEARTHBUDGET_DATA_DIR", "instance")
        path = Path(data_root).expanduser().resolve()
        path.mkdir(parents=True, exist_ok=True)
        return path

    def _build_sqlite_url(self) -> str:
        """Construct the default SQLite URL inside the data directory."""

        db_path = self.DATA_DIR / self.DB_FILENAME
        return f"sqlite:///{db_path}"

    def sqlalchemy_engine_options(self) -> dict[str, Any]:
        """Expose engine kwargs for SQLModel to consume."""

        if not self.DATABASE_URL.startswith("sqlite"):
            return {}
        return {"connect_args": {"check_same_thread": False}}


class TestConfig(BaseConfig):
    """Configuration for test runs; never touches the on-disk database."""

    __test__ = False  # keep pytest from collecting this as a test class

    def __init__(self) -> None:
        super().__init__()
        self.DATABASE_URL = "sqlite://"
