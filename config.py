import os
from typing import List, Optional

from dotenv import load_dotenv
from pydantic import BaseModel, Field

DEFAULT_LSF_BASE_URL = "https://www.lsf.tu-dortmund.de/qisserver/rds"

# DAP1, PO, BS, BS Ü, PA Prosem, KoKoVa PG, GDV Blocksem, LaL Seminar, invalid
DEFAULT_CATALOG_IDS = [
    283038,
    285849,
    283046,
    286735,
    286085,
    287390,
    283059,
    285848,
    12345,
]


class Settings(BaseModel):
    lsf_base_url: str = DEFAULT_LSF_BASE_URL
    catalog_ids: List[int] = Field(default_factory=lambda: list(DEFAULT_CATALOG_IDS))
    max_workers: int = Field(default=8, ge=1)
    request_timeout: float = Field(default=10.0, gt=0)
    retry_attempts: int = Field(default=3, ge=1)
    plan_path: Optional[str] = None


def parse_catalog_ids(raw: str) -> List[int]:
    """Parse a comma separated list of LSF catalog ids."""
    ids = []
    for item in raw.split(","):
        item = item.strip()
        if not item:
            continue
        try:
            ids.append(int(item))
        except ValueError:
            raise ValueError(f"CATALOG_IDS must be integers, got: {item}")
    return ids


def _get_number(name: str, cast, default):
    raw = os.getenv(name)
    if raw is None or not raw.strip():
        return default
    try:
        return cast(raw.strip())
    except ValueError:
        raise ValueError(f"{name} must be a number, got: {raw}")


def get_settings() -> Settings:
    """Load settings from the environment (and a .env file, if present).

    Raises:
        ValueError: if a variable is set to an invalid value
    """
    load_dotenv()

    settings = Settings(
        max_workers=_get_number("MAX_WORKERS", int, 8),
        request_timeout=_get_number("REQUEST_TIMEOUT", float, 10.0),
        retry_attempts=_get_number("RETRY_ATTEMPTS", int, 3),
        plan_path=os.getenv("PLAN_PATH") or None,
    )

    base_url = os.getenv("LSF_BASE_URL")
    if base_url:
        settings = settings.model_copy(update={"lsf_base_url": base_url.rstrip("?")})

    raw_ids = os.getenv("CATALOG_IDS")
    if raw_ids:
        settings = settings.model_copy(update={"catalog_ids": parse_catalog_ids(raw_ids)})

    return settings
