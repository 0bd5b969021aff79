"""Runtime configuration for the Telegram bot."""

from __future__ import annotations

from dataclasses import dataclass
import os
from pathlib import Path
from typing import Mapping

from platewise.ingestion.importer import DEFAULT_MAX_UPLOAD_BYTES


DEFAULT_DB_PATH = ".platewise.db"
DEFAULT_PAGE_SIZE = 10

_TRUE_VALUES = {"1", "true", "yes", "on"}
_FALSE_VALUES = {"0", "false", "no", "off"}


def _parse_positive_int(*, name: str, raw_value: str, minimum: int = 1) -> int:
    value = int(raw_value)
    if value < minimum:
        raise ValueError(f"{name} must be >= {minimum}")
    return value


def _parse_flag(*, name: str, raw_value: str) -> bool:
    lowered = raw_value.lower()
    if lowered in _TRUE_VALUES:
        return True
    if lowered in _FALSE_VALUES:
        return False
    raise ValueError(f"{name} must be one of: {', '.join(sorted(_TRUE_VALUES | _FALSE_VALUES))}")


@dataclass(frozen=True, slots=True)
class BotSettings:
    """Validated Telegram bot runtime settings."""

    token: str
    db_path: Path
    max_upload_bytes: int = DEFAULT_MAX_UPLOAD_BYTES
    page_size: int = DEFAULT_PAGE_SIZE
    ocr_enabled: bool = False

    @classmethod
    def from_env(cls, environ: Mapping[str, str] | None = None) -> "BotSettings":
        source: Mapping[str, str] = os.environ if environ is None else environ

        token = source.get("TELEGRAM_BOT_TOKEN", "").strip()
        if not token:
            raise ValueError("Missing required bot environment variable: TELEGRAM_BOT_TOKEN")

        db_path_raw = source.get("PLATEWISE_DB_PATH", DEFAULT_DB_PATH).strip()
        if not db_path_raw:
            raise ValueError("PLATEWISE_DB_PATH cannot be empty")

        max_upload_raw = source.get("PLATEWISE_MAX_UPLOAD_BYTES", str(DEFAULT_MAX_UPLOAD_BYTES)).strip()
        page_size_raw = source.get("PLATEWISE_PAGE_SIZE", str(DEFAULT_PAGE_SIZE)).strip()
        ocr_raw = source.get("PLATEWISE_OCR_ENABLED", "false").strip()

        if not max_upload_raw:
            raise ValueError("PLATEWISE_MAX_UPLOAD_BYTES cannot be empty")
        if not page_size_raw:
            raise ValueError("PLATEWISE_PAGE_SIZE cannot be empty")

        max_upload_bytes = _parse_positive_int(
            name="PLATEWISE_MAX_UPLOAD_BYTES",
            raw_value=max_upload_raw,
            minimum=1024,
        )
        page_size = _parse_positive_int(
            name="PLATEWISE_PAGE_SIZE",
            raw_value=page_size_raw,
            minimum=1,
        )
        ocr_enabled = _parse_flag(name="PLATEWISE_OCR_ENABLED", raw_value=ocr_raw or "false")

        return cls(
            token=token,
            db_path=Path(db_path_raw),
            max_upload_bytes=max_upload_bytes,
            page_size=page_size,
            ocr_enabled=ocr_enabled,
        )
