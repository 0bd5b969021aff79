"""Entry points turning uploaded menus and raw text into candidate lists."""

from __future__ import annotations

import logging

from platewise.ingestion.candidates import extract_menu_candidates
from platewise.ingestion.errors import ExtractionError, ExtractionErrorKind
from platewise.ingestion.models import ImportOutcome, MenuCandidate
from platewise.ingestion.normalization import normalize_lines
from platewise.ingestion.pdf_text import recover_text

logger = logging.getLogger(__name__)

DEFAULT_MAX_UPLOAD_BYTES = 5 * 1024 * 1024
NO_CANDIDATES_MESSAGE = "No menu-like lines were detected. You may need to add items manually."

_ERROR_STATUS = {
    ExtractionErrorKind.EMPTY_DOCUMENT: 400,
    ExtractionErrorKind.UNREADABLE_DOCUMENT: 400,
    ExtractionErrorKind.DOCUMENT_TOO_LARGE: 413,
}


def extract_candidates_from_text(text: str | None) -> list[MenuCandidate]:
    """Normalize raw text and run the candidate heuristics over it.

    Raises ``ExtractionError(EMPTY_DOCUMENT)`` when *text* holds nothing but
    whitespace. Returns an empty list when text exists but no line looks like
    a dish.
    """

    return extract_menu_candidates(normalize_lines(text))


class MenuImporter:
    """Upload boundary: size check, PDF text recovery, and extraction."""

    def __init__(self, *, max_upload_bytes: int = DEFAULT_MAX_UPLOAD_BYTES, ocr_enabled: bool = False) -> None:
        if max_upload_bytes <= 0:
            raise ValueError("max_upload_bytes must be positive")
        self._max_upload_bytes = max_upload_bytes
        self._ocr_enabled = ocr_enabled

    @property
    def max_upload_bytes(self) -> int:
        return self._max_upload_bytes

    def extract(self, data: bytes, *, file_name: str | None = None) -> list[MenuCandidate]:
        """Return candidates for a PDF payload, raising ``ExtractionError`` on terminal failures."""

        if len(data) > self._max_upload_bytes:
            raise ExtractionError(
                ExtractionErrorKind.DOCUMENT_TOO_LARGE,
                f"File is too large. Maximum size: {self._max_upload_bytes // (1024 * 1024)} MB",
            )

        document = recover_text(data, file_name=file_name, ocr_enabled=self._ocr_enabled)
        candidates = extract_candidates_from_text(document.text)
        logger.info(
            "Extracted %d menu candidates from %s (%d pages, ocr=%s)",
            len(candidates),
            file_name or "<upload>",
            document.page_count,
            document.ocr_used,
        )
        return candidates

    def import_pdf(self, data: bytes, *, file_name: str | None = None) -> ImportOutcome:
        """Like ``extract`` but folds terminal failures into a 400-class outcome."""

        try:
            candidates = self.extract(data, file_name=file_name)
        except ExtractionError as error:
            logger.warning("Menu import rejected for %s: %s", file_name or "<upload>", error.kind.value)
            return ImportOutcome(candidates=[], message=error.message, status=_ERROR_STATUS[error.kind])

        if not candidates:
            return ImportOutcome(candidates=[], message=NO_CANDIDATES_MESSAGE, status=200)
        return ImportOutcome(candidates=candidates, status=200)
