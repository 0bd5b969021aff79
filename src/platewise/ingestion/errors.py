"""Domain errors raised while recovering text from uploaded menus."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum


class ExtractionErrorKind(Enum):
    EMPTY_DOCUMENT = "empty_document"            # no text recoverable (image-only PDF)
    UNREADABLE_DOCUMENT = "unreadable_document"  # bytes are not a parseable PDF
    DOCUMENT_TOO_LARGE = "document_too_large"


_DEFAULT_MESSAGES = {
    ExtractionErrorKind.EMPTY_DOCUMENT: "Could not extract text from PDF (may be image-only).",
    ExtractionErrorKind.UNREADABLE_DOCUMENT: "Could not read the uploaded file as a PDF.",
    ExtractionErrorKind.DOCUMENT_TOO_LARGE: "File is too large.",
}


@dataclass(slots=True)
class ExtractionError(Exception):
    """Terminal failure for one extraction request."""

    kind: ExtractionErrorKind
    detail: str | None = None

    @property
    def message(self) -> str:
        return self.detail or _DEFAULT_MESSAGES[self.kind]

    def __str__(self) -> str:
        return self.message
