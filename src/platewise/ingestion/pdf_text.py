"""Plain-text recovery from uploaded menu PDFs via PyMuPDF."""

from __future__ import annotations

import logging

import pymupdf

from platewise.ingestion.errors import ExtractionError, ExtractionErrorKind
from platewise.ingestion.models import SourceDocument
from platewise.ingestion.normalization import is_blank
from platewise.ingestion.ocr import MenuOcrError, read_scanned_menu

logger = logging.getLogger(__name__)

PDF_MAGIC = b"%PDF-"


def looks_like_pdf(data: bytes) -> bool:
    # The header may be preceded by junk bytes; readers accept it within the first KiB.
    return PDF_MAGIC in data[:1024]


def recover_text(data: bytes, *, file_name: str | None = None, ocr_enabled: bool = False) -> SourceDocument:
    """Open PDF bytes in memory and return their text, one page after another.

    Page text keeps PyMuPDF's line breaks so adjacent name/price lines stay
    adjacent. When the embedded text of the whole document is blank and
    *ocr_enabled* is set, the pages are run through Tesseract instead. A blank
    result is returned as-is either way; deciding that it means "image-only"
    belongs to the normalizer.
    """

    if not looks_like_pdf(data):
        raise ExtractionError(ExtractionErrorKind.UNREADABLE_DOCUMENT)

    try:
        doc = pymupdf.open(stream=data, filetype="pdf")
    except Exception as exc:
        raise ExtractionError(
            ExtractionErrorKind.UNREADABLE_DOCUMENT,
            f"Could not read the uploaded file as a PDF: {exc}",
        ) from exc

    label = file_name or "<upload>"
    ocr_used = False
    with doc:
        page_count = doc.page_count
        text = "\n".join(page.get_text("text") for page in doc)

        if ocr_enabled and is_blank(text):
            try:
                text = "\n".join(read_scanned_menu(doc))
            except MenuOcrError as exc:
                logger.warning("Menu %s has no text layer and OCR is unavailable: %s", label, exc)
            else:
                ocr_used = True
                logger.info("Menu %s has no text layer; recovered %d characters with OCR", label, len(text))

    return SourceDocument(data=data, text=text, file_name=file_name, page_count=page_count, ocr_used=ocr_used)
