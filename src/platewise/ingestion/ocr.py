"""Tesseract pass for menu PDFs that carry no text layer at all.

Only used when the whole document's embedded text is blank, which is how
photographed or scanned menus arrive. ``pytesseract`` and ``Pillow`` come from
the ``ocr`` extra and are imported on first use.
"""

from __future__ import annotations

import logging

import pymupdf


logger = logging.getLogger(__name__)

MENU_SCAN_DPI = 300
MENU_SCAN_LANG = "eng"
# psm 4: a single column of rows with varying text size
_TESSERACT_CONFIG = "--oem 3 --psm 4"


class MenuOcrError(RuntimeError):
    """OCR was requested for a scanned menu but could not run."""


def _page_image(page: pymupdf.Page, image_module):
    zoom = MENU_SCAN_DPI / 72
    pix = page.get_pixmap(matrix=pymupdf.Matrix(zoom, zoom), colorspace=pymupdf.csRGB, alpha=False)
    return image_module.frombytes("RGB", (pix.width, pix.height), pix.samples)


def read_scanned_menu(doc: pymupdf.Document, *, lang: str = MENU_SCAN_LANG) -> list[str]:
    """Return OCR text for every page of *doc*, in page order.

    Raises ``MenuOcrError`` when the OCR extra or the Tesseract binary is
    missing, or when Tesseract rejects a page.
    """

    try:
        import pytesseract
        from PIL import Image
    except ImportError as exc:
        raise MenuOcrError("OCR needs the 'ocr' extra: pip install platewise[ocr]") from exc

    page_texts: list[str] = []
    for page_index, page in enumerate(doc, start=1):
        try:
            image = _page_image(page, Image)
            page_texts.append(pytesseract.image_to_string(image, lang=lang, config=_TESSERACT_CONFIG))
        except pytesseract.TesseractNotFoundError as exc:
            raise MenuOcrError("Tesseract is not installed or not in PATH") from exc
        except pytesseract.TesseractError as exc:
            raise MenuOcrError(f"Tesseract failed on page {page_index}: {exc}") from exc
        logger.debug("OCR read %d characters from menu page %d", len(page_texts[-1]), page_index)
    return page_texts
