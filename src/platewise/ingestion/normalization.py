"""Whitespace normalization for raw document text."""

from __future__ import annotations

import re

from platewise.ingestion.errors import ExtractionError, ExtractionErrorKind

_WHITESPACE_RE = re.compile(r"\s+")
# C0 control characters that are not line breaks or tabs; PDF text layers leak these.
_CONTROL_RE = re.compile(r"[\x00-\x08\x0e-\x1f\x7f]")


def normalize_whitespace(text: str) -> str:
    """Collapse repeated whitespace and trim boundaries."""

    return _WHITESPACE_RE.sub(" ", text).strip()


def is_blank(text: str | None) -> bool:
    """True when *text* would normalize to no lines at all."""

    return not normalize_whitespace(_CONTROL_RE.sub(" ", text or ""))


def normalize_lines(text: str | None) -> tuple[str, ...]:
    """Split *text* into whitespace-normalized, non-empty lines in source order.

    Raises ``ExtractionError(EMPTY_DOCUMENT)`` when there is no text at all, which
    is how image-only PDFs surface. A document whose lines yield no menu
    candidates is not an error here.
    """

    cleaned = _CONTROL_RE.sub(" ", text or "")
    lines = tuple(line for line in (normalize_whitespace(raw) for raw in cleaned.splitlines()) if line)
    if not lines:
        raise ExtractionError(ExtractionErrorKind.EMPTY_DOCUMENT)
    return lines
