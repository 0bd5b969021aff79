"""Menu document ingestion: text recovery, normalization, candidate extraction."""

from .candidates import PRICE_RE, extract_menu_candidates
from .errors import ExtractionError, ExtractionErrorKind
from .importer import DEFAULT_MAX_UPLOAD_BYTES, MenuImporter, extract_candidates_from_text
from .models import ImportOutcome, MenuCandidate, SourceDocument
from .normalization import normalize_lines, normalize_whitespace

__all__ = [
    "DEFAULT_MAX_UPLOAD_BYTES",
    "ExtractionError",
    "ExtractionErrorKind",
    "ImportOutcome",
    "MenuCandidate",
    "MenuImporter",
    "PRICE_RE",
    "SourceDocument",
    "extract_candidates_from_text",
    "extract_menu_candidates",
    "normalize_lines",
    "normalize_whitespace",
]
