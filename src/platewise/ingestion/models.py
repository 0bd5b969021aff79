"""Data structures shared by menu text recovery and candidate extraction."""

from __future__ import annotations

from dataclasses import dataclass, field


@dataclass(slots=True)
class SourceDocument:
    """Uploaded document bytes plus the best-effort plain text recovered from them."""

    data: bytes
    text: str = ""
    file_name: str | None = None
    page_count: int = 0
    ocr_used: bool = False


@dataclass(frozen=True, slots=True)
class MenuCandidate:
    """An unconfirmed dish name and price inferred from menu text."""

    name: str
    price: float
    source_text: str

    def to_dict(self) -> dict[str, object]:
        return {"name": self.name, "price": self.price, "sourceText": self.source_text}


@dataclass(slots=True)
class ImportOutcome:
    """Result of one menu import request, shaped for any response transport."""

    candidates: list[MenuCandidate] = field(default_factory=list)
    message: str | None = None
    status: int = 200

    @property
    def is_empty(self) -> bool:
        return not self.candidates
