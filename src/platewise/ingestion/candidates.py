"""Heuristic dish/price candidate extraction from normalized menu lines.

Lines are scanned with an explicit cursor. A line carrying both a name and a
price yields one candidate and advances by one; a name-only line followed by a
price-bearing line yields one candidate and consumes both. Anything else is
skipped.
"""

from __future__ import annotations

from collections.abc import Sequence
import math
import re

from platewise.ingestion.models import MenuCandidate

# 12, 12.95, $12.95, 1,200.00
PRICE_RE = re.compile(r"\$?[0-9]{1,3}(?:,[0-9]{3})*(?:\.[0-9]{1,2})?")

# Trailing dot leaders and dashes, spaced or not: "THE RICHMOND ....", "Soup - - -"
_TRAILING_LEADER_CHARS = " \t.·-"

MIN_NAME_LENGTH = 3


def has_letters(text: str) -> bool:
    return any(ch.isalpha() for ch in text)


def parse_price(raw: str) -> float | None:
    """Convert a matched price token to a positive float, or None when unusable."""

    cleaned = raw.replace("$", "").replace(",", "")
    try:
        value = float(cleaned)
    except ValueError:
        return None
    if not math.isfinite(value) or value <= 0:
        return None
    return value


def clean_name(fragment: str) -> str:
    """Trim a name fragment and drop trailing menu-leader decoration."""

    return fragment.strip().rstrip(_TRAILING_LEADER_CHARS).strip()


def _is_acceptable_name(name: str) -> bool:
    return len(name) >= MIN_NAME_LENGTH and has_letters(name)


def _same_line_candidate(line: str, match: re.Match[str]) -> MenuCandidate | None:
    name = clean_name(line[: match.start()])
    if not _is_acceptable_name(name):
        return None
    price = parse_price(match.group(0))
    if price is None:
        return None
    return MenuCandidate(name=name, price=price, source_text=line)


def _two_line_candidate(line: str, next_line: str) -> MenuCandidate | None:
    next_match = PRICE_RE.search(next_line)
    if next_match is None:
        return None
    price = parse_price(next_match.group(0))
    if price is None:
        return None
    name = clean_name(line)
    if not _is_acceptable_name(name):
        return None
    return MenuCandidate(name=name, price=price, source_text=f"{line} {next_line}")


def extract_menu_candidates(lines: Sequence[str]) -> list[MenuCandidate]:
    """Return candidates in source order for already-normalized *lines*."""

    candidates: list[MenuCandidate] = []
    index = 0
    total = len(lines)

    while index < total:
        line = lines[index]
        match = PRICE_RE.search(line)

        if match is not None:
            if has_letters(line):
                candidate = _same_line_candidate(line, match)
                if candidate is not None:
                    candidates.append(candidate)
            index += 1
            continue

        if has_letters(line) and index + 1 < total:
            candidate = _two_line_candidate(line, lines[index + 1])
            if candidate is not None:
                candidates.append(candidate)
                index += 2
                continue

        index += 1

    return candidates
