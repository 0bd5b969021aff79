"""CLI command extracting candidate dishes from a menu PDF or plain-text file."""

from __future__ import annotations

import argparse
import json
from pathlib import Path

from platewise.ingestion.errors import ExtractionError
from platewise.ingestion.importer import (
    DEFAULT_MAX_UPLOAD_BYTES,
    NO_CANDIDATES_MESSAGE,
    MenuImporter,
    extract_candidates_from_text,
)


def main(argv: list[str] | None = None) -> int:
    parser = argparse.ArgumentParser(description="Extract candidate dishes and prices from a menu")
    parser.add_argument("--path", required=True, help="Menu PDF, or a text file with --text")
    parser.add_argument("--text", action="store_true", help="Treat the input as already-extracted plain text")
    parser.add_argument("--ocr", action="store_true", help="OCR pages without embedded text (needs Tesseract)")
    parser.add_argument(
        "--max-bytes",
        type=int,
        default=DEFAULT_MAX_UPLOAD_BYTES,
        help="Reject PDFs larger than this many bytes",
    )
    args = parser.parse_args(argv)

    source_path = Path(args.path)
    try:
        if args.text:
            candidates = extract_candidates_from_text(source_path.read_text(encoding="utf-8"))
        else:
            importer = MenuImporter(max_upload_bytes=args.max_bytes, ocr_enabled=args.ocr)
            candidates = importer.extract(source_path.read_bytes(), file_name=source_path.name)
    except OSError as exc:
        print(json.dumps({"path": str(source_path), "error": f"Failed to read source file: {exc}"}, indent=2))
        return 1
    except ExtractionError as exc:
        print(
            json.dumps(
                {"path": str(source_path), "error": exc.message, "kind": exc.kind.value},
                ensure_ascii=False,
                indent=2,
            )
        )
        return 1

    payload: dict[str, object] = {
        "path": str(source_path),
        "count": len(candidates),
        "candidates": [candidate.to_dict() for candidate in candidates],
    }
    if not candidates:
        payload["message"] = NO_CANDIDATES_MESSAGE
    print(json.dumps(payload, ensure_ascii=False, indent=2))
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
