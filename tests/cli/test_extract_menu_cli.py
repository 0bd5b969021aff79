from __future__ import annotations

import json
from pathlib import Path

import pymupdf

from platewise.cli.extract_menu import main as extract_menu_main


def _write_pdf(path: Path, lines: list[str]) -> None:
    doc = pymupdf.open()
    page = doc.new_page()
    for idx, line in enumerate(lines):
        page.insert_text((72, 72 + idx * 20), line)
    path.write_bytes(doc.tobytes())
    doc.close()


def test_cli_extracts_candidates_from_pdf(tmp_path: Path, capsys: object) -> None:
    pdf_path = tmp_path / "menu.pdf"
    _write_pdf(pdf_path, ["Caesar Salad $12.50", "Grilled Salmon", "$24.00"])

    exit_code = extract_menu_main(["--path", str(pdf_path)])
    payload = json.loads(capsys.readouterr().out)

    assert exit_code == 0
    assert payload["count"] == 2
    assert payload["candidates"][0] == {
        "name": "Caesar Salad",
        "price": 12.5,
        "sourceText": "Caesar Salad $12.50",
    }
    assert payload["candidates"][1]["sourceText"] == "Grilled Salmon $24.00"
    assert "message" not in payload


def test_cli_text_mode_reports_advisory_when_nothing_found(tmp_path: Path, capsys: object) -> None:
    text_path = tmp_path / "menu.txt"
    text_path.write_text("Welcome\nOpen daily\n", encoding="utf-8")

    exit_code = extract_menu_main(["--path", str(text_path), "--text"])
    payload = json.loads(capsys.readouterr().out)

    assert exit_code == 0
    assert payload["count"] == 0
    assert payload["message"] == "No menu-like lines were detected. You may need to add items manually."


def test_cli_reports_extraction_errors(tmp_path: Path, capsys: object) -> None:
    blank_path = tmp_path / "blank.txt"
    blank_path.write_text("   \n\n", encoding="utf-8")

    exit_code = extract_menu_main(["--path", str(blank_path), "--text"])
    payload = json.loads(capsys.readouterr().out)

    assert exit_code == 1
    assert payload["kind"] == "empty_document"
    assert payload["error"] == "Could not extract text from PDF (may be image-only)."


def test_cli_enforces_size_limit(tmp_path: Path, capsys: object) -> None:
    pdf_path = tmp_path / "menu.pdf"
    _write_pdf(pdf_path, ["Soup 5"])

    exit_code = extract_menu_main(["--path", str(pdf_path), "--max-bytes", "100"])
    payload = json.loads(capsys.readouterr().out)

    assert exit_code == 1
    assert payload["kind"] == "document_too_large"


def test_cli_missing_file(tmp_path: Path, capsys: object) -> None:
    exit_code = extract_menu_main(["--path", str(tmp_path / "absent.pdf")])
    payload = json.loads(capsys.readouterr().out)

    assert exit_code == 1
    assert payload["error"].startswith("Failed to read source file")
