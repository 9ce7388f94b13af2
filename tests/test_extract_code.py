"""
Tests for access code extraction from downloaded PDFs.

Coverage:

  Pattern          case-insensitive label, verbatim capture
  Strategy order   parser first, raw file text, reparse, raw buffer
  Fallback         parser failure falls through to raw text
  Exhaustion       AccessCodeNotFoundError, file removed
  Cleanup          exactly one removal per call, removal errors only logged
  Download         Playwright download adapter
"""

import logging
import os

import pytest

from manuscript_tools import extract_code
from manuscript_tools.exceptions import AccessCodeNotFoundError, DownloadFailedError
from manuscript_tools.extract_code import (
    STRATEGIES,
    extract_access_code,
    parsed_pdf_text,
    raw_buffer_text,
    raw_file_text,
    read_pdf_and_extract_code,
    search_access_code,
)
from manuscript_tools.log import SUCCESS


# ---------------------------------------------------------------------------
# Pattern
# ---------------------------------------------------------------------------

def test_search_finds_code_after_label():
    assert search_access_code("Código de acceso: AB12CD") == "AB12CD"


def test_search_is_case_insensitive_and_keeps_source_casing():
    assert search_access_code("ACCESO: ab12cd") == "ab12cd"


def test_search_allows_line_break_after_label():
    assert search_access_code("Código de acceso:\n  XYZ789\nFin") == "XYZ789"


def test_search_returns_first_code():
    assert search_access_code("acceso: FIRST1 ... acceso: SECOND2") == "FIRST1"


@pytest.mark.parametrize("text", ["", "Código de acceso pendiente", "acceso: ---"])
def test_search_without_code_returns_none(text):
    assert search_access_code(text) is None


def test_strategies_are_tried_in_documented_order():
    assert [name for name, _ in STRATEGIES] == [
        "parsed PDF text",
        "raw file text",
        "reparsed PDF text",
        "raw buffer text",
    ]
    assert STRATEGIES[0][1] is STRATEGIES[2][1] is parsed_pdf_text
    assert STRATEGIES[1][1] is raw_file_text
    assert STRATEGIES[3][1] is raw_buffer_text


# ---------------------------------------------------------------------------
# Real PDFs
# ---------------------------------------------------------------------------

def test_extracts_code_from_compressed_pdf(make_pdf, write_pdf):
    content, path = write_pdf(make_pdf("Manuscrito del Siglo XIV", "Codigo de acceso: AB12CD", compress=True))

    # Compressed: the code is not readable from the raw bytes.
    assert b"AB12CD" not in content

    assert extract_access_code(content, path) == "AB12CD"
    assert not os.path.exists(path)


def test_parser_text_contains_the_label(make_pdf):
    text = parsed_pdf_text(make_pdf("Codigo de acceso: QW3RTY", compress=True), "")

    assert "acceso" in text.lower()
    assert search_access_code(text) == "QW3RTY"


def test_falls_back_to_raw_text_when_parser_fails(write_pdf):
    # Not a PDF at all: the parser raises, the raw file text still has the code.
    content, path = write_pdf(b"%PDF-broken\nCodigo de acceso: RAW123\n")

    assert extract_access_code(content, path) == "RAW123"
    assert not os.path.exists(path)


def test_no_code_raises_and_removes_file(make_pdf, write_pdf):
    content, path = write_pdf(make_pdf("Manuscrito sin codigo"))

    with pytest.raises(AccessCodeNotFoundError):
        extract_access_code(content, path)

    assert not os.path.exists(path)


# ---------------------------------------------------------------------------
# Strategy order and fallback with stub strategies
# ---------------------------------------------------------------------------

def _failing(file_bytes, file_path):
    raise ValueError("parser exploded")


def _no_code(file_bytes, file_path):
    return "nothing to see"


def test_first_matching_strategy_wins(write_pdf):
    content, path = write_pdf(b"ignored")
    calls = []

    def recording(name, text):
        def strategy(file_bytes, file_path):
            calls.append(name)
            return text

        return (name, strategy)

    strategies = [
        recording("one", "nothing"),
        recording("two", "acceso: TWO2"),
        recording("three", "acceso: THREE3"),
    ]

    assert extract_access_code(content, path, strategies=strategies) == "TWO2"
    assert calls == ["one", "two"]


def test_extracted_code_is_logged_as_success(write_pdf, caplog):
    content, path = write_pdf(b"ignored")
    strategies = [("stub", lambda file_bytes, file_path: "acceso: OK42")]

    with caplog.at_level(logging.INFO, logger="manuscript_tools.extract_code"):
        extract_access_code(content, path, strategies=strategies)

    (record,) = [r for r in caplog.records if "Access code extracted" in r.getMessage()]
    assert record.levelno == SUCCESS
    assert record.getMessage() == "Access code extracted (stub) -> OK42"


def test_each_strategy_failure_is_independent(write_pdf, caplog):
    content, path = write_pdf(b"ignored")
    strategies = [
        ("first", _failing),
        ("second", _no_code),
        ("third", _failing),
        ("fourth", lambda file_bytes, file_path: "acceso: LAST4"),
    ]

    with caplog.at_level(logging.WARNING, logger="manuscript_tools.extract_code"):
        assert extract_access_code(content, path, strategies=strategies) == "LAST4"

    assert "parser exploded" in caplog.text
    assert not os.path.exists(path)


def test_file_is_removed_exactly_once(write_pdf, monkeypatch):
    content, path = write_pdf(b"Codigo de acceso: ONCE1")
    removed = []
    real_remove = os.remove

    def counting_remove(p):
        removed.append(p)
        real_remove(p)

    monkeypatch.setattr(extract_code.os, "remove", counting_remove)

    assert extract_access_code(content, path, strategies=[("first", _failing), ("raw", raw_file_text)]) == "ONCE1"
    assert removed == [path]


def test_file_is_removed_exactly_once_on_failure(write_pdf, monkeypatch):
    content, path = write_pdf(b"no code here")
    removed = []
    monkeypatch.setattr(extract_code.os, "remove", lambda p: removed.append(p))

    with pytest.raises(AccessCodeNotFoundError):
        extract_access_code(content, path)

    assert removed == [path]


def test_cleanup_failure_does_not_hide_the_code(tmp_path, caplog):
    missing = str(tmp_path / "already-gone.pdf")

    # The raw file read fails as well; the in-memory buffer still has the code.
    with caplog.at_level(logging.WARNING, logger="manuscript_tools.extract_code"):
        code = extract_access_code(b"Codigo de acceso: BUF456", missing)

    assert code == "BUF456"
    assert "Failed to clean up file" in caplog.text


def test_cleanup_failure_does_not_hide_the_error(tmp_path):
    missing = str(tmp_path / "already-gone.pdf")

    with pytest.raises(AccessCodeNotFoundError):
        extract_access_code(b"no code", missing)


# ---------------------------------------------------------------------------
# Playwright download adapter
# ---------------------------------------------------------------------------

class FakeDownload:
    def __init__(self, path):
        self._path = path

    def path(self):
        return self._path


def test_reads_completed_download(make_pdf, write_pdf):
    _, path = write_pdf(make_pdf("Codigo de acceso: DL7890"))

    assert read_pdf_and_extract_code(FakeDownload(path), "XV") == "DL7890"
    assert not os.path.exists(path)


def test_download_without_path_fails():
    with pytest.raises(DownloadFailedError, match="no file path received"):
        read_pdf_and_extract_code(FakeDownload(None), "XV")
