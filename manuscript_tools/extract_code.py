"""Extract the access code embedded in a downloaded manuscript PDF.

The generated PDFs contain a line like "Código de acceso: AB12CD". PDF text
extraction is not always reliable for these files, so several independent
strategies are tried in order until one of them finds the code. The
downloaded file is deleted once, whatever the outcome.
"""

from __future__ import annotations

import io
import logging
import os
import re
from collections.abc import Callable

from pypdf import PdfReader

from manuscript_tools.exceptions import AccessCodeNotFoundError, DownloadFailedError
from manuscript_tools.log import SUCCESS

default_logger = logging.getLogger("manuscript_tools.extract_code")

ACCESS_CODE_PATTERN = re.compile(r"acceso:\s*([A-Z0-9]+)", re.IGNORECASE)

# A strategy turns (file_bytes, file_path) into text that is searched for the code.
ExtractionStrategy = tuple[str, Callable[[bytes, str], str]]


def search_access_code(text: str) -> str | None:
    """Return the first access code in text, or None."""

    match = ACCESS_CODE_PATTERN.search(text)
    return match.group(1) if match else None


def parsed_pdf_text(file_bytes: bytes, file_path: str) -> str:
    """Text of all pages as extracted by the PDF parser."""

    reader = PdfReader(io.BytesIO(file_bytes))
    return "\n".join(page.extract_text() or "" for page in reader.pages)


def raw_file_text(file_bytes: bytes, file_path: str) -> str:
    """Re-read the file from disk as UTF-8 text, skipping PDF parsing."""

    with open(file_path, encoding="utf-8", errors="replace") as f:
        return f.read()


def raw_buffer_text(file_bytes: bytes, file_path: str) -> str:
    """Decode the in-memory bytes as UTF-8 text."""

    return file_bytes.decode("utf-8", errors="replace")


STRATEGIES: list[ExtractionStrategy] = [
    ("parsed PDF text", parsed_pdf_text),
    ("raw file text", raw_file_text),
    # The parser occasionally fails on the first pass only.
    ("reparsed PDF text", parsed_pdf_text),
    ("raw buffer text", raw_buffer_text),
]


def remove_file(file_path: str, logger: logging.Logger = default_logger) -> None:
    """Delete the downloaded file. Failures are only logged."""

    try:
        os.remove(file_path)
        logger.info("Downloaded PDF file -> %s cleaned up", file_path)
    except OSError as e:
        logger.warning("Failed to clean up file -> %s; error -> %s", file_path, str(e))


def extract_access_code(
    file_bytes: bytes,
    file_path: str,
    strategies: list[ExtractionStrategy] | None = None,
    logger: logging.Logger = default_logger,
) -> str:
    """Find the access code in a downloaded PDF and delete the file.

    Args:
        file_bytes (bytes):
            Content of the downloaded PDF.
        file_path (str):
            Location of the downloaded PDF. The file is removed before returning.
        strategies (list[ExtractionStrategy] | None, optional):
            Ordered (name, function) pairs. Defaults to STRATEGIES.
        logger (logging.Logger, optional):
            The logging object to use for all log messages.

    Returns:
        str:
            The access code exactly as it appears in the document.

    Raises:
        AccessCodeNotFoundError:
            If none of the strategies finds the code.

    """

    if strategies is None:
        strategies = STRATEGIES

    try:
        for name, strategy in strategies:
            try:
                access_code = search_access_code(strategy(file_bytes, file_path))
            except Exception as e:
                logger.warning("Extraction with %s failed; error -> %s", name, str(e))
                continue

            if access_code:
                logger.log(SUCCESS, "Access code extracted (%s) -> %s", name, access_code)
                return access_code

            logger.warning("Access code not found in %s, trying next method...", name)

        raise AccessCodeNotFoundError("Access code not found in PDF content after trying all parsing methods")
    finally:
        remove_file(file_path, logger=logger)


def read_pdf_and_extract_code(download, century: str, logger: logging.Logger = default_logger) -> str:
    """Extract the access code from a completed Playwright download.

    Args:
        download (playwright.sync_api.Download):
            The finished download of the manuscript PDF.
        century (str):
            Century label of the manuscript, e.g. "XIV".
        logger (logging.Logger, optional):
            The logging object to use for all log messages.

    Returns:
        str:
            The access code.

    """

    logger.info("Reading PDF for manuscript -> Siglo %s", century)

    download_path = download.path()
    if not download_path:
        raise DownloadFailedError("Download failed - no file path received")

    download_path = str(download_path)
    logger.info("PDF downloaded to -> %s", download_path)

    try:
        with open(download_path, "rb") as f:
            pdf_bytes = f.read()
    except OSError as e:
        remove_file(download_path, logger=logger)
        raise DownloadFailedError(f"Cannot read downloaded PDF -> {download_path}") from e

    return extract_access_code(pdf_bytes, download_path, logger=logger)
