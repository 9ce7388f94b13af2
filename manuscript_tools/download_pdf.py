"""Download a manuscript PDF and extract its access code, with retries.

The portal's download endpoint is rate limited and sometimes answers with an
error (HTTP 429), which the page reports through an error banner. Each attempt
therefore goes through the same small state machine and failed attempts are
retried after a fixed delay, up to a maximum number of attempts.
"""

from __future__ import annotations

import logging
import time
from collections.abc import Callable
from dataclasses import dataclass
from enum import Enum
from typing import Any

from playwright.sync_api import Page, expect

from manuscript_tools.config import Settings
from manuscript_tools.exceptions import DownloadUIError
from manuscript_tools.extract_code import read_pdf_and_extract_code
from manuscript_tools.manuscripts import (
    DOWNLOAD_BUTTON,
    DOWNLOAD_ERROR_MESSAGE,
    UNLOCKED_STATUS,
    VISIBLE_TIMEOUT,
    find_manuscript,
)

default_logger = logging.getLogger("manuscript_tools.download_pdf")

MAX_ATTEMPTS = 5
RETRY_DELAY = 15.0
SETTLE_DELAY = 1.0


class DownloadState(Enum):
    """States of a single download attempt."""

    TRIGGERING = "triggering"
    AWAITING_DOWNLOAD = "awaiting_download"
    CHECKING_ERROR_BANNER = "checking_error_banner"
    EXTRACTING = "extracting"
    ATTEMPT_FAILED = "attempt_failed"
    DONE = "done"
    ALL_ATTEMPTS_EXHAUSTED = "all_attempts_exhausted"


@dataclass
class DownloadAttempt:
    """Outcome of one attempt: either a code or the failure reason."""

    attempt_number: int
    code: str | None = None
    reason: str | None = None

    @property
    def succeeded(self) -> bool:
        return self.code is not None


class DownloadOrchestrator:
    """Run download attempts until a code is extracted or attempts run out.

    The orchestrator knows nothing about the page. It is given three
    callables: one that triggers a download and blocks until it completes,
    one that tells whether the page shows a download error, and one that
    extracts the code from the completed download.
    """

    def __init__(
        self,
        extract: Callable[[Any], str],
        error_visible: Callable[[], bool] | None = None,
        max_attempts: int = MAX_ATTEMPTS,
        retry_delay: float = RETRY_DELAY,
        settle_delay: float = SETTLE_DELAY,
        sleep: Callable[[float], None] = time.sleep,
        logger: logging.Logger = default_logger,
    ) -> None:
        """Initialize the orchestrator.

        Args:
            extract (Callable[[Any], str]):
                Returns the access code of a completed download. Raises on failure.
            error_visible (Callable[[], bool] | None, optional):
                Returns True if the page reports a download error.
            max_attempts (int, optional):
                Maximum number of attempts. Defaults to 5.
            retry_delay (float, optional):
                Seconds to wait between attempts. Defaults to 15.
            settle_delay (float, optional):
                Seconds to wait before checking for the error banner. Defaults to 1.
            sleep (Callable[[float], None], optional):
                Function used for all waits, in seconds.
            logger (logging.Logger, optional):
                The logging object to use for all log messages.

        """

        if max_attempts < 1:
            raise ValueError("max_attempts must be >= 1")

        self.extract = extract
        self.error_visible = error_visible or (lambda: False)
        self.max_attempts = max_attempts
        self.retry_delay = retry_delay
        self.settle_delay = settle_delay
        self.sleep = sleep
        self.logger = logger
        self.state: DownloadState | None = None
        self.attempts: list[DownloadAttempt] = []

    # end method definition

    def _attempt(self, attempt_number: int, trigger_download: Callable[[], Any]) -> DownloadAttempt:
        """Run one attempt from TRIGGERING to DONE or ATTEMPT_FAILED."""

        try:
            self.state = DownloadState.TRIGGERING
            self.logger.info("Attempt %s/%s to download PDF", attempt_number, self.max_attempts)
            # The trigger blocks until the download completes (or times out).
            self.state = DownloadState.AWAITING_DOWNLOAD
            download = trigger_download()

            self.state = DownloadState.CHECKING_ERROR_BANNER
            self.sleep(self.settle_delay)
            if self.error_visible():
                raise DownloadUIError("download error reported by UI")

            self.state = DownloadState.EXTRACTING
            code = self.extract(download)
        except Exception as e:
            self.state = DownloadState.ATTEMPT_FAILED
            self.logger.warning("Attempt %s failed; error -> %s", attempt_number, str(e))
            return DownloadAttempt(attempt_number=attempt_number, reason=str(e))

        self.state = DownloadState.DONE
        self.logger.info("PDF downloaded successfully on attempt %s", attempt_number)
        return DownloadAttempt(attempt_number=attempt_number, code=code)

    # end method definition

    def run(self, trigger_download: Callable[[], Any]) -> str:
        """Download and extract the access code.

        Args:
            trigger_download (Callable[[], Any]):
                Starts the download and returns the completed download handle.

        Returns:
            str:
                The access code, or "" if every attempt failed.

        """

        self.attempts = []

        for attempt_number in range(1, self.max_attempts + 1):
            attempt = self._attempt(attempt_number, trigger_download)
            self.attempts.append(attempt)

            if attempt.succeeded:
                return attempt.code

            if attempt_number < self.max_attempts:
                self.logger.info("Waiting %s seconds before retry...", self.retry_delay)
                self.sleep(self.retry_delay)

        self.state = DownloadState.ALL_ATTEMPTS_EXHAUSTED
        self.logger.error("All %s download attempts failed", self.max_attempts)

        return ""

    # end method definition


def download_manuscript_pdf(
    page: Page,
    century: str,
    settings: Settings | None = None,
    logger: logging.Logger = default_logger,
) -> str:
    """Download the PDF of an unlocked manuscript and return its access code.

    Returns "" if no code could be obtained within the configured attempts.
    """

    if settings is None:
        settings = Settings()

    logger.info("Downloading PDF for manuscript -> Siglo %s", century)

    def trigger_download():
        container = find_manuscript(page, century)

        # Only unlocked manuscripts can be downloaded.
        expect(container.locator(UNLOCKED_STATUS)).to_be_visible()
        download_button = container.locator(DOWNLOAD_BUTTON)
        expect(download_button).to_be_visible()

        logger.info("Clicking download PDF button...")
        with page.expect_download(timeout=VISIBLE_TIMEOUT * 3) as download_info:
            download_button.click()
        return download_info.value

    orchestrator = DownloadOrchestrator(
        extract=lambda download: read_pdf_and_extract_code(download, century, logger=logger),
        error_visible=lambda: page.locator(DOWNLOAD_ERROR_MESSAGE).is_visible(),
        max_attempts=settings.download_max_attempts,
        retry_delay=settings.download_retry_delay,
        settle_delay=settings.download_settle_delay,
        sleep=lambda seconds: page.wait_for_timeout(seconds * 1000),
        logger=logger,
    )

    return orchestrator.run(trigger_download)
