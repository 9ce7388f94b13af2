"""Page interactions with the manuscript portal.

Every manuscript is rendered as a card with a "Siglo <century>" label. The
card holds the status label, the code input, the unlock button and, once
unlocked, the PDF download button. Functions here locate the card through its
century label and work inside it.
"""

from __future__ import annotations

import logging
import re

from playwright.sync_api import Locator, Page, expect

from manuscript_tools.challenge_client import ChallengeClient
from manuscript_tools.config import Settings
from manuscript_tools.exceptions import LoginError
from manuscript_tools.log import SUCCESS, log_element_info, log_page_info

default_logger = logging.getLogger("manuscript_tools.manuscripts")

# Timeouts in milliseconds, as used by Playwright.
VISIBLE_TIMEOUT = 10000
UNLOCKED_TIMEOUT = 2000

EMAIL_INPUT = '#email, input[type="email"][placeholder="monje@sherpa.local"], .sherpa-input[type="email"]'
PASSWORD_INPUT = '#password, input[type="password"], .sherpa-input[type="password"]'
LOGIN_BUTTON = 'button[type="submit"], input[type="submit"], .login-button'

PAGE_TITLE = "h1.text-2xl.font-bold.text-sherpa-text"
CENTURY_FILTER = 'label:has-text("Filtrar por Siglo") + div select'
BOOK_TITLE = "h3.text-lg.font-medium.text-sherpa-text"
CODE_INPUT = 'input[placeholder="Ingresá el código"]'
UNLOCK_BUTTON = 'button:has-text("Desbloquear")'
UNLOCKED_STATUS = 'span:has-text("Desbloqueado")'
DOWNLOAD_BUTTON = 'button:has-text("Descargar PDF")'
DOCUMENTATION_BUTTON = 'button:has-text("Ver Documentación")'
HELP_TEXT = 'p:has-text("Necesitás el código del manuscrito anterior")'
CLOSE_MODAL_BUTTON = 'button[aria-label="Cerrar modal"]'
DOWNLOAD_ERROR_MESSAGE = 'p.text-sm.text-red-400:has-text("Error al descargar el archivo")'


def find_manuscript(page: Page, century: str) -> Locator:
    """Return the card of the first manuscript labelled with the century."""

    label = page.locator(f'span:has-text("Siglo {century}")').first
    expect(label).to_be_visible(timeout=VISIBLE_TIMEOUT)

    # The label sits three levels below the card container.
    return label.locator("xpath=../../..")


def login(page: Page, settings: Settings, logger: logging.Logger = default_logger) -> None:
    """Log into the portal with the configured user."""

    logger.info("Starting login process...")
    page.goto(f"{settings.base_url}/login")
    page.wait_for_load_state("networkidle")

    logger.info("Filling login credentials...")
    page.fill(EMAIL_INPUT, settings.user_email)
    page.fill(PASSWORD_INPUT, settings.user_password)

    logger.info("Submitting login form...")
    page.click(LOGIN_BUTTON)
    page.wait_for_load_state("networkidle")

    # The portal redirects with a delay after the login request.
    page.wait_for_timeout(3000)

    if "/login" in page.url:
        logger.error("Login failed - still on login page")
        log_page_info(logger, page)
        raise LoginError("Login failed")

    logger.log(SUCCESS, "Login successful!")


def verify_portal(page: Page, logger: logging.Logger = default_logger) -> None:
    """Check that the portal page with its heading is shown."""

    logger.info("Verifying URL...")
    expect(page).to_have_url(re.compile(r".*/portal$"))

    logger.info("Looking for page title...")
    expect(page.locator(PAGE_TITLE)).to_be_visible(timeout=VISIBLE_TIMEOUT)
    log_element_info(logger, page, PAGE_TITLE, "Page title")


def filter_by_century(page: Page, century: str, logger: logging.Logger = default_logger) -> None:
    """Select the century in the portal's filter dropdown."""

    logger.info("Filtering manuscripts by century -> %s", century)

    century_filter = page.locator(CENTURY_FILTER)
    century_filter.wait_for(state="visible", timeout=VISIBLE_TIMEOUT)
    century_filter.select_option(century)

    # The list is re-rendered after a short delay.
    page.wait_for_timeout(2000)

    logger.info("Century %s filter applied successfully", century)


def close_modal(page: Page) -> None:
    close_button = page.locator(CLOSE_MODAL_BUTTON)
    expect(close_button).to_be_visible()
    close_button.click()


def verify_locked_manuscript(
    page: Page,
    century: str,
    has_documentation: bool = False,
    logger: logging.Logger = default_logger,
) -> None:
    """Check that the manuscript is locked and waiting for a code.

    If has_documentation is True, the manuscript's documentation modal is
    opened and closed first.
    """

    logger.info("Verifying locked manuscript -> Siglo %s", century)

    container = find_manuscript(page, century)

    if has_documentation:
        documentation_button = container.locator(DOCUMENTATION_BUTTON)
        expect(documentation_button).to_be_visible()
        documentation_button.click()
        page.wait_for_timeout(1000)
        close_modal(page)

    expect(container.locator(CODE_INPUT)).to_be_visible()
    expect(container.locator(UNLOCK_BUTTON)).to_be_visible()
    expect(container.locator(HELP_TEXT)).to_be_visible()

    logger.log(SUCCESS, "Locked manuscript from Siglo %s verified successfully", century)


def verify_unlocked_manuscript(page: Page, century: str, logger: logging.Logger = default_logger) -> None:
    """Check that the manuscript is unlocked and offers the PDF download."""

    logger.info("Verifying unlocked manuscript -> Siglo %s", century)

    container = find_manuscript(page, century)
    expect(container.locator(UNLOCKED_STATUS)).to_be_visible()
    expect(container.locator(DOWNLOAD_BUTTON)).to_be_visible()

    logger.log(SUCCESS, "Unlocked manuscript from Siglo %s verified successfully", century)


def get_book_title_from_page(page: Page, century: str) -> str:
    """Read the book title of the manuscript card."""

    container = find_manuscript(page, century)

    title_element = container.locator(BOOK_TITLE)
    title_element.wait_for(state="visible")

    book_title = (title_element.text_content() or "").strip()
    return book_title or f"Manuscrito del Siglo {century}"


def unlock_manuscript_with_code(
    page: Page,
    century: str,
    access_code: str,
    used_api: bool = False,
    logger: logging.Logger = default_logger,
) -> None:
    """Enter the code into the manuscript card and unlock it.

    Codes obtained through the cipher API open a confirmation modal, which is
    closed when used_api is True.
    """

    logger.info("Unlocking manuscript from Siglo %s with code -> %s", century, access_code)

    container = find_manuscript(page, century)

    code_input = container.locator(CODE_INPUT)
    code_input.wait_for(state="visible")
    code_input.clear()
    code_input.fill(access_code)

    # The form only validates on input/change events.
    code_input.dispatch_event("input")
    code_input.dispatch_event("change")
    page.wait_for_timeout(1000)

    unlock_button = container.locator(UNLOCK_BUTTON)
    unlock_button.wait_for(state="visible")
    expect(unlock_button).to_be_enabled(timeout=VISIBLE_TIMEOUT)

    logger.info("Clicking unlock button...")
    unlock_button.click()
    page.wait_for_timeout(3000)

    if used_api:
        # "¡Manuscrito Desbloqueado!" modal
        close_modal(page)
        page.wait_for_timeout(1000)

    container.locator(UNLOCKED_STATUS).wait_for(state="visible", timeout=UNLOCKED_TIMEOUT)
    container.locator(DOWNLOAD_BUTTON).wait_for(state="visible")

    logger.info("Manuscript from Siglo %s unlocked successfully", century)


def unlock_manuscript_with_api(
    page: Page,
    century: str,
    unlock_code: str,
    client: ChallengeClient,
    logger: logging.Logger = default_logger,
) -> None:
    """Unlock the manuscript with the password decoded from the cipher API.

    Raises:
        ApiRequestError:
            If the cipher API rejects the request.

    """

    logger.info("Getting unlock code from API for Siglo %s with unlock code -> %s", century, unlock_code)

    try:
        book_title = get_book_title_from_page(page, century)
        logger.info("Detected book title -> '%s'", book_title)

        password = client.get_unlock_code(book_title, unlock_code)
        logger.info("Password obtained from API -> %s", password)
    except Exception as e:
        logger.error("Failed to get unlock code from API; error -> %s", str(e))
        raise

    unlock_manuscript_with_code(page, century, password, used_api=True, logger=logger)
