
import pytest
from playwright.sync_api import Page, expect, sync_playwright

from manuscript_tools.config import Settings
from manuscript_tools.manuscripts import (
    CLOSE_MODAL_BUTTON,
    DOCUMENTATION_BUTTON,
    filter_by_century,
    find_manuscript,
    login,
    verify_locked_manuscript,
    verify_portal,
    verify_unlocked_manuscript,
)

pytestmark = pytest.mark.e2e


def test_first_manuscript_starts_unlocked(page: Page):
    # 1. Arrange: Log in and land on the portal.
    login(page, Settings.from_env())
    verify_portal(page)

    # 2. Act: Show only the XIV century.
    filter_by_century(page, "XIV")

    # 3. Assert: The first manuscript needs no code and offers the PDF.
    verify_unlocked_manuscript(page, "XIV")

    # The next one is still waiting for its code.
    filter_by_century(page, "XV")
    verify_locked_manuscript(page, "XV")

    page.screenshot(path="verification_portal.png")


def test_documentation_modal_opens_and_closes(page: Page):
    login(page, Settings.from_env())
    filter_by_century(page, "XVII")

    container = find_manuscript(page, "XVII")
    container.locator(DOCUMENTATION_BUTTON).click()

    close_button = page.locator(CLOSE_MODAL_BUTTON)
    expect(close_button).to_be_visible()
    close_button.click()
    expect(close_button).to_be_hidden()

    # Closing the modal leaves the manuscript locked
    verify_locked_manuscript(page, "XVII")

    page.screenshot(path="verification_documentation.png")


def run_checks():
    with sync_playwright() as p:
        browser = p.chromium.launch(headless=True)
        try:
            # Each check logs in on its own fresh page.
            for check in (test_first_manuscript_starts_unlocked, test_documentation_modal_opens_and_closes):
                context = browser.new_context()
                try:
                    check(context.new_page())
                finally:
                    context.close()
        finally:
            browser.close()


if __name__ == "__main__":
    run_checks()
