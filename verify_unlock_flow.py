
import pytest
from playwright.sync_api import Browser, Page, sync_playwright

from manuscript_tools.config import Settings
from manuscript_tools.log import configure_logging, get_logger, log_page_info
from manuscript_tools.manuscripts import login
from manuscript_tools.pipeline import DEFAULT_STAGES, Continue, PageActions, Skip, run_pipeline, run_stage

pytestmark = pytest.mark.e2e


class Baton:
    """Result of the last finished stage, handed to the next one."""

    def __init__(self):
        self.result = Continue("")


@pytest.fixture(scope="module")
def settings():
    settings = Settings.from_env()
    configure_logging(settings.log_level)
    return settings


@pytest.fixture(scope="module")
def portal_page(browser: Browser, settings):
    # Downloads have to be enabled on the context, not on the page.
    context = browser.new_context(accept_downloads=True)
    page = context.new_page()

    login(page, settings, logger=get_logger("File Reading Setup"))

    yield page
    context.close()


@pytest.fixture(scope="module")
def baton():
    return Baton()


@pytest.mark.parametrize("stage", DEFAULT_STAGES, ids=lambda stage: f"century-{stage.century}")
def test_unlock_manuscript(stage, portal_page: Page, settings, baton):
    logger = get_logger(f"Century {stage.century} test")
    actions = PageActions(portal_page, settings, logger=logger)

    try:
        baton.result = run_stage(stage, baton.result, actions, logger=logger)
    except Exception:
        log_page_info(logger, portal_page)
        portal_page.screenshot(path=f"verification/century_{stage.century}_failed.png")
        baton.result = Skip(f"century {stage.century} failed")
        raise

    if isinstance(baton.result, Skip):
        pytest.skip(baton.result.reason)

    logger.success("Century %s completed", stage.century)


if __name__ == "__main__":
    settings = Settings.from_env()
    configure_logging(settings.log_level)

    with sync_playwright() as p:
        browser = p.chromium.launch(headless=True)
        context = browser.new_context(accept_downloads=True)
        page = context.new_page()
        try:
            login(page, settings, logger=get_logger("File Reading Setup"))
            logger = get_logger("File Reading")
            for stage, result in run_pipeline(DEFAULT_STAGES, PageActions(page, settings, logger=logger), logger=logger):
                print(f"Siglo {stage.century}: {result}")
        finally:
            browser.close()
