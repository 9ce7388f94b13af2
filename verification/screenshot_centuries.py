from playwright.sync_api import sync_playwright

from manuscript_tools.config import Settings
from manuscript_tools.log import configure_logging, get_logger
from manuscript_tools.manuscripts import filter_by_century, login
from manuscript_tools.pipeline import DEFAULT_STAGES


def run():
    settings = Settings.from_env()
    configure_logging(settings.log_level)
    logger = get_logger("Screenshot centuries")

    with sync_playwright() as p:
        browser = p.chromium.launch()
        page = browser.new_page()

        login(page, settings, logger=logger)

        # Take screenshots
        for stage in DEFAULT_STAGES:
            try:
                filter_by_century(page, stage.century, logger=logger)
                page.screenshot(path=f"verification/century_{stage.century}.png")
                print(f"Screenshot taken for Siglo {stage.century}")
            except Exception as e:
                print(f"Error screenshotting Siglo {stage.century}: {e}")

        browser.close()


if __name__ == "__main__":
    run()
