"""Per-test logging for the manuscript suite.

Adds a SUCCESS level between INFO and WARNING and a LoggerAdapter that
prefixes every message with the test name and the elapsed milliseconds since
the logger was created.
"""

import logging
import time

SUCCESS = 25
logging.addLevelName(SUCCESS, "SUCCESS")

LOG_FORMAT = "[%(asctime)s] %(levelname)s %(message)s"


class TestLogger(logging.LoggerAdapter):
    """Logger adapter bound to a single test or setup step."""

    # Not a pytest test class.
    __test__ = False

    def __init__(self, logger: logging.Logger, test_name: str) -> None:
        super().__init__(logger, {"test_name": test_name})
        self.test_name = test_name
        self.start_time = time.monotonic()

    def process(self, msg, kwargs):
        elapsed = int((time.monotonic() - self.start_time) * 1000)
        return f"[{elapsed}ms] [{self.test_name}] {msg}", kwargs

    def success(self, msg, *args, **kwargs) -> None:
        self.log(SUCCESS, msg, *args, **kwargs)


def configure_logging(level: str = "INFO") -> None:
    """Install a basic console handler once for the whole run."""

    logging.basicConfig(level=level.upper(), format=LOG_FORMAT)


def get_logger(test_name: str) -> TestLogger:
    """Return a logger for the given test name."""

    return TestLogger(logging.getLogger("manuscript_tools.tests"), test_name)


def log_page_info(logger: logging.Logger | logging.LoggerAdapter, page) -> None:
    """Log the current title and URL of the page."""

    try:
        logger.info("Current page: %s (%s)", page.title(), page.url)
    except Exception as e:
        logger.warning("Could not read page info; error -> %s", str(e))


def log_element_info(
    logger: logging.Logger | logging.LoggerAdapter,
    page,
    selector: str,
    description: str,
) -> None:
    """Log visibility and a text preview of the element matched by selector."""

    try:
        element = page.locator(selector)
        is_visible = element.is_visible()
        text = element.text_content() or ""
        preview = text[:50] + ("..." if len(text) > 50 else "")
        logger.info('%s: visible=%s, text="%s"', description, is_visible, preview)
    except Exception as e:
        logger.warning("%s: element not found or error - %s", description, str(e))
