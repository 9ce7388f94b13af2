"""Run the manuscript unlock stages in order.

Each stage unlocks one manuscript with the access code produced by the stage
before it and downloads its PDF to get the code for the next one. The code is
handed from stage to stage as a StageResult: Continue(code) carries it on,
Skip(reason) tells every following stage to do nothing.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Literal

from playwright.sync_api import Page

from manuscript_tools import manuscripts
from manuscript_tools.challenge_client import ChallengeClient
from manuscript_tools.config import Settings
from manuscript_tools.download_pdf import download_manuscript_pdf


default_logger = logging.getLogger("manuscript_tools.pipeline")

UnlockMethod = Literal["none", "code", "api"]


@dataclass(frozen=True)
class Continue:
    code: str


@dataclass(frozen=True)
class Skip:
    reason: str


StageResult = Continue | Skip


@dataclass(frozen=True)
class Stage:
    """One manuscript of the chain.

    unlock is "none" for a manuscript that starts unlocked, "code" to unlock
    with the previous access code and "api" to unlock with the password the
    cipher API derives from it.
    """

    century: str
    unlock: UnlockMethod = "code"
    has_documentation: bool = False
    download: bool = True


DEFAULT_STAGES = [
    Stage("XIV", unlock="none"),
    Stage("XV", unlock="code"),
    Stage("XVI", unlock="code"),
    Stage("XVII", unlock="api", has_documentation=True),
    Stage("XVIII", unlock="api", has_documentation=True, download=False),
]


class PageActions:
    """The UI actions a stage needs, bound to one portal page."""

    def __init__(
        self,
        page: Page,
        settings: Settings,
        client: ChallengeClient | None = None,
        logger: logging.Logger = default_logger,
    ) -> None:
        self.page = page
        self.settings = settings
        self.client = client or ChallengeClient(
            challenge_url=settings.challenge_url,
            timeout=settings.api_timeout,
        )
        self.logger = logger

    def verify_portal(self) -> None:
        manuscripts.verify_portal(self.page, logger=self.logger)

    def filter(self, century: str) -> None:
        manuscripts.filter_by_century(self.page, century, logger=self.logger)

    def verify_locked(self, century: str, has_documentation: bool) -> None:
        manuscripts.verify_locked_manuscript(
            self.page, century, has_documentation=has_documentation, logger=self.logger
        )

    def verify_unlocked(self, century: str) -> None:
        manuscripts.verify_unlocked_manuscript(self.page, century, logger=self.logger)

    def unlock_with_code(self, century: str, code: str) -> None:
        manuscripts.unlock_manuscript_with_code(self.page, century, code, logger=self.logger)

    def unlock_with_api(self, century: str, prior_code: str) -> None:
        manuscripts.unlock_manuscript_with_api(self.page, century, prior_code, self.client, logger=self.logger)

    def download(self, century: str) -> str:
        return download_manuscript_pdf(self.page, century, settings=self.settings, logger=self.logger)


def run_stage(
    stage: Stage,
    previous: StageResult,
    actions: PageActions,
    logger: logging.Logger = default_logger,
) -> StageResult:
    """Run one stage with the result of the previous one.

    A Skip is forwarded untouched without any UI action. A stage that needs
    a code but got an empty one is skipped as well.
    """

    if isinstance(previous, Skip):
        logger.warning("Skipping century %s -> %s", stage.century, previous.reason)
        return previous

    code = previous.code
    if stage.unlock != "none" and not code.strip():
        logger.error("No access code for century %s. The following stages will be skipped.", stage.century)
        return Skip(f"no access code for century {stage.century}")

    logger.info("Starting century %s stage", stage.century)

    actions.verify_portal()
    actions.filter(stage.century)

    if stage.unlock != "none":
        actions.verify_locked(stage.century, stage.has_documentation)
        if stage.unlock == "api":
            actions.unlock_with_api(stage.century, code)
        else:
            actions.unlock_with_code(stage.century, code)

    actions.verify_unlocked(stage.century)

    if not stage.download:
        return Continue(code)

    next_code = actions.download(stage.century)
    if not next_code or not next_code.strip():
        logger.error(
            "Could not obtain access code for century %s. The following stages will be skipped.",
            stage.century,
        )
        return Skip(f"download of century {stage.century} produced no access code")

    logger.info("Access code obtained successfully -> %s", next_code)
    return Continue(next_code)


def run_pipeline(
    stages: list[Stage],
    actions: PageActions,
    initial: StageResult | None = None,
    logger: logging.Logger = default_logger,
) -> list[tuple[Stage, StageResult]]:
    """Run all stages in order and return each stage with its result."""

    result = initial if initial is not None else Continue("")
    results = []

    for stage in stages:
        result = run_stage(stage, result, actions, logger=logger)
        results.append((stage, result))

    return results
