"""Tools for the manuscript unlock verification suite."""

from manuscript_tools.challenge_client import ChallengeClient
from manuscript_tools.config import Settings
from manuscript_tools.decode_password import Challenge, binary_search_index, decode_password
from manuscript_tools.download_pdf import DownloadOrchestrator, download_manuscript_pdf
from manuscript_tools.exceptions import (
    AccessCodeNotFoundError,
    ApiRequestError,
    ChallengeValidationError,
    DownloadFailedError,
    DownloadUIError,
    LoginError,
)
from manuscript_tools.extract_code import extract_access_code, read_pdf_and_extract_code
from manuscript_tools.manuscripts import (
    filter_by_century,
    get_book_title_from_page,
    login,
    unlock_manuscript_with_api,
    unlock_manuscript_with_code,
    verify_locked_manuscript,
    verify_portal,
    verify_unlocked_manuscript,
)
from manuscript_tools.pipeline import DEFAULT_STAGES, Continue, Skip, Stage, run_pipeline, run_stage

__all__ = [
    "DEFAULT_STAGES",
    "AccessCodeNotFoundError",
    "ApiRequestError",
    "Challenge",
    "ChallengeClient",
    "ChallengeValidationError",
    "Continue",
    "DownloadFailedError",
    "DownloadOrchestrator",
    "DownloadUIError",
    "LoginError",
    "Settings",
    "Skip",
    "Stage",
    "binary_search_index",
    "decode_password",
    "download_manuscript_pdf",
    "extract_access_code",
    "filter_by_century",
    "get_book_title_from_page",
    "login",
    "read_pdf_and_extract_code",
    "run_pipeline",
    "run_stage",
    "unlock_manuscript_with_api",
    "unlock_manuscript_with_code",
    "verify_locked_manuscript",
    "verify_portal",
    "verify_unlocked_manuscript",
]
