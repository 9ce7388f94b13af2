"""Exceptions raised by the manuscript tools."""


class ManuscriptToolsError(Exception):
    """Base class for all manuscript tool errors."""


class ChallengeValidationError(ManuscriptToolsError):
    """The challenge returned by the cipher API is malformed."""


class AccessCodeNotFoundError(ManuscriptToolsError):
    """No extraction strategy found an access code in the PDF."""


class DownloadFailedError(ManuscriptToolsError):
    """A PDF download did not produce a usable file."""


class DownloadUIError(DownloadFailedError):
    """The portal showed its download error banner."""


class LoginError(ManuscriptToolsError):
    """Login to the portal did not leave the login page."""


class ApiRequestError(ManuscriptToolsError):
    """The cipher challenge API answered with a status other than 200."""

    def __init__(self, status: int | None, reason: str | None) -> None:
        """Initialize the error with the HTTP status and status text.

        Args:
            status (int | None):
                HTTP status code. None if no response was received.
            reason (str | None):
                HTTP status text or the transport error message.

        """
        self.status = status
        self.reason = reason
        super().__init__(f"API request failed: {status} {reason}")
