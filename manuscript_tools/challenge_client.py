"""Client for the cipher challenge API.

The API hands out a challenge for a manuscript once it is given the book title
and the access code of the previous manuscript. The challenge is decoded into
the unlock password locally.
"""

from __future__ import annotations

import logging

import requests

from manuscript_tools.config import DEFAULT_CHALLENGE_URL
from manuscript_tools.decode_password import Challenge, decode_password, parse_challenge
from manuscript_tools.exceptions import ApiRequestError, ChallengeValidationError

default_logger = logging.getLogger("manuscript_tools.challenge_client")

REQUEST_TIMEOUT = 30.0


class ChallengeClient:
    """Fetch cipher challenges and turn them into unlock passwords."""

    logger: logging.Logger = default_logger

    def __init__(
        self,
        challenge_url: str = DEFAULT_CHALLENGE_URL,
        timeout: float = REQUEST_TIMEOUT,
        session: requests.Session | None = None,
        logger: logging.Logger = default_logger,
    ) -> None:
        """Initialize the client.

        Args:
            challenge_url (str, optional):
                Endpoint of the cipher challenge API.
            timeout (float, optional):
                Request timeout in seconds. Defaults to 30.
            session (requests.Session | None, optional):
                Session to send requests with. A new one is created if None.
            logger (logging.Logger, optional):
                The logging object to use for all log messages.

        """

        self.challenge_url = challenge_url
        self.timeout = timeout
        self.session = session or requests.Session()
        self.logger = logger

    # end method definition

    def get_challenge(self, book_title: str, unlock_code: str) -> Challenge:
        """Request the challenge for a book.

        Args:
            book_title (str):
                Title of the manuscript as shown in the portal.
            unlock_code (str):
                Access code extracted from the previous manuscript.

        Returns:
            Challenge:
                The validated challenge.

        Raises:
            ApiRequestError:
                If the API answers with a status other than 200 or cannot be reached.
            ChallengeValidationError:
                If the response body does not contain a valid challenge.

        """

        self.logger.info(
            "Getting challenge from API for book title -> '%s' with unlock code -> '%s'",
            book_title,
            unlock_code,
        )

        try:
            response = self.session.get(
                self.challenge_url,
                params={"bookTitle": book_title, "unlockCode": unlock_code},
                timeout=self.timeout,
            )
        except requests.RequestException as e:
            raise ApiRequestError(None, str(e)) from e

        self.logger.info("API response status -> %s", response.status_code)

        if response.status_code != 200:
            raise ApiRequestError(response.status_code, response.reason)

        try:
            data = response.json()
        except ValueError as e:
            raise ChallengeValidationError(f"API response is not valid JSON: {e}") from e

        if not isinstance(data, dict) or "challenge" not in data:
            raise ChallengeValidationError("API response has no 'challenge' field")

        return parse_challenge(data["challenge"])

    # end method definition

    def get_unlock_code(self, book_title: str, unlock_code: str) -> str:
        """Fetch the challenge for a book and decode its password."""

        challenge = self.get_challenge(book_title, unlock_code)

        self.logger.info("Decoding password (hint -> '%s')...", challenge.hint)
        password = decode_password(challenge)
        self.logger.info("Password decoded -> '%s'", password)

        return password

    # end method definition
