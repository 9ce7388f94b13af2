import sys

from manuscript_tools.challenge_client import ChallengeClient
from manuscript_tools.config import Settings
from manuscript_tools.decode_password import decode_password
from manuscript_tools.exceptions import ApiRequestError
from manuscript_tools.log import configure_logging


def run(book_title, unlock_code):
    settings = Settings.from_env()
    configure_logging(settings.log_level)

    client = ChallengeClient(challenge_url=settings.challenge_url, timeout=settings.api_timeout)

    print(f"Requesting challenge for '{book_title}' with code {unlock_code}")
    try:
        challenge = client.get_challenge(book_title, unlock_code)
    except ApiRequestError as e:
        print(f"Challenge request failed: {e}")
        return 1

    print(f"Hint: {challenge.hint}")
    print(f"Vault size: {len(challenge.vault)}, targets: {challenge.targets}")

    # Targets outside the vault are dropped from the password
    out_of_range = [t for t in challenge.targets if not 0 <= t < len(challenge.vault)]
    if out_of_range:
        print(f"Targets outside the vault: {out_of_range}")

    print(f"Password: {decode_password(challenge)}")
    return 0


if __name__ == "__main__":
    if len(sys.argv) != 3:
        print("Usage: python verification/verify_challenge.py <book title> <unlock code>")
        sys.exit(2)
    sys.exit(run(sys.argv[1], sys.argv[2]))
