"""Decode the unlock password from a cipher challenge.

A challenge carries a vault (ordered list of strings) and a list of target
positions. The password is the concatenation of the vault entries at those
positions, in target order. Positions outside the vault contribute nothing.
"""

from __future__ import annotations

from collections.abc import Mapping, Sequence
from typing import Any, TypeVar

from pydantic import BaseModel, ConfigDict, Field, StrictInt, ValidationError

from manuscript_tools.exceptions import ChallengeValidationError

T = TypeVar("T")


class Challenge(BaseModel):
    """Challenge object as returned by the cipher API."""

    model_config = ConfigDict(populate_by_name=True, frozen=True)

    vault: list[str]
    targets: list[StrictInt]
    hint: str = ""
    book_title: str = Field("", alias="bookTitle")


def binary_search_index(items: Sequence[T], target_index: int) -> T | None:
    """Return items[target_index] by narrowing over the index space.

    Returns None if target_index is outside the sequence.
    """

    left = 0
    right = len(items) - 1

    while left <= right:
        mid = (left + right) // 2
        if mid == target_index:
            return items[mid]
        if mid < target_index:
            left = mid + 1
        else:
            right = mid - 1

    return None


def parse_challenge(data: Challenge | Mapping[str, Any]) -> Challenge:
    """Validate raw challenge data.

    Raises:
        ChallengeValidationError: if vault or targets are missing or malformed.

    """

    if isinstance(data, Challenge):
        return data
    if not isinstance(data, Mapping):
        raise ChallengeValidationError(f"Challenge must be an object, got {type(data).__name__}")
    try:
        return Challenge.model_validate(data)
    except ValidationError as e:
        raise ChallengeValidationError(f"Invalid challenge: {e}") from e


def decode_password(challenge: Challenge | Mapping[str, Any]) -> str:
    """Map every target position to its vault entry and join them."""

    challenge = parse_challenge(challenge)

    return "".join(binary_search_index(challenge.vault, index) or "" for index in challenge.targets)
